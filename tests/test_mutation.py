"""
Unit tests for filtered row mutation.

These tests verify:
1. FilterState arms, peeks and is consumed by take
2. select filters then projects and returns copies
3. update, delete and the fill helpers work in place
4. sort_rows is stable, multi-key and puts None last
"""

import pytest

from rowframe.engine import (
    FilterState,
    apply_rows,
    delete_rows,
    fill_missing,
    fill_null,
    select_rows,
    sort_rows,
    update_rows,
)
from rowframe.engine.mutation import parse_sort_specs
from rowframe.exceptions import InvalidInputError


class TestFilterState:

    def test_starts_idle(self):
        state = FilterState()
        assert not state.armed
        assert state.take() is None
        assert repr(state) == "FilterState(idle)"

    def test_take_consumes(self):
        state = FilterState()
        state.arm(bool)
        assert state.armed
        assert state.take() is bool
        assert not state.armed

    def test_peek_does_not_consume(self):
        state = FilterState()
        state.arm(bool)
        assert state.peek() is bool
        assert state.armed

    def test_second_arm_replaces_first(self):
        state = FilterState()
        state.arm(bool)
        state.arm(callable)
        assert state.take() is callable

    def test_arm_rejects_non_callable(self):
        with pytest.raises(InvalidInputError):
            FilterState().arm("x > 1")


class TestSelectRows:

    def test_projection(self, items):
        assert select_rows(items, ["sku"]) == [{"sku": "apple"}, {"sku": "pear"}, {"sku": "plum"}]

    def test_filter_then_project(self, items):
        rows = select_rows(items, ["sku"], lambda r: r["qty"] > 0)
        assert rows == [{"sku": "apple"}, {"sku": "plum"}]

    def test_returns_copies(self, items):
        rows = select_rows(items)
        rows[0]["sku"] = "changed"
        assert items[0]["sku"] == "apple"


class TestInPlaceMutation:

    def test_update_matching(self, items):
        count = update_rows(items, {"qty": 1}, lambda r: r["qty"] == 0)
        assert count == 1
        assert items[1]["qty"] == 1
        assert items[0]["qty"] == 3

    def test_update_rejects_non_mapping(self, items):
        with pytest.raises(InvalidInputError, match="value must be an object"):
            update_rows(items, 5)

    def test_delete_matching(self, items):
        assert delete_rows(items, lambda r: r["active"]) == 2
        assert [r["sku"] for r in items] == ["pear"]

    def test_delete_without_filter_clears(self, items):
        delete_rows(items)
        assert items == []

    def test_fill_missing(self):
        rows = [{"a": 1}, {"a": 2, "b": None}]
        fill_missing(rows, {"b": 0})
        assert rows == [{"a": 1, "b": 0}, {"a": 2, "b": None}]

    def test_fill_null(self):
        rows = [{"a": 1}, {"a": 2, "b": None}]
        fill_null(rows, {"b": 0})
        assert rows == [{"a": 1}, {"a": 2, "b": 0}]

    def test_apply(self, items):
        assert apply_rows(items, lambda r: r["qty"] * 2, lambda r: r["active"]) == [6, 14]


class TestSortRows:

    def test_parse_specs(self):
        assert parse_sort_specs(["a", ("b", False)]) == [("a", True), ("b", False)]

    def test_ascending(self, items):
        sort_rows(items, ["qty"])
        assert [r["qty"] for r in items] == [0, 3, 7]

    def test_descending(self, items):
        sort_rows(items, [("qty", False)])
        assert [r["qty"] for r in items] == [7, 3, 0]

    def test_none_sorts_last_both_directions(self, items):
        sort_rows(items, ["price"])
        assert items[-1]["sku"] == "plum"
        sort_rows(items, [("price", False)])
        assert items[-1]["sku"] == "plum"
        assert items[0]["sku"] == "apple"

    def test_multi_key_is_stable(self, team_scores):
        sort_rows(team_scores, [("period", True), ("score", False)])
        assert [(r["period"], r["score"]) for r in team_scores] == [
            ("first", 10), ("first", 7), ("second", 12), ("third", 4),
        ]

    def test_mixed_types_do_not_raise(self):
        rows = [{"k": 1}, {"k": "a"}, {"k": 2}, {"k": None}]
        sort_rows(rows, ["k"])
        assert [r["k"] for r in rows] == [1, 2, "a", None]

    def test_mixed_types_descending(self):
        rows = [{"k": "a"}, {"k": 1}, {"k": 2}]
        sort_rows(rows, [("k", False)])
        assert [r["k"] for r in rows] == ["a", 2, 1]
