"""
Unit tests for the join engine.

These tests verify:
1. Inner, left, right, full and nested joins on a ships/groups fixture
2. Merge precedence and the resulting schema order
3. Prefix and suffix renaming of either side
4. Join type resolution, including the outer alias and unknown types
5. Inputs are never modified by a join
"""

import copy

import pytest

from rowframe.engine import JoinType, join, resolve_join_type
from rowframe.exceptions import UnknownJoinTypeError
from rowframe.schema import TypeTag, column_names, derive_schema


def on_group(ship, group):
    return ship["group_id"] == group["id"]


@pytest.fixture
def sides(ships, groups):
    return ships, derive_schema(ships), groups, derive_schema(groups)


# ============================================================================
# Join type resolution
# ============================================================================

class TestResolveJoinType:

    @pytest.mark.parametrize("how", ["inner", "left", "right", "full", "nested"])
    def test_known_types(self, how):
        assert resolve_join_type(how).value == how

    def test_outer_is_left(self):
        assert resolve_join_type("outer") is JoinType.LEFT

    def test_accepts_enum(self):
        assert resolve_join_type(JoinType.FULL) is JoinType.FULL

    def test_unknown_type_raises(self):
        with pytest.raises(UnknownJoinTypeError, match="cross"):
            resolve_join_type("cross")

    def test_unknown_type_is_value_error(self, sides):
        with pytest.raises(ValueError):
            join(*sides, on_group, how="sideways")


# ============================================================================
# Flat joins
# ============================================================================

class TestInnerJoin:

    def test_rows(self, sides):
        rows, _ = join(*sides, on_group)
        assert rows == [
            {"id": 1, "class": "Galaxy", "name": "Enterprise", "group_id": 1},
            {"id": 2, "class": "Escort", "name": "Defiant", "group_id": 2},
            {"id": 3, "class": "Galaxy", "name": "Voyager", "group_id": 1},
        ]

    def test_schema_left_columns_first(self, sides):
        _, schema = join(*sides, on_group)
        assert column_names(schema) == ["id", "name", "group_id", "class"]

    def test_left_fields_win(self, sides):
        rows, _ = join(*sides, on_group)
        # ship 3 sits in group 1; the ship id survives the merge
        assert rows[2]["id"] == 3

    def test_prefix_both_sides(self, sides):
        rows, schema = join(*sides, on_group, left_options={"prefix": "s"}, right_options={"prefix": "g"})
        assert column_names(schema) == ["s_id", "s_name", "s_group_id", "g_id", "g_class"]
        assert rows[0] == {
            "g_id": 1, "g_class": "Galaxy",
            "s_id": 1, "s_name": "Enterprise", "s_group_id": 1,
        }

    def test_suffix_right_side(self, sides):
        rows, schema = join(*sides, on_group, right_options={"suffix": "grp"})
        assert column_names(schema) == ["id", "name", "group_id", "id_grp", "class_grp"]
        assert rows[2]["id"] == 3
        assert rows[2]["id_grp"] == 1

    def test_predicate_receives_original_rows(self, sides):
        seen = []

        def spy(left, right):
            seen.append((set(left), set(right)))
            return False

        join(*sides, spy, left_options={"prefix": "s"})
        assert seen[0] == ({"id", "name", "group_id"}, {"id", "class"})

    def test_no_match_is_empty(self, sides):
        rows, schema = join(*sides, lambda s, g: False)
        assert rows == []
        assert column_names(schema) == ["id", "name", "group_id", "class"]


class TestLeftJoin:

    def test_unmatched_left_row_kept_alone(self, sides):
        rows, _ = join(*sides, on_group, how="left")
        assert len(rows) == 4
        assert rows[3] == {"id": 4, "name": "Orphan", "group_id": 9}

    def test_outer_matches_left(self, sides):
        assert join(*sides, on_group, how="outer") == join(*sides, on_group, how="left")


class TestRightJoin:

    def test_swapped_layout(self, sides):
        rows, schema = join(*sides, on_group, how="right")
        assert column_names(schema) == ["id", "class", "name", "group_id"]
        assert rows == [
            {"id": 1, "name": "Enterprise", "group_id": 1, "class": "Galaxy"},
            {"id": 1, "name": "Voyager", "group_id": 1, "class": "Galaxy"},
            {"id": 2, "name": "Defiant", "group_id": 2, "class": "Escort"},
            {"id": 3, "class": "Shuttle"},
        ]

    def test_predicate_keeps_left_right_order(self, sides):
        calls = []

        def spy(ship, group):
            calls.append((ship["name"], group["class"]))
            return False

        join(*sides, spy, how="right")
        assert ("Enterprise", "Galaxy") in calls


class TestFullJoin:

    def test_unmatched_from_both_sides(self, sides):
        rows, _ = join(*sides, on_group, how="full")
        assert len(rows) == 5
        assert {"id": 4, "name": "Orphan", "group_id": 9} in rows
        assert rows[-1] == {"id": 3, "class": "Shuttle"}

    def test_right_renaming_applies_to_unmatched(self, sides):
        rows, _ = join(*sides, on_group, how="full", right_options={"prefix": "g"})
        assert rows[-1] == {"g_id": 3, "g_class": "Shuttle"}


# ============================================================================
# Nested join
# ============================================================================

class TestNestedJoin:

    def test_children_per_parent(self, sides):
        rows, _ = join(*sides, on_group, how="nested")
        assert [row["class"] for row in rows] == ["Galaxy", "Escort", "Shuttle"]
        assert [c["name"] for c in rows[0]["children"]] == ["Enterprise", "Voyager"]
        assert [c["name"] for c in rows[1]["children"]] == ["Defiant"]
        assert rows[2]["children"] == []

    def test_schema_has_array_column_with_child_metadata(self, sides, ships):
        _, schema = join(*sides, on_group, how="nested")
        assert column_names(schema) == ["id", "class", "children"]
        children = schema[-1]
        assert children.type == TypeTag.ARRAY
        assert children.metadata == derive_schema(ships)

    def test_custom_children_field(self, sides):
        rows, schema = join(*sides, on_group, how="nested", children="ships")
        assert "ships" in rows[0]
        assert schema[-1].name == "ships"

    def test_existing_children_column_is_replaced(self, ships):
        parents = [{"id": 1, "children": "old"}]
        rows, schema = join(ships, derive_schema(ships), parents, derive_schema(parents), on_group, how="nested")
        assert column_names(schema) == ["id", "children"]
        assert len(rows[0]["children"]) == 2


class TestJoinPurity:

    @pytest.mark.parametrize("how", ["inner", "left", "right", "full", "nested"])
    def test_inputs_untouched(self, ships, groups, how):
        ships_before = copy.deepcopy(ships)
        groups_before = copy.deepcopy(groups)
        rows, _ = join(ships, derive_schema(ships), groups, derive_schema(groups), on_group, how=how)
        for row in rows:
            row["touched"] = True
        assert ships == ships_before
        assert groups == groups_before
