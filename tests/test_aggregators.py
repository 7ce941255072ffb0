"""Unit tests for the stock reducers and mappers."""

import pytest

from rowframe.engine import counter, get_aggregator, pick, quantiles, violin
from rowframe.schema import identity


class TestReducers:

    def test_counter(self):
        assert counter([]) == 0
        assert counter([{"a": 1}, {"a": 2}]) == 2

    def test_quantiles(self):
        result = quantiles([1, 2, 3, 4, 5])
        assert result == {"q1": 2.0, "q3": 4.0, "iqr": 2.0, "qr_min": -1.0, "qr_max": 7.0}

    def test_quantiles_interpolates(self):
        result = quantiles([1, 2, 3, 4])
        assert result["q1"] == pytest.approx(1.75)
        assert result["q3"] == pytest.approx(3.25)

    def test_upper_fence_is_above_q3(self):
        result = quantiles([10, 20, 30, 40, 50])
        assert result["qr_max"] > result["q3"]


class TestMappers:

    def test_violin_adds_fences(self):
        row = violin({"team": "A", "q1": 1, "q3": 3})
        assert row == {"team": "A", "q1": 1, "q3": 3, "iqr": 2, "qr_min": -2, "qr_max": 6}

    def test_violin_leaves_input_alone(self):
        row = {"q1": 1, "q3": 3}
        violin(row)
        assert row == {"q1": 1, "q3": 3}

    def test_pick_skips_absent_keys(self):
        assert pick(["a", "c"])({"a": 1, "b": 2}) == {"a": 1}

    def test_get_aggregator_defaults_to_identity(self):
        mapper, reducer = get_aggregator("a")
        assert mapper({"a": 1, "b": 2}) == {"a": 1}
        assert reducer is identity

    def test_get_aggregator_with_reducer(self):
        mapper, reducer = get_aggregator(["a", "b"], counter)
        assert reducer is counter
        assert mapper({"a": 1, "b": 2, "c": 3}) == {"a": 1, "b": 2}
