"""Unit tests for schema visualization."""

import pytest

from rowframe.schema import Column, TypeTag, derive_schema
from rowframe.utils import visualize_schema


class TestVisualization:
    """Tests for visualize_schema()."""

    def test_flat_schema(self):
        text = visualize_schema([Column("a", TypeTag.INTEGER), Column("b")])
        assert text == "DataFrame\n├── a: integer\n└── b: string"

    def test_empty_schema(self):
        assert visualize_schema([]) == "DataFrame"

    def test_nested_schema_is_indented(self):
        schema = [
            Column("children", TypeTag.ARRAY, metadata=[Column("x", TypeTag.INTEGER)]),
            Column("total", TypeTag.NUMBER),
        ]
        assert visualize_schema(schema).splitlines() == [
            "DataFrame",
            "├── children: array",
            "│   └── x: integer",
            "└── total: number",
        ]

    def test_currency_and_path_attributes(self):
        schema = derive_schema(
            [{"route": "a/b", "cost": 2.5, "cost_currency": "EUR"}], path="route"
        )
        text = visualize_schema(schema)
        assert "route: string (path separator='/')" in text
        assert "cost: currency (digits=2, currency=cost_currency)" in text

    def test_output_is_deterministic(self):
        schema = derive_schema([{"a": 1, "b": "x"}])
        assert visualize_schema(schema) == visualize_schema(schema)

    def test_invalid_input(self):
        with pytest.raises(TypeError):
            visualize_schema("not a schema")
