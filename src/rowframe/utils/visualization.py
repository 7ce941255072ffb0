"""
Schema visualization utilities.

Provides text-based tree rendering for a DataFrame schema. Array columns produced by nested
joins and rollups carry their own nested schema, which is rendered as a subtree under the
column, so the shape of hierarchical results is visible at a glance.
"""

from typing import List, Optional, Sequence

from ..schema.metadata import Column


def visualize_schema(schema: Sequence[Column]) -> str:
    """Generate a text-based tree visualization of a schema.

    Args:
        schema: Ordered column metadata

    Returns:
        A string containing the tree-shaped visualization

    Example:
        >>> schema = [Column("class"), Column("children", type="array",
        ...           metadata=[Column("name")])]
        >>> print(visualize_schema(schema))
        DataFrame
        ├── class: string
        └── children: array
            └── name: string
    """
    if not isinstance(schema, (list, tuple)):
        raise TypeError(f"Expected a list of Column, got {type(schema)}")

    lines = ["DataFrame"]
    _visualize_columns(schema, lines, prefix="")
    return "\n".join(lines)


def _visualize_columns(columns: Sequence[Column], lines: List[str], prefix: str) -> None:
    for i, column in enumerate(columns):
        is_last = i == len(columns) - 1
        connector = "└── " if is_last else "├── "
        lines.append(prefix + connector + _format_column(column))
        if column.metadata:
            extension = "    " if is_last else "│   "
            _visualize_columns(column.metadata, lines, prefix + extension)


def _format_column(column: Column) -> str:
    """Format a column as ``name: type`` with its notable attributes."""
    desc = f"{column.name}: {column.type}"
    extras: List[str] = []
    if column.digits is not None:
        extras.append(f"digits={column.digits}")
    currency: Optional[str] = column.fields.get("currency")
    if currency:
        extras.append(f"currency={currency}")
    if column.path:
        extras.append(f"path separator='{column.separator}'")
    if extras:
        desc += f" ({', '.join(extras)})"
    return desc
