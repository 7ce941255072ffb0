"""
Column metadata for row collections.

A schema is an ordered list of ``Column`` entries with unique names. It is derived from a
sample row (or a deep-scan sample for sparse data) unless an explicit override is supplied,
and it is threaded alongside the rows through every join, rollup and set operation.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from .types import TypeTag, classify
from ..exceptions import SchemaConflictError

DEFAULT_SEPARATOR = "/"
DEFAULT_CURRENCY_SUFFIX = "_currency"


@dataclass
class Column:
    """Metadata for a single column.

    ``metadata`` is only set for ``array`` columns and describes the nested rows.
    ``path``/``separator`` tag the column a hierarchy layer builds its tree from.
    """

    name: str
    type: str = TypeTag.STRING
    fields: Dict[str, Any] = field(default_factory=dict)
    digits: Optional[int] = None
    metadata: Optional[List["Column"]] = None
    path: bool = False
    separator: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"name": self.name, "type": str(self.type)}
        if self.fields:
            result["fields"] = dict(self.fields)
        if self.digits is not None:
            result["digits"] = self.digits
        if self.metadata is not None:
            result["metadata"] = [col.to_dict() for col in self.metadata]
        if self.path:
            result["path"] = True
            result["separator"] = self.separator
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Column":
        if "name" not in data:
            raise ValueError("Column dict must have 'name' field")
        nested = data.get("metadata")
        return cls(
            name=data["name"],
            type=data.get("type", TypeTag.STRING),
            fields=dict(data.get("fields") or {}),
            digits=data.get("digits"),
            metadata=normalize_schema(nested) if nested is not None else None,
            path=bool(data.get("path", False)),
            separator=data.get("separator"),
        )

    def copy(self, **changes: Any) -> "Column":
        """Return a copy with its own ``fields`` dict, optionally changing attributes."""
        changes.setdefault("fields", dict(self.fields))
        return replace(self, **changes)


def normalize_schema(columns: Iterable[Any]) -> List[Column]:
    """Accept Column objects or plain dicts and return a list of Column objects."""
    return [col if isinstance(col, Column) else Column.from_dict(col) for col in columns]


def deep_scan_sample(rows: Sequence[Mapping[str, Any]]) -> Dict[str, Any]:
    """Fold every row into one sample row.

    The first non-null value seen for a key wins, so sparse collections still get every
    column represented.
    """
    sample: Dict[str, Any] = {}
    for row in rows:
        for key, value in row.items():
            if key not in sample and value is not None:
                sample[key] = value
    return sample


def add_path_modifier(columns: List[Column], path: Optional[str], separator: str) -> List[Column]:
    """Tag the ``path`` column and move it to the front."""
    if not path:
        return columns
    for index, col in enumerate(columns):
        if col.name == path:
            tagged = col.copy(path=True, separator=separator)
            return [tagged] + columns[:index] + columns[index + 1:]
    return columns


def merge_currency_attributes(columns: List[Column], currency_suffix: str) -> List[Column]:
    """Fold ``<name><suffix>`` columns into the metadata of ``<name>``.

    A suffix column without a sibling is kept as an ordinary column.
    """
    by_name = {col.name: col for col in columns}
    merged: List[Column] = []
    absorbed = set()

    for col in columns:
        if not currency_suffix or not col.name.endswith(currency_suffix):
            continue
        base = col.name[: -len(currency_suffix)]
        if base and base in by_name:
            sibling = by_name[base]
            sibling.type = TypeTag.CURRENCY
            sibling.digits = 2
            sibling.fields["currency"] = col.name
            absorbed.add(col.name)

    for col in columns:
        if col.name not in absorbed:
            merged.append(col)
    return merged


def derive_schema(
    rows: Sequence[Mapping[str, Any]],
    metadata: Optional[Iterable[Any]] = None,
    deep_scan: bool = False,
    path: Optional[str] = None,
    separator: str = DEFAULT_SEPARATOR,
    currency_suffix: str = DEFAULT_CURRENCY_SUFFIX,
) -> List[Column]:
    """Derive column metadata for a row collection.

    Args:
        rows: Rows to sample
        metadata: Explicit schema; returned as-is when non-empty
        deep_scan: Sample every row instead of the first one
        path: Name of the column holding hierarchy paths
        separator: Path separator recorded on the path column
        currency_suffix: Suffix identifying currency code columns

    Returns:
        List of Column entries in first-seen order
    """
    if metadata:
        explicit = normalize_schema(metadata)
        if explicit:
            return explicit
    if len(rows) == 0:
        return []

    sample = deep_scan_sample(rows) if deep_scan else rows[0]
    columns = [Column(name=name, type=classify(value)) for name, value in sample.items()]
    columns = add_path_modifier(columns, path, separator)
    return merge_currency_attributes(columns, currency_suffix)


def derive_column_index(schema: Sequence[Column]) -> Dict[str, int]:
    """Map every column name to its position in the schema."""
    return {col.name: index for index, col in enumerate(schema)}


def column_names(schema: Sequence[Column]) -> List[str]:
    return [col.name for col in schema]


def combine_metadata(
    first: Sequence[Column], second: Sequence[Column], overwrite: bool = False
) -> List[Column]:
    """Combine two schemas.

    Columns of ``second`` missing from ``first`` are appended. A shared column with a
    different type is retyped when ``overwrite`` is set, otherwise SchemaConflictError is
    raised. Neither input is modified.

    Raises:
        SchemaConflictError: If a shared column changes type and overwrite is False
    """
    combined = [col.copy() for col in first]
    index = derive_column_index(combined)

    for col in second:
        position = index.get(col.name)
        if position is None:
            index[col.name] = len(combined)
            combined.append(col.copy())
            continue
        existing = combined[position]
        if existing.type == col.type:
            continue
        if not overwrite:
            raise SchemaConflictError(col.name)
        existing.type = col.type
        existing.metadata = col.metadata
    return combined


def build_rollup_metadata(
    rows: Sequence[Mapping[str, Any]],
    schema: Sequence[Column],
    group_by: Sequence[str],
    summaries: Sequence[Any],
) -> List[Column]:
    """Build the schema of a rollup result.

    Group-by columns keep their metadata. Every reducer field is typed from its value on
    the first output row; array values get a nested schema derived from the array.
    """
    metadata = [col.copy() for col in schema if col.name in group_by]
    first = rows[0] if rows else None

    for summary in summaries:
        for output_field, _reducer in summary.reducers:
            if first is None:
                metadata.append(Column(name=output_field, type=TypeTag.NULL))
                continue
            value = first.get(output_field)
            tag = classify(value)
            if tag == TypeTag.ARRAY:
                nested = derive_schema([item for item in value if isinstance(item, Mapping)])
                metadata.append(Column(name=output_field, type=tag, metadata=nested))
            else:
                metadata.append(Column(name=output_field, type=tag))
    return metadata
