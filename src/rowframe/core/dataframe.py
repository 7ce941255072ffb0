"""
rowframe.DataFrame: a chainable facade over a list of row dicts.

The DataFrame keeps the rows, their schema and a column index together, and composes the
schema, join, rollup, set and mutation engines into one API.

Ownership contract:
- Structural operations (join, rollup, union, minus, intersect, rename, drop) return a new
  DataFrame built from new row dicts and never touch their inputs.
- ``sort_by``, ``update``, ``delete``, ``fill_missing`` and ``fill_null`` mutate this
  DataFrame *and the list it was constructed from*, unless it was constructed with
  ``copy=True``.
- ``select`` and ``apply`` return plain lists.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

import pandas as pd

from .config import FrameConfig, SchemaOptions
from ..engine import mutation, setops
from ..engine.join import join as run_join
from ..engine.rollup import (
    Reducers,
    Selector,
    check_output_fields,
    make_summary,
    rollup as run_rollup,
)
from ..exceptions import InvalidInputError, UnknownColumnError
from ..schema.metadata import (
    Column,
    column_names,
    combine_metadata,
    derive_column_index,
    derive_schema,
)
from ..schema.renamer import lookup_renamer
from ..utils.visualization import visualize_schema

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


class DataFrame:
    """In-memory table over a list of row dicts.

    Attributes:
        rows: The row list (the caller's list unless ``copy=True`` was given)
        schema: Ordered column metadata
        column_index: Column name to schema position
        config: Rollup pipeline configuration

    Example:
        >>> ships = DataFrame([{"id": 1, "name": "x", "group_id": 1}])
        >>> groups = DataFrame([{"id": 1, "class": "frigate"}])
        >>> ships.join(groups, lambda s, g: s["group_id"] == g["id"]).rows
        [{'id': 1, 'class': 'frigate', 'name': 'x', 'group_id': 1}]
    """

    def __init__(
        self,
        rows: List[Row],
        *,
        metadata: Optional[Iterable[Any]] = None,
        deep_scan: bool = False,
        path: Optional[str] = None,
        separator: str = SchemaOptions.separator,
        currency_suffix: str = SchemaOptions.currency_suffix,
        copy: bool = False,
    ):
        """Initialize a DataFrame.

        Args:
            rows: List of row dicts
            metadata: Explicit schema (Column objects or dicts); skips inference when non-empty
            deep_scan: Derive the schema from every row instead of the first one
            path: Column holding hierarchy paths; tagged and moved to the front
            separator: Path separator recorded on the path column
            currency_suffix: Suffix of currency code columns folded into their sibling
            copy: Take a private copy of ``rows`` so in-place operations do not reach the caller

        Raises:
            InvalidInputError: If rows is not a list
        """
        if not isinstance(rows, list):
            raise InvalidInputError(
                f"data must be a list of row dicts, got {type(rows).__name__}"
            )
        self._rows = list(rows) if copy else rows
        self._options = SchemaOptions(
            metadata=list(metadata) if metadata else None,
            deep_scan=deep_scan,
            path=path,
            separator=separator,
            currency_suffix=currency_suffix,
        )
        self._attach(derive_schema(self._rows, **self._options.to_kwargs()))
        logger.debug("DataFrame: %d rows, %d columns", len(self._rows), len(self._schema))

    def _attach(self, schema: List[Column]) -> None:
        self._set_schema(schema)
        self._config = FrameConfig()
        self._filter = mutation.FilterState()

    @classmethod
    def _from_result(cls, rows: List[Row], schema: List[Column]) -> "DataFrame":
        """Wrap an engine result whose schema is already known, skipping inference."""
        df = cls.__new__(cls)
        df._rows = rows
        df._options = SchemaOptions()
        df._attach(schema)
        return df

    def _set_schema(self, schema: List[Column]) -> None:
        self._schema = schema
        self._column_index = derive_column_index(schema)

    @classmethod
    def from_pandas(cls, frame: pd.DataFrame, **options: Any) -> "DataFrame":
        """Build a DataFrame from the records of a pandas DataFrame."""
        return cls(frame.to_dict(orient="records"), **options)

    def to_pandas(self) -> pd.DataFrame:
        """Convert to a pandas DataFrame with columns in schema order."""
        return pd.DataFrame(self._rows, columns=column_names(self._schema) or None)

    @property
    def rows(self) -> List[Row]:
        return self._rows

    @property
    def schema(self) -> List[Column]:
        return self._schema

    @property
    def column_index(self) -> Dict[str, int]:
        return self._column_index

    @property
    def columns(self) -> List[str]:
        return column_names(self._schema)

    @property
    def config(self) -> FrameConfig:
        return self._config

    @property
    def pending_filter(self) -> Optional[Callable[[Mapping[str, Any]], bool]]:
        return self._filter.peek()

    def __len__(self) -> int:
        return len(self._rows)

    def __repr__(self) -> str:
        return f"DataFrame(rows={len(self._rows)}, columns={self.columns})"

    def explain(self) -> str:
        """Render the (nested) schema as a text tree."""
        return visualize_schema(self._schema)

    # ------------------------------------------------------------------
    # Joins (new DataFrame)
    # ------------------------------------------------------------------

    def join(
        self,
        other: "DataFrame",
        predicate: Callable[[Mapping[str, Any], Mapping[str, Any]], bool],
        how: str = "inner",
        left: Optional[Mapping[str, Any]] = None,
        right: Optional[Mapping[str, Any]] = None,
        children: Optional[str] = None,
    ) -> "DataFrame":
        """Join with another DataFrame.

        Args:
            other: Right-hand DataFrame (the parent for nested joins)
            predicate: ``predicate(this_row, other_row)``
            how: inner, left, outer, right, full or nested
            left: Renaming options for this side, e.g. ``{"prefix": "x"}``
            right: Renaming options for the other side
            children: Field holding nested rows for nested joins

        Returns:
            New DataFrame with joined rows and merged schema

        Raises:
            UnknownJoinTypeError: If ``how`` is not recognised
        """
        rows, schema = run_join(
            self._rows, self._schema, other.rows, other.schema, predicate,
            how=how, left_options=left, right_options=right,
            children=children or self._config.children,
        )
        return self._from_result(rows, schema)

    def inner_join(self, other: "DataFrame", predicate, **options: Any) -> "DataFrame":
        return self.join(other, predicate, how="inner", **options)

    def left_join(self, other: "DataFrame", predicate, **options: Any) -> "DataFrame":
        return self.join(other, predicate, how="left", **options)

    outer_join = left_join

    def right_join(self, other: "DataFrame", predicate, **options: Any) -> "DataFrame":
        return self.join(other, predicate, how="right", **options)

    def full_join(self, other: "DataFrame", predicate, **options: Any) -> "DataFrame":
        return self.join(other, predicate, how="full", **options)

    def nested_join(self, parent: "DataFrame", predicate, children: Optional[str] = None) -> "DataFrame":
        """Nest the rows of this DataFrame under matching ``parent`` rows."""
        return self.join(parent, predicate, how="nested", children=children)

    # ------------------------------------------------------------------
    # Rollup configuration (returns self) and execution (new DataFrame)
    # ------------------------------------------------------------------

    def group_by(self, *columns: str) -> "DataFrame":
        self._config.group_by = list(columns)
        return self

    def summarize(self, selector: Selector, reducers: Reducers) -> "DataFrame":
        """Register a summary for the next rollup.

        Args:
            selector: Field name, list of field names, or a ``row -> value`` callable
            reducers: Output field name (values kept as a list) or a mapping of output
                field names to reducer callables

        Raises:
            ConfigurationError: If the reducers are invalid or an output field repeats a
                group-by key or a field of an earlier summary
        """
        summaries = self._config.summaries
        summary = make_summary(selector, reducers, len(summaries))
        check_output_fields(self._config.group_by, [*summaries, summary])
        summaries.append(summary)
        return self

    def align(self, *columns: str) -> "DataFrame":
        """Align every group on the value combinations of ``columns``; unknown columns are ignored."""
        self._config.align_by = [col for col in columns if col in self._column_index]
        return self

    def using(self, template: Mapping[str, Any]) -> "DataFrame":
        """Set default values for rows synthesized during alignment."""
        self._config.template = dict(template)
        return self

    def override(self, **changes: str) -> "DataFrame":
        """Rename the ``children`` or ``actual_flag`` output fields."""
        self._config.override(**changes)
        return self

    def rollup(self) -> "DataFrame":
        """Run the configured group-by / summarize / align pipeline.

        The configuration is single-use: group-by keys, alignment, template and summaries
        are cleared once the rollup succeeds.

        Raises:
            ConfigurationError: If neither group_by nor summarize was called
        """
        config = self._config
        rows, schema = run_rollup(
            self._rows,
            self._schema,
            group_by=config.group_by,
            summaries=config.summaries,
            align_by=config.align_by,
            template=config.template,
            children=config.children,
            actual_flag=config.actual_flag,
        )
        config.reset_pipeline()
        return self._from_result(rows, schema)

    # ------------------------------------------------------------------
    # Set operations (new DataFrame)
    # ------------------------------------------------------------------

    def union(self, other: "DataFrame") -> "DataFrame":
        """Rows of both DataFrames, without de-duplication.

        Raises:
            SchemaConflictError: If a shared column has different types
        """
        return self._from_result(*setops.union(self._rows, self._schema, other.rows, other.schema))

    def minus(self, other: "DataFrame") -> "DataFrame":
        """Rows not present in ``other``; returns ``self`` when the schemas differ."""
        result = setops.minus(self._rows, self._schema, other.rows, other.schema)
        if result is None:
            return self
        return self._from_result(*result)

    def intersect(self, other: "DataFrame") -> "DataFrame":
        """Rows also present in ``other``; empty when the schemas differ."""
        return self._from_result(*setops.intersect(self._rows, self._schema, other.rows, other.schema))

    # ------------------------------------------------------------------
    # Structure (new DataFrame)
    # ------------------------------------------------------------------

    def rename(self, columns: Mapping[str, str]) -> "DataFrame":
        """Rename columns using an ``{old: new}`` mapping.

        Raises:
            UnknownColumnError: If a source column does not exist or a target name is taken
        """
        missing = [name for name in columns if name not in self._column_index]
        if missing:
            raise UnknownColumnError(
                f"Cannot rename non-existing column(s) [{', '.join(missing)}]."
            )
        taken = [name for name in columns.values() if name in self._column_index]
        if taken:
            raise UnknownColumnError(f"Cannot rename to an existing column. [{', '.join(taken)}]")

        lookup = {col.name: columns.get(col.name, col.name) for col in self._schema}
        schema = [col.copy(name=lookup[col.name]) for col in self._schema]
        rename_row = lookup_renamer(lookup)
        return self._from_result([rename_row(row) for row in self._rows], schema)

    def drop(self, *columns: str) -> "DataFrame":
        schema = [col.copy() for col in self._schema if col.name not in columns]
        rows = [{k: v for k, v in row.items() if k not in columns} for row in self._rows]
        return self._from_result(rows, schema)

    # ------------------------------------------------------------------
    # Filtered access and in-place mutation
    # ------------------------------------------------------------------

    def where(self, predicate: Callable[[Mapping[str, Any]], bool]) -> "DataFrame":
        """Arm a row filter for the next ``select``, ``update`` or ``delete``.

        A second ``where`` before one of those replaces the first predicate.
        """
        self._filter.arm(predicate)
        return self

    def select(self, *columns: str) -> List[Row]:
        """Copies of the rows matching the armed filter, projected onto ``columns``.

        Consumes the armed filter.
        """
        return mutation.select_rows(self._rows, columns, self._filter.take())

    def update(self, value: Mapping[str, Any]) -> "DataFrame":
        """Merge ``value`` into the matching rows in place and widen the schema.

        Consumes the armed filter. Columns in ``value`` are added to the schema or retyped.

        Raises:
            InvalidInputError: If value is not a mapping
        """
        if not isinstance(value, Mapping):
            raise InvalidInputError("value must be an object")
        mutation.update_rows(self._rows, value, self._filter.take())
        self._set_schema(combine_metadata(self._schema, derive_schema([value]), overwrite=True))
        return self

    def delete(self) -> "DataFrame":
        """Remove the matching rows (all rows if no filter is armed) in place.

        Consumes the armed filter. The schema is left untouched.
        """
        mutation.delete_rows(self._rows, self._filter.take())
        return self

    def fill_missing(self, values: Mapping[str, Any]) -> "DataFrame":
        """Set absent fields to the given defaults, in place."""
        mutation.fill_missing(self._rows, values)
        return self

    def fill_null(self, values: Mapping[str, Any]) -> "DataFrame":
        """Replace None fields with the given defaults, in place."""
        mutation.fill_null(self._rows, values)
        return self

    def apply(self, fn: Callable[[Mapping[str, Any]], Any]) -> List[Any]:
        """Map ``fn`` over the rows matching the armed filter.

        Unlike ``select``, ``update`` and ``delete``, the filter stays armed afterwards.
        """
        return mutation.apply_rows(self._rows, fn, self._filter.peek())

    def sort_by(self, *columns: Any) -> "DataFrame":
        """Sort rows in place by ``"col"`` or ``("col", ascending)`` specs."""
        mutation.sort_rows(self._rows, columns)
        return self
