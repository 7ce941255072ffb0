"""
rowframe - An in-memory tabular engine over lists of row dicts.

This package infers a typed schema from plain row dicts and provides predicate joins
(inner, left, right, full and nested), group-by rollups with alignment, set operations and
filtered in-place mutation behind one chainable DataFrame.

Usage:
    >>> import rowframe as rf
    >>> ships = rf.DataFrame([{"id": 1, "name": "x", "group_id": 1}])
    >>> groups = rf.DataFrame([{"id": 1, "class": "frigate"}])
    >>> nested = ships.nested_join(groups, lambda s, g: s["group_id"] == g["id"])
    >>> nested.rows[0]["children"][0]["name"]
    'x'

Key components:
- DataFrame: rows, schema and column index with the chainable API
- schema: type inference and column metadata
- engine: join, rollup, set and mutation functions over (rows, schema) pairs
"""

import logging
from typing import Any, Callable, Mapping, Optional

import pandas as _pd

from .core import DataFrame, FrameConfig, SchemaOptions
from .engine import JoinType, counter, quantiles, violin
from .exceptions import *
from .schema import Column, TypeTag

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Version
__version__ = "0.1.0"

__all__ = [
    "DataFrame",
    "FrameConfig",
    "SchemaOptions",
    "Column",
    "TypeTag",
    "JoinType",
    "counter",
    "quantiles",
    "violin",
    "read_csv",
    "from_pandas",
    "join",
    "union",
    "RowframeError",
    "InvalidInputError",
    "UnknownColumnError",
    "SchemaConflictError",
    "ConfigurationError",
    "UnknownJoinTypeError",
]


def read_csv(filepath_or_buffer, **options: Any) -> DataFrame:
    """Read a CSV file into a rowframe DataFrame.

    This is a wrapper around pandas.read_csv; missing cells become None.

    Args:
        filepath_or_buffer: File path or file-like object
        **options: Schema options passed to the DataFrame constructor
            (metadata, deep_scan, path, separator, currency_suffix)

    Returns:
        rowframe.DataFrame with one row dict per CSV record
    """
    frame = _pd.read_csv(filepath_or_buffer)
    frame = frame.astype(object).where(frame.notna(), None)
    return DataFrame.from_pandas(frame, **options)


def from_pandas(frame: _pd.DataFrame, **options: Any) -> DataFrame:
    """Wrap the records of a pandas DataFrame."""
    return DataFrame.from_pandas(frame, **options)


def join(
    left: DataFrame,
    right: DataFrame,
    predicate: Callable[[Mapping[str, Any], Mapping[str, Any]], bool],
    how: str = "inner",
    **options: Optional[Any],
) -> DataFrame:
    """Join two DataFrames; see ``DataFrame.join``."""
    return left.join(right, predicate, how=how, **options)


def union(first: DataFrame, *others: DataFrame) -> DataFrame:
    """Union any number of DataFrames left to right."""
    result = first
    for other in others:
        result = result.union(other)
    return result
