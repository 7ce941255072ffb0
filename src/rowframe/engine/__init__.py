"""
Engine module for rowframe.

Pure functions over ``(rows, schema)`` pairs: predicate joins, group-by/rollup with
alignment, set operations, and filtered in-place row mutation. The DataFrame facade in
``rowframe.core`` composes these.
"""

from .join import JoinType, flat_join, join, nested_join, resolve_join_type, unmatched_right
from .rollup import (
    Bucket,
    Summary,
    aggregate,
    check_output_fields,
    align_groups,
    default_summary,
    distinct_combinations,
    group_rows,
    make_summary,
    rollup,
)
from .setops import intersect, minus, union
from .mutation import (
    FilterState,
    apply_rows,
    delete_rows,
    fill_missing,
    fill_null,
    select_rows,
    sort_rows,
    update_rows,
)
from .aggregators import counter, get_aggregator, pick, quantiles, violin

__all__ = [
    "JoinType",
    "flat_join",
    "join",
    "nested_join",
    "resolve_join_type",
    "unmatched_right",
    "Bucket",
    "Summary",
    "aggregate",
    "check_output_fields",
    "align_groups",
    "default_summary",
    "distinct_combinations",
    "group_rows",
    "make_summary",
    "rollup",
    "intersect",
    "minus",
    "union",
    "FilterState",
    "apply_rows",
    "delete_rows",
    "fill_missing",
    "fill_null",
    "select_rows",
    "sort_rows",
    "update_rows",
    "counter",
    "get_aggregator",
    "pick",
    "quantiles",
    "violin",
]
