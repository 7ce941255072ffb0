"""
Group-by / rollup over (rows, schema) pairs.

A rollup buckets rows by the values of the group-by keys, collects ``mapper(row)`` for every
summary in every bucket, optionally aligns each bucket to the full set of alignment key
combinations, and finally runs the reducers to produce one output row per bucket.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from ..exceptions import ConfigurationError
from ..schema.metadata import Column, build_rollup_metadata
from ..schema.renamer import identity
from .aggregators import pick

logger = logging.getLogger(__name__)

Row = Dict[str, Any]
Selector = Union[str, Sequence[str], Callable[[Mapping[str, Any]], Any]]
Reducers = Union[str, Mapping[str, Callable[[List[Any]], Any]]]

MISSING_CONFIGURATION = (
    "Use group_by to specify the columns to group by or use summarize to add aggregators."
)


@dataclass
class Summary:
    """A named mapper plus the reducers applied to the values it collects per group."""

    name: str
    mapper: Callable[[Mapping[str, Any]], Any]
    reducers: List[Tuple[str, Callable[[List[Any]], Any]]] = field(default_factory=list)


@dataclass
class Bucket:
    """Group-by values of one group and, per summary position, the values it collected."""

    keys: Row
    collected: List[List[Any]]


def make_summary(selector: Selector, reducers: Reducers, position: int = 0) -> Summary:
    """Build a Summary from a selector and a reducer specification.

    Args:
        selector: Field name, list of field names, or a ``row -> value`` callable
        reducers: Output field name (identity reducer) or a mapping of output field to
            reducer callable
        position: Index of the summary, used to name mapping-based summaries

    Example:
        >>> make_summary("name", "children")            # children: [{"name": ...}, ...]
        >>> make_summary("name", {"count": counter})    # count: <int>
    """
    if callable(selector):
        mapper = selector
    elif isinstance(selector, str):
        mapper = pick([selector])
    else:
        mapper = pick(list(selector))

    if isinstance(reducers, str):
        return Summary(name=reducers, mapper=mapper, reducers=[(reducers, identity)])
    if not isinstance(reducers, Mapping) or not reducers:
        raise ConfigurationError(
            "summarize needs an output field name or a mapping of field names to reducers"
        )
    for output_field, reducer in reducers.items():
        if not callable(reducer):
            raise ConfigurationError(f"Reducer for {output_field!r} is not callable")
    return Summary(
        name=f"__summary_{position}",
        mapper=mapper,
        reducers=list(reducers.items()),
    )


def default_summary(schema: Sequence[Column], group_by: Sequence[str], children: str) -> Summary:
    """Summary nesting every non-group column under ``children``."""
    keys = [col.name for col in schema if col.name not in group_by]
    return Summary(name=children, mapper=pick(keys), reducers=[(children, identity)])


def check_output_fields(group_by: Sequence[str], summaries: Sequence[Summary]) -> None:
    """Require every output field of a rollup to be distinct.

    Raises:
        ConfigurationError: If a reducer field repeats a group-by key or another reducer field
    """
    seen = set(group_by)
    for summary in summaries:
        for output_field, _reducer in summary.reducers:
            if output_field in seen:
                raise ConfigurationError(
                    f"Output field {output_field!r} is already produced by the rollup"
                )
            seen.add(output_field)


def _tagged(value: Any) -> str:
    return f"{type(value).__name__}:{value!r}"


def group_key(row: Mapping[str, Any], group_by: Sequence[str]) -> Tuple[str, Row]:
    """Bucket key for a row; values JSON cannot encode are tagged with their type name."""
    keys = {key: row[key] for key in group_by if key in row}
    return json.dumps(keys, default=_tagged), keys


def group_rows(
    rows: Sequence[Mapping[str, Any]],
    group_by: Sequence[str],
    summaries: Sequence[Summary],
) -> List[Bucket]:
    """Bucket rows by group-by values, collecting every summary's mapped values.

    Buckets are returned in the order their first row appears.
    """
    buckets: Dict[str, Bucket] = {}
    for row in rows:
        key, keys = group_key(row, group_by)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = Bucket(keys=keys, collected=[[] for _ in summaries])
            buckets[key] = bucket
        for position, summary in enumerate(summaries):
            bucket.collected[position].append(summary.mapper(row))
    return list(buckets.values())


def distinct_combinations(
    rows: Sequence[Mapping[str, Any]], keys: Sequence[str]
) -> List[Row]:
    """Distinct value combinations of ``keys`` in first-seen order."""
    extract = pick(keys)
    combinations: List[Row] = []
    for row in rows:
        combination = extract(row)
        if combination not in combinations:
            combinations.append(combination)
    return combinations


def align_groups(
    buckets: Sequence[Bucket],
    rows: Sequence[Mapping[str, Any]],
    summaries: Sequence[Summary],
    align_by: Sequence[str],
    group_by: Sequence[str],
    template: Optional[Mapping[str, Any]],
    actual_flag: str,
) -> int:
    """Give every bucket an entry for every alignment combination seen in ``rows``.

    Collected entries are flagged with ``actual_flag = 1``; each missing combination gets a
    filler built from ``template`` and flagged with ``actual_flag = 0``. Buckets are updated
    in place.

    Returns:
        Number of filler rows added

    Raises:
        ConfigurationError: If a summary collected something other than row mappings
    """
    excluded = set(align_by) | set(group_by)
    filler = {k: v for k, v in (template or {}).items() if k not in excluded}
    combinations = distinct_combinations(rows, align_by)
    extract = pick(align_by)
    added = 0

    for bucket in buckets:
        for position, summary in enumerate(summaries):
            values = bucket.collected[position]
            if not all(isinstance(value, Mapping) for value in values):
                raise ConfigurationError(
                    f"Cannot align summary {summary.name!r}: collected values are not rows"
                )
            present = [extract(value) for value in values]
            missing = [
                {**filler, **combination, actual_flag: 0}
                for combination in combinations
                if combination not in present
            ]
            bucket.collected[position] = [
                {**value, actual_flag: 1} for value in values
            ] + missing
            added += len(missing)
    return added


def aggregate(buckets: Sequence[Bucket], summaries: Sequence[Summary]) -> List[Row]:
    """Run every reducer over its collected values; one output row per bucket."""
    result = []
    for bucket in buckets:
        row = dict(bucket.keys)
        for values, summary in zip(bucket.collected, summaries):
            for output_field, reducer in summary.reducers:
                row[output_field] = reducer(values)
        result.append(row)
    return result


def rollup(
    rows: Sequence[Mapping[str, Any]],
    schema: Sequence[Column],
    group_by: Sequence[str] = (),
    summaries: Sequence[Summary] = (),
    align_by: Sequence[str] = (),
    template: Optional[Mapping[str, Any]] = None,
    children: str = "children",
    actual_flag: str = "actual_flag",
) -> Tuple[List[Row], List[Column]]:
    """Execute a configured group-by / summarize / align pipeline.

    Returns:
        Tuple of (rows, schema), one row per group in first-appearance order

    Raises:
        ConfigurationError: If neither group-by keys nor summaries are configured, or two
            output fields share a name
    """
    if not group_by and not summaries:
        raise ConfigurationError(MISSING_CONFIGURATION)
    if not summaries:
        summaries = [default_summary(schema, group_by, children)]
    check_output_fields(group_by, summaries)

    buckets = group_rows(rows, group_by, summaries)
    if align_by:
        added = align_groups(
            buckets, rows, summaries, align_by, group_by, template, actual_flag
        )
        logger.debug("Aligned %d groups on %s, %d filler rows", len(buckets), list(align_by), added)

    result = aggregate(buckets, summaries)
    metadata = build_rollup_metadata(result, schema, group_by, summaries)
    logger.debug("Rolled up %d rows into %d groups by %s", len(rows), len(result), list(group_by))
    return result, metadata
