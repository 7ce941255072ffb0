"""
Predicate joins over (rows, schema) pairs.

Every flat join is a nested-loop evaluation of ``predicate(left_row, right_row)``; there is no
index acceleration. Callers that need speed should pre-bucket by key.

Merge precedence: when a field exists on both sides after renaming, the left row's value
wins, and left columns win schema conflicts in the same way.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from ..exceptions import UnknownJoinTypeError
from ..schema.metadata import Column, column_names
from ..schema.renamer import renamer_from_options, row_renamer
from ..schema.types import TypeTag

logger = logging.getLogger(__name__)

Row = Dict[str, Any]
Predicate = Callable[[Mapping[str, Any], Mapping[str, Any]], bool]
JoinResult = Tuple[List[Row], List[Column]]


class JoinType(str, Enum):
    INNER = "inner"
    LEFT = "left"
    OUTER = "outer"
    RIGHT = "right"
    FULL = "full"
    NESTED = "nested"


def resolve_join_type(how: Any) -> JoinType:
    """Turn a join type token into a JoinType; ``outer`` is an alias of ``left``."""
    try:
        join_type = JoinType(how)
    except ValueError:
        valid = [t.value for t in JoinType]
        raise UnknownJoinTypeError(f"Join type must be one of {valid}, got: {how!r}") from None
    if join_type is JoinType.OUTER:
        return JoinType.LEFT
    return join_type


def _renamers(schema: Sequence[Column], options: Optional[Mapping[str, Any]]):
    name_fn = renamer_from_options(options)
    return name_fn, row_renamer(name_fn, column_names(schema))


def flat_join(
    left_rows: Sequence[Mapping[str, Any]],
    left_schema: Sequence[Column],
    right_rows: Sequence[Mapping[str, Any]],
    right_schema: Sequence[Column],
    predicate: Predicate,
    keep_unmatched: bool = False,
    left_options: Optional[Mapping[str, Any]] = None,
    right_options: Optional[Mapping[str, Any]] = None,
) -> JoinResult:
    """Join left rows against right rows, left fields winning on collisions.

    Args:
        keep_unmatched: Emit a left row on its own when nothing on the right matches it

    Returns:
        Tuple of (rows, schema)
    """
    rename_left_key, rename_left = _renamers(left_schema, left_options)
    rename_right_key, rename_right = _renamers(right_schema, right_options)

    rows: List[Row] = []
    for x in left_rows:
        renamed_x = rename_left(x)
        matches = [
            {**rename_right(y), **renamed_x}
            for y in right_rows
            if predicate(x, y)
        ]
        if not matches and keep_unmatched:
            matches.append(dict(renamed_x))
        rows.extend(matches)

    left_meta = [col.copy(name=rename_left_key(col.name)) for col in left_schema]
    taken = set(column_names(left_meta))
    right_meta = [
        col.copy(name=rename_right_key(col.name))
        for col in right_schema
        if rename_right_key(col.name) not in taken
    ]
    return rows, left_meta + right_meta


def unmatched_right(
    left_rows: Sequence[Mapping[str, Any]],
    right_rows: Sequence[Mapping[str, Any]],
    right_schema: Sequence[Column],
    predicate: Predicate,
    right_options: Optional[Mapping[str, Any]] = None,
) -> List[Row]:
    """Right rows that match no left row, renamed as right rows."""
    _, rename_right = _renamers(right_schema, right_options)
    return [
        dict(rename_right(y))
        for y in right_rows
        if not any(predicate(x, y) for x in left_rows)
    ]


def nested_join(
    child_rows: Sequence[Mapping[str, Any]],
    child_schema: Sequence[Column],
    parent_rows: Sequence[Mapping[str, Any]],
    parent_schema: Sequence[Column],
    predicate: Predicate,
    children: str = "children",
) -> JoinResult:
    """Nest matching child rows under each parent row.

    ``predicate`` is called as ``predicate(child, parent)``. Fields are not merged; every
    parent row gets a ``children`` list holding the child rows it matched.
    """
    rows = [
        {**p, children: [dict(c) for c in child_rows if predicate(c, p)]}
        for p in parent_rows
    ]
    schema = [col.copy() for col in parent_schema if col.name != children]
    schema.append(
        Column(
            name=children,
            type=TypeTag.ARRAY,
            metadata=[col.copy() for col in child_schema],
        )
    )
    return rows, schema


def join(
    left_rows: Sequence[Mapping[str, Any]],
    left_schema: Sequence[Column],
    right_rows: Sequence[Mapping[str, Any]],
    right_schema: Sequence[Column],
    predicate: Predicate,
    how: Any = "inner",
    left_options: Optional[Mapping[str, Any]] = None,
    right_options: Optional[Mapping[str, Any]] = None,
    children: str = "children",
) -> JoinResult:
    """Join two (rows, schema) pairs.

    Args:
        predicate: ``predicate(left_row, right_row)`` deciding whether two rows match
        how: One of inner, left, outer, right, full, nested
        left_options: ``{"prefix"|"suffix": str, "separator": str}`` renaming the left side
        right_options: Same, for the right side
        children: Field receiving nested rows for ``nested`` joins

    Returns:
        Tuple of (rows, schema)

    Raises:
        UnknownJoinTypeError: If ``how`` is not a known join type

    Note:
        A right join runs the left-join algorithm with the operands swapped. The result
        keeps the swapped layout: right columns come first and right fields win
        collisions. The predicate is still called as ``predicate(left_row, right_row)``.
    """
    join_type = resolve_join_type(how)

    if join_type is JoinType.INNER:
        rows, schema = flat_join(
            left_rows, left_schema, right_rows, right_schema, predicate,
            keep_unmatched=False, left_options=left_options, right_options=right_options,
        )
    elif join_type is JoinType.LEFT:
        rows, schema = flat_join(
            left_rows, left_schema, right_rows, right_schema, predicate,
            keep_unmatched=True, left_options=left_options, right_options=right_options,
        )
    elif join_type is JoinType.RIGHT:
        rows, schema = flat_join(
            right_rows, right_schema, left_rows, left_schema,
            lambda y, x: predicate(x, y),
            keep_unmatched=True, left_options=right_options, right_options=left_options,
        )
    elif join_type is JoinType.FULL:
        rows, schema = flat_join(
            left_rows, left_schema, right_rows, right_schema, predicate,
            keep_unmatched=True, left_options=left_options, right_options=right_options,
        )
        rows.extend(
            unmatched_right(left_rows, right_rows, right_schema, predicate, right_options)
        )
    else:
        rows, schema = nested_join(
            left_rows, left_schema, right_rows, right_schema, predicate, children=children,
        )

    logger.debug(
        "%s join: %d x %d rows -> %d rows",
        join_type.value, len(left_rows), len(right_rows), len(rows),
    )
    return rows, schema
