"""
Set operations over (rows, schema) pairs.

Rows are compared by whole-row equality, pairwise, with no hashing. ``minus`` and
``intersect`` require structurally equal schemas but react differently when they are not:
``minus`` hands back the left side untouched and ``intersect`` yields an empty result. The
DataFrame facade preserves both behaviours.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ..schema.metadata import Column, combine_metadata

logger = logging.getLogger(__name__)

Row = Dict[str, Any]
SetResult = Tuple[List[Row], List[Column]]


def union(
    left_rows: Sequence[Mapping[str, Any]],
    left_schema: Sequence[Column],
    right_rows: Sequence[Mapping[str, Any]],
    right_schema: Sequence[Column],
) -> SetResult:
    """Concatenate two row collections without de-duplication.

    Raises:
        SchemaConflictError: If a shared column has different types on the two sides
    """
    schema = combine_metadata(left_schema, right_schema, overwrite=False)
    rows = [dict(row) for row in left_rows] + [dict(row) for row in right_rows]
    logger.debug("union: %d + %d rows", len(left_rows), len(right_rows))
    return rows, schema


def _contains(rows: Sequence[Mapping[str, Any]], candidate: Mapping[str, Any]) -> bool:
    return any(row == candidate for row in rows)


def minus(
    left_rows: Sequence[Mapping[str, Any]],
    left_schema: Sequence[Column],
    right_rows: Sequence[Mapping[str, Any]],
    right_schema: Sequence[Column],
) -> Optional[SetResult]:
    """Left rows that do not appear in the right collection.

    Returns:
        Tuple of (rows, schema), or None when the schemas differ so the caller can keep
        the left operand unchanged
    """
    if list(left_schema) != list(right_schema):
        logger.warning("minus: schemas differ, left operand returned unchanged")
        return None
    rows = [dict(row) for row in left_rows if not _contains(right_rows, row)]
    logger.debug("minus: %d - %d rows -> %d rows", len(left_rows), len(right_rows), len(rows))
    return rows, [col.copy() for col in left_schema]


def intersect(
    left_rows: Sequence[Mapping[str, Any]],
    left_schema: Sequence[Column],
    right_rows: Sequence[Mapping[str, Any]],
    right_schema: Sequence[Column],
) -> SetResult:
    """Left rows that also appear in the right collection.

    Differing schemas produce an empty result with an empty schema.
    """
    if list(left_schema) != list(right_schema):
        logger.warning("intersect: schemas differ, returning an empty result")
        return [], []
    rows = [dict(row) for row in left_rows if _contains(right_rows, row)]
    logger.debug("intersect: %d & %d rows -> %d rows", len(left_rows), len(right_rows), len(rows))
    return rows, [col.copy() for col in left_schema]
