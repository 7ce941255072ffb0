"""
Filtered row mutation.

``where`` arms a single-use predicate. The next ``select``, ``update`` or ``delete`` takes it
and leaves the state idle again; ``apply`` only peeks at it. Calling ``where`` twice in a row
replaces the first predicate.

All functions here work on the caller's row list in place, except ``select_rows`` and
``apply_rows`` which build new lists.
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable, Dict, List, Mapping, MutableSequence, Optional, Sequence, Tuple, Union

from ..exceptions import InvalidInputError

logger = logging.getLogger(__name__)

Row = Dict[str, Any]
RowPredicate = Callable[[Mapping[str, Any]], bool]
SortSpec = Union[str, Tuple[str, bool]]


def include_all(row: Mapping[str, Any]) -> bool:
    return True


class FilterState:
    """Two-state machine holding the pending row filter: idle or armed(predicate)."""

    def __init__(self) -> None:
        self._predicate: Optional[RowPredicate] = None

    @property
    def armed(self) -> bool:
        return self._predicate is not None

    def arm(self, predicate: RowPredicate) -> None:
        if not callable(predicate):
            raise InvalidInputError("where expects a callable row predicate")
        self._predicate = predicate

    def take(self) -> Optional[RowPredicate]:
        """Return the armed predicate (or None) and go back to idle."""
        predicate, self._predicate = self._predicate, None
        return predicate

    def peek(self) -> Optional[RowPredicate]:
        return self._predicate

    def __repr__(self) -> str:
        return "FilterState(armed)" if self.armed else "FilterState(idle)"


def select_rows(
    rows: Sequence[Mapping[str, Any]],
    columns: Sequence[str] = (),
    predicate: Optional[RowPredicate] = None,
) -> List[Row]:
    """Filter, then project onto ``columns`` (all fields when empty). Returns copies."""
    matched = [row for row in rows if predicate is None or predicate(row)]
    if columns:
        return [{key: row[key] for key in columns if key in row} for row in matched]
    return [dict(row) for row in matched]


def update_rows(
    rows: Sequence[Dict[str, Any]],
    value: Any,
    predicate: Optional[RowPredicate] = None,
) -> int:
    """Merge ``value`` into every matching row in place.

    Returns:
        Number of rows updated

    Raises:
        InvalidInputError: If ``value`` is not a mapping
    """
    if not isinstance(value, Mapping):
        raise InvalidInputError("value must be an object")
    predicate = predicate or include_all
    count = 0
    for row in rows:
        if predicate(row):
            row.update(value)
            count += 1
    logger.debug("update: %d of %d rows", count, len(rows))
    return count


def delete_rows(
    rows: MutableSequence[Mapping[str, Any]],
    predicate: Optional[RowPredicate] = None,
) -> int:
    """Remove every matching row from ``rows`` in place.

    Returns:
        Number of rows removed
    """
    predicate = predicate or include_all
    count = 0
    for index in range(len(rows) - 1, -1, -1):
        if predicate(rows[index]):
            del rows[index]
            count += 1
    logger.debug("delete: %d rows removed, %d left", count, len(rows))
    return count


def fill_missing(rows: Sequence[Dict[str, Any]], values: Mapping[str, Any]) -> None:
    """Set every key of ``values`` that is absent from a row."""
    for row in rows:
        for key, default in values.items():
            if key not in row:
                row[key] = default


def fill_null(rows: Sequence[Dict[str, Any]], values: Mapping[str, Any]) -> None:
    """Replace every key of ``values`` whose current value is None."""
    for row in rows:
        for key, default in values.items():
            if key in row and row[key] is None:
                row[key] = default


def apply_rows(
    rows: Sequence[Mapping[str, Any]],
    fn: Callable[[Mapping[str, Any]], Any],
    predicate: Optional[RowPredicate] = None,
) -> List[Any]:
    return [fn(row) for row in rows if predicate is None or predicate(row)]


def _compare(a: Any, b: Any) -> int:
    if a is None and b is None:
        return 0
    if a is None:
        return 1
    if b is None:
        return -1
    try:
        if a < b:
            return -1
        if a > b:
            return 1
        return 0
    except TypeError:
        # unorderable pair, e.g. str and int in a mixed column
        left, right = (type(a).__name__, str(a)), (type(b).__name__, str(b))
        return (left > right) - (left < right)


def parse_sort_specs(specs: Sequence[SortSpec]) -> List[Tuple[str, bool]]:
    """Normalise ``"col"`` / ``("col", ascending)`` specs to ``(col, ascending)`` pairs."""
    parsed = []
    for spec in specs:
        if isinstance(spec, str):
            parsed.append((spec, True))
        else:
            name, ascending = spec
            parsed.append((name, bool(ascending)))
    return parsed


def sort_rows(rows: MutableSequence[Mapping[str, Any]], specs: Sequence[SortSpec]) -> None:
    """Stable multi-key sort of ``rows`` in place; missing and None values sort last.

    Values that cannot be compared with each other are ordered by type name, then by their
    string form.
    """
    keys = parse_sort_specs(specs)

    def compare(a: Mapping[str, Any], b: Mapping[str, Any]) -> int:
        for name, ascending in keys:
            left, right = a.get(name), b.get(name)
            result = _compare(left, right)
            if result and not ascending and left is not None and right is not None:
                result = -result
            if result:
                return result
        return 0

    rows.sort(key=functools.cmp_to_key(compare))
