"""
Name transforms for columns and rows.

Joins rename one or both sides with a prefix or suffix before merging rows. The same name
function is applied to the schema and, through a lookup built once from the schema, to every
row.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, Mapping, Optional

Row = Dict[str, Any]


def identity(value: Any) -> Any:
    return value


def attribute_renamer(
    prefix: Optional[str] = None,
    suffix: Optional[str] = None,
    separator: str = "_",
) -> Callable[[str], str]:
    """Build a function that adds a prefix or a suffix to a name.

    The prefix wins when both are given. Returns ``identity`` when neither is given, which
    lets ``row_renamer`` skip the per-row work entirely.

    Example:
        >>> attribute_renamer(prefix="x")("id")
        'x_id'
    """
    if prefix:
        return lambda name: separator.join([prefix, name])
    if suffix:
        return lambda name: separator.join([name, suffix])
    return identity


def renamer_from_options(options: Optional[Mapping[str, Any]]) -> Callable[[str], str]:
    """Build an attribute renamer from a ``{"prefix"|"suffix", "separator"}`` mapping."""
    options = options or {}
    return attribute_renamer(
        prefix=options.get("prefix"),
        suffix=options.get("suffix"),
        separator=options.get("separator", "_"),
    )


def lookup_renamer(lookup: Mapping[str, str]) -> Callable[[Mapping[str, Any]], Row]:
    """Rename the keys of a row through ``lookup``; keys missing from it are dropped."""
    def rename(row: Mapping[str, Any]) -> Row:
        return {lookup[key]: value for key, value in row.items() if key in lookup}
    return rename


def row_renamer(
    name_fn: Callable[[str], str], known_keys: Iterable[str]
) -> Callable[[Mapping[str, Any]], Row]:
    """Build a row renamer for rows whose keys are ``known_keys``.

    The renamer must be built from the schema of the rows it will be applied to: keys that
    are not in ``known_keys`` are dropped.
    """
    if name_fn is identity:
        return identity
    return lookup_renamer({key: name_fn(key) for key in known_keys})
