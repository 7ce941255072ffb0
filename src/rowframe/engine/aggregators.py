"""Stock reducers and mappers for rollups."""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from ..schema.renamer import identity


def counter(values: Sequence[Any]) -> int:
    """Number of collected values."""
    return len(values)


def quantiles(values: Sequence[float]) -> Dict[str, float]:
    """First and third quartiles, the interquartile range and the 1.5 IQR fences.

    Uses linear interpolation between closest ranks.
    """
    data = np.asarray(values, dtype=float)
    q1, q3 = (float(q) for q in np.quantile(data, [0.25, 0.75]))
    iqr = q3 - q1
    return {
        "q1": q1,
        "q3": q3,
        "iqr": iqr,
        "qr_min": q1 - 1.5 * iqr,
        "qr_max": q3 + 1.5 * iqr,
    }


def violin(row: Mapping[str, Any]) -> Dict[str, Any]:
    """Row mapper adding ``iqr`` and the fences to a row that already has ``q1``/``q3``."""
    iqr = row["q3"] - row["q1"]
    return {
        **row,
        "iqr": iqr,
        "qr_min": row["q1"] - 1.5 * iqr,
        "qr_max": row["q3"] + 1.5 * iqr,
    }


def pick(keys: Sequence[str]) -> Callable[[Mapping[str, Any]], Dict[str, Any]]:
    """Mapper keeping only ``keys`` that are present on the row."""
    keys = list(keys)

    def mapper(row: Mapping[str, Any]) -> Dict[str, Any]:
        return {key: row[key] for key in keys if key in row}
    return mapper


def get_aggregator(
    keys: Union[str, Sequence[str]], reducer: Optional[Callable] = None
) -> Tuple[Callable, Callable]:
    """Return a ``(mapper, reducer)`` pair picking ``keys`` and reducing with ``reducer``."""
    if isinstance(keys, str):
        keys = [keys]
    return pick(keys), reducer if callable(reducer) else identity
