"""
Value classification.

Maps single Python values onto the semantic type tags used in column metadata, and checks a
sequence of values for homogeneity.
"""

from __future__ import annotations

import datetime as _dt
import re
from enum import Enum
from numbers import Integral, Real
from typing import Any, Iterable

import numpy as np
import pandas as pd


class TypeTag(str, Enum):
    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    ARRAY = "array"
    OBJECT = "object"
    MIXED = "mixed"
    CURRENCY = "currency"
    NULL = "null"
    UNDEFINED = "undefined"

    def __str__(self) -> str:
        return self.value


_HAS_DIGIT = re.compile(r"\d")


def is_date_string(value: str) -> bool:
    """Return True when ``value`` parses as a date.

    Strings without a digit are rejected up front so that words such as ``"today"`` or
    ``"may"`` stay strings.
    """
    if not _HAS_DIGIT.search(value):
        return False
    try:
        parsed = pd.to_datetime(value)
    except (ValueError, TypeError, OverflowError):
        return False
    return not pd.isna(parsed)


def classify(value: Any) -> TypeTag:
    """Classify a single value into a TypeTag."""
    if value is None:
        return TypeTag.NULL
    if isinstance(value, (list, tuple)):
        return TypeTag.ARRAY
    if isinstance(value, (_dt.date, pd.Timestamp, np.datetime64)):
        return TypeTag.DATE
    # bool is an int subclass, so it has to be checked first
    if isinstance(value, (bool, np.bool_)):
        return TypeTag.BOOLEAN
    if isinstance(value, Integral):
        return TypeTag.INTEGER
    if isinstance(value, Real):
        value = float(value)
        if value.is_integer():
            return TypeTag.INTEGER
        return TypeTag.NUMBER
    if isinstance(value, str):
        return TypeTag.DATE if is_date_string(value) else TypeTag.STRING
    return TypeTag.OBJECT


def infer_type(values: Iterable[Any]) -> TypeTag:
    """Infer the common type of a sequence of values.

    Returns ``undefined`` for an empty sequence, ``null`` when every value is None and
    ``mixed`` when the non-null values do not all classify the same way.
    """
    values = list(values)
    if not values:
        return TypeTag.UNDEFINED

    non_null = [v for v in values if v is not None]
    if not non_null:
        return TypeTag.NULL

    tag = classify(non_null[0])
    for value in non_null[1:]:
        if classify(value) != tag:
            return TypeTag.MIXED
    return tag
