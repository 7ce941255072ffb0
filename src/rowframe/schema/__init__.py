"""
Schema module for rowframe.

Type inference for single values, column metadata derivation and merging, and the renaming
primitives shared by joins and structural operations.
"""

from .types import TypeTag, classify, infer_type
from .metadata import (
    Column,
    DEFAULT_CURRENCY_SUFFIX,
    DEFAULT_SEPARATOR,
    build_rollup_metadata,
    column_names,
    combine_metadata,
    deep_scan_sample,
    derive_column_index,
    derive_schema,
    normalize_schema,
)
from .renamer import (
    attribute_renamer,
    identity,
    lookup_renamer,
    renamer_from_options,
    row_renamer,
)

__all__ = [
    "TypeTag",
    "classify",
    "infer_type",
    "Column",
    "DEFAULT_CURRENCY_SUFFIX",
    "DEFAULT_SEPARATOR",
    "build_rollup_metadata",
    "column_names",
    "combine_metadata",
    "deep_scan_sample",
    "derive_column_index",
    "derive_schema",
    "normalize_schema",
    "attribute_renamer",
    "identity",
    "lookup_renamer",
    "renamer_from_options",
    "row_renamer",
]
