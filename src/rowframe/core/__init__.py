"""
Core module for rowframe.

Contains the DataFrame facade and the configuration it carries.
"""

from .config import DEFAULT_ACTUAL_FLAG, DEFAULT_CHILDREN, FrameConfig, SchemaOptions
from .dataframe import DataFrame

__all__ = [
    "DataFrame",
    "FrameConfig",
    "SchemaOptions",
    "DEFAULT_ACTUAL_FLAG",
    "DEFAULT_CHILDREN",
]
