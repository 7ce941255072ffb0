"""
Utilities module for rowframe.

Contains helper functions for rendering schemas.
"""

from .visualization import visualize_schema

__all__ = ["visualize_schema"]
