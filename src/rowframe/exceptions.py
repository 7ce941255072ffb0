"""
Exception classes for rowframe.

These exceptions are raised synchronously by the schema, join, rollup and mutation layers.
None of them are recovered from internally; they always surface to the caller.
"""


class RowframeError(Exception):
    """Base class for every error raised by rowframe."""
    pass


class InvalidInputError(RowframeError, TypeError):
    """Raised when an operation receives a value of the wrong shape.

    Examples:
        - Constructing a DataFrame from something that is not a list of rows
        - Calling ``update`` with a value that is not a mapping
    """
    pass


class UnknownColumnError(RowframeError, ValueError):
    """Raised when a column reference cannot be resolved against the schema.

    Examples:
        - Renaming a column that does not exist
        - Renaming a column to a name that is already taken
    """
    pass


class SchemaConflictError(RowframeError, ValueError):
    """Raised when two schemas disagree on the type of a shared column.

    This is the guard used by ``combine_metadata`` when overwriting was not
    requested, e.g. a union of ``[{"x": 1}]`` with ``[{"x": "s"}]``.

    Attributes:
        column: Name of the offending column
    """

    def __init__(self, column: str):
        self.column = column
        super().__init__(f"Metadata conflict: {column} has conflicting types")


class ConfigurationError(RowframeError):
    """Raised when a configured pipeline cannot run.

    Examples:
        - ``rollup()`` with neither group-by keys nor summaries
        - Alignment over summaries that do not produce row mappings
        - Overriding an unknown configuration key
    """
    pass


class UnknownJoinTypeError(RowframeError, ValueError):
    """Raised when a join is requested with an unrecognised join type."""
    pass
