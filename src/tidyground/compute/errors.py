"""Errors raised by the compute functions.

All the compute functions are all-or-nothing: they either
return a brand new :class:`TableModel` or raise one of the
errors defined here, no partially built table is ever returned.
"""


class TidyGroundError(Exception):
    """Base class for all the errors raised by TidyGround."""


class ShapeError(TidyGroundError):
    """The structure of the data does not allow the operation.

    Raised for things like columns of different length,
    duplicated column names or pivots that would be ambiguous.
    """


class NotFoundError(TidyGroundError, KeyError):
    """A referenced column does not exist in the table."""

    def __init__(self, name: str | int, available: list[str] | None = None) -> None:
        self.name = name
        self.available = available
        message = f"Column {name!r} not found"
        if available is not None:
            message += f", available columns: {available}"
        super().__init__(message)

    def __str__(self) -> str:
        # KeyError would otherwise quote the whole message.
        return self.args[0]


class ConflictError(TidyGroundError):
    """More than one value competes for the same cell of a wide table."""


class ParseError(TidyGroundError, ValueError):
    """A value could not be parsed into the requested type."""

    def __init__(self, column: str, row: int, value: str) -> None:
        self.column = column
        self.row = row
        self.value = value
        super().__init__(f"Unable to parse {value!r} in column {column!r} at row {row}")
