"""String processing helpers.

Most string transformations can be performed by
``pyarrow.compute`` functions through a
:class:`tidyground.compute.FunctionCallExpression`, for example
to find which colleges are universities::

    table.filter_rows(
        FunctionCallExpression(pc.match_substring, col("college"), "University")
    )

Converting text to numbers is instead a step that can fail,
when a value doesn't contain a number. :func:`parse_number` makes
that step explicit: it either converts all the values or raises
:class:`ParseError` pointing to the first value that
couldn't be converted.
"""

import logging
import re

import pyarrow as pa

from .errors import ParseError, ShapeError
from .table import TableModel

__all__ = ("parse_number", "parse_number_value")

logger = logging.getLogger(__name__)

# Commas between digits are grouping marks, wherever they are.
GROUPING_RE = re.compile(r"(?<=\d),(?=\d)")
# A sign can precede prefix symbols like currencies, as in "-$5".
NUMBER_RE = re.compile(
    r"(?P<sign>[-+]?)[^\w\s.,+-]*"
    r"(?P<number>(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?)"
)


def parse_number_value(text: str) -> float | None:
    """Extract the first number contained in a text.

    Anything before or after the number, like currency
    symbols or units, is ignored and grouping commas are removed.
    Blank texts are considered missing values and return ``None``.

    >>> parse_number_value("$1,234.50 per year")
    1234.5
    >>> parse_number_value("-$5")
    -5.0
    >>> parse_number_value("1e5")
    100000.0

    Raises :class:`ValueError` when the text contains no number.
    """
    if not text.strip():
        return None
    match = NUMBER_RE.search(GROUPING_RE.sub("", text))
    if match is None:
        raise ValueError(f"No number found in {text!r}")
    return float(match.group("sign") + match.group("number"))


def parse_number(
    table: TableModel, column: str, into: str | None = None, integer: bool = False
) -> TableModel:
    """Parse the numbers contained in a text column.

    Returns a new table where ``column`` was replaced by its parsed
    values, or where the parsed values were added as a new column ``into``.
    Missing and blank values are parsed as missing values.

    :param table: The table containing the text column.
    :param column: The column to parse.
    :param into: The name of the column receiving the numbers,
                 the parsed column itself when not provided.
    :param integer: Parse the values as integers, values with
                    a fractional part will fail to parse.
    """
    column = table.resolve_name(column)
    values = table.column(column)
    target_type = pa.int64() if integer else pa.float64()

    if pa.types.is_integer(values.type) or pa.types.is_floating(values.type):
        parsed = values.to_pylist()
    elif pa.types.is_string(values.type) or pa.types.is_large_string(values.type) or pa.types.is_null(values.type):
        parsed = []
        for row, text in enumerate(values.to_pylist()):
            if text is None:
                parsed.append(None)
                continue
            try:
                parsed.append(parse_number_value(text))
            except ValueError:
                raise ParseError(column, row, text) from None
    else:
        raise ShapeError(f"Column {column!r} of type {values.type} can't be parsed as numbers")

    if integer:
        for row, number in enumerate(parsed):
            if number is not None and not float(number).is_integer():
                raise ParseError(column, row, values[row].as_py())
        parsed = [None if number is None else int(number) for number in parsed]

    logger.debug("Parsed %s values of column %s as %s", len(parsed), column, target_type)
    return table.mutate(**{into or column: pa.array(parsed, type=target_type)})
