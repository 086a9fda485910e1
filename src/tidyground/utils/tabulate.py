"""Render tables as aligned plain text.

Used by ``TableModel.__str__``, ``Dataframe.show`` and the command line
tools. Cells are left aligned and separated by ``|``, missing values
read ``NA`` and floats are rounded to two decimals. Only the first
``max_rows`` rows are rendered, followed by a count of the hidden ones.

Example:

    >>> import pyarrow as pa
    >>> data = {
    ...     "college": ["Evanston U", "Chicago U", "Boston U"],
    ...     "cases": [8, 8, None],
    ...     "rate": [66.5, 38.72, 77.46],
    ... }
    >>> table = pa.Table.from_pydict(data)
    >>> print(tabulate(table))
    college    | cases | rate
    ---------- | ----- | -----
    Evanston U | 8     | 66.50
    Chicago U  | 8     | 38.72
    Boston U   | NA    | 77.46
"""

from typing import Any

import pyarrow as pa


def tabulate(table: Any, max_rows: int = 20) -> str:
    """Render ``table`` as text, one line per row.

    ``table`` is an Arrow table or record batch, or any object
    providing ``to_arrow()`` such as a :class:`TableModel`::

        college    | year  | cases
        ---------- | ----- | -----
        Evanston U | total | 100
        Evanston U | 2021  | 40
    """
    if not isinstance(table, (pa.Table, pa.RecordBatch)):
        table = table.to_arrow()

    names = table.column_names
    cells = [
        [format_value(row[name]) for name in names]
        for row in table.slice(0, max_rows).to_pylist()
    ]

    widths = column_widths(names, cells)
    lines = [format_row(names, widths), format_row(["-"] * len(names), widths, fill="-")]
    lines.extend(format_row(row, widths) for row in cells)

    hidden = table.num_rows - max_rows
    if hidden > 0:
        lines.append(f"... and {hidden} more rows")
    return "\n".join(lines)


def column_widths(names: list[str], cells: list[list[str]]) -> list[int]:
    """Width of each column, wide enough for the header and every cell."""
    return [
        max([len(name)] + [len(row[position]) for row in cells])
        for position, name in enumerate(names)
    ]


def format_row(cells: list[str], widths: list[int], fill: str = " ") -> str:
    return " | ".join(
        cell.ljust(width, fill) for cell, width in zip(cells, widths)
    ).rstrip()


def format_value(value: Any) -> str:
    """Text shown in a cell for ``value``.

    Missing values read ``NA``, booleans ``true``/``false``,
    floats get two decimals and texts longer than 30
    characters are truncated.
    """
    if value is None:
        return "NA"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return f"{value:.2f}"

    text = str(value)
    if len(text) > 30:
        text = text[:27] + "..."
    return text
