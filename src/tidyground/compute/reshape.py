"""Reshaping of tables between long and wide formats.

The same data can frequently be represented in two ways.
In *wide* format each entity has a single row and each
attribute of the entity has its own column::

    college,    cases_total, cases_2021
    Evanston U, 100,         40
    Chicago U,  250,         80

In *long* format each row holds a single (entity, attribute) pair::

    college,    year,  cases
    Evanston U, total, 100
    Evanston U, 2021,  40
    Chicago U,  total, 250
    Chicago U,  2021,  80

Long format is usually more convenient to aggregate and plot,
while wide format is more convenient to read and compare.
:func:`pivot_longer` converts from wide to long format and
:func:`pivot_wider` from long to wide format. Converting a table
to long format and back returns the original table, as far
as the columns order is not concerned.
"""

import logging
import re
from typing import Hashable, Literal, Sequence

import pyarrow as pa
import pyarrow.compute as pc

from .aggregate import group_keys
from .errors import ConflictError, ShapeError
from .table import TableModel

__all__ = ("pivot_longer", "pivot_wider")

logger = logging.getLogger(__name__)

ConflictResolution = Literal["error", "first", "last"]


def pivot_longer(
    table: TableModel,
    id_columns: Sequence[str],
    name_pattern: str | None = None,
    name_column: str = "name",
    value_column: str = "value",
    columns: Sequence[str] | None = None,
    drop_missing: bool = False,
) -> TableModel:
    """Convert a table from wide to long format.

    For each row of the table and each of the pivoted columns
    a new row is emitted with the values of the ``id_columns``,
    the name of the pivoted column in ``name_column`` and
    the value the row had for that column in ``value_column``.

    Rows are emitted in the order of the input rows and, for each input
    row, in the order of the pivoted columns.

    ``name_pattern`` is a regular expression matched at the start of the
    pivoted column names. When it contains a group, the first group
    becomes the name, otherwise the matched text is stripped from the name.
    So both ``"cases_"`` and ``r"cases_(\\w+)"`` turn ``cases_total``
    into ``total``. Every pivoted column must match the pattern.

    >>> table = TableModel.construct(
    ...     ["college", "cases_total", "cases_2021"],
    ...     {"college": ["Evanston U"], "cases_total": [100], "cases_2021": [40]},
    ... )
    >>> pivot_longer(table, ["college"], "cases_", "year", "cases").to_pylist()
    [{'college': 'Evanston U', 'year': 'total', 'cases': 100}, {'college': 'Evanston U', 'year': '2021', 'cases': 40}]

    :param table: The table in wide format.
    :param id_columns: The columns identifying each entity, they are not pivoted.
    :param name_pattern: How to extract the attribute name from the pivoted columns.
    :param name_column: The column that will contain the attribute names.
    :param value_column: The column that will contain the values.
    :param columns: The columns to pivot, by default all the columns
                    that are not ``id_columns``. The columns that are
                    neither pivoted nor id columns are discarded.
    :param drop_missing: Don't emit rows whose value is missing.
    """
    id_columns = [table.resolve_name(name) for name in id_columns]
    _check_no_repetitions("id columns", id_columns)
    if columns is None:
        pivoted = [name for name in table.column_names if name not in id_columns]
    else:
        pivoted = [table.resolve_name(name) for name in columns]
        _check_no_repetitions("pivoted columns", pivoted)
        overlapping = [name for name in pivoted if name in id_columns]
        if overlapping:
            raise ShapeError(f"Columns {overlapping} are both id columns and pivoted columns")
    if not pivoted:
        raise ShapeError("There are no columns to pivot")
    if name_column == value_column:
        raise ShapeError(f"Names and values can't both be stored in column {name_column!r}")
    for target in (name_column, value_column):
        if target in id_columns:
            raise ShapeError(f"Column {target!r} is already an id column")

    names = _pivoted_names(pivoted, name_pattern)
    value_type = _common_type(table, pivoted)

    nrows, ncols = table.row_count, len(pivoted)
    row_indices = pa.array([i for i in range(nrows) for _ in range(ncols)], type=pa.int64())
    # All the pivoted columns are concatenated one after the other,
    # so the value for row i of column j is at j * nrows + i
    all_values = pa.concat_arrays(
        [table.column(name).cast(value_type).combine_chunks() for name in pivoted]
    )
    value_indices = pa.array(
        [j * nrows + i for i in range(nrows) for j in range(ncols)], type=pa.int64()
    )

    arrays = [table.column(name).take(row_indices).combine_chunks() for name in id_columns]
    arrays.append(pa.array(names * nrows, type=pa.string()))
    arrays.append(all_values.take(value_indices))
    result = pa.Table.from_arrays(arrays, names=id_columns + [name_column, value_column])
    if drop_missing:
        result = result.filter(pc.is_valid(result.column(value_column)))

    logger.debug(
        "Pivoted %s columns of %s rows into %s rows", ncols, nrows, result.num_rows
    )
    return TableModel(result)


def pivot_wider(
    table: TableModel,
    id_columns: Sequence[str] | None = None,
    name_column: str = "name",
    value_column: str = "value",
    name_prefix: str = "",
    on_conflict: ConflictResolution = "error",
) -> TableModel:
    """Convert a table from long to wide format.

    Rows are grouped by the ``id_columns``, one row per group is emitted
    in the order the groups were first seen. For each distinct value
    found in ``name_column`` a new column named ``name_prefix + value``
    is created, holding the ``value_column`` of the row of the group
    with that name. When a group has no row for a name the value
    is missing.

    When multiple rows of a group have the same name it's unclear
    which value should be used, ``on_conflict`` decides what happens:

    * ``"error"`` raises :class:`ConflictError`, the default.
    * ``"first"`` uses the value of the first of those rows.
    * ``"last"`` uses the value of the last of those rows.

    >>> table = TableModel.construct(
    ...     ["college", "year", "cases"],
    ...     {"college": ["Evanston U", "Evanston U"], "year": ["total", "2021"], "cases": [100, 40]},
    ... )
    >>> pivot_wider(table, ["college"], "year", "cases", name_prefix="cases_").to_pylist()
    [{'college': 'Evanston U', 'cases_total': 100, 'cases_2021': 40}]

    :param table: The table in long format.
    :param id_columns: The columns identifying each entity, by default all
                       the columns apart from ``name_column`` and ``value_column``.
    :param name_column: The column with the names of the new columns.
    :param value_column: The column with the values of the new columns.
    :param name_prefix: Prepended to the names of the new columns.
    :param on_conflict: How to resolve multiple values for the same cell.
    """
    if on_conflict not in ("error", "first", "last"):
        raise ValueError(f"Unsupported conflict resolution: {on_conflict!r}")
    name_column = table.resolve_name(name_column)
    value_column = table.resolve_name(value_column)
    if name_column == value_column:
        raise ShapeError(f"Names and values can't both come from column {name_column!r}")
    if id_columns is None:
        id_columns = [
            name for name in table.column_names if name not in (name_column, value_column)
        ]
    else:
        id_columns = [table.resolve_name(name) for name in id_columns]
        _check_no_repetitions("id columns", id_columns)
        for source in (name_column, value_column):
            if source in id_columns:
                raise ShapeError(f"Column {source!r} can't be an id column")

    names = table.column(name_column).to_pylist()
    if any(name is None for name in names):
        raise ShapeError(f"Column {name_column!r} contains missing names")
    distinct_names = list(dict.fromkeys(names))
    name_positions = {name: position for position, name in enumerate(distinct_names)}
    new_columns = [f"{name_prefix}{name}" for name in distinct_names]
    _check_no_repetitions("resulting columns", id_columns + new_columns)

    groups: dict[tuple[Hashable, ...], int] = {}
    first_rows: list[int] = []
    cells: dict[tuple[int, int], int] = {}
    for row_index, key in enumerate(group_keys(table, id_columns)):
        group = groups.get(key)
        if group is None:
            group = groups[key] = len(first_rows)
            first_rows.append(row_index)
        cell = (group, name_positions[names[row_index]])
        if cell in cells:
            if on_conflict == "error":
                raise ConflictError(
                    f"Multiple values for {name_column}={names[row_index]!r} "
                    f"in group {dict(zip(id_columns, key))}"
                )
            if on_conflict == "first":
                continue
        cells[cell] = row_index

    first_rows_indices = pa.array(first_rows, type=pa.int64())
    arrays = [
        table.column(name).take(first_rows_indices).combine_chunks() for name in id_columns
    ]
    values = table.column(value_column)
    for position in range(len(distinct_names)):
        # Missing cells have a null index, which takes a null value.
        indices = pa.array(
            [cells.get((group, position)) for group in range(len(first_rows))],
            type=pa.int64(),
        )
        arrays.append(values.take(indices).combine_chunks())

    logger.debug(
        "Pivoted %s rows into %s rows and %s new columns",
        table.row_count, len(first_rows), len(new_columns),
    )
    return TableModel(pa.Table.from_arrays(arrays, names=id_columns + new_columns))


def _check_no_repetitions(kind: str, names: list[str]) -> None:
    seen = set()
    repeated = [name for name in names if name in seen or seen.add(name)]
    if repeated:
        raise ShapeError(f"Repeated {kind}: {repeated}")


def _pivoted_names(columns: list[str], name_pattern: str | None) -> list[str]:
    """Extract the attribute names out of the pivoted columns."""
    if not name_pattern:
        return list(columns)

    pattern = re.compile(name_pattern)
    names = []
    for column in columns:
        match = pattern.match(column)
        if match is None:
            raise ShapeError(f"Column {column!r} does not match {name_pattern!r}")
        if pattern.groups:
            name = match.group(1)
            if name is None:
                raise ShapeError(
                    f"Column {column!r} matches {name_pattern!r} but its group captured nothing"
                )
            names.append(name)
        else:
            names.append(column[match.end():])

    _check_no_repetitions("names extracted from pivoted columns", names)
    return names


def _common_type(table: TableModel, columns: list[str]) -> pa.DataType:
    """Find the type that can hold the values of all the pivoted columns.

    Columns with only missing values adapt to the others, numbers
    are widened to int64 or float64, any other mix of types
    can't be stored in a single column.
    """
    types = {table.column(name).type for name in columns}
    non_null = {t for t in types if not pa.types.is_null(t)}
    if len(non_null) == 0:
        return pa.null()
    if len(non_null) == 1:
        return non_null.pop()
    if all(pa.types.is_integer(t) for t in non_null):
        return pa.int64()
    if all(pa.types.is_integer(t) or pa.types.is_floating(t) for t in non_null):
        return pa.float64()
    raise ShapeError(
        f"Pivoted columns have incompatible types: {sorted(str(t) for t in types)}"
    )
