"""The in-memory columnar table.

:class:`TableModel` is the data structure every compute function
accepts and returns. It is a thin immutable wrapper around
a :class:`pyarrow.Table` which takes care of enforcing the
invariants TidyGround relies on:

* Column names are unique.
* All columns have the same length.
* All values of a column share a single type,
  missing values are represented as nulls.

Every operation returns a new TableModel, the original
one is never modified. This makes safe to share the same
table between multiple pipelines::

    Dataframe(TableModel) -> select -> TableModel
                          -> filter -> TableModel

>>> table = TableModel.construct(
...     ["college", "cases"],
...     {"college": ["Evanston U", "Chicago U"], "cases": [100, 250]},
... )
>>> table.row_count
2
>>> table.column("cases").to_pylist()
[100, 250]
"""

import logging
from collections import Counter
from typing import Any, Callable, Iterable, Mapping, Self, Sequence

import pyarrow as pa
import pyarrow.csv

from ..utils import tabulate
from .base import Expression
from .errors import NotFoundError, ShapeError

logger = logging.getLogger(__name__)

Row = dict[str, Any]
RowPredicate = Callable[[Row], Any]
ColumnKey = str | int


class TableModel:
    """Immutable table of named columns of equal length.

    The table can be built from Python data with :meth:`construct`
    or :meth:`from_rows`, loaded from a CSV file with :meth:`read_csv`
    or wrap an existing :class:`pyarrow.Table`.
    """

    def __init__(self, table: pa.Table | pa.RecordBatch) -> None:
        """
        :param table: The arrow data to wrap, it's never modified.
        """
        if isinstance(table, pa.RecordBatch):
            table = pa.Table.from_batches([table])
        if not isinstance(table, pa.Table):
            raise ValueError("Invalid input, expected a PyArrow Table or RecordBatch")
        _check_unique(table.column_names)
        self._table = table

    @classmethod
    def construct(
        cls,
        column_names: Sequence[str],
        columns: Mapping[str, Sequence[Any]],
        types: Mapping[str, pa.DataType] | None = None,
    ) -> Self:
        """Build a table out of a mapping of columns.

        :param column_names: The order of the columns in the table.
        :param columns: The values of each column in the form ``{name: values}``.
        :param types: Optionally declare the type of some columns,
                      the others will be inferred from their values.
        """
        column_names = list(column_names)
        _check_unique(column_names)
        if set(column_names) != set(columns):
            raise ShapeError(
                f"Column names {column_names} do not match the provided columns {list(columns)}"
            )

        lengths = {name: len(columns[name]) for name in column_names}
        if len(set(lengths.values())) > 1:
            raise ShapeError(f"Columns have different lengths: {lengths}")

        types = types or {}
        arrays = [
            _to_arrow_array(name, columns[name], types.get(name)) for name in column_names
        ]
        return cls(pa.Table.from_arrays(arrays, names=column_names))

    @classmethod
    def from_rows(
        cls, rows: Iterable[Mapping[str, Any]], column_names: Sequence[str] | None = None
    ) -> Self:
        """Build a table out of a list of rows.

        Each row is a mapping from column name to value.
        When ``column_names`` is not provided, the columns are
        those found in the rows, in order of first appearance.
        Keys absent from a row are considered missing values.
        """
        rows = list(rows)
        if column_names is None:
            column_names = list(dict.fromkeys(name for row in rows for name in row))
        columns = {name: [row.get(name) for row in rows] for name in column_names}
        return cls.construct(column_names, columns)

    @classmethod
    def read_csv(
        cls,
        filename: str,
        delimiter: str = ",",
        null_values: list[str] | None = None,
    ) -> Self:
        """Load a table from a delimited text file.

        Type inference and detection of missing values are
        performed by :func:`pyarrow.csv.read_csv`.

        :param filename: The path of the local CSV file.
        :param delimiter: The character separating the fields.
        :param null_values: Strings that should be considered missing,
                            when ``None`` the Arrow defaults are used.
        """
        convert_options = pa.csv.ConvertOptions(strings_can_be_null=True)
        if null_values is not None:
            convert_options.null_values = null_values
        table = pa.csv.read_csv(
            filename,
            parse_options=pa.csv.ParseOptions(delimiter=delimiter),
            convert_options=convert_options,
        )
        logger.debug("Loaded %s rows and columns %s from %s", table.num_rows, table.column_names, filename)
        return cls(table)

    @property
    def column_names(self) -> list[str]:
        """The names of the columns, in order."""
        return list(self._table.column_names)

    @property
    def columns(self) -> dict[str, pa.ChunkedArray]:
        """The data of each column in the form ``{name: values}``."""
        return {name: self._table.column(name) for name in self._table.column_names}

    @property
    def row_count(self) -> int:
        return self._table.num_rows

    @property
    def schema(self) -> pa.Schema:
        return self._table.schema

    def resolve_name(self, ref: ColumnKey) -> str:
        """Get the name of a column referenced by name or position.

        Fails with :class:`NotFoundError` when the column does not exist,
        positions are never wrapped around, so ``-1`` is not the last column.
        """
        names = self._table.column_names
        if isinstance(ref, int) and not isinstance(ref, bool):
            if 0 <= ref < len(names):
                return names[ref]
        elif ref in names:
            return ref
        raise NotFoundError(ref, names)

    def column(self, name: ColumnKey) -> pa.ChunkedArray:
        """Get the values of a column.

        :param name: The name or position of the column.
        """
        return self._table.column(self.resolve_name(name))

    def select_columns(self, names: Sequence[ColumnKey]) -> Self:
        """Return a new table with only the requested columns.

        The columns will be in the order they were requested.
        """
        resolved = [self.resolve_name(name) for name in names]
        _check_unique(resolved)
        return self.__class__(self._table.select(resolved))

    def filter_rows(self, predicate: RowPredicate | Expression) -> Self:
        """Return a new table with only the rows matching the predicate.

        The predicate can be an :class:`Expression`, which is applied
        to all the data at once and must return a boolean mask,
        or a Python callable that receives each row as ``{name: value}``
        and returns if the row must be kept.

        When the mask contains nulls, the matching rows are discarded.
        """
        if isinstance(predicate, Expression):
            mask = predicate.apply(self._table)
            if isinstance(mask, pa.Scalar):
                mask = pa.repeat(mask, self.row_count)
            if not pa.types.is_boolean(mask.type):
                raise ShapeError(f"Filter predicate {predicate} did not return booleans, got {mask.type}")
        else:
            mask = pa.array(
                [bool(predicate(row)) for row in self._table.to_pylist()], type=pa.bool_()
            )
        return self.__class__(self._table.filter(mask))

    def mutate(self, /, **columns: Expression | RowPredicate | Any) -> Self:
        """Return a new table with added or replaced columns.

        Each new column can be provided as:

        * An :class:`Expression` computing the values of the column.
        * A callable receiving each row as ``{name: value}``.
        * A sequence of values, one for each row.
        * A constant, repeated for each row.

        Columns are computed in order, so a column can refer to
        the ones that were defined before it in the same call.
        """
        table = self._table
        for name, value in columns.items():
            values = _evaluate_column(table, name, value)
            if len(values) != table.num_rows:
                raise ShapeError(
                    f"Column {name!r} has {len(values)} values, expected {table.num_rows}"
                )
            if name in table.column_names:
                table = table.set_column(table.column_names.index(name), name, values)
            else:
                table = table.append_column(name, values)
        return self.__class__(table)

    def rename(self, mapping: Mapping[ColumnKey, str]) -> Self:
        """Return a new table with some columns renamed.

        :param mapping: The renames in the form ``{old_name: new_name}``.
        """
        renames = {self.resolve_name(old): new for old, new in mapping.items()}
        new_names = [renames.get(name, name) for name in self._table.column_names]
        _check_unique(new_names)
        return self.__class__(self._table.rename_columns(new_names))

    def arrange(
        self, keys: Sequence[ColumnKey], descending: Sequence[bool] | None = None
    ) -> Self:
        """Return a new table sorted by one or more columns.

        Missing values are always placed at the end.

        :param keys: The columns to sort by in the order they should be sorted.
        :param descending: If each column should be sorted in a descending order.
        """
        if descending is None:
            descending = [False] * len(keys)
        if len(keys) != len(descending):
            raise ValueError("Keys and descending must have the same length")

        sorting = [
            (self.resolve_name(key), "descending" if desc else "ascending")
            for key, desc in zip(keys, descending)
        ]
        return self.__class__(self._table.sort_by(sorting))

    def head(self, n: int = 5) -> Self:
        """Return a new table with only the first ``n`` rows."""
        if n < 0:
            raise ValueError("The number of rows can't be negative")
        return self.__class__(self._table.slice(0, n))

    def to_pylist(self) -> list[Row]:
        """The rows of the table as ``{name: value}`` dictionaries."""
        return self._table.to_pylist()

    rows = to_pylist

    def to_pydict(self) -> dict[str, list[Any]]:
        """The columns of the table as ``{name: [values]}``."""
        return self._table.to_pydict()

    def to_arrow(self) -> pa.Table:
        return self._table

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TableModel):
            return NotImplemented
        return self._table.equals(other._table)

    __hash__ = None

    def __len__(self) -> int:
        return self.row_count

    def __repr__(self) -> str:
        return f"TableModel(columns={self.column_names}, rows={self.row_count})"

    def __str__(self) -> str:
        return tabulate.tabulate(self._table)


def _check_unique(names: Sequence[str]) -> None:
    duplicates = [name for name, count in Counter(names).items() if count > 1]
    if duplicates:
        raise ShapeError(f"Duplicate column names: {duplicates}")


def _to_arrow_array(
    name: str, values: Any, type: pa.DataType | None = None
) -> pa.Array | pa.ChunkedArray:
    """Convert the values of a column to an arrow array of a single type."""
    try:
        if isinstance(values, (pa.Array, pa.ChunkedArray)):
            if type is not None and values.type != type:
                values = values.cast(type)
            return values
        return pa.array(list(values), type=type)
    except (pa.ArrowInvalid, pa.ArrowTypeError, pa.ArrowNotImplementedError) as e:
        raise ShapeError(f"Values of column {name!r} do not share a single type: {e}") from e


def _evaluate_column(table: pa.Table, name: str, value: Any) -> pa.Array | pa.ChunkedArray:
    """Compute the values of a column being added by :meth:`TableModel.mutate`."""
    if isinstance(value, Expression):
        result = value.apply(table)
        if isinstance(result, pa.Scalar):
            result = pa.repeat(result, table.num_rows)
        return result
    if callable(value):
        return _to_arrow_array(name, [value(row) for row in table.to_pylist()])
    if isinstance(value, (pa.Array, pa.ChunkedArray, list, tuple)):
        return _to_arrow_array(name, value)
    try:
        return pa.repeat(pa.scalar(value), table.num_rows)
    except (pa.ArrowInvalid, pa.ArrowTypeError) as e:
        raise ShapeError(f"Unsupported value for column {name!r}: {e}") from e
