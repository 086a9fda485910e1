"""Grouped aggregations.

Frequently when analysing data is necessary
to compute statistics like the min, max, average, etc...
of the data stored in tables.

:func:`group_summarize` is in charge of computing
those aggregations and projecting them as new
columns of a new table.

Typically the data is grouped by a set of columns
and then the aggregations are computed for each group.

For example, given the following data::

    college, state, cases
    Evanston U, IL, 10
    Boston U, MA, 15
    Chicago U, IL, 8
    Harvard U, MA, 12
    Evanston U, IL, 20

We could group by state and compute the sum of the cases
to get::

    state, total_cases
    IL, 38
    MA, 27
"""

import abc
import logging
import math
from typing import Any, Callable, Hashable, Mapping, Sequence

import pyarrow as pa
import pyarrow.compute as pc

from .errors import ShapeError
from .table import TableModel

__all__ = (
    "group_summarize",
    "group_rows",
    "Aggregation",
    "SumAggregation",
    "MinAggregation",
    "MaxAggregation",
    "CountAggregation",
    "CountDistinctAggregation",
    "MeanAggregation",
    "StddevAggregation",
    "FirstAggregation",
)

logger = logging.getLogger(__name__)


def group_summarize(
    table: TableModel,
    group_columns: Sequence[str],
    aggregations: Mapping[str, "Aggregation"],
) -> TableModel:
    """Group data and compute aggregations.

    Rows sharing the same values for all the ``group_columns``
    end up in the same group, missing values are considered
    equal to each other. One row is emitted for each group,
    in the order the groups were first seen in the input.

    When no ``group_columns`` are provided the whole table is
    a single group and exactly one row is emitted.

    >>> table = TableModel.construct(
    ...     ["state", "cases"], {"state": ["IL", "MA", "IL"], "cases": [10, 15, 8]}
    ... )
    >>> result = group_summarize(table, ["state"], {"total_cases": SumAggregation("cases")})
    >>> result.to_pydict()
    {'state': ['IL', 'MA'], 'total_cases': [18, 15]}

    :param table: The table with the data to aggregate.
    :param group_columns: The columns to group by.
    :param aggregations: The aggregations to compute in the form of {"new_col_name": Aggregation}.
    """
    group_columns = [table.resolve_name(name) for name in group_columns]
    for aggregation in aggregations.values():
        table.resolve_name(aggregation.column)
    clashing = [name for name in aggregations if name in group_columns]
    if clashing:
        raise ShapeError(f"Aggregation results {clashing} would replace group columns")
    if len(set(group_columns)) != len(group_columns):
        raise ShapeError(f"Duplicate group columns: {group_columns}")

    if group_columns:
        groups = group_rows(table, group_columns)
    else:
        groups = [list(range(table.row_count))]
    logger.debug(
        "Grouped %s rows by %s into %s groups", table.row_count, group_columns, len(groups)
    )

    # The group columns have the values of the first row of each group,
    # taking them from the original table preserves their types.
    first_rows = pa.array([indices[0] for indices in groups if indices], type=pa.int64())
    result_data: dict[str, pa.Array] = {
        name: table.column(name).take(first_rows).combine_chunks() for name in group_columns
    }

    for name, aggregation in aggregations.items():
        values = table.column(aggregation.column)
        # Computing on no rows at all gives us the type of the result
        # even when there are no groups.
        result_type = aggregation.compute(values.slice(0, 0)).type
        results = [
            aggregation.compute(values.take(pa.array(indices, type=pa.int64())))
            for indices in groups
        ]
        result_data[name] = pa.array([r.as_py() for r in results], type=result_type)

    return TableModel(
        pa.Table.from_arrays(list(result_data.values()), names=list(result_data))
    )


def group_rows(table: TableModel, group_columns: Sequence[str]) -> list[list[int]]:
    """Partition the rows of a table by the values of some columns.

    Returns the indices of the rows in each group, with groups
    in the order of their first appearance.
    An hash table keyed by the group key keeps track of the
    group each key belongs to, so a single pass over the rows
    is enough and the input doesn't need to be sorted.
    """
    keys = group_keys(table, group_columns)
    groups: dict[tuple[Hashable, ...], list[int]] = {}
    for row_index, key in enumerate(keys):
        groups.setdefault(key, []).append(row_index)
    return list(groups.values())


def group_keys(table: TableModel, group_columns: Sequence[str]) -> list[tuple[Hashable, ...]]:
    """Compute the group key of each row of the table.

    Without group columns every row has the same empty key,
    so the whole table is a single group.
    """
    if not group_columns:
        return [()] * table.row_count
    columns = [
        [_group_value(v) for v in table.column(name).to_pylist()] for name in group_columns
    ]
    return list(zip(*columns))


class _NaN:
    """Replaces float NaN in group keys, as NaN is not equal to itself."""

    def __repr__(self) -> str:
        return "NaN"


_NAN = _NaN()


def _group_value(value: Any) -> Hashable:
    if isinstance(value, float) and math.isnan(value):
        return _NAN
    if isinstance(value, (list, dict)):
        return repr(value)
    return value


class Aggregation(abc.ABC):
    """Base class for aggregations.

    Every aggregation is bound to the column it aggregates
    and is expected to reduce the values of that column
    for a single group to a single scalar.
    """

    def __init__(self, column: str) -> None:
        self.column = column

    def __str__(self) -> str:
        return f"{self.__class__.__name__}({self.column})"

    __repr__ = __str__

    @abc.abstractmethod
    def compute(self, values: pa.ChunkedArray) -> pa.Scalar:
        """Reduce the values of a group to a single value."""
        ...


class SimpleAggregation(Aggregation):
    """Provide a base implementation for aggregations that map to a compute function.

    Missing values are ignored, as the ``pyarrow.compute``
    aggregation functions do by default.
    """

    function: Callable[..., pa.Scalar]

    def compute(self, values: pa.ChunkedArray) -> pa.Scalar:
        return type(self).function(values)


class SumAggregation(SimpleAggregation):
    """Compute the sum of an aggregated column."""

    function = pc.sum


class MinAggregation(SimpleAggregation):
    """Compute the min of an aggregated column."""

    function = pc.min


class MaxAggregation(SimpleAggregation):
    """Compute the max of an aggregated column."""

    function = pc.max


class CountAggregation(SimpleAggregation):
    """Count the values of an aggregated column that are not missing."""

    function = pc.count


class CountDistinctAggregation(SimpleAggregation):
    """Count the distinct values of an aggregated column that are not missing."""

    function = pc.count_distinct


class FirstAggregation(Aggregation):
    """Take the first value of the aggregated column in each group."""

    def compute(self, values: pa.ChunkedArray) -> pa.Scalar:
        if len(values) == 0:
            return pa.scalar(None, type=values.type)
        return values[0]


class MeanAggregation(Aggregation):
    """Compute the mean of an aggregated column.

    The result is always a floating point number,
    missing values are not counted and when there are
    no values at all the mean is missing too.
    """

    def compute(self, values: pa.ChunkedArray) -> pa.Scalar:
        count = pc.count(values).as_py()
        if count == 0:
            return pa.scalar(None, type=pa.float64())
        total = pc.sum(values.cast(pa.float64()))
        return pc.divide(total, pa.scalar(float(count)))


class StddevAggregation(Aggregation):
    """Compute the sample standard deviation of an aggregated column."""

    def compute(self, values: pa.ChunkedArray) -> pa.Scalar:
        return pc.stddev(values.cast(pa.float64()), ddof=1)
