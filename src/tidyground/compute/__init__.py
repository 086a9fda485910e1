"""The TidyGround compute functions

The compute package defines the in-memory
table format and the operations supported on it.

The compute functions are tightly bound to Apache Arrow,
a :class:`TableModel` is a thin immutable wrapper around
a :class:`pyarrow.Table`, and every function accepts
one or more tables and returns a new one::

    (TableModel)-->func1--(TableModel)-->func2--(TableModel)-->...

No function ever modifies its input, so the same
table can be safely reused by multiple computations.

>>> import pyarrow.compute as pc
>>> from tidyground.compute import TableModel, col, FunctionCallExpression
>>> data = TableModel.construct(
...     ["animals", "n_legs"],
...     {"animals": ["Flamingo", "Horse", "Brittle stars", "Centipede"], "n_legs": [2, 4, 5, 100]},
... )
>>> result = data.filter_rows(FunctionCallExpression(pc.greater_equal, col("n_legs"), 5))
>>> result.to_pydict()
{'animals': ['Brittle stars', 'Centipede'], 'n_legs': [5, 100]}
"""

from .aggregate import (
    Aggregation,
    CountAggregation,
    CountDistinctAggregation,
    FirstAggregation,
    MaxAggregation,
    MeanAggregation,
    MinAggregation,
    StddevAggregation,
    SumAggregation,
    group_summarize,
)
from .base import ColumnRef, Expression, col, lit
from .errors import ConflictError, NotFoundError, ParseError, ShapeError, TidyGroundError
from .expressions import FunctionCallExpression
from .reshape import pivot_longer, pivot_wider
from .strings import parse_number
from .table import TableModel

__all__ = (
    "TableModel",
    "Expression",
    "FunctionCallExpression",
    "col",
    "lit",
    "ColumnRef",
    "group_summarize",
    "pivot_longer",
    "pivot_wider",
    "parse_number",
    "Aggregation",
    "CountAggregation",
    "CountDistinctAggregation",
    "FirstAggregation",
    "MaxAggregation",
    "MeanAggregation",
    "MinAggregation",
    "StddevAggregation",
    "SumAggregation",
    "TidyGroundError",
    "ShapeError",
    "NotFoundError",
    "ConflictError",
    "ParseError",
)
