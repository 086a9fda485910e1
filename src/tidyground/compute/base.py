"""Base classes and interfaces for column expressions.

This module defines the base components that are
necessary to compute new columns or filtering masks
out of the columns of a table.
"""

import abc
from typing import Any

import pyarrow as pa

from .errors import NotFoundError


class Expression(abc.ABC):
    """Expression to apply to a table.

    Expressions are some form of operation that
    has to be applied to the data of a :class:`pyarrow.Table`
    to create new data.

    Typical example of expressions are: A + B
    which is expected to sum column A of the table
    to column B of the table and return the result.

    As tables are Column Major, applying an expression
    always results in a new column, thus in a
    :class:`pyarrow.ChunkedArray` or :class:`pyarrow.Array`
    that contains the data for that column.
    """

    @abc.abstractmethod
    def apply(self, table: pa.Table) -> pa.ChunkedArray | pa.Array | pa.Scalar:
        """Apply the expression to a table.

        Expression classes must implement this method
        to dictate what will happen when an expression
        is applied.

        Suppose want to implement a ``SumExpression`` class
        that might look like::

            class SumExpression(Expression):
                def __init__(self, lcol, rcol):
                    self.lcol = lcol  # left column name
                    self.rcol = rcol  # right column name

                def apply(self, table):
                    return pyarrow.compute.add(
                        table[self.lcol],
                        table[self.rcol]
                    )
        """
        ...

    @abc.abstractmethod
    def __str__(self) -> str:
        """Human readable representation of the expression."""
        ...

    def __repr__(self) -> str:
        return str(self)


class ColumnRef(Expression):
    """References a column in a table.

    When another expression or a compute function need
    to operate on a specific column, we will
    need a way to reference that column and its data.

    This expression is aware of the column and when
    applied to a table returns the data for that column.
    """

    def __init__(self, name: str) -> None:
        """
        :param name: The name of the column being referenced.
        """
        self.name = name

    def apply(self, table: pa.Table) -> pa.ChunkedArray:
        """Get the data for the column."""
        if self.name not in table.column_names:
            raise NotFoundError(self.name, table.column_names)
        return table.column(self.name)

    def __str__(self) -> str:
        return f"ColumnRef({self.name})"


class Literal(Expression):
    """A constant value.

    Applying it returns a scalar, which compute functions
    broadcast against the other arguments.
    """

    def __init__(self, value: Any) -> None:
        self.value = value

    def apply(self, table: pa.Table) -> pa.Scalar:
        return pa.scalar(self.value)

    def __str__(self) -> str:
        return f"Literal({self.value!r})"


col = ColumnRef
lit = Literal
