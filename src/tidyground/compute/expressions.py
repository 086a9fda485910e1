"""Expressions executed by compute functions.

The compute functions will sometimes need to filter data
or emit new data. They need to know how the data must be
filtered or emitted.

Filters will need a ``predicate``, so an expression that
returns ``true`` or ``false`` for each row that has to be
filtered.

Mutations will need an expression that computes the values
of the new column, for example ``A + B``.

String processing is done the same way, by calling the
``pyarrow.compute`` string functions::

    FunctionCallExpression(pyarrow.compute.match_substring, col("college"), "University")
"""
from typing import Any, Callable

import pyarrow as pa

from .. import utils
from .base import Expression


def apply_expression_if_needed(table: pa.Table, o: Expression | Any) -> Any:
    """Invoke Apply on expressions when needed

    If the provided object is an Expression,
    it will be applied to the target table.

    Otherwise it will treat it as if it's
    already the result of an expression
    or a literal value.
    """
    if isinstance(o, Expression):
        o = o.apply(table)
    return o


class FunctionCallExpression(Expression):
    """Call a compute function on its arguments.

    Given a compute function, and a set of arguments
    (other expressions, literals or data), execute
    the function on the provided arguments and return
    the resulting data.

    For example to sum two columns this would be used as::

        FunctionCallExpression(pyarrow.compute.add, ColumnRef("A"), ColumnRef("B"))

    Keyword arguments are forwarded to the function untouched,
    which is convenient for options like ``ignore_case``.
    """

    def __init__(self, func: Callable, *args: Expression | Any, **kwargs: Any) -> None:
        """
        :param func: The function accepting the arguments.
        :param *args: The arguments for the function.
        :param **kwargs: Options passed as is to the function.
        """
        self.func = func
        self.args = args
        self.kwargs = kwargs

    def __str__(self) -> str:
        func_qualname = utils.inspect.get_qualname(self.func)
        args = [str(arg) for arg in self.args]
        args += [f"{k}={v!r}" for k, v in self.kwargs.items()]
        return f"{func_qualname}({','.join(args)})"

    def apply(self, table: pa.Table) -> Any:
        """Invoke the function resolving all arguments on the table.

        When the function arguments are expressions themselves,
        this will apply the expressions on the provided table
        and the resulting data will be used as the arguments for the
        function.
        """
        args = tuple(apply_expression_if_needed(table, arg) for arg in self.args)
        return self.func(*args, **self.kwargs)
