"""The plan of operations that a Dataframe will execute.

The plan is represented as a chain of nodes,
each node is a step in the execution and the
previous step is the child of the next one.

For example a simple plan might involve
loading data and filtering it::

    CSVSourceNode -> StepNode(TableModel.filter_rows)

Executing the last node executes its child first
and then applies its own operation to the resulting table.
"""

import abc
from typing import Any, Callable

from ..compute import TableModel
from ..utils import inspect


class PlanNode(abc.ABC):
    """A node of a Dataframe execution plan."""

    @abc.abstractmethod
    def execute(self) -> TableModel:
        """Compute the table resulting from this node."""
        ...

    @abc.abstractmethod
    def __str__(self) -> str:
        """Human readable representation of the node."""
        ...


class TableSourceNode(PlanNode):
    """Provide an in-memory table to the plan."""

    def __init__(self, table: TableModel) -> None:
        self.table = table

    def __str__(self) -> str:
        return f"TableSourceNode(columns={self.table.column_names}, rows={self.table.row_count})"

    def execute(self) -> TableModel:
        return self.table


class CSVSourceNode(PlanNode):
    """Load data from a CSV file.

    The file is read every time the plan is executed,
    so its content is never kept in memory by the plan itself.
    """

    def __init__(self, filename: str, delimiter: str = ",") -> None:
        """
        :param filename: The path of the local CSV file.
        :param delimiter: The character separating the fields.
        """
        self.filename = filename
        self.delimiter = delimiter

    def __str__(self) -> str:
        return f"CSVSourceNode({self.filename}, delimiter={self.delimiter!r})"

    def execute(self) -> TableModel:
        return TableModel.read_csv(self.filename, delimiter=self.delimiter)


class StepNode(PlanNode):
    """Apply a compute function to the table produced by the child node.

    The function receives the table as its first argument,
    followed by the ``args`` and ``kwargs`` provided to the node,
    and must return a new table::

        StepNode(pivot_longer, child, ["college"], name_pattern="cases_")
    """

    def __init__(
        self, func: Callable[..., TableModel], child: PlanNode, /, *args: Any, **kwargs: Any
    ) -> None:
        """
        :param func: The function computing the new table.
        :param child: The node emitting the table the function is applied to.
        :param *args: Additional arguments for the function.
        :param **kwargs: Additional keyword arguments for the function.
        """
        self.func = func
        self.child = child
        self.args = args
        self.kwargs = kwargs

    def __str__(self) -> str:
        func_qualname = inspect.get_qualname(self.func)
        args = [repr(arg) for arg in self.args]
        args += [f"{k}={v!r}" for k, v in self.kwargs.items()]
        return f"{func_qualname}({', '.join(args + [str(self.child)])})"

    def execute(self) -> TableModel:
        table = self.child.execute()
        result = self.func(table, *self.args, **self.kwargs)
        if not isinstance(result, TableModel):
            raise TypeError(
                f"{inspect.get_qualname(self.func)} returned {type(result).__name__}, expected a TableModel"
            )
        return result
