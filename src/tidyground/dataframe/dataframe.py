"""The Dataframe object itself."""
from typing import Any, Callable, Mapping, Self, Sequence

import pyarrow as pa

from ..compute import (
  Aggregation,
  Expression,
  TableModel,
  group_summarize,
  parse_number,
  pivot_longer,
  pivot_wider,
)
from ..compute.reshape import ConflictResolution
from ..utils import tabulate
from .plan import CSVSourceNode, PlanNode, StepNode, TableSourceNode


class Dataframe:
  """Data structure that handles data in rows and columns.

  The Dataframe object allows to represent in-memory data
  and chain transformations over it::

    df = Dataframe.open_csv("colleges.csv") \\
      .select("college", "state", "cases") \\
      .filter(FunctionCallExpression(pc.greater, col("cases"), 10)) \\
      .group_by("state") \\
      .summarize(total_cases=SumAggregation("cases")) \\
      .collect()

  The tidyground dataframe object is lazy, which means that
  any transformation or analysis will be applied only when the
  ``.collect()`` method will be invoked and no data is kept
  in memory until that moment (unless it already was).
  Errors like referencing a column that doesn't exist
  are thus also raised by ``.collect()``.
  """
  def __init__(self, node_or_table: PlanNode | TableModel | pa.Table) -> None:
    """
    :param node_or_table: A plan node expected to compute
                          the data for the dataframe, a `TableModel`
                          or a `pyarrow.Table`.
    """
    if isinstance(node_or_table, pa.Table):
      node_or_table = TableModel(node_or_table)

    if isinstance(node_or_table, TableModel):
      node_or_table = TableSourceNode(node_or_table)

    if not isinstance(node_or_table, PlanNode):
      raise ValueError("Invalid input, expected a PlanNode, a TableModel or a PyArrow Table")

    self.node = node_or_table

  @classmethod
  def open_csv(cls, filename: str, delimiter: str = ",") -> Self:
    """Open a CSV file and create a Dataframe out of its data.

    :param filename: The path to a local CSV file.
    :param delimiter: The character separating the fields.
    """
    return cls(CSVSourceNode(filename, delimiter=delimiter))

  def _then(self, func: Callable[..., TableModel], /, *args: Any, **kwargs: Any) -> Self:
    return self.__class__(StepNode(func, self.node, *args, **kwargs))

  def select(self, *names: str | int) -> Self:
    """Keep only the provided columns, in the provided order.

    Columns can be referenced by name or by position.
    """
    return self._then(TableModel.select_columns, list(names))

  def filter(self, predicate: Expression | Callable[[dict[str, Any]], Any]) -> Self:
    """Apply a filter to the data and return a new Dataframe.

    The returned dataframe will only contain the data that
    matches the filter predicate.

    :param predicate: The expression representing the predicate,
                      for example `A > B`, or a function receiving
                      each row and returning if it should be kept.
    """
    return self._then(TableModel.filter_rows, predicate)

  def mutate(self, /, **columns: Any) -> Self:
    """Add or replace columns, see :meth:`TableModel.mutate`."""
    return self._then(TableModel.mutate, **columns)

  def rename(self, mapping: Mapping[str, str]) -> Self:
    """Rename columns, ``mapping`` is in the form ``{old_name: new_name}``."""
    return self._then(TableModel.rename, dict(mapping))

  def arrange(self, *keys: str, descending: bool | Sequence[bool] = False) -> Self:
    """Sort the rows by one or more columns."""
    if isinstance(descending, bool):
      descending = [descending] * len(keys)
    return self._then(TableModel.arrange, list(keys), list(descending))

  def head(self, n: int = 5) -> Self:
    """Keep only the first ``n`` rows."""
    return self._then(TableModel.head, n)

  def group_by(self, *columns: str) -> "GroupedDataframe":
    """Group the rows by the values of some columns.

    The returned object only provides :meth:`GroupedDataframe.summarize`
    to compute the aggregations for each group.
    """
    return GroupedDataframe(self, list(columns))

  def summarize(self, /, **aggregations: Aggregation) -> Self:
    """Compute aggregations over all the rows, emitting a single row."""
    return self._then(group_summarize, [], aggregations)

  def pivot_longer(
    self,
    id_columns: Sequence[str],
    name_pattern: str | None = None,
    name_column: str = "name",
    value_column: str = "value",
    columns: Sequence[str] | None = None,
    drop_missing: bool = False,
  ) -> Self:
    """Convert the data from wide to long format, see :func:`tidyground.compute.pivot_longer`."""
    return self._then(
      pivot_longer,
      list(id_columns),
      name_pattern=name_pattern,
      name_column=name_column,
      value_column=value_column,
      columns=None if columns is None else list(columns),
      drop_missing=drop_missing,
    )

  def pivot_wider(
    self,
    id_columns: Sequence[str] | None = None,
    name_column: str = "name",
    value_column: str = "value",
    name_prefix: str = "",
    on_conflict: ConflictResolution = "error",
  ) -> Self:
    """Convert the data from long to wide format, see :func:`tidyground.compute.pivot_wider`."""
    return self._then(
      pivot_wider,
      None if id_columns is None else list(id_columns),
      name_column=name_column,
      value_column=value_column,
      name_prefix=name_prefix,
      on_conflict=on_conflict,
    )

  def parse_number(self, column: str, into: str | None = None, integer: bool = False) -> Self:
    """Parse the numbers in a text column, see :func:`tidyground.compute.parse_number`."""
    return self._then(parse_number, column, into=into, integer=integer)

  def pipe(self, func: Callable[..., TableModel], /, *args: Any, **kwargs: Any) -> Self:
    """Apply any function accepting and returning a :class:`TableModel`.

    Allows to chain custom steps::

      df.pipe(pivot_longer, ["college"], name_pattern="cases_")
    """
    return self._then(func, *args, **kwargs)

  def collect(self) -> Self:
    """Collect all data of the dataframe in memory.

    Returns a new Dataframe that has all data from the
    previous dataframe eagerly loaded in memory.
    """
    return self.__class__(self.node.execute())

  def to_table(self) -> TableModel:
    """Collect all the data and return a TableModel"""
    return self.node.execute()

  def to_arrow(self) -> pa.Table:
    """Collect all the data and return a pyarrow.Table"""
    return self.node.execute().to_arrow()

  def show(self, max_rows: int = 20) -> str:
    """Collect all the data and format it as a text table."""
    return tabulate.tabulate(self.to_arrow(), max_rows=max_rows)

  def __str__(self) -> str:
    return f"Dataframe({self.node})"


class GroupedDataframe:
  """A Dataframe whose rows were grouped by some columns.

  Created by :meth:`Dataframe.group_by`.
  """
  def __init__(self, dataframe: Dataframe, columns: list[str]) -> None:
    self.dataframe = dataframe
    self.columns = columns

  def summarize(self, /, **aggregations: Aggregation) -> Dataframe:
    """Compute the aggregations for each group.

    Emits one row for each group, with the group columns
    followed by one column for each aggregation::

      df.group_by("state").summarize(mean_cases=MeanAggregation("cases"))
    """
    return self.dataframe._then(group_summarize, self.columns, aggregations)

  def __str__(self) -> str:
    return f"GroupedDataframe(by={self.columns}, {self.dataframe})"
