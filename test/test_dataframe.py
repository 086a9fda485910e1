import os
import tempfile

import pyarrow as pa
import pyarrow.compute as pc
import pytest

from tidyground.compute import (
    CountDistinctAggregation,
    FunctionCallExpression,
    MeanAggregation,
    SumAggregation,
    TableModel,
    pivot_longer,
)
from tidyground.compute.errors import ConflictError, NotFoundError
from tidyground.dataframe import Dataframe, GroupedDataframe, col
from tidyground.dataframe.plan import CSVSourceNode, StepNode, TableSourceNode

COLLEGES_CSV = """college,state,cases_total,cases_2021,tuition
Evanston U,IL,100,40,"$61,000"
Chicago U,IL,250,80,"$59,500"
Boston U,MA,15,7,"$58,000"
Harvard U,MA,12,5,"$55,000"
"""

MOCK_CSV_FILE = tempfile.NamedTemporaryFile(delete=False, mode="w+", suffix=".csv")


def setup_module():
    MOCK_CSV_FILE.write(COLLEGES_CSV)
    MOCK_CSV_FILE.close()


def teardown_module():
    os.unlink(MOCK_CSV_FILE.name)


def test_invalid_input():
    with pytest.raises(ValueError):
        Dataframe({"a": [1, 2]})


def test_wraps_tables():
    table = pa.table({"a": [1, 2]})
    assert isinstance(Dataframe(table).node, TableSourceNode)
    assert Dataframe(TableModel(table)).to_arrow().equals(table)


def test_open_csv_is_lazy():
    df = Dataframe.open_csv("does_not_exist.csv").select("college")
    assert isinstance(df.node, StepNode)
    assert isinstance(df.node.child, CSVSourceNode)
    with pytest.raises(FileNotFoundError):
        df.collect()


def test_chained_operations():
    df = (
        Dataframe.open_csv(MOCK_CSV_FILE.name)
        .select("college", "state", "cases_total")
        .filter(FunctionCallExpression(pc.greater, col("cases_total"), 12))
        .mutate(cases_per_100=FunctionCallExpression(pc.divide, col("cases_total"), 100.0))
        .arrange("cases_total", descending=True)
        .collect()
    )
    assert df.to_table().to_pydict() == {
        "college": ["Chicago U", "Evanston U", "Boston U"],
        "state": ["IL", "IL", "MA"],
        "cases_total": [250, 100, 15],
        "cases_per_100": [2.5, 1.0, 0.15],
    }
    assert isinstance(df.node, TableSourceNode)


def test_group_by_summarize():
    grouped = Dataframe.open_csv(MOCK_CSV_FILE.name).group_by("state")
    assert isinstance(grouped, GroupedDataframe)
    result = grouped.summarize(
        total=SumAggregation("cases_total"),
        mean_2021=MeanAggregation("cases_2021"),
        colleges=CountDistinctAggregation("college"),
    ).to_table()
    assert result.to_pydict() == {
        "state": ["IL", "MA"],
        "total": [350, 27],
        "mean_2021": [60.0, 6.0],
        "colleges": [2, 2],
    }


def test_summarize():
    result = Dataframe.open_csv(MOCK_CSV_FILE.name).summarize(
        total=SumAggregation("cases_total")
    )
    assert result.to_table().to_pydict() == {"total": [377]}


def test_pivot_roundtrip():
    df = Dataframe.open_csv(MOCK_CSV_FILE.name).select("college", "cases_total", "cases_2021")
    long = df.pivot_longer(["college"], name_pattern="cases_", name_column="year", value_column="cases")
    assert long.to_table().row_count == 8
    wide = long.pivot_wider(["college"], name_column="year", value_column="cases", name_prefix="cases_")
    assert wide.to_table() == df.to_table()


def test_pivot_wider_conflict_on_collect():
    df = (
        Dataframe.open_csv(MOCK_CSV_FILE.name)
        .pivot_longer(["state"], columns=["cases_total", "cases_2021"])
        .pivot_wider(["state"])
    )
    with pytest.raises(ConflictError):
        df.collect()
    first = (
        Dataframe.open_csv(MOCK_CSV_FILE.name)
        .pivot_longer(["state"], columns=["cases_total", "cases_2021"])
        .pivot_wider(["state"], on_conflict="first")
        .to_table()
    )
    assert first.to_pydict() == {
        "state": ["IL", "MA"],
        "cases_total": [100, 15],
        "cases_2021": [40, 7],
    }


def test_parse_number_rename_head():
    result = (
        Dataframe.open_csv(MOCK_CSV_FILE.name)
        .parse_number("tuition", integer=True)
        .rename({"tuition": "tuition_usd"})
        .select("college", "tuition_usd")
        .head(2)
        .to_table()
    )
    assert result.to_pydict() == {
        "college": ["Evanston U", "Chicago U"],
        "tuition_usd": [61000, 59500],
    }


def test_pipe():
    result = (
        Dataframe.open_csv(MOCK_CSV_FILE.name)
        .select("college", "cases_2021")
        .pipe(pivot_longer, ["college"], name_pattern="cases_")
        .to_table()
    )
    assert result.column("name").to_pylist() == ["2021"] * 4


def test_pipe_must_return_table():
    df = Dataframe.open_csv(MOCK_CSV_FILE.name).pipe(lambda table: table.row_count)
    with pytest.raises(TypeError):
        df.collect()


def test_errors_are_raised_on_collect():
    df = Dataframe.open_csv(MOCK_CSV_FILE.name).select("deaths")
    with pytest.raises(NotFoundError):
        df.collect()


def test_str():
    table = TableModel.construct(["a"], {"a": [1, 2, 3]})
    df = Dataframe(table).select("a").head(2)
    assert str(df) == (
        "Dataframe(tidyground.compute.table.TableModel.head(2, "
        "tidyground.compute.table.TableModel.select_columns(['a'], "
        "TableSourceNode(columns=['a'], rows=3))))"
    )
    assert str(df.group_by("a")).startswith("GroupedDataframe(by=['a'], Dataframe(")


def test_show():
    table = TableModel.construct(["a", "b"], {"a": [1, 2, 3], "b": [0.5, None, 1.25]})
    assert Dataframe(table).show(max_rows=2) == (
        "a | b\n"
        "- | ----\n"
        "1 | 0.50\n"
        "2 | NA\n"
        "... and 1 more rows"
    )
