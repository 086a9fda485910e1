import argparse

import pytest

from tidyground.commands import freshape
from tidyground.compute import MeanAggregation

COLLEGES_CSV = """college,state,cases_total,cases_2021
Evanston U,IL,100,40
Chicago U,IL,250,80
Boston U,MA,15,7
"""


@pytest.fixture
def colleges_csv(tmp_path):
    path = tmp_path / "colleges.csv"
    path.write_text(COLLEGES_CSV)
    return str(path)


def test_parse_aggregation():
    name, aggregation = freshape.parse_aggregation("avg=mean:cases")
    assert name == "avg"
    assert isinstance(aggregation, MeanAggregation)
    assert aggregation.column == "cases"


@pytest.mark.parametrize("text", ["avg", "avg=mean", "avg=median:cases"])
def test_parse_aggregation_invalid(text):
    with pytest.raises(argparse.ArgumentTypeError):
        freshape.parse_aggregation(text)


def test_longer(colleges_csv, capsys):
    exit_code = freshape.main(
        [colleges_csv, "--select", "college", "--select", "cases_total", "--select", "cases_2021",
         "--longer", "college", "--name-pattern", "cases_", "--names-to", "year", "--limit", "2"]
    )
    assert exit_code == 0
    assert capsys.readouterr().out.splitlines() == [
        "college    | year  | value",
        "---------- | ----- | -----",
        "Evanston U | total | 100",
        "Evanston U | 2021  | 40",
        "... and 4 more rows",
    ]


def test_group_by(colleges_csv, capsys):
    exit_code = freshape.main(
        [colleges_csv, "--group-by", "state", "--agg", "total=sum:cases_total", "--agg", "n=count:college"]
    )
    assert exit_code == 0
    assert capsys.readouterr().out.splitlines() == [
        "state | total | n",
        "----- | ----- | -",
        "IL    | 350   | 2",
        "MA    | 15    | 1",
    ]


def test_wider_conflict(colleges_csv, capsys):
    args = [colleges_csv, "--longer", "state", "--longer", "college",
            "--wider", "state", "--names-from", "name", "--values-from", "value"]
    assert freshape.main(args) == 1
    assert capsys.readouterr().out.startswith("Invalid operation, ")

    assert freshape.main(args + ["--on-conflict", "last"]) == 0
    assert capsys.readouterr().out.splitlines()[2] == "IL    | 250         | 80"


def test_missing_column(colleges_csv, capsys):
    assert freshape.main([colleges_csv, "--select", "deaths"]) == 1
    assert "Column 'deaths' not found" in capsys.readouterr().out
