"""Command line interface for reshaping and summarizing CSV files.

This module provides a command line interface that loads a CSV file
into a :class:`tidyground.dataframe.Dataframe`, chains the requested
operations in a fixed order (parse numbers, select, group and summarize,
pivot longer, pivot wider) and prints the result.

The results of the execution are then printed to the console in a tabular format
using the :mod:`tidyground.utils.tabulate` module.
"""

import argparse
import logging
import sys

from tidyground.compute import (
    CountAggregation,
    CountDistinctAggregation,
    FirstAggregation,
    MaxAggregation,
    MeanAggregation,
    MinAggregation,
    StddevAggregation,
    SumAggregation,
    TidyGroundError,
)
from tidyground.compute.aggregate import Aggregation
from tidyground.dataframe import Dataframe
from tidyground.utils import tabulate

logger = logging.getLogger(__name__)

AGGREGATIONS: dict[str, type[Aggregation]] = {
    "sum": SumAggregation,
    "min": MinAggregation,
    "max": MaxAggregation,
    "count": CountAggregation,
    "n_distinct": CountDistinctAggregation,
    "mean": MeanAggregation,
    "sd": StddevAggregation,
    "first": FirstAggregation,
}


def parse_aggregation(text: str) -> tuple[str, Aggregation]:
    """Parse an aggregation in the form ``name=function:column``."""
    try:
        name, definition = text.split("=", 1)
        function, column = definition.split(":", 1)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"Invalid aggregation {text!r}, expected name=function:column"
        ) from None
    if function not in AGGREGATIONS:
        raise argparse.ArgumentTypeError(
            f"Unknown aggregation function {function!r}, available: {', '.join(AGGREGATIONS)}"
        )
    return name, AGGREGATIONS[function](column)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Reshape and summarize a CSV file.")
    parser.add_argument("filename", type=str, help="The CSV file to load.")
    parser.add_argument("--delimiter", default=",", help="The character separating the fields.")
    parser.add_argument(
        "--parse-number",
        action="append",
        default=[],
        metavar="COLUMN",
        help="Parse the numbers in a text column. Can be provided multiple times.",
    )
    parser.add_argument(
        "--select",
        action="append",
        metavar="COLUMN",
        help="Keep only this column. Can be provided multiple times.",
    )
    parser.add_argument(
        "--group-by",
        action="append",
        default=[],
        metavar="COLUMN",
        help="Group the rows by this column. Can be provided multiple times.",
    )
    parser.add_argument(
        "--agg",
        action="append",
        default=[],
        type=parse_aggregation,
        metavar="NAME=FUNCTION:COLUMN",
        help=f"Aggregation to compute, functions: {', '.join(AGGREGATIONS)}.",
    )
    parser.add_argument(
        "--longer",
        action="append",
        metavar="ID_COLUMN",
        help="Pivot to long format all columns apart from this id column. Can be provided multiple times.",
    )
    parser.add_argument("--name-pattern", help="Regular expression extracting names from pivoted columns.")
    parser.add_argument("--names-to", default="name", help="Column receiving the names when pivoting longer.")
    parser.add_argument("--values-to", default="value", help="Column receiving the values when pivoting longer.")
    parser.add_argument(
        "--wider",
        action="append",
        metavar="ID_COLUMN",
        help="Pivot to wide format grouping by this id column. Can be provided multiple times.",
    )
    parser.add_argument("--names-from", default="name", help="Column with the names when pivoting wider.")
    parser.add_argument("--values-from", default="value", help="Column with the values when pivoting wider.")
    parser.add_argument("--name-prefix", default="", help="Prefix of the columns created when pivoting wider.")
    parser.add_argument(
        "--on-conflict",
        choices=("error", "first", "last"),
        default="error",
        help="What to do when pivoting wider finds multiple values for the same cell.",
    )
    parser.add_argument("--limit", type=int, default=20, help="Maximum number of rows to print.")
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Show progress information, repeat for debug output.",
    )
    return parser


def build_dataframe(args: argparse.Namespace) -> Dataframe:
    """Chain the operations requested on the command line."""
    df = Dataframe.open_csv(args.filename, delimiter=args.delimiter)
    for column in args.parse_number:
        df = df.parse_number(column)
    if args.select:
        df = df.select(*args.select)
    if args.group_by or args.agg:
        df = df.group_by(*args.group_by).summarize(**dict(args.agg))
    if args.longer:
        df = df.pivot_longer(
            args.longer,
            name_pattern=args.name_pattern,
            name_column=args.names_to,
            value_column=args.values_to,
        )
    if args.wider:
        df = df.pivot_wider(
            args.wider,
            name_column=args.names_from,
            value_column=args.values_from,
            name_prefix=args.name_prefix,
            on_conflict=args.on_conflict,
        )
    return df


def main(argv: list[str] | None = None) -> int:
    """Parse the command line arguments and print the resulting table."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(level=logging.WARNING)
    if args.verbose:
        logging.getLogger("tidyground").setLevel(
            logging.DEBUG if args.verbose > 1 else logging.INFO
        )

    df = build_dataframe(args)
    logger.info("Executing %s", df)
    try:
        result = df.to_table()
    except TidyGroundError as e:
        print(f"Invalid operation, {e}")
        return 1

    print(tabulate.tabulate(result, max_rows=args.limit))
    return 0


if __name__ == "__main__":
    sys.exit(main())
