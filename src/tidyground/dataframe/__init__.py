"""Dataframe library built on top of tidyground.

A dataframe library is a tool designed to handle and manipulate structured data,
typically in the form of tables (i.e., rows and columns).
It allows users to load data from various sources (like CSV files),
explore it, apply transformations, and analyze it.

Dataframes are a convenient way to chain the operations
of an analysis one after the other, much like the pipe
operator in R ``dplyr`` or method chaining in ``pandas``::

    Dataframe.open_csv("colleges.csv") \\
        .select("college", "cases_total", "cases_2021") \\
        .pivot_longer(["college"], name_pattern="cases_", name_column="year") \\
        .collect()

This module shows how to implement such a chaining syntax
using the tidyground compute functions as its foundation.
"""

from ..compute import col, lit
from .dataframe import Dataframe, GroupedDataframe

__all__ = ("Dataframe", "GroupedDataframe", "col", "lit")
