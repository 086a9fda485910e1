"""Shell commands exposing TidyGround functionalities.

This module contains the shell commands that can be used to interact with TidyGround.

FReshape (file reshape)
=======================

``tidyground-freshape`` loads a CSV file, applies the requested
operations and prints the resulting table::

    tidyground-freshape colleges.csv --longer college --name-pattern cases_ --names-to year

Grouped aggregations are expressed as ``name=function:column``::

    tidyground-freshape colleges.csv --group-by state --agg total=sum:cases --agg colleges=n_distinct:college

"""
