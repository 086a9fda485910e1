"""TidyGround

A small tabular data manipulation toolkit built for learning and teaching purposes.

TidyGround shows the idioms commonly used when cleaning and analysing
tabular data: selecting columns, filtering rows, adding computed columns,
summarizing groups of rows, converting between long and wide format
and turning text into numbers. All the heavy lifting, like parsing CSV
files and storing columns, is delegated to Apache Arrow.

The toolkit is constituted by multiple components, each isolated within its own
package and each self documented in literate programming style.

The primary components are:

* The Compute functions, the immutable :class:`TableModel` and the
  operations that can be applied to it.
* The Dataframe API, which allows to chain those operations.

For the user guide and code documentation of each component, refer to the
component itself.
"""

from . import compute

__all__ = ("compute",)
