import pyarrow.compute as pc

from tidyground.compute import TableModel
from tidyground.compute.aggregate import group_summarize
from tidyground.utils.inspect import get_qualname


class Sample:
    def method(self):
        pass


def test_get_qualname_functions():
    assert get_qualname(pc.add) == "pyarrow.compute.add"
    assert get_qualname(group_summarize) == "tidyground.compute.aggregate.group_summarize"


def test_get_qualname_methods():
    assert get_qualname(TableModel.select_columns) == "tidyground.compute.table.TableModel.select_columns"
    assert get_qualname(Sample().method) == f"{__name__}.Sample.method"


def test_get_qualname_classes_and_modules():
    assert get_qualname(TableModel) == "tidyground.compute.table.TableModel"
    assert get_qualname(pc) == "pyarrow.compute"
