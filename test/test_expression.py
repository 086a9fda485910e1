import pytest
import pyarrow as pa
import pyarrow.compute as pc
from tidyground.compute.expressions import FunctionCallExpression
from tidyground.compute.base import ColumnRef, Literal, lit
from tidyground.compute.errors import NotFoundError

@pytest.fixture
def sample_table():
    return pa.Table.from_arrays(
        [pa.array([1, 2, 3, 4, 5]), pa.array(['a', 'b', 'c', 'd', 'e'])],
        names=['numbers', 'letters']
    )

def test_function_call_expression_init():
    expr = FunctionCallExpression(pc.add, ColumnRef('numbers'), 1)
    assert expr.func == pc.add
    assert len(expr.args) == 2
    assert isinstance(expr.args[0], ColumnRef)
    assert expr.args[1] == 1

def test_function_call_expression_str():
    expr = FunctionCallExpression(pc.add, ColumnRef('numbers'), 1)
    assert str(expr) == "pyarrow.compute.add(ColumnRef(numbers),1)"

def test_function_call_expression_str_with_options():
    expr = FunctionCallExpression(pc.match_substring, ColumnRef('letters'), 'A', ignore_case=True)
    assert str(expr) == "pyarrow.compute.match_substring(ColumnRef(letters),A,ignore_case=True)"

def test_function_call_expression_apply_simple(sample_table):
    expr = FunctionCallExpression(pc.add, ColumnRef('numbers'), 1)
    result = expr.apply(sample_table)
    assert result.to_pylist() == [2, 3, 4, 5, 6]

def test_function_call_expression_apply_nested(sample_table):
    inner_expr = FunctionCallExpression(pc.multiply, ColumnRef('numbers'), 2)
    outer_expr = FunctionCallExpression(pc.add, inner_expr, 1)
    result = outer_expr.apply(sample_table)
    assert result.to_pylist() == [3, 5, 7, 9, 11]

def test_function_call_expression_apply_string_ops(sample_table):
    expr = FunctionCallExpression(pc.utf8_upper, ColumnRef('letters'))
    result = expr.apply(sample_table)
    assert result.to_pylist() == ['A', 'B', 'C', 'D', 'E']

def test_function_call_expression_apply_keyword_options(sample_table):
    expr = FunctionCallExpression(pc.match_substring, ColumnRef('letters'), 'B', ignore_case=True)
    result = expr.apply(sample_table)
    assert result.to_pylist() == [False, True, False, False, False]

def test_function_call_expression_apply_comparison(sample_table):
    expr = FunctionCallExpression(pc.greater, ColumnRef('numbers'), 3)
    result = expr.apply(sample_table)
    assert result.to_pylist() == [False, False, False, True, True]

def test_function_call_expression_apply_multiple_args(sample_table):
    expr = FunctionCallExpression(pc.if_else,
                                  FunctionCallExpression(pc.greater, ColumnRef('numbers'), 3),
                                  ColumnRef('letters'),
                                  lit('x'))
    result = expr.apply(sample_table)
    assert result.to_pylist() == ['x', 'x', 'x', 'd', 'e']

def test_function_call_expression_apply_null_handling(sample_table):
    numbers_with_null = pa.array([1, None, 3, 4, 5])
    table_with_null = pa.Table.from_arrays([numbers_with_null, sample_table['letters']], names=['numbers', 'letters'])
    expr = FunctionCallExpression(pc.add, ColumnRef('numbers'), 1)
    result = expr.apply(table_with_null)
    assert result.to_pylist() == [2, None, 4, 5, 6]

def test_function_call_expression_apply_invalid_column():
    table = pa.Table.from_arrays([pa.array([1, 2, 3])], names=['numbers'])
    expr = FunctionCallExpression(pc.add, ColumnRef('non_existent'), 1)
    with pytest.raises(NotFoundError):
        expr.apply(table)
    # Missing columns are still reported as a KeyError
    with pytest.raises(KeyError):
        expr.apply(table)

def test_function_call_expression_apply_type_mismatch():
    table = pa.Table.from_arrays([pa.array(['a', 'b', 'c'])], names=['letters'])
    expr = FunctionCallExpression(pc.add, ColumnRef('letters'), 1)
    with pytest.raises(pa.ArrowNotImplementedError):
        expr.apply(table)

def test_literal(sample_table):
    expr = lit(5)
    assert isinstance(expr, Literal)
    assert str(expr) == "Literal(5)"
    assert expr.apply(sample_table).as_py() == 5
