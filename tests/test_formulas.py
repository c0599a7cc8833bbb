import logging

import pytest

from tableref import build_from_rows
from tableref.dto.cell import CellRecord
from tableref.errors import EvaluationError
from tableref.interpreters.base import current_text_resolver
from tableref.interpreters.formulas import DEFAULT_REDUCERS, FormulaEngine, is_formula


@pytest.fixture
def grid():
    return build_from_rows([["1", "2", "3"], ["a", "4", ""]])


def test_range_reducers(grid) -> None:
    formulas = FormulaEngine()
    assert formulas.interpret_formula("=SUM(#0-0:0-2)", grid) == 6
    assert formulas.interpret_formula("=AVERAGE(#0-0:0-2)", grid) == 2
    assert formulas.interpret_formula("=MAX(#0-0, #0-2)", grid) == 3
    assert formulas.interpret_formula("=MIN(#0-1:1-1)", grid) == 2


def test_non_numeric_values_are_skipped(grid) -> None:
    assert FormulaEngine().interpret_formula("=SUM(#1-0:1-2)", grid) == 4


def test_digit_runs_without_selectors(grid) -> None:
    formulas = FormulaEngine()
    assert formulas.interpret_formula("=SUM(4, 8, 15)", grid) == 27
    assert formulas.interpret_formula("=AVERAGE(4, 8, 15)", grid) == 9
    assert formulas.interpret_formula("=FACTORIAL(5)", grid) == 120
    assert formulas.interpret_formula("=ABS(7)", grid) == 7


def test_unknown_formula_returns_none(grid, caplog) -> None:
    caplog.set_level(logging.INFO, logger="tableref.interpreters.formulas")
    assert FormulaEngine().interpret_formula("=MEDIAN(1, 2)", grid) is None
    assert any("MEDIAN" in record.getMessage() for record in caplog.records)
    assert FormulaEngine().interpret_formula("plain text", grid) is None


def test_reducer_errors(grid) -> None:
    formulas = FormulaEngine()
    with pytest.raises(EvaluationError):
        formulas.interpret_formula("=FACTORIAL(5000)", grid)
    with pytest.raises(EvaluationError):
        formulas.interpret_formula("=MIN(#1-0)", grid)


def test_interpret_cell_keeps_text_on_error(grid) -> None:
    formulas = FormulaEngine()
    cell = CellRecord.create(0, 2, "=AVERAGE(#1-0)")
    assert formulas.interpret_cell(cell, grid, current_text_resolver(grid)) == "=AVERAGE(#1-0)"

    cell = CellRecord.create(0, 2, "=SUM(#0-0:0-1)")
    assert formulas.interpret_cell(cell, grid, current_text_resolver(grid)) == "3"


def test_register() -> None:
    formulas = FormulaEngine()
    formulas.register("DOUBLE", lambda values: sum(values) * 2)
    assert "DOUBLE" in formulas.reducers
    assert "DOUBLE" not in DEFAULT_REDUCERS
    with pytest.raises(ValueError):
        formulas.register("double", lambda values: 0)
    with pytest.raises(ValueError):
        formulas.register("X2", lambda values: 0)


def test_is_formula() -> None:
    assert is_formula("=SUM(1)")
    assert not is_formula(" =SUM(1)")
