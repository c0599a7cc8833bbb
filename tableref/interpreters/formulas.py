"""
Formulas: cell text of the form ``=NAME...``.

    =SUM(#0-0:0-2)      every cell of the range
    =MAX(#1-0, #2-3)    individual cells
    =AVERAGE(4, 8, 15)  no selectors: every run of digits is an argument

NAME is looked up in the engine's reducer table.  An unknown name is not
an error; ``interpret_formula`` returns ``None`` and the text is left
alone.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Mapping, Optional, Union

from tableref.dto.address import CellRange
from tableref.dto.cell import CellRecord
from tableref.dto.grid import GridModel, GridStage
from tableref.errors import EvaluationError
from tableref.interpreters.base import CellInterpreter, Resolver, current_text_resolver
from tableref.interpreters.expression import Reducer, format_value, values_as_numbers
from tableref.ranges import select_range
from tableref.selector import find_selectors

logger = logging.getLogger(__name__)

FORMULA_RE = re.compile(r"^=([A-Z]*)")
_DIGITS_RE = re.compile(r"\d+")
_NAME_RE = re.compile(r"^[A-Z]+$")

# Largest argument FACTORIAL accepts.
_MAX_FACTORIAL = 1000

Number = Union[int, float]


def _tidy(value: Number) -> Number:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _first(values: List[float], name: str) -> float:
    if not values:
        raise EvaluationError(f"{name} needs at least one numeric value")
    return values[0]


# ------------------------------------------------------------------
# Built-in reducers
# ------------------------------------------------------------------

def reduce_sum(values: List[float]) -> Number:
    return sum(values)


def reduce_average(values: List[float]) -> Number:
    if not values:
        raise EvaluationError("AVERAGE of no values")
    return sum(values) / len(values)


def reduce_max(values: List[float]) -> Number:
    if not values:
        raise EvaluationError("MAX of no values")
    return max(values)


def reduce_min(values: List[float]) -> Number:
    if not values:
        raise EvaluationError("MIN of no values")
    return min(values)


def reduce_abs(values: List[float]) -> Number:
    return abs(_first(values, "ABS"))


def reduce_factorial(values: List[float]) -> Number:
    n = _first(values, "FACTORIAL")
    if n < 0 or not float(n).is_integer():
        raise EvaluationError(f"FACTORIAL needs a non-negative integer, got {n!r}")
    if n > _MAX_FACTORIAL:
        raise EvaluationError(f"FACTORIAL argument {n!r} is too large")
    result = 1
    for i in range(2, int(n) + 1):
        result *= i
    return result


DEFAULT_REDUCERS: Dict[str, Reducer] = {
    "SUM": reduce_sum,
    "AVERAGE": reduce_average,
    "MAX": reduce_max,
    "MIN": reduce_min,
    "ABS": reduce_abs,
    "FACTORIAL": reduce_factorial,
}


def is_formula(text: str) -> bool:
    return text.startswith("=")


class FormulaEngine(CellInterpreter):
    stage = GridStage.FORMULA_RESOLVED

    def __init__(self, reducers: Optional[Mapping[str, Reducer]] = None) -> None:
        self.reducers: Dict[str, Reducer] = dict(DEFAULT_REDUCERS)
        for name, reducer in (reducers or {}).items():
            self.register(name, reducer)

    def register(self, name: str, reducer: Reducer) -> None:
        if not _NAME_RE.match(name):
            raise ValueError(f"formula names are uppercase letters only: {name!r}")
        self.reducers[name] = reducer

    def collect_arguments(
        self, text: str, grid: GridModel, resolve: Resolver
    ) -> List[str]:
        """Texts of the referenced cells, or the literal digit runs."""
        selectors = find_selectors(text)
        if not selectors:
            return _DIGITS_RE.findall(text)

        args: List[str] = []
        for _, selector in selectors:
            if isinstance(selector, CellRange):
                args.extend(resolve(cell.address) for cell in select_range(selector, grid))
            else:
                args.append(resolve(selector))
        return args

    def interpret_formula(
        self,
        text: str,
        grid: GridModel,
        resolve: Optional[Resolver] = None,
    ) -> Optional[Number]:
        m = FORMULA_RE.match(text)
        if not m:
            return None
        name = m.group(1)
        reducer = self.reducers.get(name)
        if reducer is None:
            logger.info("Unknown formula %r in %r", name, text)
            return None

        resolve = resolve or current_text_resolver(grid)
        args = self.collect_arguments(text[m.end():], grid, resolve)
        values = values_as_numbers(args)
        logger.debug("%s over %d value(s)", name, len(values))

        try:
            result = reducer(values)
        except ArithmeticError as exc:
            raise EvaluationError(f"{name} failed: {exc}") from exc
        if result is None:
            return None
        return _tidy(result)

    def interpret_cell(
        self, cell: CellRecord, grid: GridModel, resolve: Resolver
    ) -> str:
        if not is_formula(cell.text):
            return cell.text
        try:
            value = self.interpret_formula(cell.text, grid, resolve)
            if value is None:
                return cell.text
            return format_value(value)
        except EvaluationError:
            logger.warning(
                "Unable to evaluate the formula of cell %s",
                cell.address.to_selector(),
                exc_info=True,
            )
            return cell.text
