"""
Cell interpretation stages.

Each stage implements the ``CellInterpreter`` base class.  The pipeline
runs them in this order, each one over the whole grid:

  1. TagInterpreter     : ``<Name(args)>`` custom tags
  2. SequenceInterpreter: ``{...}`` fragments and cell references
  3. FormulaEngine      : ``=NAME(...)`` formulas
"""

from tableref.interpreters.base import CellInterpreter, Resolver
from tableref.interpreters.tags import MAIN_TAG, TagInterpreter
from tableref.interpreters.sequences import SequenceInterpreter
from tableref.interpreters.formulas import DEFAULT_REDUCERS, FormulaEngine
from tableref.interpreters.expression import ExpressionEvaluator

__all__ = [
    "CellInterpreter",
    "Resolver",
    "MAIN_TAG",
    "TagInterpreter",
    "SequenceInterpreter",
    "FormulaEngine",
    "DEFAULT_REDUCERS",
    "ExpressionEvaluator",
]
