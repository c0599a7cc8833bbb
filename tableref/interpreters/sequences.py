"""
Template fragments: ``{...}`` regions of cell text.

Interpretation runs in two passes over the whole text:

  1. every basic selector inside a fragment is replaced by the text of
     the cell it addresses (``{#0-0}`` -> ``{2}``);
  2. every fragment is evaluated with the restricted expression grammar
     and replaced by its value.

Fragments joined only by arithmetic operators form one expression, so
``{#0-0}+{#0-1}`` becomes ``{2}+{3}`` and then ``5``.  A fragment that
cannot be evaluated keeps its text, minus the braces.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from tableref.dto.address import Address
from tableref.dto.cell import CellRecord
from tableref.dto.grid import GridModel, GridStage
from tableref.errors import EvaluationError, UnsupportedSelectorError
from tableref.interpreters.base import CellInterpreter, Resolver, current_text_resolver
from tableref.interpreters.expression import ExpressionEvaluator, format_value
from tableref.selector import SELECTORS_RE

logger = logging.getLogger(__name__)

FRAGMENT_RE = re.compile(r"\{(.*?)\}")
FRAGMENT_RUN_RE = re.compile(r"\{.*?\}(?:\s*[-+*/]\s*\{.*?\})*")


def get_sequences(text: str) -> list[str]:
    return [m.group(0) for m in FRAGMENT_RE.finditer(text)]


def strip_braces(text: str) -> str:
    return FRAGMENT_RE.sub(lambda m: m.group(1), text)


class SequenceInterpreter(CellInterpreter):
    stage = GridStage.SEQUENCE_RESOLVED

    def __init__(self, evaluator: Optional[ExpressionEvaluator] = None) -> None:
        self.evaluator = evaluator or ExpressionEvaluator()

    # ------------------------------------------------------------------
    # Pass 1
    # ------------------------------------------------------------------

    def substitute_references(
        self,
        text: str,
        grid: GridModel,
        resolve: Optional[Resolver] = None,
    ) -> str:
        resolve = resolve or current_text_resolver(grid)

        def _selector(m: re.Match) -> str:
            if m.group(1) is not None:
                raise UnsupportedSelectorError(
                    f"cannot read a range selector inside a sequence: {m.group(0)}"
                )
            return resolve(Address(x=int(m.group(6)), y=int(m.group(5))))

        def _fragment(m: re.Match) -> str:
            return "{" + SELECTORS_RE.sub(_selector, m.group(1)) + "}"

        return FRAGMENT_RE.sub(_fragment, text)

    # ------------------------------------------------------------------
    # Pass 2
    # ------------------------------------------------------------------

    def evaluate_fragments(self, text: str) -> str:
        def _run(m: re.Match) -> str:
            expression = strip_braces(m.group(0))
            try:
                return format_value(self.evaluator.evaluate(expression))
            except EvaluationError as exc:
                logger.warning(
                    "Unable to evaluate %r while interpreting a cell: %s",
                    expression,
                    exc,
                )
                return expression

        return FRAGMENT_RUN_RE.sub(_run, text)

    # ------------------------------------------------------------------
    # Both passes
    # ------------------------------------------------------------------

    def interpret_sequences(
        self,
        text: str,
        grid: GridModel,
        resolve: Optional[Resolver] = None,
    ) -> str:
        if not FRAGMENT_RE.search(text):
            return text
        substituted = self.substitute_references(text, grid, resolve)
        return self.evaluate_fragments(substituted)

    def interpret_cell(
        self, cell: CellRecord, grid: GridModel, resolve: Resolver
    ) -> str:
        return self.interpret_sequences(cell.text, grid, resolve)
