"""
Exceptions raised while parsing selectors and interpreting cell text.

Structural edits on a grid never raise; they return ``False`` instead.
An unknown formula name is not an error either: ``interpret_formula``
returns ``None`` and the caller decides what to do.
"""

from __future__ import annotations

from typing import Sequence, Tuple


class TableRefError(Exception):
    """Base class for every error raised by the engine."""


class ParseError(TableRefError, ValueError):
    """Selector text does not match the address syntax."""


class CellReferenceError(TableRefError):
    """A selector addresses a cell that does not exist."""

    def __init__(self, x: int, y: int, message: str | None = None) -> None:
        self.x = x
        self.y = y
        super().__init__(message or f"the cell (x={x}, y={y}) doesn't exist")


class ReferenceCycleError(CellReferenceError):
    """Cells reference each other in a loop."""

    def __init__(self, chain: Sequence[Tuple[int, int]]) -> None:
        self.chain = list(chain)
        x, y = self.chain[-1]
        path = " -> ".join(f"#{cy}-{cx}" for cx, cy in self.chain)
        super().__init__(x, y, f"circular reference: {path}")


class UnsupportedSelectorError(TableRefError):
    """A range selector was used where only a basic selector is valid."""


class EvaluationError(TableRefError):
    """A fragment expression or a formula reducer could not be evaluated."""
