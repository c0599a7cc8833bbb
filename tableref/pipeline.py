"""
Read / refresh pipeline.

A grid moves through four stages:

    RAW -> TAG_RESOLVED -> SEQUENCE_RESOLVED -> FORMULA_RESOLVED

Each stage sweeps every cell before the next one starts, so a fragment
always sees tag-resolved cells and a formula always sees
sequence-resolved cells.  Inside a stage, a reference to a cell that the
stage has not reached yet resolves that cell first.  The addresses being
resolved are kept on a stack; meeting one of them again is a cycle and
raises ``ReferenceCycleError``.

When the engine is not strict, a cell that fails keeps its text and is
listed in the report, along with every other cell of its cycle; a cell
that references a failed cell fails the same way.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, Field

from tableref import config
from tableref.builder import TableOptions, build_from_rows
from tableref.dto.address import Address
from tableref.dto.grid import GridModel, GridStage
from tableref.dto.tag import TagDescriptor
from tableref.errors import (
    CellReferenceError,
    ReferenceCycleError,
    TableRefError,
    UnsupportedSelectorError,
)
from tableref.interpreters.base import CellInterpreter
from tableref.interpreters.expression import ExpressionEvaluator, Reducer
from tableref.interpreters.formulas import FormulaEngine
from tableref.interpreters.sequences import SequenceInterpreter
from tableref.interpreters.tags import MAIN_TAG, TagInterpreter
from tableref.origin import OriginTracker

logger = logging.getLogger(__name__)


class EngineOptions(BaseModel):
    # Raise reference errors (True) or log them and carry on (False).
    strict: bool = config.STRICT
    # Register the built-in <Main> header tag.
    default_tags: bool = True
    max_reference_depth: int = Field(config.MAX_REFERENCE_DEPTH, ge=1)


class CellFailure(BaseModel):
    address: Address
    stage: GridStage
    error: str
    message: str


class PipelineReport(BaseModel):
    stage: GridStage = GridStage.RAW
    # Number of cells whose text each stage changed.
    changed: Dict[GridStage, int] = {}
    failures: List[CellFailure] = []

    @property
    def ok(self) -> bool:
        return not self.failures


class TableEngine:
    """
    Owns the tag and formula registries and runs the interpretation
    stages over grids.  Engines never share registries.
    """

    def __init__(
        self,
        options: Optional[EngineOptions] = None,
        tags: Optional[Sequence[TagDescriptor]] = None,
        reducers: Optional[Dict[str, Reducer]] = None,
    ) -> None:
        self.options = options or EngineOptions()

        self.tags = TagInterpreter([MAIN_TAG] if self.options.default_tags else [])
        for descriptor in tags or []:
            self.tags.register(descriptor)
        self.formulas = FormulaEngine(reducers)
        self.sequences = SequenceInterpreter(ExpressionEvaluator(self.formulas.reducers))
        self.origins = OriginTracker()

        self._stages: List[CellInterpreter] = [self.tags, self.sequences, self.formulas]

    # ------------------------------------------------------------------
    # Registries
    # ------------------------------------------------------------------

    def add_tag(self, descriptor: TagDescriptor) -> None:
        self.tags.register(descriptor)

    def add_formula(self, name: str, reducer: Reducer) -> None:
        self.formulas.register(name, reducer)

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def build(
        self,
        rows: Sequence[Sequence[str]],
        options: Optional[TableOptions] = None,
    ) -> GridModel:
        grid = build_from_rows(rows, options)
        self.read(grid)
        return grid

    def read(self, grid: GridModel) -> PipelineReport:
        """Run every stage over the grid's current text."""
        report = PipelineReport(stage=grid.stage)
        for interpreter in self._stages:
            report.changed[interpreter.stage] = self._sweep(grid, interpreter, report)
            grid.stage = interpreter.stage
            report.stage = interpreter.stage

        self.origins.record(grid)
        logger.info(
            "Read %d cell(s): %s, %d failure(s)",
            grid.cell_count(),
            ", ".join(f"{stage.value}={n}" for stage, n in report.changed.items()),
            len(report.failures),
        )
        return report

    def refresh(self, grid: GridModel) -> PipelineReport:
        """Start again from every cell's origin text."""
        self.origins.restore_all(grid)
        return self.read(grid)

    def _sweep(
        self,
        grid: GridModel,
        interpreter: CellInterpreter,
        report: PipelineReport,
    ) -> int:
        resolved: Dict[Tuple[int, int], str] = {}
        # Cells this stage gave up on; referencing one of them fails too.
        failed: Dict[Tuple[int, int], TableRefError] = {}
        visiting: List[Tuple[int, int]] = []
        changed = 0

        def resolve(address: Address) -> str:
            nonlocal changed
            cell = grid.cell_at(address.x, address.y)
            if cell is None:
                raise CellReferenceError(address.x, address.y)
            key = cell.x, cell.y
            if key in resolved:
                return resolved[key]
            if key in failed:
                raise failed[key]
            if not cell.interpretable:
                return cell.text
            if key in visiting:
                raise ReferenceCycleError(visiting[visiting.index(key):] + [key])
            if len(visiting) >= self.options.max_reference_depth:
                raise CellReferenceError(
                    cell.x,
                    cell.y,
                    f"reference chain deeper than {self.options.max_reference_depth} "
                    f"cells at {address.to_selector()}",
                )

            visiting.append(key)
            try:
                text = interpreter.interpret_cell(cell, grid, resolve)
            finally:
                visiting.pop()

            if text != cell.text:
                changed += 1
                cell.text = text
            resolved[key] = text
            return text

        for cell in grid.iter_cells():
            if not cell.interpretable or (cell.x, cell.y) in failed:
                continue
            try:
                resolve(cell.address)
            except (CellReferenceError, UnsupportedSelectorError) as exc:
                if self.options.strict:
                    raise
                keys = [(cell.x, cell.y)]
                if isinstance(exc, ReferenceCycleError):
                    keys.extend(exc.chain)
                for key in dict.fromkeys(keys):
                    if key in failed:
                        continue
                    failed[key] = exc
                    self._record_failure(Address(x=key[0], y=key[1]), interpreter, exc, report)

        return changed

    def _record_failure(
        self,
        address: Address,
        interpreter: CellInterpreter,
        exc: TableRefError,
        report: PipelineReport,
    ) -> None:
        logger.warning(
            "Cell %s left as is during %s: %s",
            address.to_selector(),
            interpreter.stage.value,
            exc,
        )
        report.failures.append(
            CellFailure(
                address=address,
                stage=interpreter.stage,
                error=type(exc).__name__,
                message=str(exc),
            )
        )
