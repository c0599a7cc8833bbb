"""
OriginTracker: keeps interpretation repeatable.

Every cell remembers the source text it was built from (``origin``).
Refreshing a grid starts again from those texts, never from text that
has already been interpreted.  Edits made straight to a cell's displayed
text bypass the origin and are therefore lost on refresh; ``diverged``
lists the cells where that has happened since the last read.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from tableref.builder import parse_raw_cell
from tableref.dto.cell import CellOptions, CellRecord
from tableref.dto.grid import GridModel, GridStage

logger = logging.getLogger(__name__)


class OriginTracker:

    def origin_of(self, grid: GridModel, x: int, y: int) -> Optional[str]:
        cell = grid.cell_at(x, y)
        return cell.origin if cell is not None else None

    def restore(self, cell: CellRecord) -> None:
        """Put a cell back the way it was built."""
        cell.text = cell.origin
        cell.kind = cell.origin_kind
        cell.attributes = cell.options.base_attributes()
        cell.events = []

    def restore_all(self, grid: GridModel) -> None:
        for cell in grid.iter_cells():
            self.restore(cell)
        grid.stage = GridStage.RAW

    def record(self, grid: GridModel) -> None:
        """Remember what every cell displays after a read."""
        for cell in grid.iter_cells():
            cell.resolved = cell.text

    def diverged(self, grid: GridModel) -> List[CellRecord]:
        """Cells whose displayed text was changed after the last read."""
        return [
            cell
            for cell in grid.iter_cells()
            if cell.resolved is not None and cell.text != cell.resolved
        ]

    def rewrite(self, grid: GridModel, x: int, y: int, source: str) -> bool:
        """
        Give the cell at (x, y) a new source text.  Span suffixes and the
        header marker in *source* are honoured; the cell's other options
        are kept.  Returns False if the cell does not exist or *source* is
        a placeholder.
        """
        cell = grid.cell_at(x, y)
        parsed = parse_raw_cell(source)
        if cell is None or parsed is None:
            return False

        options: CellOptions = cell.options.model_copy(
            update={"colspan": parsed.colspan, "rowspan": parsed.rowspan}
        )
        grid.replace_cell(
            CellRecord.create(x, y, parsed.text, kind=parsed.kind, options=options)
        )
        grid.stage = GridStage.RAW
        logger.debug("Rewrote origin of %s", cell.address.to_selector())
        return True
