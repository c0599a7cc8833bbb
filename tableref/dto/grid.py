"""
GridModel: the cell grid every component works on.

Rows are ordered lists of CellRecords and may have different lengths:
a cell spanning several columns occupies a single slot in its row, so
rows holding merged cells are shorter than the others.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterator, List, Literal, Optional

from pydantic import BaseModel

from tableref.dto.cell import CellRecord


class GridStage(str, Enum):
    RAW = "raw"
    TAG_RESOLVED = "tag_resolved"
    SEQUENCE_RESOLVED = "sequence_resolved"
    FORMULA_RESOLVED = "formula_resolved"


class GridModel(BaseModel):
    rows: List[List[CellRecord]] = []
    caption: Optional[str] = None
    caption_side: Literal["top", "bottom"] = "top"
    stage: GridStage = GridStage.RAW

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def row_length(self, y: int) -> int:
        if 0 <= y < len(self.rows):
            return len(self.rows[y])
        return 0

    def cells_per_row(self) -> int:
        """Length of the widest row."""
        return max((len(row) for row in self.rows), default=0)

    def cell_count(self) -> int:
        return sum(len(row) for row in self.rows)

    def does_exist(self, x: int, y: int) -> bool:
        return 0 <= y < len(self.rows) and 0 <= x < len(self.rows[y])

    def cell_at(self, x: int, y: int) -> Optional[CellRecord]:
        if self.does_exist(x, y):
            return self.rows[y][x]
        return None

    def iter_cells(self) -> Iterator[CellRecord]:
        """Every cell in reading order (row by row, left to right)."""
        for row in self.rows:
            yield from row

    # ------------------------------------------------------------------
    # Structural edits.  Out-of-range edits return False.
    # ------------------------------------------------------------------

    def insert_row(self, cells: List[CellRecord], index: int = -1) -> bool:
        if index == -1:
            index = len(self.rows)
        if not 0 <= index <= len(self.rows):
            return False
        self.rows.insert(index, list(cells))
        self.reindex()
        return True

    def remove_row(self, y: int) -> bool:
        if not 0 <= y < len(self.rows):
            return False
        del self.rows[y]
        self.reindex()
        return True

    def remove_column(self, x: int) -> bool:
        if not 0 <= x < self.cells_per_row():
            return False
        for row in self.rows:
            if x < len(row):
                del row[x]
        self.reindex()
        return True

    def remove_cell_at(self, x: int, y: int) -> bool:
        if not self.does_exist(x, y):
            return False
        del self.rows[y][x]
        self.reindex()
        return True

    def replace_cell(self, cell: CellRecord) -> bool:
        if not self.does_exist(cell.x, cell.y):
            return False
        self.rows[cell.y][cell.x] = cell
        return True

    def reindex(self) -> None:
        """Bring every cell's (x, y) back in line with its slot."""
        for y, row in enumerate(self.rows):
            for x, cell in enumerate(row):
                cell.x = x
                cell.y = y
