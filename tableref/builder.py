"""
Building a GridModel from raw rows of strings, and turning one back into
raw rows.

Raw cell syntax:

    "text.r*3"   spans three columns
    "text.c*2"   spans two rows
    "."          placeholder, takes no slot in the row
    "@text"      header cell
"""

from __future__ import annotations

import logging
import random
import re
from typing import Callable, List, Literal, Optional, Sequence

from pydantic import BaseModel

from tableref import config
from tableref.dto.cell import CellKind, CellOptions, CellRecord
from tableref.dto.grid import GridModel

logger = logging.getLogger(__name__)

COLSPAN_RE = re.compile(r"\.r\*(\d+)")
ROWSPAN_RE = re.compile(r"\.c\*(\d+)")

PLACEHOLDER = "."
HEADER_MARKER = "@"


class TableOptions(BaseModel):
    caption: Optional[str] = None
    caption_side: Literal["top", "bottom"] = "top"
    orientation: Literal["horizontal", "vertical"] = "horizontal"
    common_class: str = ""   # added on top of config.COMMON_CLASS


class RawCell(BaseModel):
    """A raw input string split into its text, kind and spans."""

    text: str
    kind: CellKind = CellKind.NORMAL
    colspan: int = 1
    rowspan: int = 1

    def to_raw(self) -> str:
        out = self.text
        if self.kind == CellKind.HEADER:
            out = HEADER_MARKER + out
        if self.rowspan > 1:
            out += f".c*{self.rowspan}"
        if self.colspan > 1:
            out += f".r*{self.colspan}"
        return out


# ------------------------------------------------------------------
# Raw cell parsing
# ------------------------------------------------------------------

def parse_raw_cell(raw: str) -> Optional[RawCell]:
    """Return the parsed cell, or ``None`` for a ``.`` placeholder."""
    if raw == PLACEHOLDER:
        return None

    colspan = rowspan = 1
    m = COLSPAN_RE.search(raw)
    if m:
        colspan = max(1, int(m.group(1)))
    m = ROWSPAN_RE.search(raw)
    if m:
        rowspan = max(1, int(m.group(1)))
    text = ROWSPAN_RE.sub("", COLSPAN_RE.sub("", raw))

    kind = CellKind.NORMAL
    if text.startswith(HEADER_MARKER):
        kind = CellKind.HEADER
        text = text[len(HEADER_MARKER):]

    return RawCell(text=text, kind=kind, colspan=colspan, rowspan=rowspan)


def _cell_options(raw: RawCell, common_class: str) -> CellOptions:
    options = CellOptions(colspan=raw.colspan, rowspan=raw.rowspan)
    for cla in (config.COMMON_CLASS, common_class):
        options = options.with_class(cla)
    return options


def make_cell(
    raw: str,
    x: int,
    y: int,
    common_class: str = "",
) -> Optional[CellRecord]:
    parsed = parse_raw_cell(raw)
    if parsed is None:
        return None
    return CellRecord.create(
        x, y, parsed.text, kind=parsed.kind,
        options=_cell_options(parsed, common_class),
    )


def make_random_cell(
    x: int,
    y: int,
    low: int,
    high: int,
    options: Optional[CellOptions] = None,
    rng: Optional[random.Random] = None,
) -> CellRecord:
    """
    Create a Random cell holding an integer drawn once from
    ``[low, high]``.  The number becomes the cell's origin, so refreshing
    the grid keeps it.
    """
    if low > high:
        low, high = high, low
    number = (rng or random).randint(low, high)
    options = (options or CellOptions()).with_class(config.RANDOM_CELL_CLASS)
    return CellRecord.create(x, y, str(number), kind=CellKind.RANDOM, options=options)


# ------------------------------------------------------------------
# Rows <-> grid
# ------------------------------------------------------------------

def _build_row(raw_row: Sequence[str], y: int, common_class: str) -> List[CellRecord]:
    cells: List[CellRecord] = []
    for raw in raw_row:
        cell = make_cell(raw, len(cells), y, common_class)
        if cell is not None:
            cells.append(cell)
    return cells


def transpose_rows(rows: Sequence[Sequence[str]]) -> List[List[str]]:
    """
    Turn columns into rows.  Short rows are padded with placeholders and
    every cell's colspan and rowspan are swapped.
    """
    width = max((len(row) for row in rows), default=0)
    out: List[List[str]] = []
    for x in range(width):
        line: List[str] = []
        for row in rows:
            raw = row[x] if x < len(row) else PLACEHOLDER
            parsed = parse_raw_cell(raw)
            if parsed is None:
                line.append(PLACEHOLDER)
                continue
            parsed.colspan, parsed.rowspan = parsed.rowspan, parsed.colspan
            line.append(parsed.to_raw())
        out.append(line)
    return out


def build_from_rows(
    rows: Sequence[Sequence[str]],
    options: Optional[TableOptions] = None,
) -> GridModel:
    options = options or TableOptions()
    if options.orientation == "vertical":
        rows = transpose_rows(rows)

    grid = GridModel(caption=options.caption, caption_side=options.caption_side)
    for y, raw_row in enumerate(rows):
        grid.rows.append(_build_row(raw_row, y, options.common_class))

    logger.debug(
        "Built grid: %d row(s), %d cell(s)", grid.row_count, grid.cell_count()
    )
    return grid


def add_row(
    grid: GridModel,
    raw_row: Sequence[str],
    index: int = -1,
    common_class: str = "",
) -> bool:
    y = grid.row_count if index == -1 else index
    return grid.insert_row(_build_row(raw_row, y, common_class), index)


def add_column(
    grid: GridModel,
    raw_column: Sequence[str],
    index: int = -1,
    common_class: str = "",
) -> bool:
    """
    Add one cell per row from *raw_column*.  Placeholders leave their row
    untouched; an index past the end of a row appends.
    """
    if len(raw_column) > grid.row_count:
        return False
    for y, raw in enumerate(raw_column):
        row = grid.rows[y]
        x = len(row) if index == -1 or index > len(row) else index
        cell = make_cell(raw, x, y, common_class)
        if cell is None:
            continue
        row.insert(x, cell)
    grid.reindex()
    return True


def export_to_rows(grid: GridModel, interpreted: bool = False) -> List[List[str]]:
    """
    Inverse of ``build_from_rows``.  Spans come back as ``.c*N`` / ``.r*N``
    suffixes and short rows are padded with ``.`` up to the widest row.

    With *interpreted* the displayed text and kind are exported instead of
    the origin.
    """
    width = grid.cells_per_row()
    out: List[List[str]] = []
    for row in grid.rows:
        line: List[str] = []
        for cell in row:
            raw = RawCell(
                text=cell.text if interpreted else cell.origin,
                kind=cell.kind if interpreted else cell.origin_kind,
                colspan=cell.colspan,
                rowspan=cell.rowspan,
            )
            line.append(raw.to_raw())
        line.extend([PLACEHOLDER] * (width - len(line)))
        out.append(line)
    return out


def generate_line(
    in_line: Callable[[int], str],
    cells_to_generate: int,
    starts_with: Optional[str] = None,
    ends_with: Optional[str] = None,
) -> List[str]:
    """Build a raw row by calling ``in_line(i)`` for each generated cell."""
    if cells_to_generate <= 0:
        raise ValueError("cells_to_generate must be a positive number of cells")
    line: List[str] = []
    if starts_with is not None:
        line.append(starts_with)
    line.extend(in_line(i) for i in range(cells_to_generate))
    if ends_with is not None:
        line.append(ends_with)
    return line
