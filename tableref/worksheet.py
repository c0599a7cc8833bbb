"""
Worksheet interop.

``grid_from_worksheet`` derives a GridModel from a table that is already
laid out in an openpyxl worksheet: every merged range becomes a single
spanning cell, the cells it covers take no slot, and bold cells are read
as headers.  Excel formulas are kept out of interpretation.
``grid_to_worksheet`` does the reverse.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Set, Tuple

from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from tableref.dto.cell import CellKind, CellOptions, CellRecord
from tableref.dto.grid import GridModel
from tableref.interpreters.expression import format_value

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Coordinate helpers
# ------------------------------------------------------------------

def coord(col: int, row: int) -> str:
    """Return an A1-style coordinate from 1-based col/row indices."""
    return f"{get_column_letter(col)}{row}"


def build_span_map(ws: Worksheet) -> Tuple[Dict[str, Tuple[int, int]], Set[str]]:
    """
    Return ``({top_left: (colspan, rowspan)}, covered)`` for the merged
    ranges of *ws*, where *covered* holds every merged coordinate other
    than a top-left one.
    """
    spans: Dict[str, Tuple[int, int]] = {}
    covered: Set[str] = set()
    for mr in ws.merged_cells.ranges:
        tl = coord(mr.min_col, mr.min_row)
        spans[tl] = (mr.max_col - mr.min_col + 1, mr.max_row - mr.min_row + 1)
        for r in range(mr.min_row, mr.max_row + 1):
            for c in range(mr.min_col, mr.max_col + 1):
                cd = coord(c, r)
                if cd != tl:
                    covered.add(cd)
    return spans, covered


def find_used_range(ws: Worksheet) -> Optional[Tuple[int, int, int, int]]:
    """Return (min_row, min_col, max_row, max_col), all 1-based, or None if empty."""
    min_r = min_c = float("inf")
    max_r = max_c = 0
    for row in ws.iter_rows():
        for cell in row:
            if cell.value is not None:
                min_r = min(min_r, cell.row)
                max_r = max(max_r, cell.row)
                min_c = min(min_c, cell.column)
                max_c = max(max_c, cell.column)
    for mr in ws.merged_cells.ranges:
        min_r = min(min_r, mr.min_row)
        max_r = max(max_r, mr.max_row)
        min_c = min(min_c, mr.min_col)
        max_c = max(max_c, mr.max_col)
    if max_r == 0:
        return None
    return int(min_r), int(min_c), int(max_r), int(max_c)


def _cell_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return format_value(value)
    return str(value)


# ------------------------------------------------------------------
# Worksheet -> grid
# ------------------------------------------------------------------

def grid_from_worksheet(ws: Worksheet) -> GridModel:
    grid = GridModel()
    bounds = find_used_range(ws)
    if bounds is None:
        return grid

    min_row, min_col, max_row, max_col = bounds
    spans, covered = build_span_map(ws)

    for r in range(min_row, max_row + 1):
        cells = []
        for c in range(min_col, max_col + 1):
            cd = coord(c, r)
            if cd in covered:
                continue
            cell = ws.cell(row=r, column=c)
            colspan, rowspan = spans.get(cd, (1, 1))
            kind = CellKind.HEADER if cell.font is not None and cell.font.bold else CellKind.NORMAL
            cells.append(
                CellRecord.create(
                    len(cells),
                    r - min_row,
                    _cell_text(cell.value),
                    kind=kind,
                    # Excel formulas are not in the =NAME(#y-x) syntax
                    options=CellOptions(
                        colspan=colspan,
                        rowspan=rowspan,
                        interpret=cell.data_type != "f",
                    ),
                )
            )
        grid.rows.append(cells)

    logger.debug(
        "Read %d row(s) from worksheet %r (%d merged range(s))",
        grid.row_count,
        ws.title,
        len(spans),
    )
    return grid


# ------------------------------------------------------------------
# Grid -> worksheet
# ------------------------------------------------------------------

def grid_to_worksheet(
    grid: GridModel,
    ws: Worksheet,
    interpreted: bool = True,
    start_row: int = 1,
    start_col: int = 1,
) -> Worksheet:
    """
    Lay the grid out in *ws* the way a table is laid out: each cell takes
    the next free slot of its row, and spanning cells reserve the slots
    they cover in the rows below.
    """
    occupied: Set[Tuple[int, int]] = set()

    for y, row in enumerate(grid.rows):
        x = 0
        for cell in row:
            while (y, x) in occupied:
                x += 1
            r, c = start_row + y, start_col + x
            target = ws.cell(row=r, column=c)
            target.value = cell.text if interpreted else cell.origin
            if isinstance(target.value, str) and target.value.startswith("="):
                # keep =NAME(...) as text rather than an Excel formula
                target.data_type = "s"
            kind = cell.kind if interpreted else cell.origin_kind
            if kind == CellKind.HEADER:
                target.font = Font(bold=True)

            for dy in range(cell.rowspan):
                for dx in range(cell.colspan):
                    occupied.add((y + dy, x + dx))
            if cell.colspan > 1 or cell.rowspan > 1:
                ws.merge_cells(
                    start_row=r,
                    start_column=c,
                    end_row=r + cell.rowspan - 1,
                    end_column=c + cell.colspan - 1,
                )
            x += cell.colspan

    return ws
