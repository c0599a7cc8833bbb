"""
Cell selection over a GridModel.

Ranges may be given in either direction.  The sweep always runs from the
smaller address to the larger one; when the caller asked for the reverse
direction, the result is reversed at the end so it still starts at the
``from`` cell.  Rows shorter than the requested bound are clipped.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Union

from tableref.dto.address import Address, CellRange
from tableref.dto.cell import CellRecord
from tableref.dto.grid import GridModel

logger = logging.getLogger(__name__)

Pos = Union[Address, Dict[str, Any]]


def _as_address(pos: Optional[Pos]) -> Address:
    """Accept an Address or a ``{"x": .., "y": ..}`` dict; missing keys are 0."""
    if pos is None:
        return Address()
    if isinstance(pos, Address):
        return pos
    return Address(
        x=pos.get("x") if pos.get("x") is not None else 0,
        y=pos.get("y") if pos.get("y") is not None else 0,
    )


# ------------------------------------------------------------------
# Single cells, rows, columns
# ------------------------------------------------------------------

def select_cell(x: int, y: int, grid: GridModel) -> Optional[CellRecord]:
    return grid.cell_at(x, y)


def select_row(y: int, grid: GridModel) -> List[CellRecord]:
    if not 0 <= y < grid.row_count:
        return []
    return list(grid.rows[y])


def select_column(x: int, grid: GridModel) -> List[CellRecord]:
    """Cells at position *x* of every row long enough to have one."""
    return [row[x] for row in grid.rows if 0 <= x < len(row)]


def select_several_rows(y1: int, y2: int, grid: GridModel) -> List[List[CellRecord]]:
    if y1 == y2:
        return [select_row(y1, grid)]

    is_reversed = y1 > y2
    if is_reversed:
        y1, y2 = y2, y1

    rows = [select_row(y, grid) for y in range(y1, y2 + 1)]
    if is_reversed:
        return [row[::-1] for row in reversed(rows)]
    return rows


def select_several_columns(x1: int, x2: int, grid: GridModel) -> List[List[CellRecord]]:
    if x1 == x2:
        return [select_column(x1, grid)]

    is_reversed = x1 > x2
    if is_reversed:
        x1, x2 = x2, x1

    columns = [select_column(x, grid) for x in range(x1, x2 + 1)]
    if is_reversed:
        return [column[::-1] for column in reversed(columns)]
    return columns


# ------------------------------------------------------------------
# Rectangular ranges
# ------------------------------------------------------------------

def select_multiple_cells(
    from_: Optional[Pos],
    to: Optional[Pos],
    grid: GridModel,
) -> List[CellRecord]:
    """
    Expand the range between *from_* and *to* into cells in reading order.

    Every row of the sweep starts at ``from.x``.  Rows before the last one
    run to their own end; the last row stops at ``to.x``.  Bounds past the
    end of a row are clipped, and the sweep stops quietly at the first
    missing row.
    """
    start = _as_address(from_)
    end = _as_address(to)

    is_reversed = start.y > end.y or (start.y == end.y and start.x > end.x)
    if is_reversed:
        start, end = end, start

    cells: List[CellRecord] = []
    for y in range(start.y, end.y + 1):
        if not 0 <= y < grid.row_count:
            break
        row = grid.rows[y]
        last = len(row) - 1
        if y == end.y:
            last = min(end.x, last)
        cells.extend(row[x] for x in range(start.x, last + 1))

    logger.debug(
        "Expanded %s -> %s into %d cell(s)",
        start.to_selector(),
        end.to_selector(),
        len(cells),
    )
    return cells[::-1] if is_reversed else cells


def select_range(cell_range: CellRange, grid: GridModel) -> List[CellRecord]:
    return select_multiple_cells(cell_range.start, cell_range.end, grid)
