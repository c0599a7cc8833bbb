from tableref import build_from_rows
from tableref.dto.address import Address, CellRange
from tableref.ranges import (
    select_cell,
    select_column,
    select_multiple_cells,
    select_range,
    select_row,
    select_several_columns,
    select_several_rows,
)


def _texts(cells):
    return [cell.text for cell in cells]


def test_sweep_starts_each_row_at_from_x(numbers_grid) -> None:
    cells = select_multiple_cells({"x": 1, "y": 0}, {"x": 1, "y": 1}, numbers_grid)
    assert _texts(cells) == ["2", "3", "5"]


def test_reversed_range_is_reversed(numbers_grid) -> None:
    cells = select_multiple_cells({"x": 1, "y": 1}, {"x": 1, "y": 0}, numbers_grid)
    assert _texts(cells) == ["5", "3", "2"]


def test_bounds_are_clipped(numbers_grid) -> None:
    cells = select_multiple_cells(Address(x=0, y=0), Address(x=10, y=0), numbers_grid)
    assert _texts(cells) == ["1", "2", "3"]


def test_sweep_stops_at_missing_row(numbers_grid) -> None:
    cells = select_multiple_cells({"x": 0, "y": 1}, {"x": 0, "y": 5}, numbers_grid)
    assert _texts(cells) == ["4", "5", "6", "7", "8", "9"]


def test_missing_coordinates_default_to_zero(numbers_grid) -> None:
    cells = select_multiple_cells({}, {"x": 1}, numbers_grid)
    assert _texts(cells) == ["1", "2"]


def test_select_range(numbers_grid) -> None:
    cell_range = CellRange(start=Address(x=0, y=2), end=Address(x=2, y=2))
    assert _texts(select_range(cell_range, numbers_grid)) == ["7", "8", "9"]


def test_single_cell_row_and_column(numbers_grid) -> None:
    assert select_cell(2, 1, numbers_grid).text == "6"
    assert select_cell(3, 1, numbers_grid) is None
    assert _texts(select_row(1, numbers_grid)) == ["4", "5", "6"]
    assert select_row(7, numbers_grid) == []
    assert _texts(select_column(0, numbers_grid)) == ["1", "4", "7"]


def test_select_column_skips_short_rows() -> None:
    grid = build_from_rows([["wide.r*2", "x"], ["a", "b", "c"]])
    assert _texts(select_column(2, grid)) == ["c"]


def test_several_rows_and_columns(numbers_grid) -> None:
    rows = select_several_rows(2, 1, numbers_grid)
    assert [_texts(row) for row in rows] == [["9", "8", "7"], ["6", "5", "4"]]

    columns = select_several_columns(0, 0, numbers_grid)
    assert [_texts(column) for column in columns] == [["1", "4", "7"]]

    columns = select_several_columns(0, 1, numbers_grid)
    assert [_texts(column) for column in columns] == [["1", "4", "7"], ["2", "5", "8"]]
