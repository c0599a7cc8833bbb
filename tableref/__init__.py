from tableref.builder import (
    TableOptions,
    add_column,
    add_row,
    build_from_rows,
    export_to_rows,
    generate_line,
    make_random_cell,
)
from tableref.dto.address import Address, CellRange
from tableref.dto.cell import CellKind, CellOptions, CellRecord
from tableref.dto.grid import GridModel, GridStage
from tableref.dto.tag import TagDescriptor
from tableref.errors import (
    CellReferenceError,
    EvaluationError,
    ParseError,
    ReferenceCycleError,
    TableRefError,
    UnsupportedSelectorError,
)
from tableref.pipeline import EngineOptions, PipelineReport, TableEngine
from tableref.worksheet import grid_from_worksheet, grid_to_worksheet

__all__ = [
    "TableEngine",
    "EngineOptions",
    "PipelineReport",
    "TableOptions",
    "build_from_rows",
    "export_to_rows",
    "add_row",
    "add_column",
    "generate_line",
    "make_random_cell",
    "grid_from_worksheet",
    "grid_to_worksheet",
    "Address",
    "CellRange",
    "CellKind",
    "CellOptions",
    "CellRecord",
    "GridModel",
    "GridStage",
    "TagDescriptor",
    "TableRefError",
    "ParseError",
    "CellReferenceError",
    "ReferenceCycleError",
    "UnsupportedSelectorError",
    "EvaluationError",
]
