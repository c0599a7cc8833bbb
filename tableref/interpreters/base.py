"""
Base class for the interpretation stages.

A stage turns one cell's current text into its next text.  The pipeline
runs each stage over the whole grid before starting the next one, and
hands the stage a *resolve* callback that returns another cell's text as
already processed by that same stage.  Stages that never look at other
cells simply ignore it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

from tableref.dto.address import Address
from tableref.dto.cell import CellRecord
from tableref.dto.grid import GridModel, GridStage
from tableref.errors import CellReferenceError

Resolver = Callable[[Address], str]


def current_text_resolver(grid: GridModel) -> Resolver:
    """Resolver that reads the referenced cell's text as it stands."""

    def resolve(address: Address) -> str:
        cell = grid.cell_at(address.x, address.y)
        if cell is None:
            raise CellReferenceError(address.x, address.y)
        return cell.text

    return resolve


class CellInterpreter(ABC):
    """Interface that every interpretation stage must implement."""

    # Stage the grid reaches once this interpreter has swept it.
    stage: GridStage

    @abstractmethod
    def interpret_cell(
        self, cell: CellRecord, grid: GridModel, resolve: Resolver
    ) -> str:
        """
        Return the cell's text after this stage.

        May also update the cell's metadata (attributes, events, kind),
        but must not assign ``cell.text``; the pipeline does that.
        """
        ...
