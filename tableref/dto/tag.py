from __future__ import annotations

from typing import Callable, List, Optional, Tuple

from pydantic import BaseModel, Field

from tableref.dto.cell import CellKind, EventBinding


class TagDescriptor(BaseModel):
    """A custom tag such as ``<Greet(World)>`` and what it does to a cell."""

    name: str = Field(pattern=r"^\w+$")
    # Receives the tag's arguments and returns the cell's new content.
    callback: Optional[Callable[[List[str]], str]] = None
    attributes: List[Tuple[str, str]] = []
    events: List[EventBinding] = []
    # Renders the cell as this kind instead of its own (e.g. a header).
    kind: Optional[CellKind] = None

    model_config = {"arbitrary_types_allowed": True}


class TagResult(BaseModel):
    content: str
    attributes: List[Tuple[str, str]] = []
    events: List[EventBinding] = []
    kind: Optional[CellKind] = None

    model_config = {"arbitrary_types_allowed": True}
