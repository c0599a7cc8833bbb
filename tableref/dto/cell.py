"""
CellRecord: one cell of a GridModel.

A cell keeps two texts.  ``origin`` is the source text as written by the
caller and never changes; ``text`` is what the interpretation stages have
made of it so far.  Refreshing a grid copies ``origin`` back into ``text``
and starts over.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from tableref.dto.address import Address


class CellKind(str, Enum):
    NORMAL = "normal"
    HEADER = "header"
    RANDOM = "random"


EventBinding = Tuple[str, Callable[..., Any]]


class CellOptions(BaseModel):
    """Per-cell options, all optional."""

    rowspan: int = Field(1, ge=1)
    colspan: int = Field(1, ge=1)
    scope: str = ""
    id: str = ""
    classname: str = ""   # space separated
    interpret: bool = True   # False keeps the text away from every stage

    model_config = {"frozen": True}

    def base_attributes(self) -> Dict[str, str]:
        attrs: Dict[str, str] = {}
        if self.scope:
            attrs["scope"] = self.scope
        if self.id:
            attrs["id"] = self.id
        classes = " ".join(self.classname.split())
        if classes:
            attrs["class"] = classes
        return attrs

    def with_class(self, cla: str) -> "CellOptions":
        """Return a copy with *cla* appended to ``classname``."""
        if not cla or cla in self.classname.split():
            return self
        classname = f"{self.classname} {cla}".strip()
        return self.model_copy(update={"classname": classname})


class CellRecord(BaseModel):
    x: int = Field(ge=0)
    y: int = Field(ge=0)

    origin: str = Field(frozen=True)
    origin_kind: CellKind = Field(CellKind.NORMAL, frozen=True)
    options: CellOptions = Field(default_factory=CellOptions, frozen=True)

    text: str = ""
    kind: CellKind = CellKind.NORMAL
    attributes: Dict[str, str] = {}
    events: List[EventBinding] = []

    # Text produced by the last completed read, see OriginTracker.
    resolved: Optional[str] = None

    model_config = {"arbitrary_types_allowed": True}

    @classmethod
    def create(
        cls,
        x: int,
        y: int,
        origin: str,
        kind: CellKind = CellKind.NORMAL,
        options: Optional[CellOptions] = None,
    ) -> "CellRecord":
        options = options or CellOptions()
        return cls(
            x=x,
            y=y,
            origin=origin,
            origin_kind=kind,
            options=options,
            text=origin,
            kind=kind,
            attributes=options.base_attributes(),
        )

    # ------------------------------------------------------------------
    # Convenience helpers
    # ------------------------------------------------------------------

    @property
    def address(self) -> Address:
        return Address(x=self.x, y=self.y)

    @property
    def colspan(self) -> int:
        return self.options.colspan

    @property
    def rowspan(self) -> int:
        return self.options.rowspan

    @property
    def interpretable(self) -> bool:
        return self.options.interpret

    def clear_content(self) -> None:
        self.text = ""

    def set_attributes(self, attributes: List[Tuple[str, str]]) -> None:
        for name, value in attributes:
            self.attributes[name] = value

    def add_events(self, events: List[EventBinding]) -> None:
        self.events.extend(events)
