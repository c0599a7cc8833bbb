from __future__ import annotations

from typing import Tuple

from pydantic import BaseModel, Field


class Address(BaseModel):
    """Zero-based cell position.  Selector text writes it row first: ``#y-x``."""

    x: int = Field(0, ge=0)
    y: int = Field(0, ge=0)

    model_config = {"frozen": True}

    @property
    def key(self) -> Tuple[int, int]:
        return self.x, self.y

    def to_selector(self) -> str:
        return f"#{self.y}-{self.x}"


class CellRange(BaseModel):
    start: Address
    end: Address

    model_config = {"frozen": True}

    def to_selector(self) -> str:
        return (
            f"#{self.start.y}-{self.start.x}:{self.end.y}-{self.end.x}"
        )
