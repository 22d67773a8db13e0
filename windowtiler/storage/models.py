"""
windowtiler.storage.models - Persisted records for named groups and saved layouts.

All models use Pydantic v2 for validation and JSON serialization.  JSON
keys are camelCase (``appIdentifiers``, ``createdAt``...); Python code
uses the snake_case field names.
"""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from windowtiler.tiling.rect import Rect


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Frame(BaseModel):
    """Window frame, serialized as {x, y, width, height}."""
    x: float
    y: float
    width: float = Field(ge=0)
    height: float = Field(ge=0)

    @classmethod
    def from_rect(cls, rect: Rect) -> Frame:
        return cls(x=rect.x, y=rect.y, width=rect.w, height=rect.h)

    def to_rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)


class NamedGroup(BaseModel):
    """A named set of applications that can be re-selected in one step."""
    model_config = ConfigDict(populate_by_name=True)

    id: UUID = Field(default_factory=uuid4)
    name: str = Field(..., min_length=1)
    app_identifiers: list[str] = Field(default_factory=list, alias="appIdentifiers")
    created_at: datetime = Field(default_factory=_now, alias="createdAt")


class WindowPosition(BaseModel):
    """One window's frame inside a saved layout."""
    model_config = ConfigDict(populate_by_name=True)

    app_identifier: str = Field(..., alias="appIdentifier")
    app_name: str = Field(..., alias="appName")
    frame: Frame

    @property
    def key(self) -> str:
        return f"{self.app_identifier}-{int(self.frame.x)}-{int(self.frame.y)}"


class SavedLayout(BaseModel):
    """A named snapshot of where each window was."""
    model_config = ConfigDict(populate_by_name=True)

    id: UUID = Field(default_factory=uuid4)
    name: str = Field(..., min_length=1)
    created_at: datetime = Field(default_factory=_now, alias="createdAt")
    window_positions: list[WindowPosition] = Field(
        default_factory=list, alias="windowPositions"
    )

    @property
    def window_count(self) -> int:
        return len(self.window_positions)

    @property
    def unique_app_count(self) -> int:
        return len({p.app_identifier for p in self.window_positions})
