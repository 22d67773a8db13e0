"""
windowtiler.core.window - Window snapshot data structures.

`RawWindow` is the strict descriptor the platform layer hands to the
core; the core never looks at untyped attribute maps.  `Window` is the
immutable snapshot built from it on each refresh, and `AppGroup` is the
selection unit: every window owned by one process.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from windowtiler.tiling.rect import Rect

log = logging.getLogger(__name__)

# Window layer of ordinary application windows.  Menus, panels, the
# dock and other chrome report a different layer.
NORMAL_LAYER = 0


# ============================================================================
# RawWindow
# ============================================================================
@dataclass(frozen=True, slots=True)
class RawWindow:
    """One entry of the platform's visible-window enumeration."""

    id: int
    title: str
    owner_pid: int
    owner_name: str
    bounds: Rect
    layer: int = NORMAL_LAYER
    app_identifier: Optional[str] = None


# ============================================================================
# Window
# ============================================================================
@dataclass(frozen=True, slots=True, eq=False)
class Window:
    """
    Immutable snapshot of a single on-screen window.

    Equality and hashing are based solely on the window id, so a Window
    can be used in sets and as a dict key across refreshes even if its
    bounds changed.
    """

    id: int
    title: str
    owner_pid: int
    owner_name: str
    bounds: Rect
    on_screen: bool = True
    app_identifier: str = ""

    @classmethod
    def from_raw(cls, raw: RawWindow) -> Window:
        return cls(
            id=raw.id,
            title=raw.title or "Untitled",
            owner_pid=raw.owner_pid,
            owner_name=raw.owner_name,
            bounds=raw.bounds,
            on_screen=True,
            app_identifier=raw.app_identifier or f"unknown.{raw.owner_name}",
        )

    # ------------------------------------------------------------------
    # Dunder methods
    # ------------------------------------------------------------------
    def __eq__(self, other: object) -> bool:
        if isinstance(other, Window):
            return self.id == other.id
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.id)

    def __str__(self) -> str:
        return (
            f"[{self.id:#x}] {self.title!r} | "
            f"PID:{self.owner_pid} ({self.owner_name}) | {self.bounds}"
        )


# ============================================================================
# AppGroup
# ============================================================================
@dataclass(slots=True)
class AppGroup:
    """
    All windows of one owning process, as seen by the latest refresh.

    `id` is the owning process id.  `is_selected` is the only field the
    catalog mutates between refreshes.
    """

    id: int
    name: str
    identifier: str
    windows: list[Window] = field(default_factory=list)
    icon: Any = None
    is_selected: bool = False

    @property
    def process_id(self) -> int:
        return self.id

    @property
    def window_count(self) -> int:
        return len(self.windows)

    def __str__(self) -> str:
        marker = "x" if self.is_selected else " "
        return f"[{marker}] {self.name} (PID:{self.id}, {self.window_count} windows)"
