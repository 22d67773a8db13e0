"""
windowtiler.core.history - Undo and focus-mode state holders.

    - UndoStack  : one generation of "bounds before the last move"
    - FocusState : bounds of every visible window before focus mode

Neither holder talks to the platform; the controller fills and
consumes them.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Optional

from windowtiler.core.window import Window
from windowtiler.tiling.rect import Rect

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class UndoRecord:
    """Where one window was before the last mutating operation."""

    bounds_before_move: Rect
    owner_pid: int


# window id -> record
UndoEntry = dict[int, UndoRecord]

# window id -> bounds
FocusSnapshot = dict[int, Rect]


# ============================================================================
# UndoStack
# ============================================================================
class UndoStack:
    """
    Single-slot undo history.

    `record()` overwrites whatever was there; `take()` empties the slot.
    There is never more than one generation alive.
    """

    def __init__(self) -> None:
        self._entry: Optional[UndoEntry] = None

    @property
    def can_undo(self) -> bool:
        return bool(self._entry)

    def record(self, windows: Iterable[Window]) -> int:
        """Remember the current bounds of *windows*. Returns the entry size."""
        entry: UndoEntry = {
            w.id: UndoRecord(bounds_before_move=w.bounds, owner_pid=w.owner_pid)
            for w in windows
        }
        if self._entry:
            log.debug("Undo entry of %d windows overwritten", len(self._entry))
        self._entry = entry or None
        return len(entry)

    def take(self) -> Optional[UndoEntry]:
        """Consume the entry. A second call returns None."""
        entry, self._entry = self._entry, None
        return entry


# ============================================================================
# FocusState
# ============================================================================
class FocusState:
    """
    Focus-mode snapshot.

    Either inactive (no snapshot, no focused window) or active (snapshot
    populated and exactly one focused window); never in between.
    """

    def __init__(self) -> None:
        self._snapshot: FocusSnapshot = {}
        self._focused_id: Optional[int] = None

    @property
    def active(self) -> bool:
        return self._focused_id is not None

    @property
    def focused_id(self) -> Optional[int]:
        return self._focused_id

    def enter(self, focused: Window, visible: Iterable[Window]) -> None:
        """Capture every visible window's bounds and mark *focused*."""
        snapshot = {w.id: w.bounds for w in visible}
        snapshot.setdefault(focused.id, focused.bounds)
        self._snapshot = snapshot
        self._focused_id = focused.id
        log.debug("Focus snapshot of %d windows", len(snapshot))

    def exit(self) -> FocusSnapshot:
        """Return the snapshot and go back to the inactive state."""
        snapshot = self._snapshot
        self._snapshot = {}
        self._focused_id = None
        return snapshot
