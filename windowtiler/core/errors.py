"""
windowtiler.core.errors - Result taxonomy for core operations.

Expected conditions never cross the core boundary as exceptions: every
mutating operation returns a `TileResult`.  `PersistenceError` exists
only inside the storage layer, which converts it into a degraded
result before returning.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class Outcome(enum.Enum):
    """How a mutating operation ended."""

    # The batch ran (individual windows may still have been skipped).
    OK = "ok"

    # Placement permission is missing; nothing was touched.
    PERMISSION_DENIED = "permission_denied"

    # Empty selection, zero windows or no displays; silent no-op.
    NO_TARGET = "no_target"

    # The operation is not allowed in the current controller state.
    INVALID_STATE = "invalid_state"

    # undo() called without a recorded entry.
    NOTHING_TO_UNDO = "nothing_to_undo"


@dataclass(frozen=True, slots=True)
class TileResult:
    """
    Result of one controller operation.

    Attributes:
        outcome: How the operation ended.
        moved:   Windows the mutator reported as moved.
        skipped: Windows that could not be matched (moved or closed).
    """

    outcome: Outcome
    moved: int = 0
    skipped: int = 0

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.OK

    @classmethod
    def denied(cls) -> TileResult:
        return cls(Outcome.PERMISSION_DENIED)

    @classmethod
    def no_target(cls) -> TileResult:
        return cls(Outcome.NO_TARGET)

    @classmethod
    def invalid_state(cls) -> TileResult:
        return cls(Outcome.INVALID_STATE)

    def __str__(self) -> str:
        return f"{self.outcome.value} (moved={self.moved}, skipped={self.skipped})"


class PersistenceError(Exception):
    """A group/layout/settings file could not be read or written."""
