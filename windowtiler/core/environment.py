"""
windowtiler.core.environment - The platform capability injected into the core.

The core never enumerates or moves windows itself.  A platform backend
(see `windowtiler.platform`) implements this protocol and is handed to
the composition root.

Coordinate conventions:
    - Window bounds returned by `list_visible_windows()` and passed to
      `move_and_resize()` use a top-left origin.
    - Display frames use a bottom-left origin when
      `displays_bottom_left` is True, top-left otherwise.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from windowtiler.core.window import RawWindow
from windowtiler.tiling.monitor import Display
from windowtiler.tiling.rect import Rect


@runtime_checkable
class WindowEnvironment(Protocol):
    """Window enumeration, window mutation and display discovery."""

    displays_bottom_left: bool

    def has_placement_permission(self) -> bool:
        """True if this process may move other processes' windows."""
        ...

    def request_placement_permission(self) -> None:
        """Ask the user for placement permission (may show a system prompt)."""
        ...

    def list_visible_windows(self) -> list[RawWindow]:
        """On-screen windows, excluding desktop elements, in z-order."""
        ...

    def move_and_resize(
        self, owner_pid: int, approximate_bounds: Rect, new_bounds: Rect,
    ) -> bool:
        """
        Move the window of *owner_pid* found near *approximate_bounds*.

        Returns False when no live window of that process matches.
        """
        ...

    def list_displays(self) -> list[Display]:
        """All connected displays, in enumeration order."""
        ...
