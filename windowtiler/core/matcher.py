"""
windowtiler.core.matcher - Re-identify a window by approximate bounds.

Window ids from enumeration and the handles accepted by the mutation
API are not interchangeable, so the only correlation signal is where
the window is.  Given the bounds remembered for a window and the live
windows of its process, the matcher picks the first live window whose
origin lies within the tolerance on both axes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Generic, Optional, TypeVar

from windowtiler.tiling.rect import Rect

log = logging.getLogger(__name__)

T = TypeVar("T")

# Maximum origin distance (exclusive) on each axis
DEFAULT_TOLERANCE = 10.0


class WindowMatcher(Generic[T]):
    """
    Origin-proximity matcher.

    First match in enumeration order wins; there is no closest-match
    tie-break.  Live entries can be any object: *bounds_of* extracts the
    current bounds from each one.
    """

    def __init__(
        self,
        bounds_of: Callable[[T], Rect],
        tolerance: float = DEFAULT_TOLERANCE,
    ) -> None:
        self._bounds_of = bounds_of
        self._tolerance = tolerance

    @property
    def tolerance(self) -> float:
        return self._tolerance

    def matches(self, remembered: Rect, current: Rect) -> bool:
        dx, dy = remembered.origin_distance(current)
        return dx < self._tolerance and dy < self._tolerance

    def find(self, remembered: Rect, live: Iterable[T]) -> Optional[T]:
        """
        Return the first entry of *live* near *remembered*, or None.

        None means the window moved or closed; callers skip it.
        """
        for candidate in live:
            try:
                current = self._bounds_of(candidate)
            except Exception:
                log.debug("Could not read bounds of %r", candidate, exc_info=True)
                continue
            if self.matches(remembered, current):
                return candidate

        log.debug("No live window near %s", remembered)
        return None


def match_rect(
    remembered: Rect,
    live: Iterable[Rect],
    tolerance: float = DEFAULT_TOLERANCE,
) -> Optional[Rect]:
    """Convenience form of `WindowMatcher.find` over plain rectangles."""
    return WindowMatcher[Rect](lambda r: r, tolerance).find(remembered, live)
