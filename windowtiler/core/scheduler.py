"""
windowtiler.core.scheduler - Deferred catalog refresh.

After a batch of window moves the OS needs a moment to settle the new
geometry before it is read back.  The controller schedules one refresh
after each batch:

    - TimerScheduler    : runs the callback on a threading.Timer after the
                          delay; scheduling again cancels the pending timer
                          so a superseded refresh is dropped.
    - InlineScheduler   : runs the callback immediately (tests).
    - BlockingScheduler : sleeps, then runs it on the caller (one-shot CLI).
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from typing import Optional, Protocol

log = logging.getLogger(__name__)


class RefreshScheduler(Protocol):
    def schedule(self, delay: float, callback: Callable[[], None]) -> None: ...

    def cancel(self) -> None: ...


class TimerScheduler:
    """Cancellable single-slot timer."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None and self._timer.is_alive()

    def schedule(self, delay: float, callback: Callable[[], None]) -> None:
        def _fire() -> None:
            with self._lock:
                if self._timer is not timer:
                    return  # superseded
                self._timer = None
            try:
                callback()
            except Exception:
                log.exception("Deferred refresh failed")

        timer = threading.Timer(max(0.0, delay), _fire)
        timer.daemon = True

        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                log.debug("Pending refresh superseded")
            self._timer = timer
        timer.start()

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None


class InlineScheduler:
    """Runs the callback synchronously, ignoring the delay."""

    def __init__(self) -> None:
        self.calls = 0

    def schedule(self, delay: float, callback: Callable[[], None]) -> None:
        self.calls += 1
        callback()

    def cancel(self) -> None:
        pass


class BlockingScheduler(InlineScheduler):
    """Sleeps for the delay on the calling thread, then runs the callback."""

    def schedule(self, delay: float, callback: Callable[[], None]) -> None:
        time.sleep(max(0.0, delay))
        super().schedule(delay, callback)
