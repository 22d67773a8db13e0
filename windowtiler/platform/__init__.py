"""
windowtiler.platform - Platform backends implementing WindowEnvironment.

    - win32 : Windows backend (pywin32)

Backends are imported lazily by `load_environment()` so the core stays
importable on any platform.
"""

from __future__ import annotations

import sys

from windowtiler.core.environment import WindowEnvironment


def load_environment() -> WindowEnvironment:
    """
    Build the backend for the running platform.

    Raises:
        RuntimeError: No backend exists for this platform.
    """
    if sys.platform == "win32":
        from windowtiler.platform.win32 import Win32Environment
        return Win32Environment()
    raise RuntimeError(f"No window backend for platform {sys.platform!r}")
