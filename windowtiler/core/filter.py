"""
windowtiler.core.filter - Window filtering rules.

Decides which enumerated windows are *tileable* (shown in the catalog
and eligible for placement) versus system chrome that must be ignored.
The platform layer already drops off-screen windows and desktop
elements; the rules here are the domain filters applied on every
refresh.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from windowtiler.core.window import NORMAL_LAYER, RawWindow

log = logging.getLogger(__name__)

# ============================================================================
# Owning applications that are always excluded
# ============================================================================
DEFAULT_EXCLUDED_APPS: frozenset[str] = frozenset({
    # This application
    "WindowTiler",
    "windowtiler",

    # macOS system processes
    "Finder",                   # Often has hidden windows
    "Dock",
    "Window Server",
    "SystemUIServer",
    "Control Center",
    "Notification Center",

    # Windows shell hosts
    "SearchHost.exe",
    "ShellExperienceHost.exe",
    "StartMenuExperienceHost.exe",
    "TextInputHost.exe",
    "LockApp.exe",
})

# Windows smaller than this on either axis are not real windows
DEFAULT_MIN_WINDOW_SIZE = 100.0


# ============================================================================
# Core filter function
# ============================================================================
def is_tileable(
    raw: RawWindow,
    excluded_apps: Iterable[str] = DEFAULT_EXCLUDED_APPS,
    min_size: float = DEFAULT_MIN_WINDOW_SIZE,
) -> bool:
    """
    Return True if *raw* should appear in the catalog.

    The rules, in order:
        1. Must be on the normal window layer.
        2. Owning application must not be in the exclusion list.
        3. Must be strictly larger than *min_size* on both axes.
    """
    # --- 1. Layer ---
    if raw.layer != NORMAL_LAYER:
        return False

    # --- 2. Owner ---
    if raw.owner_name in excluded_apps:
        log.debug("Filtered %#x: excluded app %r", raw.id, raw.owner_name)
        return False

    # --- 3. Size ---
    if raw.bounds.w <= min_size or raw.bounds.h <= min_size:
        log.debug(
            "Filtered %#x: too small (%gx%g)", raw.id, raw.bounds.w, raw.bounds.h,
        )
        return False

    return True


def filter_tileable(
    raws: Iterable[RawWindow],
    excluded_apps: Iterable[str] = DEFAULT_EXCLUDED_APPS,
    min_size: float = DEFAULT_MIN_WINDOW_SIZE,
) -> list[RawWindow]:
    """Keep the entries of *raws* that pass `is_tileable()`, in order."""
    excluded = frozenset(excluded_apps)
    return [raw for raw in raws if is_tileable(raw, excluded, min_size)]
