"""
windowtiler.core - Window state and tiling orchestration.

This package contains:
    - window      : RawWindow / Window / AppGroup snapshot structures
    - filter      : Rules deciding which windows are tileable
    - catalog     : WindowCatalog - windows grouped by app, selection state
    - matcher     : WindowMatcher - re-identify a window by approximate bounds
    - history     : UndoStack and FocusState
    - environment : The injected platform capability protocol
    - scheduler   : Deferred catalog refresh
    - errors      : Outcome / TileResult taxonomy
    - controller  : TilingController - the tiling state machine
    - commands    : Command-name dispatcher
"""

from windowtiler.core.window import AppGroup, RawWindow, Window
from windowtiler.core.catalog import CatalogEvent, WindowCatalog
from windowtiler.core.matcher import WindowMatcher
from windowtiler.core.errors import Outcome, TileResult
from windowtiler.core.controller import ControllerState, TilingController

__all__ = [
    "AppGroup", "RawWindow", "Window",
    "CatalogEvent", "WindowCatalog",
    "WindowMatcher",
    "Outcome", "TileResult",
    "ControllerState", "TilingController",
]
