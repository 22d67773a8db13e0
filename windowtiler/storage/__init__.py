"""
windowtiler.storage - Persistence of named groups and saved layouts.

    - models  : Pydantic records (NamedGroup, SavedLayout, WindowPosition)
    - files   : JSON read / atomic write helpers
    - groups  : GroupStore
    - layouts : LayoutStore
"""

from windowtiler.storage.models import Frame, NamedGroup, SavedLayout, WindowPosition
from windowtiler.storage.groups import GroupStore
from windowtiler.storage.layouts import LayoutStore

__all__ = [
    "Frame",
    "NamedGroup",
    "SavedLayout",
    "WindowPosition",
    "GroupStore",
    "LayoutStore",
]
