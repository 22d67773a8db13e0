"""
windowtiler.storage.layouts - Named window layouts, persisted as one JSON file.

Newest layouts come first.  Restoring is done by
`TilingController.restore_layout`, which needs the live catalog.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Optional
from uuid import UUID

from pydantic import TypeAdapter, ValidationError

from windowtiler.core.errors import PersistenceError
from windowtiler.core.window import Window
from windowtiler.storage.files import read_json, write_json_atomic
from windowtiler.storage.models import Frame, SavedLayout, WindowPosition

log = logging.getLogger(__name__)

LAYOUTS_FILE = "saved_layouts.json"

_LAYOUT_LIST = TypeAdapter(list[SavedLayout])


class LayoutStore:
    """Saved layouts, newest first."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._layouts: list[SavedLayout] = self._load()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def layouts(self) -> list[SavedLayout]:
        return list(self._layouts)

    def save_layout(self, name: str, windows: Iterable[Window]) -> bool:
        """
        Snapshot the current bounds of *windows* under *name*.

        Returns:
            True if the file was written.  False also when the layout is
            rejected (e.g. empty name); nothing is stored then.
        """
        try:
            positions = [
                WindowPosition(
                    app_identifier=w.app_identifier or f"unknown.{w.owner_name}",
                    app_name=w.owner_name,
                    frame=Frame.from_rect(w.bounds),
                )
                for w in windows
            ]
            layout = SavedLayout(name=name, window_positions=positions)
        except ValidationError as exc:
            log.warning("Layout %r rejected: %s", name, exc)
            return False
        self._layouts.insert(0, layout)
        log.info(
            "Layout saved: %r (%d windows, %d apps)",
            layout.name, layout.window_count, layout.unique_app_count,
        )
        return self._persist()

    def delete_layout(self, layout_id: UUID) -> bool:
        before = len(self._layouts)
        self._layouts = [layout for layout in self._layouts if layout.id != layout_id]
        if len(self._layouts) == before:
            return False
        return self._persist()

    def get_layout(self, layout_id: UUID) -> Optional[SavedLayout]:
        for layout in self._layouts:
            if layout.id == layout_id:
                return layout
        return None

    def find_by_name(self, name: str) -> Optional[SavedLayout]:
        for layout in self._layouts:
            if layout.name == name:
                return layout
        return None

    # ------------------------------------------------------------------
    # Internal: persistence
    # ------------------------------------------------------------------
    def _load(self) -> list[SavedLayout]:
        try:
            data = read_json(self._path)
            if data is None:
                return []
            return _LAYOUT_LIST.validate_python(data)
        except (PersistenceError, ValidationError) as exc:
            log.warning("Failed to load layouts: %s", exc)
            return []

    def _persist(self) -> bool:
        try:
            write_json_atomic(
                self._path, _LAYOUT_LIST.dump_python(self._layouts, mode="json", by_alias=True)
            )
        except PersistenceError as exc:
            log.warning("Failed to save layouts: %s", exc)
            return False
        return True
