"""
windowtiler.storage.groups - Named groups of applications, persisted as JSON.

A group only remembers app identifiers.  Restoring one re-selects the
matching apps in the catalog (`WindowCatalog.select_by_membership`).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Optional
from uuid import UUID

from pydantic import TypeAdapter, ValidationError

from windowtiler.core.errors import PersistenceError
from windowtiler.storage.files import read_json, write_json_atomic
from windowtiler.storage.models import NamedGroup

log = logging.getLogger(__name__)

GROUPS_FILE = "groups.json"

_GROUP_LIST = TypeAdapter(list[NamedGroup])


class GroupStore:
    """Named groups in creation order."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._groups: list[NamedGroup] = self._load()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def groups(self) -> list[NamedGroup]:
        return list(self._groups)

    # ------------------------------------------------------------------
    # Public: mutations
    # ------------------------------------------------------------------
    def save_group(self, name: str, app_identifiers: Iterable[str]) -> Optional[NamedGroup]:
        """
        Append a new group and persist.

        Returns:
            The new group, or None if it was rejected or could not be
            written.  A rejected group (e.g. empty name) is not kept; one
            that failed to write stays in memory.
        """
        try:
            group = NamedGroup(name=name, app_identifiers=list(dict.fromkeys(app_identifiers)))
        except ValidationError as exc:
            log.warning("Group %r rejected: %s", name, exc)
            return None
        self._groups.append(group)
        log.info("Group saved: %r (%d apps)", group.name, len(group.app_identifiers))
        return group if self._persist() else None

    def delete_group(self, group_id: UUID) -> bool:
        before = len(self._groups)
        self._groups = [g for g in self._groups if g.id != group_id]
        if len(self._groups) == before:
            return False
        return self._persist()

    def update_group(self, group: NamedGroup) -> bool:
        for index, existing in enumerate(self._groups):
            if existing.id == group.id:
                self._groups[index] = group
                return self._persist()
        return False

    def get_group(self, group_id: UUID) -> Optional[NamedGroup]:
        for group in self._groups:
            if group.id == group_id:
                return group
        return None

    def find_by_name(self, name: str) -> Optional[NamedGroup]:
        for group in self._groups:
            if group.name == name:
                return group
        return None

    # ------------------------------------------------------------------
    # Internal: persistence
    # ------------------------------------------------------------------
    def _load(self) -> list[NamedGroup]:
        try:
            data = read_json(self._path)
            if data is None:
                return []
            return _GROUP_LIST.validate_python(data)
        except (PersistenceError, ValidationError) as exc:
            log.warning("Failed to load groups: %s", exc)
            return []

    def _persist(self) -> bool:
        try:
            write_json_atomic(
                self._path, _GROUP_LIST.dump_python(self._groups, mode="json", by_alias=True)
            )
        except PersistenceError as exc:
            log.warning("Failed to save groups: %s", exc)
            return False
        return True
