"""
windowtiler.core.catalog - WindowCatalog: the current window snapshot.

The catalog owns the latest snapshot of tileable windows grouped by
owning application, plus the selection state.  It does no I/O: the
controller hands it the platform's raw window list on every refresh.

A refresh replaces every AppGroup wholesale and starts all of them
deselected.  Selection does not survive a refresh, including the one
scheduled after a tiling operation.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Iterable
from typing import Optional

from windowtiler.core.filter import (
    DEFAULT_EXCLUDED_APPS,
    DEFAULT_MIN_WINDOW_SIZE,
    filter_tileable,
)
from windowtiler.core.window import AppGroup, RawWindow, Window

log = logging.getLogger(__name__)


# ============================================================================
# Event types emitted by WindowCatalog
# ============================================================================
class CatalogEvent(enum.Enum):
    """Events that the catalog emits to subscribers."""

    # The snapshot was rebuilt from a fresh enumeration.
    REFRESHED = "refreshed"

    # One or more groups changed selection state.
    SELECTION_CHANGED = "selection_changed"


# All callbacks receive (event, catalog).
CatalogCallback = Callable[["CatalogEvent", "WindowCatalog"], None]


# ============================================================================
# WindowCatalog
# ============================================================================
class WindowCatalog:
    """
    In-memory grouping of visible windows by owning application.

    Usage:
        catalog = WindowCatalog()
        catalog.on(CatalogEvent.REFRESHED, my_callback)
        catalog.refresh(environment.list_visible_windows())
        catalog.toggle_selection(pid)
    """

    def __init__(
        self,
        excluded_apps: Optional[Callable[[], Iterable[str]]] = None,
        min_window_size: float | Callable[[], float] = DEFAULT_MIN_WINDOW_SIZE,
    ) -> None:
        # Sorted groups from the latest refresh
        self._groups: list[AppGroup] = []

        # Filter sources (value or callable), read on every refresh
        self._excluded_apps = excluded_apps
        self._min_window_size = min_window_size

        # Event subscribers: event -> list of callbacks
        self._subscribers: dict[CatalogEvent, list[CatalogCallback]] = {
            ev: [] for ev in CatalogEvent
        }

    # ------------------------------------------------------------------
    # Public: snapshot access
    # ------------------------------------------------------------------
    @property
    def groups(self) -> list[AppGroup]:
        """Groups sorted by application name (copy of the list)."""
        return list(self._groups)

    @property
    def windows(self) -> list[Window]:
        """Every window of every group, in catalog order."""
        return [w for group in self._groups for w in group.windows]

    @property
    def selected_groups(self) -> list[AppGroup]:
        return [g for g in self._groups if g.is_selected]

    @property
    def selected_windows(self) -> list[Window]:
        return [w for group in self.selected_groups for w in group.windows]

    @property
    def selected_window_count(self) -> int:
        return sum(g.window_count for g in self._groups if g.is_selected)

    @property
    def total_window_count(self) -> int:
        return sum(g.window_count for g in self._groups)

    def get(self, process_id: int) -> Optional[AppGroup]:
        """Get a group by its owning process id, or None."""
        for group in self._groups:
            if group.id == process_id:
                return group
        return None

    def find_window(self, window_id: int) -> Optional[Window]:
        for window in self.windows:
            if window.id == window_id:
                return window
        return None

    def groups_for_identifier(self, identifier: str) -> list[AppGroup]:
        return [g for g in self._groups if g.identifier == identifier]

    # ------------------------------------------------------------------
    # Public: event subscription
    # ------------------------------------------------------------------
    def on(self, event: CatalogEvent, callback: CatalogCallback) -> None:
        """Register a callback for a specific event."""
        self._subscribers[event].append(callback)

    def off(self, event: CatalogEvent, callback: CatalogCallback) -> None:
        """Unregister a callback."""
        try:
            self._subscribers[event].remove(callback)
        except ValueError:
            pass

    def on_all(self, callback: CatalogCallback) -> None:
        """Register a callback for ALL events."""
        for ev in CatalogEvent:
            self._subscribers[ev].append(callback)

    def _emit(self, event: CatalogEvent) -> None:
        for cb in self._subscribers[event]:
            try:
                cb(event, self)
            except Exception:
                log.exception("Error in catalog callback for %s", event.value)

    # ------------------------------------------------------------------
    # Refresh
    # ------------------------------------------------------------------
    def tileable(self, raw_windows: Iterable[RawWindow]) -> list[Window]:
        """Apply the domain filters without touching the snapshot."""
        excluded = (
            frozenset(self._excluded_apps())
            if self._excluded_apps is not None
            else DEFAULT_EXCLUDED_APPS
        )
        min_size = self._min_window_size
        if callable(min_size):
            min_size = min_size()
        survivors = filter_tileable(raw_windows, excluded, min_size)
        return [Window.from_raw(raw) for raw in survivors]

    def refresh(self, raw_windows: Iterable[RawWindow]) -> None:
        """
        Rebuild the snapshot from the platform's raw window list.

        Applies the domain filters, groups survivors by owning process
        and sorts groups by application name (ordinal, case-sensitive).
        Every group starts deselected.
        """
        by_pid: dict[int, AppGroup] = {}
        for window in self.tileable(raw_windows):
            group = by_pid.get(window.owner_pid)
            if group is None:
                group = AppGroup(
                    id=window.owner_pid,
                    name=window.owner_name,
                    identifier=window.app_identifier,
                )
                by_pid[window.owner_pid] = group
            group.windows.append(window)

        self._groups = sorted(by_pid.values(), key=lambda g: g.name)

        log.info(
            "Catalog refreshed: %d windows in %d apps",
            self.total_window_count,
            len(self._groups),
        )
        self._emit(CatalogEvent.REFRESHED)

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------
    def toggle_selection(self, process_id: int) -> bool:
        """
        Flip the selection of one group.

        Returns:
            True if the group exists.
        """
        group = self.get(process_id)
        if group is None:
            log.debug("toggle_selection: no group for PID %d", process_id)
            return False

        group.is_selected = not group.is_selected
        log.debug("SELECT %s", group)
        self._emit(CatalogEvent.SELECTION_CHANGED)
        return True

    def select_all(self) -> None:
        for group in self._groups:
            group.is_selected = True
        self._emit(CatalogEvent.SELECTION_CHANGED)

    def deselect_all(self) -> None:
        for group in self._groups:
            group.is_selected = False
        self._emit(CatalogEvent.SELECTION_CHANGED)

    def select_by_membership(self, app_identifiers: Iterable[str]) -> int:
        """
        Select exactly the groups whose identifier is in *app_identifiers*.

        Used to restore a saved group; every other group is deselected.

        Returns:
            Number of groups selected.
        """
        wanted = set(app_identifiers)
        selected = 0
        for group in self._groups:
            group.is_selected = group.identifier in wanted
            if group.is_selected:
                selected += 1

        log.info("Selected %d apps from %d identifiers", selected, len(wanted))
        self._emit(CatalogEvent.SELECTION_CHANGED)
        return selected

    def select_by_name(self, names: Iterable[str]) -> int:
        """Add the groups whose application name is in *names* to the selection."""
        wanted = set(names)
        selected = 0
        for group in self._groups:
            if group.name in wanted:
                group.is_selected = True
                selected += 1
        self._emit(CatalogEvent.SELECTION_CHANGED)
        return selected

    # ------------------------------------------------------------------
    # Debug helpers
    # ------------------------------------------------------------------
    def dump_state(self) -> str:
        """Return a formatted string of all groups and windows."""
        lines = [
            f"=== WindowCatalog: {self.total_window_count} windows, "
            f"{self.selected_window_count} selected ===",
            "",
        ]
        for group in self._groups:
            lines.append(f"  {group}")
            for window in group.windows:
                lines.append(f"      {window}")
        return "\n".join(lines)
