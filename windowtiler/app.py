"""
windowtiler.app - Composition root.

Builds every service explicitly and wires them together: settings,
catalog, layout engine, controller, stores and command dispatcher.
There is no module-level state; front ends hold one `Application`.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional
from uuid import UUID

from windowtiler.config.settings import SETTINGS_FILE, SettingsStore
from windowtiler.core.catalog import WindowCatalog
from windowtiler.core.commands import CommandDispatcher, build_default_commands
from windowtiler.core.controller import TilingController
from windowtiler.core.environment import WindowEnvironment
from windowtiler.core.errors import TileResult
from windowtiler.core.scheduler import RefreshScheduler
from windowtiler.storage.files import default_data_dir
from windowtiler.storage.groups import GROUPS_FILE, GroupStore
from windowtiler.storage.layouts import LAYOUTS_FILE, LayoutStore
from windowtiler.storage.models import NamedGroup, SavedLayout
from windowtiler.tiling.engine import LayoutEngine

log = logging.getLogger(__name__)


class Application:
    """
    Owns one instance of each service.

    Usage:
        app = Application(environment)
        app.controller.refresh()
        app.dispatcher.execute("tile_all")
    """

    def __init__(
        self,
        environment: WindowEnvironment,
        data_dir: Optional[Path] = None,
        scheduler: Optional[RefreshScheduler] = None,
    ) -> None:
        self.data_dir = data_dir if data_dir is not None else default_data_dir()
        self.environment = environment

        self.settings = SettingsStore(self.data_dir / SETTINGS_FILE)
        self.groups = GroupStore(self.data_dir / GROUPS_FILE)
        self.layouts = LayoutStore(self.data_dir / LAYOUTS_FILE)

        self.catalog = WindowCatalog(
            excluded_apps=self.settings.excluded_apps,
            min_window_size=self.settings.min_window_size,
        )
        self.engine = LayoutEngine(
            environment,
            gap_source=self.settings.current_gap,
            primary_height_reference=self.settings.primary_height_reference,
        )
        self.controller = TilingController(
            environment,
            self.catalog,
            self.engine,
            scheduler=scheduler,
            refresh_delay=self.settings.refresh_delay,
        )

        self.dispatcher = CommandDispatcher()
        build_default_commands(self.dispatcher, self.controller)

        log.info(
            "WindowTiler ready | data=%s | gap=%g | commands=%d",
            self.data_dir,
            self.settings.current_gap(),
            self.dispatcher.count,
        )

    # ------------------------------------------------------------------
    # Groups
    # ------------------------------------------------------------------
    def save_selection_as_group(self, name: str) -> Optional[NamedGroup]:
        """Save the identifiers of the selected apps as a named group."""
        identifiers = [g.identifier for g in self.catalog.selected_groups]
        if not identifiers:
            log.info("Nothing selected, group %r not saved", name)
            return None
        return self.groups.save_group(name, identifiers)

    def restore_group(self, group_id: UUID) -> int:
        """Select the apps of a saved group. Returns the number selected."""
        group = self.groups.get_group(group_id)
        if group is None:
            log.warning("Unknown group %s", group_id)
            return 0
        return self.controller.select_by_membership(group.app_identifiers)

    # ------------------------------------------------------------------
    # Layouts
    # ------------------------------------------------------------------
    def save_current_layout(self, name: str) -> bool:
        """Snapshot every catalog window under *name*."""
        return self.layouts.save_layout(name, self.catalog.windows)

    def restore_layout(self, layout_id: UUID) -> TileResult:
        layout: Optional[SavedLayout] = self.layouts.get_layout(layout_id)
        if layout is None:
            log.warning("Unknown layout %s", layout_id)
            return TileResult.no_target()
        return self.controller.restore_layout(layout)
