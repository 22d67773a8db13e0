"""
windowtiler.core.commands - Named actions over the TilingController.

Front ends (the command line, a tray menu, global hotkeys) refer to
actions by name, "tile_left" or "undo", instead of holding references
to controller methods:

    dispatcher = CommandDispatcher()
    build_default_commands(dispatcher, controller)
    dispatcher.execute("tile_left")
    print(dispatcher.last_result)

Extra actions can be added with the decorator form:

    @dispatcher.command("tile_coding", category="tile")
    def tile_coding():
        app.restore_group(coding_id)
        return app.controller.tile_selected(TileRegion.LEFT_TWO_THIRDS)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from windowtiler.core.errors import TileResult
from windowtiler.tiling.grid import TileRegion

if TYPE_CHECKING:
    from windowtiler.core.controller import TilingController

log = logging.getLogger(__name__)


# Actions take no arguments; tiling actions return a TileResult
CommandFn = Callable[[], object]


@dataclass(frozen=True, slots=True)
class Command:
    """One named action."""

    name: str
    fn: CommandFn
    description: str = ""
    category: str = "general"

    def __str__(self) -> str:
        desc = f"  {self.description}" if self.description else ""
        return f"[{self.category}] {self.name}{desc}"


class CommandDispatcher:
    """Name -> action table with the outcome of the last run."""

    def __init__(self) -> None:
        self._table: dict[str, Command] = {}
        self._last_result: Optional[TileResult] = None

    @property
    def count(self) -> int:
        return len(self._table)

    @property
    def command_names(self) -> list[str]:
        return sorted(self._table)

    @property
    def last_result(self) -> Optional[TileResult]:
        """TileResult of the last executed tiling action, if any."""
        return self._last_result

    def register(
        self,
        name: str,
        fn: CommandFn,
        description: str = "",
        category: str = "general",
    ) -> None:
        """
        Bind *name* to *fn*, replacing an earlier binding.

        Args:
            name:        Action name, e.g. "tile_left_third".
            fn:          Zero-argument callable.
            description: Shown by --list.
            category:    "selection", "tile", "history" or "focus".
        """
        if name in self._table:
            log.info("Action %s rebound", name)
        self._table[name] = Command(name, fn, description, category)

    def unregister(self, name: str) -> bool:
        return self._table.pop(name, None) is not None

    def execute(self, name: str) -> bool:
        """
        Run the action bound to *name*.

        Returns:
            False for an unknown name, an action that raised, or a
            TileResult other than OK. True otherwise.
        """
        action = self._table.get(name)
        if action is None:
            log.warning("No action named %r", name)
            return False

        self._last_result = None
        try:
            result = action.fn()
        except Exception:
            log.exception("Action %s failed", name)
            return False

        if not isinstance(result, TileResult):
            return True
        self._last_result = result
        log.info("%s -> %s", name, result)
        return result.ok

    def get(self, name: str) -> Optional[Command]:
        return self._table.get(name)

    def has(self, name: str) -> bool:
        return name in self._table

    def command(
        self,
        name: str,
        description: str = "",
        category: str = "general",
    ) -> Callable[[CommandFn], CommandFn]:
        """Decorator form of register()."""

        def _bind(fn: CommandFn) -> CommandFn:
            self.register(name, fn, description=description, category=category)
            return fn

        return _bind

    def list_commands(self, category: Optional[str] = None) -> list[Command]:
        """Actions sorted by name, optionally only one category."""
        return sorted(
            (c for c in self._table.values() if category is None or c.category == category),
            key=lambda c: c.name,
        )

    def dump_state(self) -> str:
        lines = [f"=== Actions: {self.count} ===", ""]
        lines.extend(f"  {action}" for action in self.list_commands())
        return "\n".join(lines)


def build_default_commands(dispatcher: CommandDispatcher, controller: TilingController) -> None:
    """
    Bind the built-in action names to *controller*.

    Every TileRegion gets a "tile_<region>" action acting on the
    current selection.
    """
    # -- Catalog / selection -------------------------------------------
    dispatcher.register(
        "refresh", controller.refresh,
        description="Re-read visible windows", category="selection",
    )
    dispatcher.register(
        "select_all", controller.select_all,
        description="Select every app", category="selection",
    )
    dispatcher.register(
        "deselect_all", controller.deselect_all,
        description="Clear the selection", category="selection",
    )

    # -- Tiling --------------------------------------------------------
    dispatcher.register(
        "tile_all", controller.tile_all,
        description="Tile every window over the full screen", category="tile",
    )
    dispatcher.register(
        "tile_across_displays", controller.tile_across_displays,
        description="Spread every window over all displays", category="tile",
    )

    def _make_tile(region: TileRegion) -> CommandFn:
        def _tile() -> TileResult:
            return controller.tile_selected(region)
        return _tile

    for _region in TileRegion:
        dispatcher.register(
            f"tile_{_region.value}",
            _make_tile(_region),
            description=f"Tile selected windows: {_region.value.replace('_', ' ')}",
            category="tile",
        )

    # -- History / focus -----------------------------------------------
    dispatcher.register(
        "undo", controller.undo,
        description="Undo the last tiling operation", category="history",
    )
    dispatcher.register(
        "focus", controller.enter_focus,
        description="Enlarge the selected window", category="focus",
    )
    dispatcher.register(
        "unfocus", controller.exit_focus,
        description="Leave focus mode and restore windows", category="focus",
    )
    dispatcher.register(
        "toggle_focus", controller.toggle_focus,
        description="Enter or leave focus mode", category="focus",
    )

    log.info("%d actions bound", dispatcher.count)
