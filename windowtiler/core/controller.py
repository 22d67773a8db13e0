"""
windowtiler.core.controller - TilingController: the tiling state machine.

The controller is the single entry point for every user action.  It
validates preconditions, asks the LayoutEngine for target rectangles,
drives the platform mutator once per window, records undo/focus state
and schedules a catalog refresh once the batch is done.

States:
    IDLE         -> ready for any action
    TILING       -> a batch of moves is in flight (transient)
    FOCUS_ACTIVE -> one window enlarged; only exit_focus() is allowed

Every public method runs under one re-entrant lock, so the deferred
refresh (fired from a timer thread) never interleaves with a batch.
"""

from __future__ import annotations

import enum
import logging
import threading
from collections.abc import Callable, Iterable, Sequence
from typing import TYPE_CHECKING, Optional

from windowtiler.core.catalog import WindowCatalog
from windowtiler.core.environment import WindowEnvironment
from windowtiler.core.errors import Outcome, TileResult
from windowtiler.core.history import FocusState, UndoStack
from windowtiler.core.scheduler import RefreshScheduler, TimerScheduler
from windowtiler.core.window import AppGroup, Window
from windowtiler.tiling.engine import LayoutEngine
from windowtiler.tiling.grid import TileRegion
from windowtiler.tiling.rect import Rect

if TYPE_CHECKING:
    from windowtiler.storage.models import SavedLayout

log = logging.getLogger(__name__)


# Seconds to let the window server settle before re-reading geometry
DEFAULT_REFRESH_DELAY = 0.3


class ControllerState(enum.Enum):
    IDLE = "idle"
    TILING = "tiling"
    FOCUS_ACTIVE = "focus_active"


# callback(old_state, new_state)
StateChangedCallback = Callable[[ControllerState, ControllerState], None]

# (window, target rect in mutator coordinates)
Placement = tuple[Window, Rect]


# ============================================================================
# TilingController
# ============================================================================
class TilingController:
    """
    Orchestrates catalog, layout engine and platform mutator.

    Usage:
        controller = TilingController(env, catalog, engine)
        controller.refresh()
        controller.select_all()
        result = controller.tile_selected(TileRegion.LEFT)
        if result.outcome is Outcome.PERMISSION_DENIED:
            ...
        controller.undo()
    """

    def __init__(
        self,
        environment: WindowEnvironment,
        catalog: WindowCatalog,
        engine: LayoutEngine,
        scheduler: Optional[RefreshScheduler] = None,
        refresh_delay: float | Callable[[], float] = DEFAULT_REFRESH_DELAY,
    ) -> None:
        self._env = environment
        self._catalog = catalog
        self._engine = engine
        self._scheduler: RefreshScheduler = scheduler or TimerScheduler()
        self._refresh_delay = refresh_delay

        self._lock = threading.RLock()
        self._state = ControllerState.IDLE
        self._undo = UndoStack()
        self._focus = FocusState()

        self._on_state_changed: list[StateChangedCallback] = []

    # ------------------------------------------------------------------
    # Observables
    # ------------------------------------------------------------------
    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def catalog(self) -> WindowCatalog:
        return self._catalog

    @property
    def engine(self) -> LayoutEngine:
        return self._engine

    @property
    def groups(self) -> list[AppGroup]:
        return self._catalog.groups

    @property
    def can_undo(self) -> bool:
        return self._undo.can_undo

    @property
    def focus_active(self) -> bool:
        return self._focus.active

    @property
    def focused_window_id(self) -> Optional[int]:
        return self._focus.focused_id

    @property
    def selected_window_count(self) -> int:
        return self._catalog.selected_window_count

    @property
    def total_window_count(self) -> int:
        return self._catalog.total_window_count

    def on_state_changed(self, callback: StateChangedCallback) -> None:
        """Register a callback for state transitions."""
        self._on_state_changed.append(callback)

    def _set_state(self, new_state: ControllerState) -> None:
        old_state = self._state
        if old_state is new_state:
            return
        self._state = new_state
        log.debug("STATE %s -> %s", old_state.value, new_state.value)
        for cb in self._on_state_changed:
            try:
                cb(old_state, new_state)
            except Exception:
                log.exception("Error in state callback %s -> %s", old_state, new_state)

    # ------------------------------------------------------------------
    # Catalog passthrough
    # ------------------------------------------------------------------
    def refresh(self) -> None:
        """Re-read the platform's window list into the catalog."""
        with self._lock:
            self._catalog.refresh(self._env.list_visible_windows())

    def toggle_selection(self, process_id: int) -> bool:
        with self._lock:
            return self._catalog.toggle_selection(process_id)

    def select_all(self) -> None:
        with self._lock:
            self._catalog.select_all()

    def deselect_all(self) -> None:
        with self._lock:
            self._catalog.deselect_all()

    def select_by_membership(self, app_identifiers: Iterable[str]) -> int:
        with self._lock:
            return self._catalog.select_by_membership(app_identifiers)

    def _schedule_refresh(self) -> None:
        delay = self._refresh_delay() if callable(self._refresh_delay) else self._refresh_delay
        self._scheduler.schedule(delay, self.refresh)

    # ------------------------------------------------------------------
    # Preconditions
    # ------------------------------------------------------------------
    def _check_permission(self) -> bool:
        if self._env.has_placement_permission():
            return True
        log.warning("Placement permission missing, requesting it")
        self._env.request_placement_permission()
        return False

    def _guard_idle(self) -> Optional[TileResult]:
        """Common preconditions of every mutating action started from IDLE."""
        if self._state is not ControllerState.IDLE:
            log.info("Action refused in state %s", self._state.value)
            return TileResult.invalid_state()
        if not self._check_permission():
            return TileResult.denied()
        return None

    # ------------------------------------------------------------------
    # Tiling
    # ------------------------------------------------------------------
    def tile_all(self) -> TileResult:
        """Tile every catalog window over the full usable area."""
        with self._lock:
            return self._tile(self._catalog.windows, TileRegion.FULL)

    def tile_selected(self, region: TileRegion = TileRegion.FULL) -> TileResult:
        """Tile the windows of the selected apps into *region*."""
        with self._lock:
            windows = self._catalog.selected_windows
            if region is TileRegion.ALL_DISPLAYS:
                return self._tile_across(windows)
            return self._tile(windows, region)

    def tile_across_displays(self) -> TileResult:
        """Distribute every catalog window over all displays."""
        with self._lock:
            return self._tile_across(self._catalog.windows)

    def _tile(self, windows: Sequence[Window], region: TileRegion) -> TileResult:
        rejected = self._guard_idle()
        if rejected is not None:
            return rejected
        if not windows:
            log.debug("Nothing to tile")
            return TileResult.no_target()

        display = self._engine.pick_display(windows[0].bounds)
        if display is None:
            return TileResult.no_target()

        rects = self._engine.tile_region(len(windows), region, display)
        placements = [
            (window, self._engine.placement_rect(rect, display))
            for window, rect in zip(windows, rects)
        ]
        return self._apply_batch(placements, f"TILE {region.value}")

    def _tile_across(self, windows: Sequence[Window]) -> TileResult:
        rejected = self._guard_idle()
        if rejected is not None:
            return rejected
        if not windows:
            log.debug("Nothing to tile")
            return TileResult.no_target()

        distribution = self._engine.distribute_across_displays(len(windows))
        if not distribution:
            return TileResult.no_target()

        placements = [
            (window, self._engine.placement_rect(rect, display))
            for window, (rect, display) in zip(windows, distribution)
        ]
        return self._apply_batch(placements, "TILE all_displays")

    def _apply_batch(self, placements: Sequence[Placement], label: str) -> TileResult:
        """Record undo, move every window, schedule a refresh."""
        self._set_state(ControllerState.TILING)
        try:
            self._undo.record(window for window, _ in placements)

            moved = skipped = 0
            for window, target in placements:
                if self._move(window.owner_pid, window.bounds, target, window):
                    moved += 1
                else:
                    skipped += 1
        finally:
            self._set_state(ControllerState.IDLE)

        self._schedule_refresh()
        log.info("%s: %d moved, %d skipped", label, moved, skipped)
        return TileResult(Outcome.OK, moved=moved, skipped=skipped)

    def _move(
        self,
        owner_pid: int,
        current: Rect,
        target: Rect,
        window: Optional[Window] = None,
    ) -> bool:
        """One mutator call. Failures are logged and reported as False."""
        label = window if window is not None else f"PID:{owner_pid}"
        try:
            ok = self._env.move_and_resize(owner_pid, current, target)
        except Exception:
            log.exception("Error moving %s", label)
            return False

        if ok:
            log.debug("MOVE %s -> %s", label, target)
        else:
            log.warning("No live window matched %s near %s, skipped", label, current)
        return ok

    # ------------------------------------------------------------------
    # Undo
    # ------------------------------------------------------------------
    def undo(self) -> TileResult:
        """
        Put the windows of the last operation back where they were.

        Current bounds are re-read from the platform because the windows
        may have moved since.  Undo is one-shot and creates no new entry.
        """
        with self._lock:
            if self._state is not ControllerState.IDLE:
                return TileResult.invalid_state()
            if not self._undo.can_undo:
                return TileResult(Outcome.NOTHING_TO_UNDO)
            if not self._check_permission():
                return TileResult.denied()

            entry = self._undo.take() or {}
            live = {raw.id: raw for raw in self._env.list_visible_windows()}

            moved = skipped = 0
            for window_id, record in entry.items():
                raw = live.get(window_id)
                if raw is None:
                    log.warning("UNDO: window %#x is gone, skipped", window_id)
                    skipped += 1
                    continue
                if self._move(record.owner_pid, raw.bounds, record.bounds_before_move):
                    moved += 1
                else:
                    skipped += 1

            self._schedule_refresh()
            log.info("UNDO: %d restored, %d skipped", moved, skipped)
            return TileResult(Outcome.OK, moved=moved, skipped=skipped)

    # ------------------------------------------------------------------
    # Focus mode
    # ------------------------------------------------------------------
    def enter_focus(self) -> TileResult:
        """
        Enlarge the single selected window to its display's usable area.

        The bounds of every visible window are remembered first so that
        exit_focus() can put everything back.
        """
        with self._lock:
            rejected = self._guard_idle()
            if rejected is not None:
                return rejected

            selected = self._catalog.selected_windows
            if len(selected) != 1:
                log.info("Focus needs exactly one selected window (got %d)", len(selected))
                return TileResult.no_target()

            visible = self._catalog.tileable(self._env.list_visible_windows())
            current = {w.id: w for w in visible}
            target = current.get(selected[0].id, selected[0])

            placement = self._engine.focus_rect(target.bounds)
            if placement is None:
                return TileResult.no_target()
            usable, display = placement
            rect = self._engine.placement_rect(usable, display)

            self._focus.enter(target, visible)
            if not self._move(target.owner_pid, target.bounds, rect, target):
                self._focus.exit()
                return TileResult(Outcome.NO_TARGET, skipped=1)

            self._set_state(ControllerState.FOCUS_ACTIVE)
            self._schedule_refresh()
            log.info("FOCUS ON  %s", target)
            return TileResult(Outcome.OK, moved=1)

    def exit_focus(self) -> TileResult:
        """Restore every remembered window and leave focus mode."""
        with self._lock:
            if not self._focus.active:
                return TileResult.invalid_state()
            if not self._check_permission():
                return TileResult.denied()

            self.refresh()
            snapshot = self._focus.exit()
            self._set_state(ControllerState.IDLE)

            moved = skipped = 0
            seen: set[int] = set()
            for window in self._catalog.windows:
                before = snapshot.get(window.id)
                if before is None:
                    continue
                seen.add(window.id)
                if self._move(window.owner_pid, window.bounds, before, window):
                    moved += 1
                else:
                    skipped += 1

            skipped += len(snapshot.keys() - seen)

            self._schedule_refresh()
            log.info("FOCUS OFF %d restored, %d skipped", moved, skipped)
            return TileResult(Outcome.OK, moved=moved, skipped=skipped)

    def toggle_focus(self) -> TileResult:
        if self._focus.active:
            return self.exit_focus()
        return self.enter_focus()

    # ------------------------------------------------------------------
    # Saved layouts
    # ------------------------------------------------------------------
    def restore_layout(self, layout: SavedLayout) -> TileResult:
        """
        Move running apps' windows back to the frames of a saved layout.

        Saved frames of one app are paired, in order, with that app's
        live windows in catalog order.  Apps that are not running are
        skipped.
        """
        with self._lock:
            rejected = self._guard_idle()
            if rejected is not None:
                return rejected

            frames_by_app: dict[str, list[Rect]] = {}
            for position in layout.window_positions:
                frames_by_app.setdefault(position.app_identifier, []).append(
                    position.frame.to_rect()
                )

            placements: list[Placement] = []
            for identifier, frames in frames_by_app.items():
                groups = self._catalog.groups_for_identifier(identifier)
                if not groups:
                    log.info("Layout %r: %s is not running, skipped", layout.name, identifier)
                    continue
                live = [w for group in groups for w in group.windows]
                placements.extend(zip(live, frames))

            if not placements:
                return TileResult.no_target()
            return self._apply_batch(placements, f"LAYOUT {layout.name!r}")

    # ------------------------------------------------------------------
    # Debug helpers
    # ------------------------------------------------------------------
    def dump_state(self) -> str:
        lines = [
            "=== TilingController ===",
            f"    State: {self._state.value}",
            f"    Undo available: {self.can_undo}",
            f"    Focus: {self._focus.focused_id if self._focus.active else 'off'}",
            f"    Windows: {self.selected_window_count}/{self.total_window_count} selected",
            f"    Engine: {self._engine!r}",
        ]
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"TilingController("
            f"state={self._state.value}, "
            f"windows={self.total_window_count}, "
            f"undo={self.can_undo})"
        )
