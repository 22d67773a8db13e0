"""
windowtiler.platform.win32 - Windows implementation of WindowEnvironment.

Uses pywin32 (win32gui / win32api / win32process / win32con) to
enumerate top-level windows and monitors and to move windows.

Windows has no per-process placement permission, and both window
rectangles and monitor rectangles use a top-left origin, so no vertical
conversion is needed.
"""

from __future__ import annotations

import logging
import os

import pywintypes
import win32api
import win32con
import win32gui
import win32process

from windowtiler.core.matcher import WindowMatcher
from windowtiler.core.window import NORMAL_LAYER, RawWindow
from windowtiler.tiling.monitor import Display
from windowtiler.tiling.rect import Rect

log = logging.getLogger(__name__)

# Layer reported for tool windows, popups and other non-app windows
AUXILIARY_LAYER = 1

# Desktop elements the enumeration must never report
DESKTOP_CLASSES: frozenset[str] = frozenset({
    "Shell_TrayWnd",            # Taskbar
    "Shell_SecondaryTrayWnd",   # Secondary monitor taskbar
    "Progman",                  # Desktop Program Manager
    "WorkerW",                  # Desktop wallpaper worker
})

# PROCESS_QUERY_INFORMATION | PROCESS_VM_READ
_PROCESS_QUERY_ACCESS = 0x0410


class Win32Environment:
    """WindowEnvironment backed by the Win32 API."""

    displays_bottom_left = False

    def __init__(self) -> None:
        self._process_names: dict[int, str] = {}
        self._matcher: WindowMatcher[tuple[int, Rect]] = WindowMatcher(lambda item: item[1])

    # ------------------------------------------------------------------
    # Permission
    # ------------------------------------------------------------------
    def has_placement_permission(self) -> bool:
        return True

    def request_placement_permission(self) -> None:
        log.debug("Placement permission is implicit on Windows")

    # ------------------------------------------------------------------
    # Enumeration
    # ------------------------------------------------------------------
    def list_visible_windows(self) -> list[RawWindow]:
        results: list[RawWindow] = []

        def _callback(hwnd: int, _: object) -> bool:
            raw = self._describe(hwnd)
            if raw is not None:
                results.append(raw)
            return True  # continue enumeration

        win32gui.EnumWindows(_callback, None)
        log.debug("Enumerated %d visible windows", len(results))
        return results

    def _describe(self, hwnd: int) -> RawWindow | None:
        try:
            if not win32gui.IsWindowVisible(hwnd) or win32gui.IsIconic(hwnd):
                return None
            if win32gui.GetClassName(hwnd) in DESKTOP_CLASSES:
                return None

            title = win32gui.GetWindowText(hwnd)
            if not title:
                return None

            bounds = Rect.from_ltrb(*win32gui.GetWindowRect(hwnd))
            _, pid = win32process.GetWindowThreadProcessId(hwnd)
            ex_style = win32gui.GetWindowLong(hwnd, win32con.GWL_EXSTYLE)
            style = win32gui.GetWindowLong(hwnd, win32con.GWL_STYLE)
        except pywintypes.error:
            log.debug("Window %#x vanished during enumeration", hwnd)
            return None

        auxiliary = bool(ex_style & win32con.WS_EX_TOOLWINDOW) or bool(style & win32con.WS_CHILD)
        owner = self._process_name(pid)
        return RawWindow(
            id=hwnd,
            title=title,
            owner_pid=pid,
            owner_name=owner,
            bounds=bounds,
            layer=AUXILIARY_LAYER if auxiliary else NORMAL_LAYER,
            app_identifier=owner.lower(),
        )

    def _process_name(self, pid: int) -> str:
        """Executable name of *pid* (cached), e.g. 'notepad.exe'."""
        cached = self._process_names.get(pid)
        if cached is not None:
            return cached

        name = f"pid-{pid}"
        try:
            handle = win32api.OpenProcess(_PROCESS_QUERY_ACCESS, False, pid)
            try:
                name = os.path.basename(win32process.GetModuleFileNameEx(handle, 0))
            finally:
                win32api.CloseHandle(handle)
        except pywintypes.error:
            log.debug("Cannot open process %d", pid)

        self._process_names[pid] = name
        return name

    def _process_windows(self, pid: int) -> list[tuple[int, Rect]]:
        """(hwnd, bounds) of the visible top-level windows of *pid*."""
        found: list[tuple[int, Rect]] = []

        def _callback(hwnd: int, _: object) -> bool:
            try:
                if not win32gui.IsWindowVisible(hwnd):
                    return True
                _, owner = win32process.GetWindowThreadProcessId(hwnd)
                if owner == pid:
                    found.append((hwnd, Rect.from_ltrb(*win32gui.GetWindowRect(hwnd))))
            except pywintypes.error:
                pass  # window closed mid-enumeration
            return True

        win32gui.EnumWindows(_callback, None)
        return found

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def move_and_resize(self, owner_pid: int, approximate_bounds: Rect, new_bounds: Rect) -> bool:
        match = self._matcher.find(approximate_bounds, self._process_windows(owner_pid))
        if match is None:
            return False

        hwnd, _ = match
        try:
            # Restore if maximized so the new rect sticks
            if win32gui.IsZoomed(hwnd) or win32gui.IsIconic(hwnd):
                win32gui.ShowWindow(hwnd, win32con.SW_RESTORE)
            win32gui.MoveWindow(
                hwnd,
                int(round(new_bounds.x)),
                int(round(new_bounds.y)),
                int(round(new_bounds.w)),
                int(round(new_bounds.h)),
                True,
            )
        except pywintypes.error as exc:
            log.warning("MoveWindow failed for %#x: %s", hwnd, exc)
            return False
        return True

    # ------------------------------------------------------------------
    # Displays
    # ------------------------------------------------------------------
    def list_displays(self) -> list[Display]:
        """
        Enumerate monitors: primary first, then by device name.
        """
        displays: list[Display] = []

        for hmonitor, _hdc, _rect in win32api.EnumDisplayMonitors(None, None):
            try:
                info = win32api.GetMonitorInfo(hmonitor)
            except pywintypes.error:
                log.warning("No monitor info for %s", hmonitor)
                continue

            # info['Monitor'] = (left, top, right, bottom) - full area
            # info['Work']    = (left, top, right, bottom) - work area
            displays.append(
                Display(
                    frame=Rect.from_ltrb(*info["Monitor"]),
                    usable_frame=Rect.from_ltrb(*info["Work"]),
                    name=info["Device"],
                    is_primary=bool(info["Flags"] & win32con.MONITORINFOF_PRIMARY),
                )
            )

        displays.sort(key=lambda d: (not d.is_primary, d.name))
        log.debug("Displays: %s", ", ".join(str(d) for d in displays))
        return displays
