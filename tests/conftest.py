"""
Pytest configuration and fixtures for WindowTiler tests.

`FakeEnvironment` simulates the platform: a list of windows, a list of
displays, a permission flag and a mutator that re-identifies windows
with the same origin tolerance as the real backends.
"""

from dataclasses import replace

import pytest

from windowtiler.core.catalog import WindowCatalog
from windowtiler.core.controller import TilingController
from windowtiler.core.matcher import WindowMatcher
from windowtiler.core.scheduler import InlineScheduler
from windowtiler.core.window import RawWindow
from windowtiler.tiling.engine import LayoutEngine
from windowtiler.tiling.monitor import Display
from windowtiler.tiling.rect import Rect


GAP = 4.0

PRIMARY = Display(
    frame=Rect(0, 0, 1920, 1080),
    usable_frame=Rect(0, 40, 1920, 1040),
    name="DISPLAY1",
    is_primary=True,
)

SECONDARY = Display(
    frame=Rect(1920, 0, 1280, 1024),
    usable_frame=Rect(1920, 0, 1280, 984),
    name="DISPLAY2",
)


def make_raw(window_id, pid, owner, x, y, w=600, h=400, layer=0, title=None, identifier=None):
    return RawWindow(
        id=window_id,
        title=title if title is not None else f"{owner} #{window_id}",
        owner_pid=pid,
        owner_name=owner,
        bounds=Rect(x, y, w, h),
        layer=layer,
        app_identifier=identifier,
    )


class FakeEnvironment:
    """In-memory WindowEnvironment."""

    def __init__(self, windows=None, displays=None, bottom_left=False):
        self.windows = list(windows or [])
        self.displays = list(displays) if displays is not None else [PRIMARY]
        self.displays_bottom_left = bottom_left
        self.permission = True
        self.permission_requests = 0
        self.move_calls = []
        self.fail_pids = set()
        self._matcher = WindowMatcher(lambda raw: raw.bounds)

    # -- capability ----------------------------------------------------
    def has_placement_permission(self):
        return self.permission

    def request_placement_permission(self):
        self.permission_requests += 1

    def list_visible_windows(self):
        return list(self.windows)

    def list_displays(self):
        return list(self.displays)

    def move_and_resize(self, owner_pid, approximate_bounds, new_bounds):
        self.move_calls.append((owner_pid, approximate_bounds, new_bounds))
        if owner_pid in self.fail_pids:
            raise OSError("simulated mutator failure")
        live = [w for w in self.windows if w.owner_pid == owner_pid]
        match = self._matcher.find(approximate_bounds, live)
        if match is None:
            return False
        self.move(match.id, new_bounds)
        return True

    # -- test helpers --------------------------------------------------
    def move(self, window_id, bounds):
        self.windows = [
            replace(w, bounds=bounds) if w.id == window_id else w
            for w in self.windows
        ]

    def close(self, window_id):
        self.windows = [w for w in self.windows if w.id != window_id]

    def bounds_of(self, window_id):
        for w in self.windows:
            if w.id == window_id:
                return w.bounds
        raise KeyError(window_id)

    def all_bounds(self):
        return {w.id: w.bounds for w in self.windows}


@pytest.fixture
def windows():
    """Five windows of four apps, far apart from each other."""
    return [
        make_raw(1, 100, "Safari", 50, 60),
        make_raw(2, 100, "Safari", 700, 500),
        make_raw(3, 200, "Terminal", 300, 200, 500, 300),
        make_raw(4, 300, "Mail", 1000, 100, 800, 600),
        make_raw(5, 400, "Notes", 150, 650, 400, 350),
    ]


@pytest.fixture
def env(windows):
    return FakeEnvironment(windows)


@pytest.fixture
def catalog():
    return WindowCatalog()


@pytest.fixture
def engine(env):
    return LayoutEngine(env, gap_source=lambda: GAP)


@pytest.fixture
def scheduler():
    return InlineScheduler()


@pytest.fixture
def controller(env, catalog, engine, scheduler):
    ctl = TilingController(env, catalog, engine, scheduler=scheduler, refresh_delay=0)
    ctl.refresh()
    return ctl
