"""Tests for windowtiler.core.catalog, filter and matcher."""

from windowtiler.core.catalog import CatalogEvent, WindowCatalog
from windowtiler.core.filter import filter_tileable, is_tileable
from windowtiler.core.matcher import WindowMatcher, match_rect
from windowtiler.tiling.rect import Rect

from tests.conftest import make_raw


class TestFilter:
    """Tileable window rules."""

    def test_normal_window_is_tileable(self):
        """An ordinary application window passes."""
        assert is_tileable(make_raw(1, 10, "Editor", 0, 0, 800, 600))

    def test_non_normal_layer_is_rejected(self):
        """Menus, panels and other layers are ignored."""
        assert not is_tileable(make_raw(1, 10, "Editor", 0, 0, 800, 600, layer=25))

    def test_excluded_owner_is_rejected(self):
        """System apps never appear."""
        assert not is_tileable(make_raw(1, 10, "Dock", 0, 0, 800, 600))
        assert not is_tileable(make_raw(2, 11, "Editor", 0, 0, 800, 600), excluded_apps={"Editor"})

    def test_size_threshold_is_strict(self):
        """Windows must be larger than 100 on both axes."""
        assert not is_tileable(make_raw(1, 10, "Editor", 0, 0, 100, 500))
        assert not is_tileable(make_raw(2, 10, "Editor", 0, 0, 500, 100))
        assert is_tileable(make_raw(3, 10, "Editor", 0, 0, 101, 101))

    def test_filter_keeps_order(self):
        """Survivors keep their enumeration order."""
        raws = [
            make_raw(1, 10, "B", 0, 0),
            make_raw(2, 10, "Dock", 0, 0),
            make_raw(3, 11, "A", 0, 0),
        ]
        assert [r.id for r in filter_tileable(raws)] == [1, 3]


class TestCatalogRefresh:
    """Grouping and sorting."""

    def test_groups_by_process(self, catalog, windows):
        """Windows of one process share a group."""
        catalog.refresh(windows)
        assert catalog.total_window_count == 5
        assert catalog.get(100).window_count == 2
        assert [w.id for w in catalog.get(100).windows] == [1, 2]

    def test_groups_sorted_by_name_ordinal(self, catalog):
        """Uppercase sorts before lowercase."""
        catalog.refresh([
            make_raw(1, 1, "Zed", 0, 0),
            make_raw(2, 2, "alpha", 0, 0),
            make_raw(3, 3, "Beta", 0, 0),
        ])
        assert [g.name for g in catalog.groups] == ["Beta", "Zed", "alpha"]

    def test_filtered_windows_are_dropped(self, catalog):
        """Tiny and excluded windows never reach a group."""
        catalog.refresh([
            make_raw(1, 1, "Editor", 0, 0),
            make_raw(2, 1, "Editor", 0, 0, 50, 50),
            make_raw(3, 2, "Dock", 0, 0),
        ])
        assert catalog.total_window_count == 1
        assert catalog.get(2) is None

    def test_untitled_and_unknown_identifier(self, catalog):
        """Empty titles and missing identifiers get placeholders."""
        catalog.refresh([make_raw(1, 1, "Editor", 0, 0, title="")])
        window = catalog.find_window(1)
        assert window.title == "Untitled"
        assert window.app_identifier == "unknown.Editor"

    def test_exclusion_source_is_read_on_refresh(self, windows):
        """The exclusion callable is consulted at every refresh."""
        excluded = set()
        catalog = WindowCatalog(excluded_apps=lambda: excluded)
        catalog.refresh(windows)
        assert catalog.get(200) is not None

        excluded.add("Terminal")
        catalog.refresh(windows)
        assert catalog.get(200) is None

    def test_refresh_clears_selection(self, catalog, windows):
        """Every refresh starts with nothing selected."""
        catalog.refresh(windows)
        catalog.select_all()
        catalog.refresh(windows)
        assert catalog.selected_window_count == 0

    def test_refresh_emits_event(self, catalog, windows):
        """Subscribers hear about refreshes; a failing one does not stop others."""
        seen = []

        def broken(event, cat):
            raise RuntimeError("boom")

        catalog.on(CatalogEvent.REFRESHED, broken)
        catalog.on(CatalogEvent.REFRESHED, lambda event, cat: seen.append(cat.total_window_count))
        catalog.refresh(windows)
        assert seen == [5]


class TestCatalogSelection:
    """Selection changes."""

    def test_toggle(self, catalog, windows):
        """Toggling flips one group; unknown pids are reported."""
        catalog.refresh(windows)
        assert catalog.toggle_selection(100)
        assert catalog.selected_window_count == 2
        assert catalog.toggle_selection(100)
        assert catalog.selected_window_count == 0
        assert not catalog.toggle_selection(999)

    def test_select_all_and_none(self, catalog, windows):
        """select_all / deselect_all cover every group."""
        catalog.refresh(windows)
        catalog.select_all()
        assert catalog.selected_window_count == catalog.total_window_count
        catalog.deselect_all()
        assert catalog.selected_groups == []

    def test_select_by_membership_is_exact(self, catalog, windows):
        """Groups outside the identifier set are deselected."""
        catalog.refresh(windows)
        catalog.select_all()
        count = catalog.select_by_membership(["unknown.Mail", "unknown.Notes", "missing"])
        assert count == 2
        assert sorted(g.name for g in catalog.selected_groups) == ["Mail", "Notes"]

    def test_select_by_name_adds(self, catalog, windows):
        """Selecting by name keeps the current selection."""
        catalog.refresh(windows)
        catalog.toggle_selection(300)
        assert catalog.select_by_name(["Safari"]) == 1
        assert catalog.selected_window_count == 3

    def test_selection_event(self, catalog, windows):
        """Selection changes are announced."""
        events = []
        catalog.on_all(lambda event, cat: events.append(event))
        catalog.refresh(windows)
        catalog.toggle_selection(100)
        assert events == [CatalogEvent.REFRESHED, CatalogEvent.SELECTION_CHANGED]

    def test_dump_state_lists_groups(self, catalog, windows):
        """Debug dump mentions every application."""
        catalog.refresh(windows)
        dump = catalog.dump_state()
        for name in ("Safari", "Terminal", "Mail", "Notes"):
            assert name in dump


class TestMatcher:
    """Re-identification by origin proximity."""

    def test_within_tolerance(self):
        """An origin 9 units away still matches."""
        assert match_rect(Rect(100, 100, 10, 10), [Rect(109, 91, 500, 500)]) is not None

    def test_outside_tolerance(self):
        """An origin 11 units away on one axis does not match."""
        assert match_rect(Rect(100, 100, 10, 10), [Rect(111, 100, 10, 10)]) is None
        assert match_rect(Rect(100, 100, 10, 10), [Rect(100, 89, 10, 10)]) is None

    def test_exactly_tolerance_does_not_match(self):
        """The tolerance is exclusive."""
        assert match_rect(Rect(0, 0, 10, 10), [Rect(10, 0, 10, 10)]) is None

    def test_first_match_wins(self):
        """Enumeration order decides, not distance."""
        live = [("far", Rect(108, 100, 1, 1)), ("near", Rect(100, 100, 1, 1))]
        matcher = WindowMatcher(lambda item: item[1])
        assert matcher.find(Rect(100, 100, 1, 1), live)[0] == "far"

    def test_unreadable_candidate_is_skipped(self):
        """A candidate whose bounds cannot be read is ignored."""

        def bounds_of(item):
            if item is None:
                raise OSError("gone")
            return item

        matcher = WindowMatcher(bounds_of)
        assert matcher.find(Rect(0, 0, 1, 1), [None, Rect(1, 1, 1, 1)]) == Rect(1, 1, 1, 1)
