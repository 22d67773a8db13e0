"""Tests for windowtiler.storage and windowtiler.config."""

import json

import pytest

from windowtiler.config.settings import Settings, SettingsStore
from windowtiler.core.window import Window
from windowtiler.storage.files import default_data_dir
from windowtiler.storage.groups import GroupStore
from windowtiler.storage.layouts import LayoutStore
from windowtiler.storage.models import Frame, NamedGroup, SavedLayout
from windowtiler.tiling.rect import Rect


@pytest.fixture
def blocked_path(tmp_path):
    """A path whose parent is a regular file, so nothing can be written."""
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    return blocker / "data.json"


def _window(window_id, pid, owner, rect):
    return Window(
        id=window_id,
        title=owner,
        owner_pid=pid,
        owner_name=owner,
        bounds=rect,
        app_identifier=f"com.example.{owner.lower()}",
    )


class TestModels:
    """Pydantic records."""

    def test_group_json_uses_camel_case(self):
        """Serialized keys match the persisted format."""
        group = NamedGroup(name="dev", app_identifiers=["a", "b"])
        data = group.model_dump(mode="json", by_alias=True)
        assert set(data) == {"id", "name", "appIdentifiers", "createdAt"}

    def test_group_accepts_camel_case(self):
        """Records load from the persisted keys."""
        group = NamedGroup.model_validate({"name": "dev", "appIdentifiers": ["x"]})
        assert group.app_identifiers == ["x"]

    def test_empty_name_is_rejected(self):
        """Names cannot be empty."""
        with pytest.raises(ValueError):
            NamedGroup(name="")

    def test_frame_rect_conversion(self):
        """Frames convert to and from rects."""
        frame = Frame.from_rect(Rect(1, 2, 3, 4))
        assert frame.model_dump() == {"x": 1, "y": 2, "width": 3, "height": 4}
        assert frame.to_rect() == Rect(1, 2, 3, 4)

    def test_layout_counts(self):
        """Window and distinct app counts."""
        layout = SavedLayout.model_validate({
            "name": "l",
            "windowPositions": [
                {"appIdentifier": "a", "appName": "A", "frame": {"x": 0, "y": 0, "width": 1, "height": 1}},
                {"appIdentifier": "a", "appName": "A", "frame": {"x": 5, "y": 5, "width": 1, "height": 1}},
                {"appIdentifier": "b", "appName": "B", "frame": {"x": 0, "y": 0, "width": 1, "height": 1}},
            ],
        })
        assert layout.window_count == 3
        assert layout.unique_app_count == 2
        assert layout.window_positions[1].key == "a-5-5"


class TestGroupStore:
    """Named group persistence."""

    def test_save_and_reload(self, tmp_path):
        """Groups survive a new store instance."""
        path = tmp_path / "groups.json"
        store = GroupStore(path)
        saved = store.save_group("coding", ["code.exe", "wt.exe", "code.exe"])

        assert saved is not None
        assert saved.app_identifiers == ["code.exe", "wt.exe"]

        reloaded = GroupStore(path)
        assert [g.name for g in reloaded.groups] == ["coding"]
        assert reloaded.get_group(saved.id).app_identifiers == ["code.exe", "wt.exe"]

    def test_file_format(self, tmp_path):
        """The file is a JSON list with camelCase keys."""
        path = tmp_path / "groups.json"
        GroupStore(path).save_group("coding", ["code.exe"])
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data[0]["appIdentifiers"] == ["code.exe"]
        assert "createdAt" in data[0]

    def test_delete_and_find(self, tmp_path):
        """Groups can be found by name and deleted by id."""
        store = GroupStore(tmp_path / "groups.json")
        group = store.save_group("a", ["x"])
        assert store.find_by_name("a") == group
        assert store.delete_group(group.id)
        assert not store.delete_group(group.id)
        assert store.find_by_name("a") is None

    def test_update(self, tmp_path):
        """An existing group can be replaced."""
        store = GroupStore(tmp_path / "groups.json")
        group = store.save_group("a", ["x"])
        renamed = group.model_copy(update={"name": "b"})
        assert store.update_group(renamed)
        assert GroupStore(store.path).groups[0].name == "b"

    def test_corrupt_file_loads_empty(self, tmp_path):
        """A corrupt file is ignored."""
        path = tmp_path / "groups.json"
        path.write_text("{not json", encoding="utf-8")
        assert GroupStore(path).groups == []

    def test_invalid_records_load_empty(self, tmp_path):
        """Records that fail validation are ignored."""
        path = tmp_path / "groups.json"
        path.write_text(json.dumps([{"name": ""}]), encoding="utf-8")
        assert GroupStore(path).groups == []

    def test_write_failure_degrades(self, blocked_path):
        """An unwritable file reports failure but keeps the group in memory."""
        store = GroupStore(blocked_path)
        assert store.save_group("a", ["x"]) is None
        assert len(store.groups) == 1

    def test_empty_name_is_rejected(self, tmp_path):
        """An invalid group is refused without raising and nothing is written."""
        path = tmp_path / "groups.json"
        store = GroupStore(path)
        assert store.save_group("", ["x"]) is None
        assert store.groups == []
        assert not path.exists()


class TestLayoutStore:
    """Saved layout persistence."""

    def test_save_and_reload(self, tmp_path):
        """Layouts survive a new store, newest first."""
        path = tmp_path / "saved_layouts.json"
        store = LayoutStore(path)
        windows = [
            _window(1, 10, "Editor", Rect(0, 0, 800, 600)),
            _window(2, 10, "Editor", Rect(800, 0, 800, 600)),
        ]
        assert store.save_layout("first", windows)
        assert store.save_layout("second", windows[:1])

        reloaded = LayoutStore(path)
        assert [layout.name for layout in reloaded.layouts] == ["second", "first"]

        first = reloaded.find_by_name("first")
        assert first.window_count == 2
        assert first.unique_app_count == 1
        assert first.window_positions[1].frame.to_rect() == Rect(800, 0, 800, 600)
        assert first.window_positions[0].app_identifier == "com.example.editor"

    def test_file_format(self, tmp_path):
        """Positions are stored under windowPositions with camelCase keys."""
        path = tmp_path / "saved_layouts.json"
        LayoutStore(path).save_layout("l", [_window(1, 10, "Editor", Rect(1, 2, 300, 400))])
        data = json.loads(path.read_text(encoding="utf-8"))
        position = data[0]["windowPositions"][0]
        assert position["appIdentifier"] == "com.example.editor"
        assert position["appName"] == "Editor"
        assert position["frame"] == {"x": 1, "y": 2, "width": 300, "height": 400}

    def test_delete(self, tmp_path):
        """Deleting removes the layout from disk."""
        path = tmp_path / "saved_layouts.json"
        store = LayoutStore(path)
        store.save_layout("l", [])
        layout_id = store.layouts[0].id
        assert store.delete_layout(layout_id)
        assert LayoutStore(path).layouts == []

    def test_corrupt_file_loads_empty(self, tmp_path):
        """A corrupt file is ignored."""
        path = tmp_path / "saved_layouts.json"
        path.write_text("[1, 2", encoding="utf-8")
        assert LayoutStore(path).layouts == []

    def test_write_failure_returns_false(self, blocked_path):
        """Save reports failure when the file cannot be written."""
        assert not LayoutStore(blocked_path).save_layout("l", [])

    def test_empty_name_is_rejected(self, tmp_path):
        """An invalid layout is refused without raising and nothing is stored."""
        path = tmp_path / "saved_layouts.json"
        store = LayoutStore(path)
        assert not store.save_layout("", [_window(1, 10, "Editor", Rect(0, 0, 800, 600))])
        assert store.layouts == []
        assert not path.exists()


class TestSettings:
    """Persisted settings."""

    def test_defaults(self, tmp_path):
        """A missing file gives the defaults."""
        store = SettingsStore(tmp_path / "settings.json")
        assert store.current_gap() == 4
        assert store.refresh_delay() == pytest.approx(0.3)
        assert store.settings.primary_height_reference
        assert "Dock" in store.excluded_apps()

    def test_gap_is_persisted_and_clamped(self, tmp_path):
        """Negative gaps become zero and survive a reload."""
        path = tmp_path / "settings.json"
        store = SettingsStore(path)
        assert store.set_gap(12)
        assert SettingsStore(path).current_gap() == 12

        store.set_gap(-3)
        assert store.current_gap() == 0
        assert SettingsStore(path).current_gap() == 0

    def test_negative_gap_in_file(self, tmp_path):
        """A negative gap on disk is read as zero."""
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"window_gap": -5}), encoding="utf-8")
        assert SettingsStore(path).current_gap() == 0

    def test_update_validates(self, tmp_path):
        """Invalid changes are rejected and the old values kept."""
        store = SettingsStore(tmp_path / "settings.json")
        assert store.update(excluded_apps=["Foo"], refresh_delay=0.1)
        assert store.excluded_apps() == ["Foo"]
        assert not store.update(refresh_delay="soon")
        assert store.refresh_delay() == pytest.approx(0.1)

    def test_non_numeric_gap_is_rejected(self, tmp_path):
        """A null or non-numeric gap fails validation instead of raising."""
        store = SettingsStore(tmp_path / "settings.json")
        assert store.set_gap(6)
        assert not store.update(window_gap=None)
        assert not store.update(window_gap=[1, 2])
        assert store.current_gap() == 6

    def test_null_gap_in_file_gives_defaults(self, tmp_path):
        """A null gap on disk falls back to defaults like any invalid file."""
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"window_gap": None}), encoding="utf-8")
        assert SettingsStore(path).settings == Settings()

    def test_readers_follow_updates(self, tmp_path):
        """Reader methods return the values applied by the last update."""
        store = SettingsStore(tmp_path / "settings.json")
        assert store.update(min_window_size=250, primary_height_reference=False)
        assert store.min_window_size() == 250
        assert not store.primary_height_reference()

    def test_corrupt_file_gives_defaults(self, tmp_path):
        """Unreadable settings fall back to defaults."""
        path = tmp_path / "settings.json"
        path.write_text("gap = 4", encoding="utf-8")
        assert SettingsStore(path).settings == Settings()

    def test_write_failure(self, blocked_path):
        """A failed save is reported, the value still applies."""
        store = SettingsStore(blocked_path)
        assert not store.set_gap(8)
        assert store.current_gap() == 8


class TestDataDir:
    """Location of the data directory."""

    def test_override(self, monkeypatch, tmp_path):
        """WINDOWTILER_HOME wins."""
        monkeypatch.setenv("WINDOWTILER_HOME", str(tmp_path))
        assert default_data_dir() == tmp_path

    def test_appdata(self, monkeypatch, tmp_path):
        """APPDATA is used on Windows."""
        monkeypatch.delenv("WINDOWTILER_HOME", raising=False)
        monkeypatch.setenv("APPDATA", str(tmp_path))
        assert default_data_dir() == tmp_path / "WindowTiler"

    def test_xdg(self, monkeypatch, tmp_path):
        """XDG_CONFIG_HOME is used elsewhere."""
        monkeypatch.delenv("WINDOWTILER_HOME", raising=False)
        monkeypatch.delenv("APPDATA", raising=False)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert default_data_dir() == tmp_path / "windowtiler"
