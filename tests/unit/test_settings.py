"""
Unit tests for the JSON settings manager.
"""

import json

from models.interaction import CollisionPolicy
from services.settings_manager import (
    AppSettings, CanvasSettings, SettingsManager, get_settings, reset_settings_manager,
)


class TestDefaults:

    def test_canvas_defaults(self):
        canvas = CanvasSettings()
        assert canvas.grid_size == 20
        assert (canvas.min_zoom, canvas.max_zoom) == (0.5, 3.0)
        assert (canvas.zoom_in_step, canvas.zoom_out_step) == (1.2, 0.8)
        assert canvas.world_multiple == 5
        assert canvas.policy == CollisionPolicy.ENFORCE

    def test_unknown_policy_falls_back_to_enforce(self):
        assert CanvasSettings(collision_policy="sometimes").policy == CollisionPolicy.ENFORCE

    def test_missing_file_keeps_defaults(self, settings_manager, settings_path):
        assert not settings_path.exists()
        assert settings_manager.grid_size == 20


class TestSerialization:

    def test_roundtrip_through_file(self, settings_manager, settings_path):
        settings_manager.grid_size = 25
        settings_manager.collision_policy = CollisionPolicy.ADVISORY

        reloaded = SettingsManager(config_override=str(settings_path))
        assert reloaded.grid_size == 25
        assert reloaded.collision_policy == CollisionPolicy.ADVISORY

    def test_file_layout(self, settings_manager, settings_path):
        settings_manager.save()
        data = json.loads(settings_path.read_text(encoding="utf-8"))
        assert set(data) == {"canvas", "ui", "window_geometry"}
        assert data["canvas"]["collision_policy"] == "enforce"

    def test_unknown_keys_are_ignored(self):
        settings = AppSettings.from_dict({
            "canvas": {"grid_size": 10, "legacy_option": True},
            "ui": {"show_grid": False},
        })
        assert settings.canvas.grid_size == 10
        assert settings.ui.show_grid is False

    def test_corrupt_file_is_reported_not_raised(self, settings_path):
        settings_path.parent.mkdir(parents=True)
        settings_path.write_text("{not json", encoding="utf-8")

        manager = SettingsManager(config_override=str(settings_path))
        assert manager.load() is False
        assert manager.grid_size == 20

    def test_malformed_sections_fall_back_to_defaults(self, settings_path):
        settings_path.parent.mkdir(parents=True)
        settings_path.write_text(
            json.dumps({"canvas": [20], "ui": "dark", "window_geometry": 7}),
            encoding="utf-8",
        )

        manager = SettingsManager(config_override=str(settings_path))
        assert manager.grid_size == 20
        assert manager.settings.ui.show_grid is True
        assert manager.get_window_geometry() == (None, None)

    def test_non_object_file_falls_back_to_defaults(self, settings_path):
        settings_path.parent.mkdir(parents=True)
        settings_path.write_text("[1, 2, 3]", encoding="utf-8")

        manager = SettingsManager(config_override=str(settings_path))
        assert manager.grid_size == 20
        assert manager.collision_policy == CollisionPolicy.ENFORCE

    def test_reset(self, settings_manager):
        settings_manager.grid_size = 40
        settings_manager.reset()
        assert settings_manager.grid_size == 20


class TestWindowGeometry:

    def test_geometry_roundtrip(self, settings_manager):
        settings_manager.save_window_geometry(b"\x01\x02geometry", b"\x00state")
        assert settings_manager.get_window_geometry() == (b"\x01\x02geometry", b"\x00state")

    def test_no_geometry(self, settings_manager):
        assert settings_manager.get_window_geometry() == (None, None)


class TestGlobalManager:

    def test_get_settings_is_shared(self, settings_path):
        reset_settings_manager()
        try:
            first = get_settings(str(settings_path))
            assert get_settings() is first
            assert first.settings_path == str(settings_path)
        finally:
            reset_settings_manager()
