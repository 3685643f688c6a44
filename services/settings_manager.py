"""
Settings Manager.

Handles application settings with JSON file storage.
"""

import json
import logging
import os
from dataclasses import dataclass, field, asdict, fields
from typing import Optional
from pathlib import Path

from models.interaction import CollisionPolicy

logger = logging.getLogger(__name__)


@dataclass
class CanvasSettings:
    """Canvas engine parameters."""
    grid_size: int = 20
    min_zoom: float = 0.5
    max_zoom: float = 3.0
    world_multiple: int = 5     # World bounds as a multiple of the screen size
    zoom_in_step: float = 1.2
    zoom_out_step: float = 0.8
    collision_policy: str = CollisionPolicy.ENFORCE.value

    @property
    def policy(self) -> CollisionPolicy:
        try:
            return CollisionPolicy(self.collision_policy)
        except ValueError:
            logger.warning(f"Unknown collision policy '{self.collision_policy}', enforcing")
            return CollisionPolicy.ENFORCE


@dataclass
class UISettings:
    """User interface settings."""
    show_grid: bool = True
    grid_dot_radius: float = 1.5
    grid_dot_color: str = "#CACACA"
    background_color: str = "#FAFAFA"


def _section_from_dict(section_cls, data):
    """Build a settings section, ignoring unknown keys."""
    if not isinstance(data, dict):
        logger.warning(f"Ignoring malformed {section_cls.__name__} section: {data!r}")
        return section_cls()
    known = {f.name for f in fields(section_cls)}
    return section_cls(**{k: v for k, v in data.items() if k in known})


@dataclass
class AppSettings:
    """Complete application settings."""
    canvas: CanvasSettings = field(default_factory=CanvasSettings)
    ui: UISettings = field(default_factory=UISettings)
    window_geometry: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "canvas": asdict(self.canvas),
            "ui": asdict(self.ui),
            "window_geometry": self.window_geometry,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AppSettings":
        """Create from dictionary."""
        settings = cls()
        if not isinstance(data, dict):
            logger.warning("Settings file does not hold an object, using defaults")
            return settings

        if "canvas" in data:
            settings.canvas = _section_from_dict(CanvasSettings, data["canvas"])
        if "ui" in data:
            settings.ui = _section_from_dict(UISettings, data["ui"])
        if isinstance(data.get("window_geometry"), dict):
            settings.window_geometry = data["window_geometry"]

        return settings


class SettingsManager:
    """
    Manages application settings with JSON file storage.

    Settings file location:
    - Windows: %APPDATA%/GridCanvas/settings.json
    - Linux: ~/.config/GridCanvas/settings.json
    - macOS: ~/Library/Application Support/GridCanvas/settings.json
    """

    APP_NAME = "GridCanvas"
    SETTINGS_FILE = "settings.json"

    def __init__(self, config_override: Optional[str] = None):
        """
        Initialize settings manager.

        Args:
            config_override: Optional path to override config file location.
                            Useful for testing.
        """
        self._settings = AppSettings()
        self._config_override = config_override
        self._settings_path = self._get_settings_path()
        self.load()

    @property
    def settings(self) -> AppSettings:
        """Get current settings."""
        return self._settings

    @property
    def settings_path(self) -> str:
        """Get the settings file path."""
        return str(self._settings_path)

    @property
    def canvas(self) -> CanvasSettings:
        return self._settings.canvas

    # Convenience properties for common settings
    @property
    def grid_size(self) -> int:
        return self._settings.canvas.grid_size

    @grid_size.setter
    def grid_size(self, value: int):
        self._settings.canvas.grid_size = value
        self.save()

    @property
    def collision_policy(self) -> CollisionPolicy:
        return self._settings.canvas.policy

    @collision_policy.setter
    def collision_policy(self, value: CollisionPolicy):
        self._settings.canvas.collision_policy = value.value
        self.save()

    def _get_settings_path(self) -> Path:
        """Get platform-specific settings directory."""
        if self._config_override:
            return Path(self._config_override)

        import platform
        system = platform.system()

        if system == "Windows":
            base = os.environ.get("APPDATA", os.path.expanduser("~"))
            config_dir = Path(base) / self.APP_NAME
        elif system == "Darwin":  # macOS
            config_dir = Path.home() / "Library" / "Application Support" / self.APP_NAME
        else:  # Linux and others
            xdg_config = os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config"))
            config_dir = Path(xdg_config) / self.APP_NAME

        return config_dir / self.SETTINGS_FILE

    def _ensure_settings_dir(self):
        """Create settings directory if it doesn't exist."""
        self._settings_path.parent.mkdir(parents=True, exist_ok=True)

    def load(self) -> bool:
        """Load settings from file."""
        if not self._settings_path.exists():
            return False

        try:
            with open(self._settings_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            self._settings = AppSettings.from_dict(data)
            return True
        except Exception as e:
            logger.error(f"Error loading settings from {self._settings_path}: {e}")
            return False

    def save(self) -> bool:
        """Save settings to file."""
        try:
            self._ensure_settings_dir()
            with open(self._settings_path, "w", encoding="utf-8") as f:
                json.dump(self._settings.to_dict(), f, indent=2)
            return True
        except OSError as e:
            logger.error(f"Error saving settings to {self._settings_path}: {e}")
            return False

    def reset(self):
        """Reset settings to defaults."""
        self._settings = AppSettings()
        self.save()

    def save_window_geometry(self, geometry: bytes, state: bytes):
        """Save window geometry and state."""
        import base64
        self._settings.window_geometry = {
            "geometry": base64.b64encode(geometry).decode("ascii"),
            "state": base64.b64encode(state).decode("ascii"),
        }
        self.save()

    def get_window_geometry(self) -> tuple:
        """Get saved window geometry and state."""
        import base64
        geo = self._settings.window_geometry
        if not geo:
            return None, None

        try:
            geometry = base64.b64decode(geo.get("geometry", ""))
            state = base64.b64decode(geo.get("state", ""))
            return geometry, state
        except (ValueError, TypeError):
            return None, None


# Global settings instance
_settings_manager: Optional[SettingsManager] = None


def get_settings(config_override: Optional[str] = None) -> SettingsManager:
    """
    Get the global settings manager instance.

    Args:
        config_override: Optional path to override config location.
                        Only used on first call to initialize.
    """
    global _settings_manager
    if _settings_manager is None:
        _settings_manager = SettingsManager(config_override)
    return _settings_manager


def reset_settings_manager():
    """Reset the global settings manager (useful for testing)."""
    global _settings_manager
    _settings_manager = None
