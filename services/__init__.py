"""Services package."""

from .occupancy_index import OccupancyIndex
from .shape_registry import ShapeRegistry
from .alignment_engine import AlignmentEngine
from .connection_router import ConnectionRouter
from .render_surface import RenderSurface, PrimitiveHandle
from .settings_manager import (
    SettingsManager,
    AppSettings,
    CanvasSettings,
    UISettings,
    get_settings,
    reset_settings_manager,
)
from .interaction_controller import InteractionController

__all__ = [
    "OccupancyIndex",
    "ShapeRegistry",
    "AlignmentEngine",
    "ConnectionRouter",
    "RenderSurface",
    "PrimitiveHandle",
    "SettingsManager",
    "AppSettings",
    "CanvasSettings",
    "UISettings",
    "get_settings",
    "reset_settings_manager",
    "InteractionController",
]
