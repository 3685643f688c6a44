"""Views package."""

from .scene_surface import SceneSurface, parse_color
from .diagram_canvas import DiagramCanvas, describe_state
from .shape_palette import ShapePalette, ShapeKindButton
from .main_window import MainWindow, CanvasToolbar

__all__ = [
    "SceneSurface",
    "parse_color",
    "DiagramCanvas",
    "describe_state",
    "ShapePalette",
    "ShapeKindButton",
    "MainWindow",
    "CanvasToolbar",
]
