"""
Pytest configuration and shared fixtures for Grid Canvas tests.
"""

import pytest
from pathlib import Path
from typing import Optional

# Add parent directory to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from models.grid import GridModel
from models.interaction import CollisionPolicy
from models.primitives import (
    Geometry, PrimitiveKind, PrimitiveRecord, PrimitiveStyle, Rect, geometry_bounds,
)
from models.viewport import ViewportTransform
from services.alignment_engine import AlignmentEngine
from services.interaction_controller import InteractionController
from services.occupancy_index import OccupancyIndex
from services.settings_manager import CanvasSettings, SettingsManager, reset_settings_manager
from services.shape_registry import ShapeRegistry


SCREEN_WIDTH = 800
SCREEN_HEIGHT = 600


# ============== Rendering Surface ==============

class RecordingSurface:
    """
    In-memory rendering surface.

    Keeps every live primitive so tests can inspect what the controller
    drew without a GUI toolkit.
    """

    def __init__(self):
        self.records: dict[int, PrimitiveRecord] = {}
        self.removed: list[int] = []
        self.raised: list[int] = []
        self.transform: tuple[float, float, float] = (1.0, 0.0, 0.0)
        self._next_handle = 1

    def draw_primitive(self, kind: PrimitiveKind, geometry: Geometry, style: PrimitiveStyle) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self.records[handle] = PrimitiveRecord(handle, kind, geometry, style)
        return handle

    def update_primitive(self, handle: int, geometry: Geometry):
        self.records[handle].geometry = geometry

    def remove_primitive(self, handle: int):
        self.records.pop(handle, None)
        self.removed.append(handle)

    def get_bounding_box(self, handle: int) -> Rect:
        record = self.records.get(handle)
        return geometry_bounds(record.geometry) if record else Rect()

    def raise_primitive(self, handle: int):
        self.raised.append(handle)

    def set_view_transform(self, scale: float, tx: float, ty: float):
        self.transform = (scale, tx, ty)

    # Inspection helpers

    def of_style(self, style: PrimitiveStyle) -> list[PrimitiveRecord]:
        return [r for r in self.records.values() if r.style == style]

    def texts(self) -> list[str]:
        return [
            r.geometry.text for r in self.records.values()
            if r.kind == PrimitiveKind.TEXT
        ]


# ============== Engine Fixtures ==============

@pytest.fixture
def grid() -> GridModel:
    return GridModel(20)


@pytest.fixture
def registry(grid: GridModel) -> ShapeRegistry:
    return ShapeRegistry(grid)


@pytest.fixture
def occupancy(grid: GridModel) -> OccupancyIndex:
    return OccupancyIndex(grid)


@pytest.fixture
def alignment() -> AlignmentEngine:
    return AlignmentEngine()


@pytest.fixture
def viewport() -> ViewportTransform:
    """An 800x600 viewport over a 4000x3000 world."""
    return ViewportTransform(SCREEN_WIDTH, SCREEN_HEIGHT)


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture
def controller(surface: RecordingSurface) -> InteractionController:
    """Controller enforcing collisions on a 20-unit grid."""
    return InteractionController(surface, SCREEN_WIDTH, SCREEN_HEIGHT, CanvasSettings(grid_size=20))


@pytest.fixture
def advisory_controller(surface: RecordingSurface) -> InteractionController:
    """Controller that records overlaps without rejecting them."""
    settings = CanvasSettings(grid_size=20, collision_policy=CollisionPolicy.ADVISORY.value)
    return InteractionController(surface, SCREEN_WIDTH, SCREEN_HEIGHT, settings)


# ============== Settings Fixtures ==============

@pytest.fixture
def settings_path(tmp_path: Path) -> Path:
    return tmp_path / "config" / "settings.json"


@pytest.fixture
def settings_manager(settings_path: Path):
    """Settings manager writing to a temporary file."""
    reset_settings_manager()
    yield SettingsManager(config_override=str(settings_path))
    reset_settings_manager()


# ============== Helper Functions ==============

def place(controller: InteractionController, kind: str, screen_x: float, screen_y: float) -> Optional[str]:
    """Select a kind and click; returns the id of the new shape, if any."""
    before = set(controller.registry.ids())
    controller.select_shape_kind(kind)
    controller.on_pointer_move(screen_x, screen_y)
    controller.on_pointer_down(screen_x, screen_y)
    controller.on_pointer_up(screen_x, screen_y)
    created = set(controller.registry.ids()) - before
    return created.pop() if created else None


def drag(controller: InteractionController, shape_id: str,
         start: tuple[float, float], end: tuple[float, float], steps: int = 4):
    """Drag a shape between two screen points through intermediate moves."""
    controller.on_drag_start(shape_id, *start)
    for i in range(1, steps + 1):
        x = start[0] + (end[0] - start[0]) * i / steps
        y = start[1] + (end[1] - start[1]) * i / steps
        controller.on_drag_move(shape_id, x, y)
    controller.on_drag_end(shape_id, *end)
