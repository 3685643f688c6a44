"""
Viewport transform.

Tracks the zoom scale and pan offset of the canvas and converts between
screen and world coordinates. The forward transform is

    screen = world * k + t

Translation is clamped so the visible part of the world never leaves the
world bounds, which are a fixed multiple of the initial screen size.
"""

import logging
from dataclasses import dataclass

from .primitives import Rect

logger = logging.getLogger(__name__)


DEFAULT_MIN_ZOOM = 0.5
DEFAULT_MAX_ZOOM = 3.0
DEFAULT_WORLD_MULTIPLE = 5


@dataclass
class ViewportState:
    """Zoom scale k and translation (tx, ty)."""
    k: float = 1.0
    tx: float = 0.0
    ty: float = 0.0


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


class ViewportTransform:
    """
    Zoom/pan state with clamped gestures.

    Attributes:
        screen_width, screen_height: Size of the visible viewport in pixels
        world_width, world_height: Extent of the world, fixed at construction
    """

    def __init__(
        self,
        screen_width: float,
        screen_height: float,
        min_zoom: float = DEFAULT_MIN_ZOOM,
        max_zoom: float = DEFAULT_MAX_ZOOM,
        world_multiple: float = DEFAULT_WORLD_MULTIPLE,
    ):
        if screen_width <= 0 or screen_height <= 0:
            raise ValueError(f"Screen size must be positive, got {screen_width}x{screen_height}")
        if not 0 < min_zoom <= max_zoom:
            raise ValueError(f"Invalid zoom bounds [{min_zoom}, {max_zoom}]")
        if world_multiple < 1:
            raise ValueError(f"World multiple must be at least 1, got {world_multiple}")

        self.screen_width = screen_width
        self.screen_height = screen_height
        self.min_zoom = min_zoom
        self.max_zoom = max_zoom
        self.world_width = screen_width * world_multiple
        self.world_height = screen_height * world_multiple
        self._state = ViewportState()

    @property
    def state(self) -> ViewportState:
        """Get a copy of the current state."""
        return ViewportState(self._state.k, self._state.tx, self._state.ty)

    @property
    def scale(self) -> float:
        return self._state.k

    @property
    def translation(self) -> tuple[float, float]:
        return (self._state.tx, self._state.ty)

    def screen_to_world(self, screen_x: float, screen_y: float) -> tuple[float, float]:
        s = self._state
        return ((screen_x - s.tx) / s.k, (screen_y - s.ty) / s.k)

    def world_to_screen(self, world_x: float, world_y: float) -> tuple[float, float]:
        s = self._state
        return (world_x * s.k + s.tx, world_y * s.k + s.ty)

    def apply_zoom(self, factor: float, pivot: tuple[float, float]):
        """
        Multiply the scale by factor, keeping the screen pivot fixed.

        The resulting scale is clamped to [min_zoom, max_zoom] and the
        translation to the world bounds.
        """
        if factor <= 0:
            logger.warning(f"Ignoring non-positive zoom factor {factor}")
            return

        px, py = pivot
        world_x, world_y = self.screen_to_world(px, py)
        new_k = _clamp(self._state.k * factor, self.min_zoom, self.max_zoom)

        self._state.k = new_k
        self._state.tx = px - world_x * new_k
        self._state.ty = py - world_y * new_k
        self._clamp_translation()
        logger.debug(f"Zoom -> k={self._state.k:.3f} t=({self._state.tx:.1f}, {self._state.ty:.1f})")

    def apply_pan(self, dx: float, dy: float):
        """Shift the translation, clamped to the world bounds."""
        self._state.tx += dx
        self._state.ty += dy
        self._clamp_translation()

    def resize(self, screen_width: float, screen_height: float):
        """Update the viewport size; world bounds stay fixed."""
        if screen_width <= 0 or screen_height <= 0:
            return
        self.screen_width = screen_width
        self.screen_height = screen_height
        self._clamp_translation()

    def reset(self):
        """Return to unit scale at the world origin."""
        self._state = ViewportState()

    def visible_world_rect(self) -> Rect:
        """The region of the world currently on screen."""
        left, top = self.screen_to_world(0, 0)
        k = self._state.k
        return Rect(left, top, self.screen_width / k, self.screen_height / k)

    def _clamp_translation(self):
        # Translation range keeping [0, world] covering the screen:
        # -(world * k - screen) <= t <= 0
        k = self._state.k
        min_tx = min(0.0, -(self.world_width * k - self.screen_width))
        min_ty = min(0.0, -(self.world_height * k - self.screen_height))
        self._state.tx = _clamp(self._state.tx, min_tx, 0.0)
        self._state.ty = _clamp(self._state.ty, min_ty, 0.0)
