"""
Render primitive value types.

These are the geometry and style payloads the canvas engine hands to a
rendering surface. All coordinates are in world space; the surface
applies the current view transform itself.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Union


class PrimitiveKind(Enum):
    """Kinds of primitives a rendering surface must be able to draw."""
    RECT = auto()
    ELLIPSE = auto()
    POLYGON = auto()
    POLYLINE = auto()
    LINE = auto()
    TEXT = auto()


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in world space."""
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @property
    def left(self) -> float:
        return self.x

    @property
    def top(self) -> float:
        return self.y

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    def contains(self, x: float, y: float) -> bool:
        """Check if a point lies inside the rectangle (edges included)."""
        return self.left <= x <= self.right and self.top <= y <= self.bottom

    def adjusted(self, margin: float) -> "Rect":
        """Return a copy grown by margin on every side."""
        return Rect(
            self.x - margin, self.y - margin,
            self.width + 2 * margin, self.height + 2 * margin
        )


@dataclass(frozen=True)
class RectGeometry:
    x: float
    y: float
    width: float
    height: float
    corner_radius: float = 0.0


@dataclass(frozen=True)
class EllipseGeometry:
    cx: float
    cy: float
    radius: float


@dataclass(frozen=True)
class PolygonGeometry:
    points: tuple[tuple[float, float], ...]


@dataclass(frozen=True)
class PolylineGeometry:
    points: tuple[tuple[float, float], ...]


@dataclass(frozen=True)
class LineGeometry:
    x1: float
    y1: float
    x2: float
    y2: float


@dataclass(frozen=True)
class TextGeometry:
    """Text centred on (x, y)."""
    x: float
    y: float
    text: str


Geometry = Union[
    RectGeometry, EllipseGeometry, PolygonGeometry,
    PolylineGeometry, LineGeometry, TextGeometry,
]


def geometry_bounds(geometry: Geometry) -> Rect:
    """
    Compute the bounding rectangle of a geometry.

    Text has no intrinsic extent here; surfaces that measure fonts
    report a real box, this returns a degenerate rect at the anchor.
    """
    if isinstance(geometry, RectGeometry):
        return Rect(geometry.x, geometry.y, geometry.width, geometry.height)
    if isinstance(geometry, EllipseGeometry):
        r = geometry.radius
        return Rect(geometry.cx - r, geometry.cy - r, 2 * r, 2 * r)
    if isinstance(geometry, (PolygonGeometry, PolylineGeometry)):
        if not geometry.points:
            return Rect()
        xs = [p[0] for p in geometry.points]
        ys = [p[1] for p in geometry.points]
        return Rect(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))
    if isinstance(geometry, LineGeometry):
        left = min(geometry.x1, geometry.x2)
        top = min(geometry.y1, geometry.y2)
        return Rect(left, top, abs(geometry.x2 - geometry.x1), abs(geometry.y2 - geometry.y1))
    if isinstance(geometry, TextGeometry):
        return Rect(geometry.x, geometry.y, 0.0, 0.0)
    raise TypeError(f"Unsupported geometry: {type(geometry).__name__}")


@dataclass(frozen=True)
class PrimitiveStyle:
    """Visual style for a primitive."""
    fill: str = "none"
    stroke: str = "black"
    stroke_width: float = 1.0
    opacity: float = 1.0
    dashed: bool = False
    font_size: int = 16
    z_value: float = 0.0


# Styles shared by the canvas overlays
GUIDE_STYLE = PrimitiveStyle(stroke="#3B82F6", stroke_width=1.0, dashed=True, z_value=50)
OVERLAY_STYLE = PrimitiveStyle(stroke="#3B82F6", stroke_width=2.0, dashed=True, z_value=60)
MENU_STYLE = PrimitiveStyle(fill="#FFFFFF", stroke="#9CA3AF", stroke_width=1.0, z_value=70)
MENU_LABEL_STYLE = PrimitiveStyle(fill="#374151", stroke="none", font_size=12, z_value=71)
CONNECTION_STYLE = PrimitiveStyle(stroke="#374151", stroke_width=2.0, z_value=-1)
RUBBER_BAND_STYLE = PrimitiveStyle(stroke="#6B7280", stroke_width=1.5, dashed=True, z_value=80)


@dataclass
class PrimitiveRecord:
    """Bookkeeping for a drawn primitive, used by in-memory surfaces."""
    handle: int
    kind: PrimitiveKind
    geometry: Geometry
    style: PrimitiveStyle = field(default_factory=PrimitiveStyle)
