"""
Diagram shape models.

A shape is one of a closed set of kinds, each with a fixed intrinsic
size. The shape's origin is its world-space reference point: the
top-left corner for rectangles, the centre for circles and rhombi.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .grid import GridCoordinate
from .primitives import (
    EllipseGeometry, Geometry, PolygonGeometry, PrimitiveKind,
    PrimitiveStyle, Rect, RectGeometry, TextGeometry,
)


class ShapeKind(Enum):
    """Kinds of shapes that can be placed on the canvas."""
    RECTANGLE = "rectangle"
    CIRCLE = "circle"
    RHOMBUS = "rhombus"

    @property
    def label(self) -> str:
        return self.value.title()


@dataclass(frozen=True)
class ShapeSpec:
    """Intrinsic geometry and look of a shape kind."""
    width: float
    height: float
    text: str
    fill: str
    font_size: int = 16
    corner_radius: float = 0.0
    origin_is_center: bool = True


SHAPE_SPECS = {
    ShapeKind.RECTANGLE: ShapeSpec(
        width=220, height=160, text="Task 1", fill="rgba(0, 0, 255, 0.5)",
        corner_radius=10, origin_is_center=False,
    ),
    ShapeKind.CIRCLE: ShapeSpec(
        width=80, height=80, text="Start", fill="rgba(255, 0, 0, 0.5)",
    ),
    ShapeKind.RHOMBUS: ShapeSpec(
        width=100, height=100, text="?", fill="rgba(0, 255, 0, 0.5)", font_size=60,
    ),
}

PREVIEW_OPACITY = 0.6


def _origin_to_rect(kind: ShapeKind, x: float, y: float) -> Rect:
    spec = SHAPE_SPECS[kind]
    if spec.origin_is_center:
        return Rect(x - spec.width / 2, y - spec.height / 2, spec.width, spec.height)
    return Rect(x, y, spec.width, spec.height)


def rhombus_points(cx: float, cy: float, size: float) -> tuple[tuple[float, float], ...]:
    """Vertices of a rhombus with the given diagonal, clockwise from the top."""
    half = size / 2
    return (
        (cx, cy - half),
        (cx + half, cy),
        (cx, cy + half),
        (cx - half, cy),
    )


@dataclass
class Shape:
    """
    A placed shape.

    Attributes:
        id: Unique identifier ("{kind}-{n}")
        kind: Shape kind
        origin: World reference point (top-left or centre, see module doc)
        anchor_cell: Grid cell of the geometric centre
    """
    id: str
    kind: ShapeKind
    origin: tuple[float, float] = (0.0, 0.0)
    anchor_cell: GridCoordinate = field(default_factory=GridCoordinate)

    @property
    def spec(self) -> ShapeSpec:
        return SHAPE_SPECS[self.kind]

    @property
    def bounding_rect(self) -> Rect:
        return _origin_to_rect(self.kind, *self.origin)

    @property
    def center(self) -> tuple[float, float]:
        return self.bounding_rect.center

    def contains(self, x: float, y: float) -> bool:
        """Check if a world point lies inside the shape outline."""
        return shape_contains(self.kind, self.origin, x, y)

    @property
    def primitive_kind(self) -> PrimitiveKind:
        return primitive_kind_for(self.kind)

    def body_geometry(self) -> Geometry:
        return body_geometry_for(self.kind, self.origin)

    def label_geometry(self) -> TextGeometry:
        return label_geometry_for(self.kind, self.origin)


def primitive_kind_for(kind: ShapeKind) -> PrimitiveKind:
    return {
        ShapeKind.RECTANGLE: PrimitiveKind.RECT,
        ShapeKind.CIRCLE: PrimitiveKind.ELLIPSE,
        ShapeKind.RHOMBUS: PrimitiveKind.POLYGON,
    }[kind]


def body_geometry_for(kind: ShapeKind, origin: tuple[float, float]) -> Geometry:
    """Geometry of the shape body for a given origin."""
    spec = SHAPE_SPECS[kind]
    x, y = origin
    if kind == ShapeKind.RECTANGLE:
        return RectGeometry(x, y, spec.width, spec.height, spec.corner_radius)
    if kind == ShapeKind.CIRCLE:
        return EllipseGeometry(x, y, spec.width / 2)
    return PolygonGeometry(rhombus_points(x, y, spec.width))


def label_geometry_for(kind: ShapeKind, origin: tuple[float, float]) -> TextGeometry:
    cx, cy = _origin_to_rect(kind, *origin).center
    return TextGeometry(cx, cy, SHAPE_SPECS[kind].text)


def body_style_for(kind: ShapeKind, preview: bool = False) -> PrimitiveStyle:
    spec = SHAPE_SPECS[kind]
    return PrimitiveStyle(
        fill=spec.fill,
        stroke="black",
        stroke_width=1.0 if preview else 2.0,
        opacity=PREVIEW_OPACITY if preview else 1.0,
        z_value=0,
    )


def label_style_for(kind: ShapeKind, preview: bool = False) -> PrimitiveStyle:
    return PrimitiveStyle(
        fill="#FFFFFF",
        stroke="none",
        font_size=SHAPE_SPECS[kind].font_size,
        opacity=PREVIEW_OPACITY if preview else 1.0,
        z_value=1,
    )


def shape_contains(kind: ShapeKind, origin: tuple[float, float], x: float, y: float) -> bool:
    rect = _origin_to_rect(kind, *origin)
    if kind == ShapeKind.RECTANGLE:
        return rect.contains(x, y)
    cx, cy = rect.center
    half = rect.width / 2
    if kind == ShapeKind.CIRCLE:
        return (x - cx) ** 2 + (y - cy) ** 2 <= half ** 2
    # Rhombus: L1 distance from the centre
    return abs(x - cx) + abs(y - cy) <= half


def shape_rect(kind: ShapeKind, origin: tuple[float, float]) -> Rect:
    """Bounding rectangle for a kind placed at origin."""
    return _origin_to_rect(kind, *origin)


def parse_shape_kind(value: Optional[str]) -> Optional[ShapeKind]:
    """Resolve a kind from its name ("rectangle") or None."""
    if value is None:
        return None
    try:
        return ShapeKind(value.lower())
    except ValueError:
        return None
