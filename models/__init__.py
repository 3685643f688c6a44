"""
Models package.

This package contains the data models of the diagram canvas:
- Grid cells and world/grid conversion (GridCoordinate, GridModel)
- Shapes and their intrinsic geometry (ShapeKind, Shape)
- Zoom/pan state (ViewportState, ViewportTransform)
- Render primitive payloads (Rect, geometries, PrimitiveStyle)
- Interaction state (controller states, DragSession, guides, connections)
"""

from .grid import GridCoordinate, GridModel, round_half_up
from .primitives import (
    PrimitiveKind,
    Rect,
    RectGeometry,
    EllipseGeometry,
    PolygonGeometry,
    PolylineGeometry,
    LineGeometry,
    TextGeometry,
    Geometry,
    PrimitiveStyle,
    PrimitiveRecord,
    geometry_bounds,
)
from .shapes import (
    ShapeKind,
    ShapeSpec,
    Shape,
    SHAPE_SPECS,
    parse_shape_kind,
    rhombus_points,
)
from .viewport import ViewportState, ViewportTransform
from .interaction import (
    CollisionPolicy,
    GuideOrientation,
    AlignmentGuide,
    GuideDiff,
    DragSession,
    Connection,
    MenuOption,
    ShapeInfo,
    IdleState,
    PreviewingState,
    SelectedState,
    DraggingState,
    ConnectingState,
    ControllerState,
)


__all__ = [
    # Grid
    "GridCoordinate",
    "GridModel",
    "round_half_up",
    # Primitives
    "PrimitiveKind",
    "Rect",
    "RectGeometry",
    "EllipseGeometry",
    "PolygonGeometry",
    "PolylineGeometry",
    "LineGeometry",
    "TextGeometry",
    "Geometry",
    "PrimitiveStyle",
    "PrimitiveRecord",
    "geometry_bounds",
    # Shapes
    "ShapeKind",
    "ShapeSpec",
    "Shape",
    "SHAPE_SPECS",
    "parse_shape_kind",
    "rhombus_points",
    # Viewport
    "ViewportState",
    "ViewportTransform",
    # Interaction
    "CollisionPolicy",
    "GuideOrientation",
    "AlignmentGuide",
    "GuideDiff",
    "DragSession",
    "Connection",
    "MenuOption",
    "ShapeInfo",
    "IdleState",
    "PreviewingState",
    "SelectedState",
    "DraggingState",
    "ConnectingState",
    "ControllerState",
]
