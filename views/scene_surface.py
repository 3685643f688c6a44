"""
Qt rendering surface.

Implements the canvas RenderSurface on a QGraphicsScene. All primitives
live under one root item carrying the world-to-screen transform, so the
scene itself is in screen coordinates and the view never scrolls.
"""

import logging
import re
from typing import Optional

from PyQt6.QtCore import Qt, QPointF, QRectF, QLineF
from PyQt6.QtGui import QBrush, QColor, QFont, QPainterPath, QPen, QPolygonF, QTransform
from PyQt6.QtWidgets import (
    QGraphicsEllipseItem, QGraphicsItem, QGraphicsLineItem, QGraphicsPathItem,
    QGraphicsRectItem, QGraphicsScene, QGraphicsSimpleTextItem,
)

from models.primitives import (
    EllipseGeometry, Geometry, LineGeometry, PolygonGeometry, PolylineGeometry,
    PrimitiveKind, PrimitiveStyle, Rect, RectGeometry, TextGeometry, geometry_bounds,
)

logger = logging.getLogger(__name__)


_RGBA_RE = re.compile(r"rgba?\(\s*([\d.]+)\s*,\s*([\d.]+)\s*,\s*([\d.]+)\s*(?:,\s*([\d.]+)\s*)?\)")

# Raised items stack above unraised shapes but below overlays (z >= 50)
RAISED_Z_BASE = 10.0
RAISED_Z_STEP = 1e-4


def parse_color(value: str) -> QColor:
    """Parse a CSS-like colour ("#RRGGBB", "rgba(r, g, b, a)", "none")."""
    if not value or value == "none":
        return QColor(Qt.GlobalColor.transparent)

    match = _RGBA_RE.fullmatch(value.strip())
    if match:
        r, g, b, a = match.groups()
        color = QColor(int(float(r)), int(float(g)), int(float(b)))
        if a is not None:
            color.setAlphaF(float(a))
        return color

    color = QColor(value)
    if not color.isValid():
        logger.warning(f"Unrecognised colour '{value}'")
        return QColor("black")
    return color


class SceneSurface:
    """
    RenderSurface backed by a QGraphicsScene.

    Handles are integers; the engine never sees Qt items.
    """

    def __init__(self, scene: Optional[QGraphicsScene] = None):
        self.scene = scene or QGraphicsScene()

        # Root container carrying the view transform
        self._root = QGraphicsRectItem()
        self._root.setPen(QPen(Qt.PenStyle.NoPen))
        self._root.setFlag(QGraphicsItem.GraphicsItemFlag.ItemHasNoContents, True)
        self.scene.addItem(self._root)

        self._items: dict[int, QGraphicsItem] = {}
        self._geometry: dict[int, Geometry] = {}
        self._next_handle = 1
        self._raise_level = 0

    def __len__(self) -> int:
        return len(self._items)

    def item(self, handle: int) -> Optional[QGraphicsItem]:
        return self._items.get(handle)

    # ------------------------------------------------------------------
    # RenderSurface
    # ------------------------------------------------------------------

    def draw_primitive(self, kind: PrimitiveKind, geometry: Geometry, style: PrimitiveStyle) -> int:
        item = self._create_item(kind)
        item.setParentItem(self._root)
        self._apply_style(item, style)

        handle = self._next_handle
        self._next_handle += 1
        self._items[handle] = item
        self.update_primitive(handle, geometry)
        return handle

    def update_primitive(self, handle: int, geometry: Geometry):
        item = self._items.get(handle)
        if item is None:
            logger.warning(f"Update of unknown primitive {handle}")
            return
        self._geometry[handle] = geometry

        if isinstance(geometry, RectGeometry):
            path = QPainterPath()
            rect = QRectF(geometry.x, geometry.y, geometry.width, geometry.height)
            if geometry.corner_radius:
                path.addRoundedRect(rect, geometry.corner_radius, geometry.corner_radius)
            else:
                path.addRect(rect)
            item.setPath(path)
        elif isinstance(geometry, EllipseGeometry):
            r = geometry.radius
            item.setRect(QRectF(geometry.cx - r, geometry.cy - r, 2 * r, 2 * r))
        elif isinstance(geometry, PolygonGeometry):
            path = QPainterPath()
            path.addPolygon(QPolygonF([QPointF(x, y) for x, y in geometry.points]))
            path.closeSubpath()
            item.setPath(path)
        elif isinstance(geometry, PolylineGeometry):
            path = QPainterPath()
            if geometry.points:
                path.moveTo(*geometry.points[0])
                for x, y in geometry.points[1:]:
                    path.lineTo(x, y)
            item.setPath(path)
        elif isinstance(geometry, LineGeometry):
            item.setLine(QLineF(geometry.x1, geometry.y1, geometry.x2, geometry.y2))
        elif isinstance(geometry, TextGeometry):
            item.setText(geometry.text)
            # Centre the text on the anchor point
            bounds = item.boundingRect()
            item.setPos(geometry.x - bounds.width() / 2, geometry.y - bounds.height() / 2)

    def remove_primitive(self, handle: int):
        item = self._items.pop(handle, None)
        self._geometry.pop(handle, None)
        if item is None:
            return
        try:
            self.scene.removeItem(item)
        except RuntimeError:
            pass  # Item already deleted on the C++ side

    def get_bounding_box(self, handle: int) -> Rect:
        geometry = self._geometry.get(handle)
        if geometry is None:
            return Rect()
        if isinstance(geometry, TextGeometry):
            item = self._items[handle]
            box = item.mapRectToParent(item.boundingRect())
            return Rect(box.x(), box.y(), box.width(), box.height())
        return geometry_bounds(geometry)

    def raise_primitive(self, handle: int):
        item = self._items.get(handle)
        if item is None:
            return
        self._raise_level += 1
        item.setZValue(RAISED_Z_BASE + self._raise_level * RAISED_Z_STEP)

    def set_view_transform(self, scale: float, tx: float, ty: float):
        self._root.setTransform(QTransform(scale, 0.0, 0.0, scale, tx, ty))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _create_item(kind: PrimitiveKind) -> QGraphicsItem:
        if kind == PrimitiveKind.ELLIPSE:
            return QGraphicsEllipseItem()
        if kind == PrimitiveKind.LINE:
            return QGraphicsLineItem()
        if kind == PrimitiveKind.TEXT:
            return QGraphicsSimpleTextItem()
        return QGraphicsPathItem()

    @staticmethod
    def _apply_style(item: QGraphicsItem, style: PrimitiveStyle):
        pen = QPen(parse_color(style.stroke), style.stroke_width)
        if style.stroke == "none":
            pen = QPen(Qt.PenStyle.NoPen)
        elif style.dashed:
            pen.setStyle(Qt.PenStyle.DashLine)

        if isinstance(item, QGraphicsSimpleTextItem):
            font = QFont("SF Pro Display")
            font.setPixelSize(style.font_size)
            item.setFont(font)
            item.setBrush(QBrush(parse_color(style.fill)))
        else:
            item.setPen(pen)
            if not isinstance(item, QGraphicsLineItem):
                item.setBrush(QBrush(parse_color(style.fill)))

        item.setOpacity(style.opacity)
        item.setZValue(style.z_value)
        item.setAcceptedMouseButtons(Qt.MouseButton.NoButton)
