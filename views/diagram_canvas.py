"""
Diagram canvas for visual shape editing.

Uses Qt's Graphics View Framework for rendering. Mouse, wheel and key
events are translated into calls on the InteractionController, which
owns every decision; this widget only decides whether a gesture is a
click, a shape drag or a background pan.
"""

import logging
from typing import Optional
from PyQt6.QtCore import Qt, QPointF, QRectF, QSize, pyqtSignal
from PyQt6.QtGui import QPainter, QBrush, QColor, QWheelEvent, QMouseEvent, QKeyEvent
from PyQt6.QtWidgets import QGraphicsView, QGraphicsScene

from models import (
    ConnectingState, ControllerState, DraggingState, GridCoordinate,
    IdleState, PreviewingState, SelectedState, ShapeInfo, ShapeKind,
)
from services import CanvasSettings, InteractionController, UISettings
from views.scene_surface import SceneSurface, parse_color

# Setup logger for this module
logger = logging.getLogger(__name__)


DRAG_THRESHOLD = 4          # Pixels before a press becomes a drag
WHEEL_PIXELS_PER_STEP = 40  # Pan distance per wheel notch
WHEEL_ZOOM_FACTOR = 1.15    # Ctrl+wheel zoom step


def describe_state(state: ControllerState) -> str:
    """Short status-bar text for a controller state."""
    if isinstance(state, PreviewingState):
        return f"Placing {state.kind.value} • click to drop"
    if isinstance(state, SelectedState):
        return f"Selected {state.shape_id}"
    if isinstance(state, DraggingState):
        return f"Moving {state.session.shape_id}"
    if isinstance(state, ConnectingState):
        return f"Connecting from {state.source_id} • click a target shape"
    return "Ready"


class DiagramCanvas(QGraphicsView):
    """
    Main canvas widget for viewing and editing the diagram.

    Provides zooming, panning and interaction handling.
    """

    # Signals
    stateChanged = pyqtSignal(object)       # ControllerState
    shapeInfoRequested = pyqtSignal(object) # ShapeInfo
    viewChanged = pyqtSignal(float)         # zoom scale

    def __init__(
        self,
        canvas_settings: Optional[CanvasSettings] = None,
        ui_settings: Optional[UISettings] = None,
        initial_size: QSize = QSize(1200, 800),
        parent=None,
    ):
        super().__init__(parent)
        self._ui = ui_settings or UISettings()

        # Scene is kept in screen coordinates; the surface applies zoom/pan
        self.diagram_scene = QGraphicsScene(self)
        self.setScene(self.diagram_scene)
        self.surface = SceneSurface(self.diagram_scene)

        self.controller = InteractionController(
            self.surface,
            initial_size.width(),
            initial_size.height(),
            settings=canvas_settings,
        )
        self.controller.add_state_listener(self._on_state_changed)
        self.controller.add_info_listener(self._on_info)

        # View settings
        self.setRenderHint(QPainter.RenderHint.Antialiasing)
        self.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
        self.setViewportUpdateMode(QGraphicsView.ViewportUpdateMode.FullViewportUpdate)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setAlignment(Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignTop)
        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setBackgroundBrush(QBrush(QColor(self._ui.background_color)))
        self.diagram_scene.setSceneRect(QRectF(0, 0, initial_size.width(), initial_size.height()))

        # Gesture state
        self._press_pos: Optional[QPointF] = None
        self._last_pos: Optional[QPointF] = None
        self._press_target: Optional[str] = None
        self._dragging = False
        self._panning = False
        self._background_pan = False

    # ------------------------------------------------------------------
    # Public actions (toolbar / palette)
    # ------------------------------------------------------------------

    def select_shape_kind(self, kind: Optional[ShapeKind]):
        self.controller.select_shape_kind(kind)
        self.setFocus()

    def zoom_in(self):
        self.controller.zoom_in()
        self._after_view_change()

    def zoom_out(self):
        self.controller.zoom_out()
        self._after_view_change()

    def reset_view(self):
        self.controller.reset_view()
        self._after_view_change()

    def delete_selected(self):
        self.controller.delete_selected()

    def clear_diagram(self):
        self.controller.clear()

    # ------------------------------------------------------------------
    # Qt events
    # ------------------------------------------------------------------

    def resizeEvent(self, event):
        super().resizeEvent(event)
        size = self.viewport().size()
        self.diagram_scene.setSceneRect(QRectF(0, 0, size.width(), size.height()))
        self.controller.resize(size.width(), size.height())
        self._after_view_change()

    def drawBackground(self, painter: QPainter, rect: QRectF):
        """Draw the dotted grid."""
        super().drawBackground(painter, rect)
        if not self._ui.show_grid:
            return

        grid = self.controller.grid
        viewport = self.controller.viewport
        visible = viewport.visible_world_rect()
        k = viewport.scale

        first = grid.world_to_cell(max(visible.left, 0), max(visible.top, 0))
        last = grid.world_to_cell(
            min(visible.right, viewport.world_width),
            min(visible.bottom, viewport.world_height),
        )

        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(QBrush(parse_color(self._ui.grid_dot_color)))
        radius = self._ui.grid_dot_radius * k

        for col in range(first.col, last.col + 1):
            for row in range(first.row, last.row + 1):
                sx, sy = viewport.world_to_screen(*grid.cell_to_world(GridCoordinate(col, row)))
                painter.drawEllipse(QPointF(sx, sy), radius, radius)

    def wheelEvent(self, event: QWheelEvent):
        """Scroll pans vertically; Ctrl+scroll zooms about the pointer."""
        steps = event.angleDelta().y() / 120
        if event.modifiers() & Qt.KeyboardModifier.ControlModifier:
            factor = WHEEL_ZOOM_FACTOR if steps > 0 else 1 / WHEEL_ZOOM_FACTOR
            pos = event.position()
            self.controller.zoom(factor, (pos.x(), pos.y()))
        else:
            # DOM convention: positive delta scrolls down
            self.controller.on_wheel(-steps * WHEEL_PIXELS_PER_STEP)
        self._after_view_change()
        event.accept()

    def mousePressEvent(self, event: QMouseEvent):
        pos = event.position()
        if event.button() == Qt.MouseButton.MiddleButton:
            self._panning = True
            self._last_pos = pos
            self.setCursor(Qt.CursorShape.ClosedHandCursor)
            event.accept()
        elif event.button() == Qt.MouseButton.LeftButton:
            self._press_pos = pos
            self._last_pos = pos
            self._dragging = False
            self._press_target = None

            state = self.controller.state
            if isinstance(state, (IdleState, SelectedState)) and \
               self.controller.menu_option_at_screen(pos.x(), pos.y()) is None:
                self._press_target = self.controller.shape_at_screen(pos.x(), pos.y())
            event.accept()
        elif event.button() == Qt.MouseButton.RightButton:
            self.controller.cancel()
            event.accept()
        else:
            super().mousePressEvent(event)

    def mouseMoveEvent(self, event: QMouseEvent):
        pos = event.position()
        left_down = bool(event.buttons() & Qt.MouseButton.LeftButton)

        if self._panning:
            delta = pos - self._last_pos
            self._last_pos = pos
            self.controller.pan(delta.x(), delta.y())
            self._after_view_change()
        elif left_down and self._press_pos is not None:
            if not self._dragging and not self._background_pan:
                moved = (pos - self._press_pos).manhattanLength()
                if moved >= DRAG_THRESHOLD:
                    self._begin_left_drag()
            if self._dragging:
                self.controller.on_drag_move(self._press_target, pos.x(), pos.y())
            elif self._background_pan:
                delta = pos - self._last_pos
                self.controller.pan(delta.x(), delta.y())
                self._after_view_change()
            self._last_pos = pos
        else:
            self.controller.on_pointer_move(pos.x(), pos.y())
        event.accept()

    def mouseReleaseEvent(self, event: QMouseEvent):
        pos = event.position()
        if event.button() == Qt.MouseButton.MiddleButton and self._panning:
            self._panning = False
            self.unsetCursor()
        elif event.button() == Qt.MouseButton.LeftButton:
            if self._dragging:
                self.controller.on_drag_end(self._press_target, pos.x(), pos.y())
            elif not self._background_pan:
                # A press without movement is a click
                self.controller.on_pointer_down(pos.x(), pos.y())
                self.controller.on_pointer_up(pos.x(), pos.y())
            self._press_pos = None
            self._press_target = None
            self._dragging = False
            self._background_pan = False
            self.unsetCursor()
        else:
            super().mouseReleaseEvent(event)
        event.accept()

    def keyPressEvent(self, event: QKeyEvent):
        """Handle keyboard shortcuts."""
        key = event.key()
        if key in (Qt.Key.Key_Delete, Qt.Key.Key_Backspace):
            self.controller.delete_selected()
        elif key == Qt.Key.Key_Escape:
            self.controller.cancel()
        elif key in (Qt.Key.Key_Plus, Qt.Key.Key_Equal):
            self.zoom_in()
        elif key == Qt.Key.Key_Minus:
            self.zoom_out()
        elif key == Qt.Key.Key_0 and event.modifiers() == Qt.KeyboardModifier.ControlModifier:
            self.reset_view()
        else:
            super().keyPressEvent(event)
            return
        event.accept()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _begin_left_drag(self):
        state = self.controller.state
        if self._press_target is not None:
            self.controller.on_drag_start(
                self._press_target, self._press_pos.x(), self._press_pos.y())
            self._dragging = isinstance(self.controller.state, DraggingState)
        elif isinstance(state, (IdleState, SelectedState)):
            self._background_pan = True
            self.setCursor(Qt.CursorShape.ClosedHandCursor)

    def _after_view_change(self):
        self.viewport().update()
        self.viewChanged.emit(self.controller.viewport.scale)

    def _on_state_changed(self, state: ControllerState):
        self.stateChanged.emit(state)

    def _on_info(self, info: ShapeInfo):
        self.shapeInfoRequested.emit(info)
