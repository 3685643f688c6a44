"""
Main application window.

Assembles the shape palette, the diagram canvas, the toolbar and the
status bar, and manages window geometry persistence.
"""

import logging
from typing import Optional
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QAction, QKeySequence
from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QHBoxLayout, QToolBar, QPushButton,
    QLabel, QSplitter, QStatusBar, QMessageBox, QSizePolicy
)

from models import ControllerState, IdleState, ShapeInfo, ShapeKind
from services import SettingsManager, get_settings
from views.diagram_canvas import DiagramCanvas, describe_state
from views.shape_palette import ShapePalette

logger = logging.getLogger(__name__)


class CanvasToolbar(QToolBar):
    """Toolbar with zoom and clear controls."""

    def __init__(self, parent=None):
        super().__init__("Canvas", parent)
        self.setMovable(False)
        self._setup_ui()

    def _setup_ui(self):
        self.zoom_in_btn = QPushButton("＋ Zoom In")
        self.addWidget(self.zoom_in_btn)

        self.zoom_out_btn = QPushButton("－ Zoom Out")
        self.addWidget(self.zoom_out_btn)

        self.reset_btn = QPushButton("Reset View")
        self.addWidget(self.reset_btn)

        self.addSeparator()

        self.clear_btn = QPushButton("Clear Diagram")
        self.addWidget(self.clear_btn)

        spacer = QWidget()
        spacer.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Preferred)
        self.addWidget(spacer)

        self.zoom_label = QLabel("100%")
        self.zoom_label.setStyleSheet("color: #6B7280; font-size: 12px;")
        self.addWidget(self.zoom_label)

    def set_zoom(self, scale: float):
        self.zoom_label.setText(f"{scale * 100:.0f}%")


class MainWindow(QMainWindow):
    """
    Main application window for the diagram editor.

    Layout:
    ┌─────────────────────────────────────────────────────┐
    │  Toolbar: [Zoom In] [Zoom Out] [Reset] [Clear] 100% │
    ├─────────────┬───────────────────────────────────────┤
    │             │                                       │
    │   Shape     │                                       │
    │   Palette   │           Diagram Canvas              │
    │             │                                       │
    ├─────────────┴───────────────────────────────────────┤
    │  Status Bar                                         │
    └─────────────────────────────────────────────────────┘
    """

    def __init__(self, settings_manager: Optional[SettingsManager] = None):
        super().__init__()

        # Settings manager (JSON file based)
        self.settings_manager = settings_manager or get_settings()

        self._setup_window()
        self._setup_menu()
        self._setup_toolbar()
        self._setup_central_widget()
        self._setup_status_bar()
        self._connect_signals()

        # Restore window geometry
        self._load_window_settings()

    def _load_window_settings(self):
        """Restore window geometry and state."""
        geometry, state = self.settings_manager.get_window_geometry()
        if geometry:
            self.restoreGeometry(geometry)
        if state:
            self.restoreState(state)

    def _save_window_settings(self):
        """Save window geometry and state."""
        self.settings_manager.save_window_geometry(
            bytes(self.saveGeometry()),
            bytes(self.saveState())
        )

    def closeEvent(self, event):
        """Handle window close - save settings."""
        self._save_window_settings()
        super().closeEvent(event)

    def _setup_window(self):
        self.setWindowTitle("Grid Canvas")
        self.setMinimumSize(900, 600)
        self.resize(1400, 900)

    def _setup_menu(self):
        """Create menu bar."""
        menubar = self.menuBar()

        file_menu = menubar.addMenu("&File")

        clear_action = QAction("&Clear Diagram", self)
        clear_action.setShortcut(QKeySequence.StandardKey.New)
        clear_action.triggered.connect(self._on_clear_diagram)
        file_menu.addAction(clear_action)

        file_menu.addSeparator()

        exit_action = QAction("E&xit", self)
        exit_action.setShortcut(QKeySequence.StandardKey.Quit)
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        edit_menu = menubar.addMenu("&Edit")

        delete_action = QAction("&Delete Selected", self)
        delete_action.setShortcut(QKeySequence.StandardKey.Delete)
        delete_action.triggered.connect(self._on_delete_selected)
        edit_menu.addAction(delete_action)

        view_menu = menubar.addMenu("&View")

        zoom_in_action = QAction("Zoom &In", self)
        zoom_in_action.setShortcut(QKeySequence.StandardKey.ZoomIn)
        zoom_in_action.triggered.connect(self._on_zoom_in)
        view_menu.addAction(zoom_in_action)

        zoom_out_action = QAction("Zoom &Out", self)
        zoom_out_action.setShortcut(QKeySequence.StandardKey.ZoomOut)
        zoom_out_action.triggered.connect(self._on_zoom_out)
        view_menu.addAction(zoom_out_action)

        reset_view_action = QAction("&Reset View", self)
        reset_view_action.setShortcut("Ctrl+R")
        reset_view_action.triggered.connect(self._on_reset_view)
        view_menu.addAction(reset_view_action)

        help_menu = menubar.addMenu("&Help")

        about_action = QAction("&About", self)
        about_action.triggered.connect(self._on_about)
        help_menu.addAction(about_action)

    def _setup_toolbar(self):
        self.toolbar = CanvasToolbar()
        self.addToolBar(self.toolbar)

        self.toolbar.zoom_in_btn.clicked.connect(self._on_zoom_in)
        self.toolbar.zoom_out_btn.clicked.connect(self._on_zoom_out)
        self.toolbar.reset_btn.clicked.connect(self._on_reset_view)
        self.toolbar.clear_btn.clicked.connect(self._on_clear_diagram)

    def _setup_central_widget(self):
        """Create the main layout with palette and canvas."""
        central = QWidget()
        self.setCentralWidget(central)

        layout = QHBoxLayout(central)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        splitter = QSplitter(Qt.Orientation.Horizontal)

        # Left panel - Shape palette
        self.shape_palette = ShapePalette()
        splitter.addWidget(self.shape_palette)

        # Center - Diagram canvas
        s = self.settings_manager.settings
        self.canvas = DiagramCanvas(canvas_settings=s.canvas, ui_settings=s.ui)
        self.canvas.setStyleSheet("QGraphicsView { border: none; }")
        splitter.addWidget(self.canvas)

        splitter.setSizes([250, 1150])
        splitter.setStretchFactor(0, 0)
        splitter.setStretchFactor(1, 1)

        layout.addWidget(splitter)

    def _setup_status_bar(self):
        status = QStatusBar()
        self.setStatusBar(status)

        self._state_label = QLabel(describe_state(IdleState()))
        status.addWidget(self._state_label)

        self._count_label = QLabel("Shapes: 0  Connections: 0")
        status.addWidget(self._count_label)

        status.addWidget(QWidget(), 1)

        policy = self.canvas.controller.collision_policy.value
        self._policy_label = QLabel(f"Collisions: {policy}")
        status.addWidget(self._policy_label)

    def _connect_signals(self):
        # Palette -> Canvas
        self.shape_palette.shapeKindSelected.connect(self._on_shape_kind_selected)

        # Canvas -> Status bar
        self.canvas.stateChanged.connect(self._on_state_changed)
        self.canvas.shapeInfoRequested.connect(self._on_shape_info)
        self.canvas.viewChanged.connect(self.toolbar.set_zoom)

    # ------------------------------------------------------------------
    # Slots
    # ------------------------------------------------------------------

    def _on_shape_kind_selected(self, kind: Optional[ShapeKind]):
        self.canvas.select_shape_kind(kind)

    def _on_state_changed(self, state: ControllerState):
        self._state_label.setText(describe_state(state))
        if isinstance(state, IdleState):
            self.shape_palette.clear_selection()
        self._update_counts()

    def _update_counts(self):
        controller = self.canvas.controller
        self._count_label.setText(
            f"Shapes: {len(controller.registry)}  "
            f"Connections: {len(controller.connections)}"
        )

    def _on_shape_info(self, info: ShapeInfo):
        self.statusBar().showMessage(
            f"{info.shape_id}: {info.kind.label} at {info.origin}, "
            f"cell ({info.anchor_cell.col}, {info.anchor_cell.row}), "
            f"{info.occupied_cells} cells, {info.connections} connections",
            5000
        )

    def _on_zoom_in(self):
        self.canvas.zoom_in()

    def _on_zoom_out(self):
        self.canvas.zoom_out()

    def _on_reset_view(self):
        self.canvas.reset_view()

    def _on_delete_selected(self):
        self.canvas.delete_selected()

    def _on_clear_diagram(self):
        """Clear the diagram after confirmation."""
        if len(self.canvas.controller.registry) == 0:
            return

        reply = QMessageBox.question(
            self,
            "Clear Diagram",
            "Are you sure you want to remove every shape?",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No
        )

        if reply == QMessageBox.StandardButton.Yes:
            self.canvas.clear_diagram()
            self._update_counts()
            self.statusBar().showMessage("Diagram cleared", 2000)

    def _on_about(self):
        QMessageBox.about(
            self,
            "About Grid Canvas",
            "<h3>Grid Canvas</h3>"
            "<p>A grid-snapped diagram editor.</p>"
            "<ul>"
            "<li>Rectangles, circles and rhombi snapped to the grid</li>"
            "<li>Occupancy-checked placement and moves</li>"
            "<li>Live alignment guides while dragging</li>"
            "<li>Orthogonal connections between shapes</li>"
            "</ul>"
        )
