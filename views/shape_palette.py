"""
Shape palette for choosing what to place on the canvas.

Clicking a kind arms the canvas with a placement preview; clicking the
active kind again disarms it.
"""

from typing import Optional
from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel,
    QPushButton, QFrame, QButtonGroup
)

from models import ShapeKind, SHAPE_SPECS


class ShapeKindButton(QPushButton):
    """
    A checkable button representing one shape kind.
    """

    clicked_with_kind = pyqtSignal(ShapeKind)

    # Solid variants of the canvas fills
    COLORS = {
        ShapeKind.RECTANGLE: "#3B5BDB",
        ShapeKind.CIRCLE: "#E03131",
        ShapeKind.RHOMBUS: "#2F9E44",
    }

    ICONS = {
        ShapeKind.RECTANGLE: "▭",
        ShapeKind.CIRCLE: "●",
        ShapeKind.RHOMBUS: "◆",
    }

    def __init__(self, kind: ShapeKind, parent=None):
        super().__init__(parent)
        self.kind = kind
        self.setCheckable(True)
        self._setup_ui()

        self.clicked.connect(lambda: self.clicked_with_kind.emit(self.kind))

    def _setup_ui(self):
        self.setFixedHeight(64)
        self.setCursor(Qt.CursorShape.PointingHandCursor)

        color = self.COLORS[self.kind]
        spec = SHAPE_SPECS[self.kind]

        self.setStyleSheet(f"""
            QPushButton {{
                background: white;
                border: 2px solid #E5E7EB;
                border-radius: 10px;
                text-align: left;
                padding: 10px 12px;
            }}
            QPushButton:hover {{
                border-color: {color};
                background: #F9FAFB;
            }}
            QPushButton:checked {{
                border-color: {color};
                background: #EFF6FF;
            }}
        """)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(8, 4, 8, 4)
        layout.setSpacing(12)

        icon_frame = QFrame()
        icon_frame.setFixedSize(40, 40)
        icon_frame.setStyleSheet(f"""
            QFrame {{
                background: {color};
                border-radius: 8px;
            }}
        """)

        icon_layout = QVBoxLayout(icon_frame)
        icon_layout.setContentsMargins(0, 0, 0, 0)

        icon_label = QLabel(self.ICONS[self.kind])
        icon_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        icon_label.setStyleSheet("""
            color: white;
            font-size: 18px;
            font-weight: bold;
        """)
        icon_layout.addWidget(icon_label)
        layout.addWidget(icon_frame)

        text_layout = QVBoxLayout()
        text_layout.setSpacing(2)

        name_label = QLabel(self.kind.label)
        name_label.setStyleSheet("""
            color: #374151;
            font-size: 13px;
            font-weight: 600;
        """)
        text_layout.addWidget(name_label)

        desc_label = QLabel(f"{spec.width:g} × {spec.height:g}, \"{spec.text}\"")
        desc_label.setStyleSheet("""
            color: #9CA3AF;
            font-size: 11px;
        """)
        text_layout.addWidget(desc_label)

        layout.addLayout(text_layout)
        layout.addStretch()


class ShapePalette(QWidget):
    """
    Palette panel listing every placeable shape kind.

    Emits shapeKindSelected with None when the active kind is toggled off.
    """

    shapeKindSelected = pyqtSignal(object)  # Optional[ShapeKind]

    def __init__(self, parent=None):
        super().__init__(parent)
        self._buttons: dict[ShapeKind, ShapeKindButton] = {}
        self._last_emitted: Optional[ShapeKind] = None
        self._setup_ui()

    @property
    def active_kind(self) -> Optional[ShapeKind]:
        for kind, button in self._buttons.items():
            if button.isChecked():
                return kind
        return None

    def clear_selection(self):
        """Uncheck every button without emitting."""
        self._last_emitted = None
        self._group.setExclusive(False)
        for button in self._buttons.values():
            button.setChecked(False)
        self._group.setExclusive(True)

    def _setup_ui(self):
        self.setMinimumWidth(250)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(12)

        title = QLabel("Shapes")
        title_font = QFont("SF Pro Display", 14)
        title_font.setWeight(QFont.Weight.Bold)
        title.setFont(title_font)
        title.setStyleSheet("color: #111827;")
        layout.addWidget(title)

        subtitle = QLabel("Pick a shape, then click the canvas")
        subtitle.setStyleSheet("color: #6B7280; font-size: 12px; margin-bottom: 8px;")
        layout.addWidget(subtitle)

        self._group = QButtonGroup(self)
        self._group.setExclusive(True)
        for kind in ShapeKind:
            btn = ShapeKindButton(kind)
            btn.clicked_with_kind.connect(self._on_kind_clicked)
            self._group.addButton(btn)
            self._buttons[kind] = btn
            layout.addWidget(btn)

        layout.addStretch()

        help_text = QLabel(
            "Drag shapes to move them\n"
            "Click a shape for delete / connect / info\n"
            "Scroll to pan, Ctrl+scroll to zoom"
        )
        help_text.setAlignment(Qt.AlignmentFlag.AlignCenter)
        help_text.setStyleSheet("""
            color: #9CA3AF;
            font-size: 11px;
            padding: 12px;
            background: #F9FAFB;
            border-radius: 6px;
        """)
        layout.addWidget(help_text)

    def _on_kind_clicked(self, kind: ShapeKind):
        if self._last_emitted == kind:
            # Second click on the armed kind disarms it
            self.clear_selection()
        else:
            self._last_emitted = kind
        self.shapeKindSelected.emit(self._last_emitted)
