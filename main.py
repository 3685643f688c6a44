#!/usr/bin/env python3
"""
Grid Canvas - Main Entry Point

A grid-snapped diagram editor: place rectangles, circles and rhombi,
drag them with live alignment guides, and connect them.

Usage:
    python main.py
    python main.py --debug                  # Enable debug logging
    python main.py --grid-size 10           # Override the grid cell size
    python main.py --advisory-collisions    # Allow overlapping shapes
    python main.py --config path/to.json    # Use an alternate settings file
"""

import sys
import logging
import argparse
from PyQt6.QtWidgets import QApplication
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QFont, QPalette, QColor

from models import CollisionPolicy
from services import get_settings
from views import MainWindow


def setup_logging(debug: bool = False):
    """Configure logging for the application."""
    level = logging.DEBUG if debug else logging.INFO

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)

    logger = logging.getLogger(__name__)
    logger.info(f"Logging initialized at {'DEBUG' if debug else 'INFO'} level")


def setup_application() -> QApplication:
    """Configure the Qt application."""
    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )

    app = QApplication(sys.argv)
    app.setApplicationName("Grid Canvas")
    app.setApplicationVersion("0.1.0")
    app.setOrganizationName("grid-canvas")

    font = QFont("SF Pro Display", 10)
    if not font.exactMatch():
        font = QFont("Segoe UI", 10)
    if not font.exactMatch():
        font = QFont("Helvetica Neue", 10)
    app.setFont(font)

    palette = QPalette()
    palette.setColor(QPalette.ColorRole.Window, QColor("#F3F4F6"))
    palette.setColor(QPalette.ColorRole.WindowText, QColor("#111827"))
    palette.setColor(QPalette.ColorRole.Base, QColor("#FFFFFF"))
    palette.setColor(QPalette.ColorRole.Text, QColor("#374151"))
    palette.setColor(QPalette.ColorRole.Button, QColor("#FFFFFF"))
    palette.setColor(QPalette.ColorRole.ButtonText, QColor("#374151"))
    palette.setColor(QPalette.ColorRole.Highlight, QColor("#3B82F6"))
    palette.setColor(QPalette.ColorRole.HighlightedText, QColor("#FFFFFF"))
    app.setPalette(palette)

    return app


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Grid Canvas diagram editor')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')
    parser.add_argument('--grid-size', type=int, help='Grid cell size in world units')
    parser.add_argument(
        '--advisory-collisions', action='store_true',
        help='Report overlaps without rejecting placements and moves'
    )
    parser.add_argument('--config', help='Path to an alternate settings file')
    return parser


def main():
    """Main entry point."""
    args = build_parser().parse_args()

    setup_logging(debug=args.debug)
    logger = logging.getLogger(__name__)

    settings_manager = get_settings(args.config)
    canvas = settings_manager.canvas

    # Command line overrides apply to this session only
    if args.grid_size is not None:
        if args.grid_size <= 0:
            logger.error(f"Grid size must be positive, got {args.grid_size}")
            return 2
        canvas.grid_size = args.grid_size
    if args.advisory_collisions:
        canvas.collision_policy = CollisionPolicy.ADVISORY.value

    app = setup_application()

    window = MainWindow(settings_manager)
    window.show()

    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
