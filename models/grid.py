"""
Grid model.

Maps between logical world coordinates and discrete grid cells.
Everything here is pure: no state beyond the fixed cell size.
"""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class GridCoordinate:
    """Integer cell coordinate on the canvas grid."""
    col: int = 0
    row: int = 0

    def to_tuple(self) -> tuple[int, int]:
        return (self.col, self.row)


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer with halves going up.

    Python's round() uses banker's rounding, which would put a shape
    centred on a half cell into a different column depending on parity.
    """
    return int(math.floor(value + 0.5))


class GridModel:
    """
    Conversion between world space and grid cells.

    Attributes:
        cell_size: Edge length of a grid cell in world units
    """

    def __init__(self, cell_size: float = 20):
        if cell_size <= 0:
            raise ValueError(f"Grid cell size must be positive, got {cell_size}")
        self._cell_size = cell_size

    @property
    def cell_size(self) -> float:
        return self._cell_size

    def world_to_cell(self, x: float, y: float) -> GridCoordinate:
        """Get the cell nearest to a world point."""
        return GridCoordinate(
            round_half_up(x / self._cell_size),
            round_half_up(y / self._cell_size),
        )

    def cell_to_world(self, cell: GridCoordinate) -> tuple[float, float]:
        """Get the world position of a cell (exact inverse, no rounding)."""
        return (cell.col * self._cell_size, cell.row * self._cell_size)

    def snap(self, x: float, y: float) -> tuple[float, float]:
        """Snap a world point to the nearest grid intersection."""
        return self.cell_to_world(self.world_to_cell(x, y))
