"""
Occupancy Index.

Tracks which grid cells are claimed by which shape. The index never
validates a claim itself: callers that enforce collisions check
are_free() before calling claim(). Without enforcement several shapes
can claim the same cell; each cell keeps its claimants in claim order
so that releasing one shape never uncovers cells another still holds.
"""

import logging
import math
from typing import Iterable, Optional

from models.grid import GridCoordinate, GridModel
from models.shapes import Shape, ShapeKind, shape_rect

logger = logging.getLogger(__name__)


class OccupancyIndex:
    """
    Mapping of grid cells to owning shape ids.

    Circles and rhombi are indexed by their bounding square, so two
    such shapes can register a conflict while their outlines do not
    actually touch.
    """

    def __init__(self, grid: GridModel):
        self._grid = grid
        # Claimants per cell, latest last
        self._owners: dict[GridCoordinate, list[str]] = {}

    def __len__(self) -> int:
        return len(self._owners)

    def cells_for(self, shape: Shape) -> set[GridCoordinate]:
        """Enumerate every cell covered by a shape's bounding box."""
        return self.cells_for_kind(shape.kind, shape.origin)

    def cells_for_kind(self, kind: ShapeKind, origin: tuple[float, float]) -> set[GridCoordinate]:
        """Cells a shape of the given kind would cover at origin."""
        rect = shape_rect(kind, origin)
        size = self._grid.cell_size
        cols = max(1, math.ceil(rect.width / size))
        rows = max(1, math.ceil(rect.height / size))

        cells = set()
        for i in range(cols):
            x = rect.left + i * size
            for j in range(rows):
                y = rect.top + j * size
                cells.add(self._grid.world_to_cell(x, y))
        return cells

    def are_free(self, cells: Iterable[GridCoordinate], ignore: Optional[str] = None) -> bool:
        """
        Check that none of the cells is claimed.

        Args:
            cells: Cells to check
            ignore: Shape id whose own claims count as free
        """
        for cell in cells:
            if any(owner != ignore for owner in self._owners.get(cell, ())):
                return False
        return True

    def conflicts(self, cells: Iterable[GridCoordinate], ignore: Optional[str] = None) -> set[str]:
        """Get the ids of shapes owning any of the cells."""
        owners = set()
        for cell in cells:
            owners.update(o for o in self._owners.get(cell, ()) if o != ignore)
        return owners

    def claim(self, shape_id: str, cells: Iterable[GridCoordinate]):
        """Claim cells for a shape. Re-claiming a cell is a no-op."""
        for cell in cells:
            claimants = self._owners.setdefault(cell, [])
            if shape_id not in claimants:
                claimants.append(shape_id)

    def release(self, cells: Iterable[GridCoordinate]):
        """Release cells regardless of owner."""
        for cell in cells:
            self._owners.pop(cell, None)

    def forget(self, shape_id: str) -> set[GridCoordinate]:
        """
        Drop every claim a shape holds and return the cells it held.

        Cells also claimed by another shape stay claimed by that shape.
        """
        owned = self.cells_of(shape_id)
        for cell in owned:
            claimants = self._owners[cell]
            claimants.remove(shape_id)
            if not claimants:
                del self._owners[cell]
        if owned:
            logger.debug(f"Released {len(owned)} cells of {shape_id}")
        return owned

    def owner_of(self, cell: GridCoordinate) -> Optional[str]:
        """Get the latest claimant of a cell."""
        claimants = self._owners.get(cell)
        return claimants[-1] if claimants else None

    def cells_of(self, shape_id: str) -> set[GridCoordinate]:
        return {cell for cell, claimants in self._owners.items() if shape_id in claimants}

    def clear(self):
        self._owners.clear()
