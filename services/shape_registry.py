"""
Shape Registry.

Owns the canonical set of placed shapes. Other components read shapes
through this registry and receive copies, so every mutation goes
through create / move_to / remove.
"""

import logging
from dataclasses import replace
from typing import Callable, Optional

from models.grid import GridCoordinate, GridModel
from models.shapes import Shape, ShapeKind, shape_rect

logger = logging.getLogger(__name__)


RemovalListener = Callable[[Shape], None]


class ShapeRegistry:
    """
    Registry of placed shapes, kept in z-order (last is topmost).

    Ids are "{kind}-{n}" where n is the smallest positive integer not in
    use for that kind. A number becomes available again only after the
    shape holding it is removed.
    """

    def __init__(self, grid: GridModel):
        self._grid = grid
        self._shapes: dict[str, Shape] = {}
        self._used_numbers: dict[ShapeKind, set[int]] = {kind: set() for kind in ShapeKind}
        self._removal_listeners: list[RemovalListener] = []

    def __len__(self) -> int:
        return len(self._shapes)

    def __contains__(self, shape_id: str) -> bool:
        return shape_id in self._shapes

    def add_removal_listener(self, listener: RemovalListener):
        """Register a callback invoked with the removed shape."""
        self._removal_listeners.append(listener)

    def next_id(self, kind: ShapeKind) -> str:
        """Get the id the next shape of this kind would receive."""
        used = self._used_numbers[kind]
        n = 1
        while n in used:
            n += 1
        return f"{kind.value}-{n}"

    def anchor_for(self, kind: ShapeKind, origin: tuple[float, float]) -> GridCoordinate:
        """Anchor cell of a shape of this kind placed at origin."""
        cx, cy = shape_rect(kind, origin).center
        return self._grid.world_to_cell(cx, cy)

    def create(self, kind: ShapeKind, world_x: float, world_y: float) -> Shape:
        """Create and register a new shape with its origin at the given point."""
        shape_id = self.next_id(kind)
        number = int(shape_id.rsplit("-", 1)[1])
        self._used_numbers[kind].add(number)

        origin = (world_x, world_y)
        shape = Shape(
            id=shape_id,
            kind=kind,
            origin=origin,
            anchor_cell=self.anchor_for(kind, origin),
        )
        self._shapes[shape_id] = shape
        logger.info(f"Created {shape_id} at {origin}")
        return replace(shape)

    def move_to(self, shape_id: str, world_x: float, world_y: float) -> Optional[Shape]:
        """Move a shape's origin and recompute its anchor cell."""
        shape = self._shapes.get(shape_id)
        if shape is None:
            return None
        shape.origin = (world_x, world_y)
        shape.anchor_cell = self.anchor_for(shape.kind, shape.origin)
        return replace(shape)

    def remove(self, shape_id: str) -> Optional[Shape]:
        """Remove a shape, free its id number and notify listeners."""
        shape = self._shapes.pop(shape_id, None)
        if shape is None:
            return None

        number = int(shape_id.rsplit("-", 1)[1])
        self._used_numbers[shape.kind].discard(number)

        for listener in self._removal_listeners:
            listener(replace(shape))
        logger.info(f"Removed {shape_id}")
        return replace(shape)

    def get(self, shape_id: str) -> Optional[Shape]:
        shape = self._shapes.get(shape_id)
        return replace(shape) if shape is not None else None

    def ids(self) -> list[str]:
        return list(self._shapes)

    def shapes(self) -> list[Shape]:
        """Get copies of all shapes, bottom to top."""
        return [replace(s) for s in self._shapes.values()]

    def anchors(self) -> dict[str, GridCoordinate]:
        return {sid: s.anchor_cell for sid, s in self._shapes.items()}

    def shape_at(self, world_x: float, world_y: float) -> Optional[Shape]:
        """Get the topmost shape whose outline contains the point."""
        for shape in reversed(list(self._shapes.values())):
            if shape.contains(world_x, world_y):
                return replace(shape)
        return None

    def bring_to_front(self, shape_id: str):
        shape = self._shapes.pop(shape_id, None)
        if shape is not None:
            self._shapes[shape_id] = shape

    def clear(self):
        """Remove every shape, notifying listeners for each."""
        for shape_id in list(self._shapes):
            self.remove(shape_id)
