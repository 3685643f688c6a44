"""
Connection routing.

Connections run between the nearest grid-snapped boundary points of two
shapes as an L-shaped polyline with a single bend at (start_x, end_y).
"""

from models.grid import GridModel
from models.shapes import Shape, ShapeKind, rhombus_points

Point = tuple[float, float]


class ConnectionRouter:
    """Computes connector endpoints and paths."""

    def __init__(self, grid: GridModel):
        self._grid = grid

    def boundary_points(self, shape: Shape) -> list[Point]:
        """
        Candidate attachment points on a shape outline, snapped to the grid.

        Rectangles use their side midpoints, circles the four compass
        points and rhombi their vertices.
        """
        rect = shape.bounding_rect
        cx, cy = rect.center
        if shape.kind == ShapeKind.RHOMBUS:
            raw = list(rhombus_points(cx, cy, rect.width))
        else:
            raw = [
                (cx, rect.top),
                (rect.right, cy),
                (cx, rect.bottom),
                (rect.left, cy),
            ]
        return [self._grid.snap(x, y) for x, y in raw]

    def nearest_points(self, source: Shape, target: Shape) -> tuple[Point, Point]:
        """Get the closest pair of attachment points between two shapes."""
        best = None
        best_dist = None
        for p in self.boundary_points(source):
            for q in self.boundary_points(target):
                dist = (p[0] - q[0]) ** 2 + (p[1] - q[1]) ** 2
                if best_dist is None or dist < best_dist:
                    best, best_dist = (p, q), dist
        return best

    def route(self, source: Shape, target: Shape) -> list[Point]:
        """Route an L-shaped path from source to target."""
        start, end = self.nearest_points(source, target)
        return self.l_path(start, end)

    @staticmethod
    def l_path(start: Point, end: Point) -> list[Point]:
        """
        Build a one-bend polyline with the bend at (start_x, end_y).

        When the endpoints already share an axis the bend would coincide
        with one of them, so the path is a straight segment.
        """
        if start[0] == end[0] or start[1] == end[1]:
            return [start, end]
        return [start, (start[0], end[1]), end]
