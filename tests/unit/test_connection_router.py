"""
Unit tests for connection routing.
"""

import pytest

from models.shapes import Shape, ShapeKind
from services.connection_router import ConnectionRouter


@pytest.fixture
def router(grid):
    return ConnectionRouter(grid)


class TestLPath:

    def test_bend_at_start_x_end_y(self):
        assert ConnectionRouter.l_path((0, 0), (100, 60)) == [(0, 0), (0, 60), (100, 60)]

    def test_shared_row_is_straight(self):
        assert ConnectionRouter.l_path((0, 40), (100, 40)) == [(0, 40), (100, 40)]

    def test_shared_column_is_straight(self):
        assert ConnectionRouter.l_path((20, 0), (20, 80)) == [(20, 0), (20, 80)]


class TestBoundaryPoints:

    def test_rectangle_side_midpoints_are_snapped(self, router):
        shape = Shape("rectangle-1", ShapeKind.RECTANGLE, (100, 100))
        # Centre x 210 snaps up to 220
        assert router.boundary_points(shape) == [(220, 100), (320, 180), (220, 260), (100, 180)]

    def test_circle_compass_points(self, router):
        shape = Shape("circle-1", ShapeKind.CIRCLE, (200, 200))
        assert router.boundary_points(shape) == [(200, 160), (240, 200), (200, 240), (160, 200)]

    def test_rhombus_vertices(self, router):
        shape = Shape("rhombus-1", ShapeKind.RHOMBUS, (200, 200))
        # Half-diagonal 50 snaps 150 -> 160 and 250 -> 260
        assert router.boundary_points(shape) == [(200, 160), (260, 200), (200, 260), (160, 200)]


class TestRoute:

    def test_facing_sides_are_used(self, router):
        left = Shape("rectangle-1", ShapeKind.RECTANGLE, (100, 100))
        right = Shape("rectangle-2", ShapeKind.RECTANGLE, (500, 100))
        assert router.nearest_points(left, right) == ((320, 180), (500, 180))
        assert router.route(left, right) == [(320, 180), (500, 180)]

    def test_diagonal_route_has_one_bend(self, router):
        source = Shape("circle-1", ShapeKind.CIRCLE, (200, 200))
        target = Shape("circle-2", ShapeKind.CIRCLE, (500, 400))
        path = router.route(source, target)

        assert path == [(240, 200), (240, 400), (460, 400)]
        # Both runs are axis-aligned
        for (x1, y1), (x2, y2) in zip(path, path[1:]):
            assert x1 == x2 or y1 == y2
