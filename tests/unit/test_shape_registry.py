"""
Unit tests for shapes and the shape registry.
"""

import pytest

from models.grid import GridCoordinate
from models.primitives import EllipseGeometry, PolygonGeometry, RectGeometry
from models.shapes import SHAPE_SPECS, Shape, ShapeKind, parse_shape_kind, shape_contains


class TestShapeGeometry:

    def test_intrinsic_sizes(self):
        assert (SHAPE_SPECS[ShapeKind.RECTANGLE].width, SHAPE_SPECS[ShapeKind.RECTANGLE].height) == (220, 160)
        assert SHAPE_SPECS[ShapeKind.CIRCLE].width == 80
        assert SHAPE_SPECS[ShapeKind.RHOMBUS].width == 100

    def test_rectangle_origin_is_top_left(self):
        shape = Shape("rectangle-1", ShapeKind.RECTANGLE, (100, 100))
        assert shape.center == (210, 180)
        assert shape.body_geometry() == RectGeometry(100, 100, 220, 160, 10)

    def test_circle_origin_is_center(self):
        shape = Shape("circle-1", ShapeKind.CIRCLE, (200, 200))
        assert shape.center == (200, 200)
        assert shape.body_geometry() == EllipseGeometry(200, 200, 40)

    def test_rhombus_vertices(self):
        shape = Shape("rhombus-1", ShapeKind.RHOMBUS, (200, 200))
        assert shape.body_geometry() == PolygonGeometry(
            ((200, 150), (250, 200), (200, 250), (150, 200)))

    def test_label_is_centred(self):
        shape = Shape("rectangle-1", ShapeKind.RECTANGLE, (0, 0))
        label = shape.label_geometry()
        assert (label.x, label.y, label.text) == (110, 80, "Task 1")

    def test_hit_testing_follows_outline(self):
        # Bounding box corner is outside the circle and the rhombus
        assert not shape_contains(ShapeKind.CIRCLE, (200, 200), 165, 165)
        assert not shape_contains(ShapeKind.RHOMBUS, (200, 200), 160, 160)
        assert shape_contains(ShapeKind.CIRCLE, (200, 200), 230, 200)
        assert shape_contains(ShapeKind.RHOMBUS, (200, 200), 220, 220)
        assert shape_contains(ShapeKind.RECTANGLE, (0, 0), 219, 1)

    @pytest.mark.parametrize("value,expected", [
        ("rectangle", ShapeKind.RECTANGLE),
        ("Circle", ShapeKind.CIRCLE),
        ("RHOMBUS", ShapeKind.RHOMBUS),
        ("hexagon", None),
        (None, None),
    ])
    def test_parse_shape_kind(self, value, expected):
        assert parse_shape_kind(value) == expected


class TestRegistryIds:

    def test_first_id_per_kind(self, registry):
        assert registry.create(ShapeKind.RECTANGLE, 0, 0).id == "rectangle-1"
        assert registry.create(ShapeKind.CIRCLE, 0, 0).id == "circle-1"
        assert registry.create(ShapeKind.RECTANGLE, 300, 0).id == "rectangle-2"

    def test_ids_are_unique(self, registry):
        ids = [registry.create(ShapeKind.RHOMBUS, i * 200, 0).id for i in range(5)]
        assert len(set(ids)) == 5

    def test_smallest_free_number_is_reused(self, registry):
        for i in range(3):
            registry.create(ShapeKind.CIRCLE, i * 100, 0)
        registry.remove("circle-2")

        assert registry.next_id(ShapeKind.CIRCLE) == "circle-2"
        assert registry.create(ShapeKind.CIRCLE, 500, 0).id == "circle-2"
        assert registry.create(ShapeKind.CIRCLE, 600, 0).id == "circle-4"

    def test_numbers_are_per_kind(self, registry):
        registry.create(ShapeKind.RECTANGLE, 0, 0)
        registry.remove("rectangle-1")
        registry.create(ShapeKind.CIRCLE, 0, 0)
        assert registry.next_id(ShapeKind.RECTANGLE) == "rectangle-1"


class TestRegistryMutation:

    def test_anchor_cell_is_center_cell(self, registry):
        shape = registry.create(ShapeKind.RECTANGLE, 100, 100)
        # Centre (210, 180): 10.5 rounds up
        assert shape.anchor_cell == GridCoordinate(11, 9)

        circle = registry.create(ShapeKind.CIRCLE, 200, 200)
        assert circle.anchor_cell == GridCoordinate(10, 10)

    def test_move_recomputes_anchor(self, registry):
        shape = registry.create(ShapeKind.CIRCLE, 200, 200)
        moved = registry.move_to(shape.id, 400, 100)

        assert moved.origin == (400, 100)
        assert moved.anchor_cell == GridCoordinate(20, 5)
        assert registry.get(shape.id).anchor_cell == GridCoordinate(20, 5)

    def test_move_unknown_returns_none(self, registry):
        assert registry.move_to("circle-9", 0, 0) is None

    def test_get_returns_copies(self, registry):
        shape = registry.create(ShapeKind.CIRCLE, 200, 200)
        shape.origin = (999, 999)
        registry.get(shape.id).origin = (555, 555)
        assert registry.get(shape.id).origin == (200, 200)

    def test_remove(self, registry):
        shape = registry.create(ShapeKind.RHOMBUS, 200, 200)
        removed = registry.remove(shape.id)

        assert removed.id == shape.id
        assert registry.get(shape.id) is None
        assert shape.id not in registry
        assert registry.remove(shape.id) is None

    def test_remove_notifies_listeners(self, registry):
        seen = []
        registry.add_removal_listener(lambda s: seen.append(s.id))
        registry.create(ShapeKind.CIRCLE, 0, 0)
        registry.create(ShapeKind.CIRCLE, 200, 0)

        registry.remove("circle-1")
        registry.clear()

        assert seen == ["circle-1", "circle-2"]
        assert len(registry) == 0


class TestRegistryQueries:

    def test_shape_at_prefers_topmost(self, registry):
        registry.create(ShapeKind.RECTANGLE, 100, 100)
        registry.create(ShapeKind.CIRCLE, 150, 150)

        assert registry.shape_at(150, 150).id == "circle-1"
        assert registry.shape_at(300, 240).id == "rectangle-1"
        assert registry.shape_at(10, 10) is None

    def test_bring_to_front_changes_hit_order(self, registry):
        registry.create(ShapeKind.RECTANGLE, 100, 100)
        registry.create(ShapeKind.CIRCLE, 150, 150)

        registry.bring_to_front("rectangle-1")
        assert registry.shape_at(150, 150).id == "rectangle-1"
        assert registry.ids() == ["circle-1", "rectangle-1"]

    def test_anchors(self, registry):
        registry.create(ShapeKind.CIRCLE, 0, 0)
        registry.create(ShapeKind.CIRCLE, 200, 100)
        assert registry.anchors() == {
            "circle-1": GridCoordinate(0, 0),
            "circle-2": GridCoordinate(10, 5),
        }

    def test_shapes_bottom_to_top(self, registry):
        registry.create(ShapeKind.CIRCLE, 0, 0)
        registry.create(ShapeKind.RHOMBUS, 200, 0)
        assert [s.id for s in registry.shapes()] == ["circle-1", "rhombus-1"]
