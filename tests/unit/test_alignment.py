"""
Unit tests for the alignment engine.
"""

from models.grid import GridCoordinate
from models.interaction import AlignmentGuide, GuideOrientation
from models.primitives import LineGeometry, Rect

V = GuideOrientation.VERTICAL
H = GuideOrientation.HORIZONTAL


def _anchors(**cells):
    return {sid: GridCoordinate(*cell) for sid, cell in cells.items()}


class TestGuideIdentity:

    def test_pair_is_unordered(self):
        assert AlignmentGuide.between("b", "a", V, 3) == AlignmentGuide.between("a", "b", V, 3)
        assert AlignmentGuide.between("b", "a", V).pair_key == ("a", "b")

    def test_key_includes_orientation(self):
        vertical = AlignmentGuide.between("a", "b", V)
        horizontal = AlignmentGuide.between("a", "b", H)
        assert vertical.key != horizontal.key

    def test_involves(self):
        guide = AlignmentGuide.between("a", "b", H)
        assert guide.involves("a") and guide.involves("b")
        assert not guide.involves("c")


class TestCompute:

    def test_three_shapes(self, alignment):
        guides = alignment.compute(_anchors(A=(0, 0), B=(0, 5), C=(3, 5)))

        assert set(guides.values()) == {
            AlignmentGuide.between("A", "B", V, 0),
            AlignmentGuide.between("B", "C", H, 5),
        }
        assert not any(g.pair_key == ("A", "C") for g in guides.values())

    def test_same_cell_gives_both_orientations(self, alignment):
        guides = alignment.compute(_anchors(a=(2, 2), b=(2, 2)))
        assert {g.orientation for g in guides.values()} == {V, H}

    def test_no_shapes(self, alignment):
        assert alignment.compute({}) == {}
        assert alignment.compute(_anchors(a=(1, 1))) == {}


class TestUpdate:

    def test_first_update_adds_everything(self, alignment):
        diff = alignment.update(_anchors(a=(0, 0), b=(0, 4)))
        assert diff.added == [AlignmentGuide.between("a", "b", V, 0)]
        assert diff.removed == []
        assert len(alignment) == 1

    def test_unchanged_update_is_empty(self, alignment):
        anchors = _anchors(a=(0, 0), b=(0, 4))
        alignment.update(anchors)
        assert alignment.update(anchors).is_empty

    def test_diverging_removes_then_realigning_readds(self, alignment):
        alignment.update(_anchors(a=(0, 0), b=(0, 4)))

        diff = alignment.update(_anchors(a=(0, 0), b=(3, 4)))
        assert [g.pair_key for g in diff.removed] == [("a", "b")]
        assert len(alignment) == 0

        diff = alignment.update(_anchors(a=(0, 0), b=(0, 4)))
        assert [g.key for g in diff.added] == [(("a", "b"), V)]

    def test_pair_moving_together_is_replaced(self, alignment):
        alignment.update(_anchors(a=(0, 0), b=(0, 4)))
        diff = alignment.update(_anchors(a=(2, 0), b=(2, 4)))
        assert [g.line for g in diff.removed] == [0]
        assert [g.line for g in diff.added] == [2]

    def test_forget(self, alignment):
        alignment.update(_anchors(a=(0, 0), b=(0, 4), c=(5, 4)))
        removed = alignment.forget("b")

        assert {g.pair_key for g in removed} == {("a", "b"), ("b", "c")}
        assert len(alignment) == 0

    def test_clear(self, alignment):
        alignment.update(_anchors(a=(0, 0), b=(0, 4)))
        assert len(alignment.clear()) == 1
        assert alignment.guides == []


class TestGuideSegment:

    def test_vertical_spans_visible_height(self, alignment, grid):
        guide = AlignmentGuide.between("a", "b", V, 11)
        segment = alignment.guide_segment(guide, Rect(50, 30, 800, 600), grid)
        assert segment == LineGeometry(220, 30, 220, 630)

    def test_horizontal_spans_visible_width(self, alignment, grid):
        guide = AlignmentGuide.between("a", "b", H, 9)
        segment = alignment.guide_segment(guide, Rect(0, 0, 400, 300), grid)
        assert segment == LineGeometry(0, 180, 400, 180)
