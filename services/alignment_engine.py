"""
Alignment Engine.

Finds pairs of shapes whose anchor cells share a row or a column. The
scan is pairwise over all shapes; diagrams are human-scale, so this runs
on every drag tick without an index.
"""

import logging
from itertools import combinations

from models.grid import GridCoordinate, GridModel
from models.interaction import AlignmentGuide, GuideDiff, GuideOrientation
from models.primitives import LineGeometry, Rect

logger = logging.getLogger(__name__)


GuideKey = tuple[tuple[str, str], GuideOrientation]


class AlignmentEngine:
    """Keeps the current guide set and reports what changed."""

    def __init__(self):
        self._guides: dict[GuideKey, AlignmentGuide] = {}

    @property
    def guides(self) -> list[AlignmentGuide]:
        return list(self._guides.values())

    def __len__(self) -> int:
        return len(self._guides)

    def __contains__(self, key: GuideKey) -> bool:
        return key in self._guides

    @staticmethod
    def compute(anchors: dict[str, GridCoordinate]) -> dict[GuideKey, AlignmentGuide]:
        """Compute the full guide set for a set of anchor cells."""
        guides = {}
        for id_a, id_b in combinations(sorted(anchors), 2):
            cell_a, cell_b = anchors[id_a], anchors[id_b]
            if cell_a.col == cell_b.col:
                guide = AlignmentGuide.between(id_a, id_b, GuideOrientation.VERTICAL, cell_a.col)
                guides[guide.key] = guide
            if cell_a.row == cell_b.row:
                guide = AlignmentGuide.between(id_a, id_b, GuideOrientation.HORIZONTAL, cell_a.row)
                guides[guide.key] = guide
        return guides

    def update(self, anchors: dict[str, GridCoordinate]) -> GuideDiff:
        """
        Recompute guides and return the difference from the last set.

        A guide whose pair still matches but on a different line (both
        shapes moved together) is reported as removed and re-added.
        """
        current = self.compute(anchors)
        diff = GuideDiff()

        for key, guide in list(self._guides.items()):
            if current.get(key) != guide:
                diff.removed.append(self._guides.pop(key))

        for key, guide in current.items():
            if key not in self._guides:
                self._guides[key] = guide
                diff.added.append(guide)

        if not diff.is_empty:
            logger.debug(f"Guides +{len(diff.added)} -{len(diff.removed)}")
        return diff

    def forget(self, shape_id: str) -> list[AlignmentGuide]:
        """Drop every guide referencing a shape."""
        removed = [g for g in self._guides.values() if g.involves(shape_id)]
        for guide in removed:
            del self._guides[guide.key]
        return removed

    def clear(self) -> list[AlignmentGuide]:
        removed = list(self._guides.values())
        self._guides.clear()
        return removed

    @staticmethod
    def guide_segment(guide: AlignmentGuide, visible: Rect, grid: GridModel) -> LineGeometry:
        """Line spanning the visible area along the guide's row or column."""
        if guide.orientation == GuideOrientation.VERTICAL:
            x, _ = grid.cell_to_world(GridCoordinate(guide.line, 0))
            return LineGeometry(x, visible.top, x, visible.bottom)
        _, y = grid.cell_to_world(GridCoordinate(0, guide.line))
        return LineGeometry(visible.left, y, visible.right, y)
