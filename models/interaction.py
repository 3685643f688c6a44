"""
Interaction state models.

Value types passed through the interaction controller: the closed set of
controller states, the drag session, alignment guides and connections.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Union

from .grid import GridCoordinate
from .shapes import ShapeKind


class CollisionPolicy(Enum):
    """
    How occupied cells affect placement and moves.

    ENFORCE rejects a placement or move onto occupied cells. ADVISORY
    records occupancy but never blocks.
    """
    ENFORCE = "enforce"
    ADVISORY = "advisory"


class GuideOrientation(Enum):
    HORIZONTAL = "horizontal"   # Shared row
    VERTICAL = "vertical"       # Shared column


@dataclass(frozen=True)
class AlignmentGuide:
    """
    A guide between two shapes sharing a grid row or column.

    The id pair is stored sorted so (a, b) and (b, a) are the same guide.
    """
    shape_a: str
    shape_b: str
    orientation: GuideOrientation
    # Column (vertical) or row (horizontal) index the guide sits on
    line: int = 0

    @classmethod
    def between(cls, id1: str, id2: str, orientation: GuideOrientation, line: int = 0) -> "AlignmentGuide":
        a, b = sorted((id1, id2))
        return cls(a, b, orientation, line)

    @property
    def pair_key(self) -> tuple[str, str]:
        return (self.shape_a, self.shape_b)

    @property
    def key(self) -> tuple[tuple[str, str], GuideOrientation]:
        return (self.pair_key, self.orientation)

    def involves(self, shape_id: str) -> bool:
        return shape_id in (self.shape_a, self.shape_b)


@dataclass
class GuideDiff:
    """Guides added and removed by one recomputation."""
    added: list[AlignmentGuide] = field(default_factory=list)
    removed: list[AlignmentGuide] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.added and not self.removed


@dataclass(frozen=True)
class DragSession:
    """
    State captured at drag start.

    Attributes:
        shape_id: Shape being dragged
        offset: Pointer position minus shape origin, in world units
        start_origin: Origin before the drag, used for rollback
    """
    shape_id: str
    offset: tuple[float, float]
    start_origin: tuple[float, float]


@dataclass
class Connection:
    """An L-shaped connector between two shapes."""
    id: str
    source_id: str
    target_id: str
    points: list[tuple[float, float]] = field(default_factory=list)

    def involves(self, shape_id: str) -> bool:
        return shape_id in (self.source_id, self.target_id)


class MenuOption(Enum):
    """Affordances in the option menu of a selected shape."""
    DELETE = auto()
    CONNECT = auto()
    INFO = auto()


MENU_ICONS = {
    MenuOption.DELETE: "✖",
    MenuOption.CONNECT: "→",
    MenuOption.INFO: "i",
}


@dataclass(frozen=True)
class ShapeInfo:
    """Summary reported by the info affordance."""
    shape_id: str
    kind: ShapeKind
    origin: tuple[float, float]
    anchor_cell: GridCoordinate
    occupied_cells: int
    connections: int


# ============================================================================
# Controller states
# ============================================================================

@dataclass(frozen=True)
class IdleState:
    """No shape kind pending and nothing selected."""


@dataclass(frozen=True)
class PreviewingState:
    """A kind is pending; a ghost follows the pointer."""
    kind: ShapeKind


@dataclass(frozen=True)
class SelectedState:
    shape_id: str


@dataclass(frozen=True)
class DraggingState:
    session: DragSession


@dataclass(frozen=True)
class ConnectingState:
    """Waiting for a click on the connection target."""
    source_id: str


ControllerState = Union[IdleState, PreviewingState, SelectedState, DraggingState, ConnectingState]
