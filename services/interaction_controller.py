"""
Interaction controller for the diagram canvas.

Drives placement, selection, dragging, deletion and connection from
pointer events. Composes the grid, viewport, registry, occupancy index
and alignment engine, and mirrors their state onto a rendering surface.

States (exactly one is active):

    Idle ──select kind──> Previewing ──click──> Idle (shape placed)
    Idle ──click shape──> Selected ──drag──> Dragging ──release──> Selected
    Selected ──connect──> Connecting ──click target──> Idle
    Selected ──delete / background click──> Idle

Entering a state clears the visual artifacts of the previous one. Leaving
Dragging by any route settles the move against the occupancy index first.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Union

from models.grid import GridModel
from models.interaction import (
    AlignmentGuide, CollisionPolicy, Connection, ConnectingState,
    ControllerState, DragSession, DraggingState, IdleState, MENU_ICONS,
    MenuOption, PreviewingState, SelectedState, ShapeInfo,
)
from models.primitives import (
    CONNECTION_STYLE, GUIDE_STYLE, MENU_LABEL_STYLE, MENU_STYLE,
    OVERLAY_STYLE, RUBBER_BAND_STYLE, LineGeometry, PolylineGeometry,
    PrimitiveKind, Rect, RectGeometry, TextGeometry,
)
from models.shapes import (
    Shape, ShapeKind, body_geometry_for, body_style_for, label_geometry_for,
    label_style_for, parse_shape_kind, primitive_kind_for,
)
from models.viewport import ViewportTransform
from services.alignment_engine import AlignmentEngine, GuideKey
from services.connection_router import ConnectionRouter
from services.occupancy_index import OccupancyIndex
from services.render_surface import PrimitiveHandle, RenderSurface
from services.settings_manager import CanvasSettings
from services.shape_registry import ShapeRegistry

logger = logging.getLogger(__name__)


MENU_ICON_SIZE = 20
MENU_ICON_SPACING = 4
MENU_MARGIN = 8
OVERLAY_MARGIN = 6


@dataclass
class ShapeHandles:
    """Surface handles making up one drawn shape."""
    body: PrimitiveHandle
    label: PrimitiveHandle


class InteractionController:
    """
    State machine driving the canvas.

    The controller owns the engine components; the host shell feeds it
    pointer events in screen coordinates and the controller draws
    through the rendering surface.
    """

    def __init__(
        self,
        surface: RenderSurface,
        screen_width: float,
        screen_height: float,
        settings: Optional[CanvasSettings] = None,
    ):
        settings = settings or CanvasSettings()

        self.grid = GridModel(settings.grid_size)
        self.viewport = ViewportTransform(
            screen_width, screen_height,
            min_zoom=settings.min_zoom,
            max_zoom=settings.max_zoom,
            world_multiple=settings.world_multiple,
        )
        self.registry = ShapeRegistry(self.grid)
        self.occupancy = OccupancyIndex(self.grid)
        self.alignment = AlignmentEngine()
        self.router = ConnectionRouter(self.grid)
        self.collision_policy = settings.policy
        self._zoom_in_step = settings.zoom_in_step
        self._zoom_out_step = settings.zoom_out_step

        self._surface = surface
        self._state: ControllerState = IdleState()
        self._last_pointer: Optional[tuple[float, float]] = None

        # Surface handles, keyed by the id of what they depict
        self._shape_handles: dict[str, ShapeHandles] = {}
        self._preview: Optional[ShapeHandles] = None
        self._overlay: Optional[PrimitiveHandle] = None
        self._menu: dict[MenuOption, ShapeHandles] = {}
        self._guide_handles: dict[GuideKey, PrimitiveHandle] = {}
        self._rubber_band: Optional[PrimitiveHandle] = None

        self._connections: dict[str, Connection] = {}
        self._connection_handles: dict[str, PrimitiveHandle] = {}

        self._info_listeners: list[Callable[[ShapeInfo], None]] = []
        self._state_listeners: list[Callable[[ControllerState], None]] = []

        self.registry.add_removal_listener(self._on_shape_removed)
        self._apply_view()

    # ==================================================================
    # Queries
    # ==================================================================

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def selected_shape_id(self) -> Optional[str]:
        if isinstance(self._state, SelectedState):
            return self._state.shape_id
        return None

    @property
    def guides(self) -> list[AlignmentGuide]:
        return self.alignment.guides

    @property
    def connections(self) -> list[Connection]:
        return [
            Connection(c.id, c.source_id, c.target_id, list(c.points))
            for c in self._connections.values()
        ]

    def shape_at_screen(self, screen_x: float, screen_y: float) -> Optional[str]:
        """Get the id of the topmost shape under a screen point."""
        shape = self.registry.shape_at(*self.viewport.screen_to_world(screen_x, screen_y))
        return shape.id if shape else None

    def menu_option_at_screen(self, screen_x: float, screen_y: float) -> Optional[MenuOption]:
        return self._menu_option_at(*self.viewport.screen_to_world(screen_x, screen_y))

    def shape_info(self, shape_id: str) -> Optional[ShapeInfo]:
        shape = self.registry.get(shape_id)
        if shape is None:
            return None
        return ShapeInfo(
            shape_id=shape.id,
            kind=shape.kind,
            origin=shape.origin,
            anchor_cell=shape.anchor_cell,
            occupied_cells=len(self.occupancy.cells_of(shape.id)),
            connections=sum(1 for c in self._connections.values() if c.involves(shape.id)),
        )

    def add_info_listener(self, listener: Callable[[ShapeInfo], None]):
        self._info_listeners.append(listener)

    def add_state_listener(self, listener: Callable[[ControllerState], None]):
        self._state_listeners.append(listener)

    # ==================================================================
    # Host surface
    # ==================================================================

    def select_shape_kind(self, kind: Union[ShapeKind, str, None]):
        """Set the pending placement kind; None returns to idle."""
        if isinstance(kind, str):
            resolved = parse_shape_kind(kind)
            if resolved is None:
                logger.warning(f"Unknown shape kind '{kind}'")
                return
            kind = resolved

        if kind is None:
            self._set_state(IdleState())
            return

        self._set_state(PreviewingState(kind))
        if self._last_pointer is not None:
            self._update_preview(kind, *self._last_pointer)

    def on_pointer_move(self, screen_x: float, screen_y: float):
        self._last_pointer = (screen_x, screen_y)
        state = self._state

        if isinstance(state, PreviewingState):
            self._update_preview(state.kind, screen_x, screen_y)
        elif isinstance(state, ConnectingState):
            self._update_rubber_band(state.source_id, screen_x, screen_y)
        elif isinstance(state, DraggingState):
            self._drag_to(state.session, screen_x, screen_y)

    def on_pointer_down(self, screen_x: float, screen_y: float):
        """Handle a click at a screen position."""
        self._last_pointer = (screen_x, screen_y)
        world_x, world_y = self.viewport.screen_to_world(screen_x, screen_y)
        state = self._state

        if isinstance(state, PreviewingState):
            self._place(state.kind, world_x, world_y)
            return

        if isinstance(state, ConnectingState):
            self._finish_connection(state.source_id, world_x, world_y)
            return

        if isinstance(state, DraggingState):
            logger.debug("Pointer down during drag ignored")
            return

        if isinstance(state, SelectedState):
            option = self._menu_option_at(world_x, world_y)
            if option is not None:
                self.activate_option(option)
                return

        shape = self.registry.shape_at(world_x, world_y)
        if shape is not None:
            self.select(shape.id)
        elif not isinstance(state, IdleState):
            # Background click
            self._set_state(IdleState())

    def on_pointer_up(self, screen_x: float, screen_y: float):
        self._last_pointer = (screen_x, screen_y)
        if isinstance(self._state, DraggingState):
            session = self._state.session
            self._drag_to(session, screen_x, screen_y)
            self._finish_drag(session)

    def on_wheel(self, delta_y: float):
        """Scrolling pans the canvas vertically."""
        self.pan(0, -delta_y)

    def on_drag_start(self, target: str, screen_x: float, screen_y: float):
        shape = self.registry.get(target)
        if shape is None:
            logger.warning(f"Drag start on unknown shape '{target}' ignored")
            return

        world_x, world_y = self.viewport.screen_to_world(screen_x, screen_y)
        session = DragSession(
            shape_id=target,
            offset=(world_x - shape.origin[0], world_y - shape.origin[1]),
            start_origin=shape.origin,
        )

        self.registry.bring_to_front(target)
        handles = self._shape_handles.get(target)
        if handles is not None:
            self._surface.raise_primitive(handles.body)
            self._surface.raise_primitive(handles.label)

        self._set_state(DraggingState(session))
        self._refresh_guides()
        logger.debug(f"Drag start {target} offset={session.offset}")

    def on_drag_move(self, target: str, screen_x: float, screen_y: float):
        session = self._session_for(target)
        if session is not None:
            self._last_pointer = (screen_x, screen_y)
            self._drag_to(session, screen_x, screen_y)

    def on_drag_end(self, target: str, screen_x: float, screen_y: float):
        session = self._session_for(target)
        if session is not None:
            self._drag_to(session, screen_x, screen_y)
            self._finish_drag(session)

    def zoom_in(self):
        self.zoom(self._zoom_in_step)

    def zoom_out(self):
        self.zoom(self._zoom_out_step)

    def zoom(self, factor: float, pivot: Optional[tuple[float, float]] = None):
        """Zoom about a screen pivot, the viewport centre by default."""
        if pivot is None:
            pivot = (self.viewport.screen_width / 2, self.viewport.screen_height / 2)
        self.viewport.apply_zoom(factor, pivot)
        self._apply_view()

    def pan(self, dx: float, dy: float):
        self.viewport.apply_pan(dx, dy)
        self._apply_view()

    def resize(self, screen_width: float, screen_height: float):
        self.viewport.resize(screen_width, screen_height)
        self._apply_view()

    def reset_view(self):
        self.viewport.reset()
        self._apply_view()

    def select(self, shape_id: str):
        if shape_id not in self.registry:
            logger.warning(f"Cannot select unknown shape '{shape_id}'")
            return
        self._set_state(SelectedState(shape_id))

    def deselect(self):
        if isinstance(self._state, SelectedState):
            self._set_state(IdleState())

    def cancel(self):
        """Abort the active mode. A running drag is settled where it is."""
        self._set_state(IdleState())

    def activate_option(self, option: MenuOption):
        """Trigger an option menu affordance for the selected shape."""
        shape_id = self.selected_shape_id
        if shape_id is None:
            return

        if option == MenuOption.DELETE:
            self.delete_shape(shape_id)
        elif option == MenuOption.CONNECT:
            self._set_state(ConnectingState(shape_id))
        elif option == MenuOption.INFO:
            info = self.shape_info(shape_id)
            logger.info(f"Shape info: {info}")
            for listener in self._info_listeners:
                listener(info)

    def delete_selected(self):
        shape_id = self.selected_shape_id
        if shape_id is not None:
            self.delete_shape(shape_id)

    def delete_shape(self, shape_id: str):
        """Remove a shape with everything attached to it."""
        if shape_id not in self.registry:
            logger.warning(f"Cannot delete unknown shape '{shape_id}'")
            return
        self.cancel()
        self.registry.remove(shape_id)

    def connect(self, source_id: str, target_id: str) -> Optional[Connection]:
        """Draw a connection between two shapes."""
        source = self.registry.get(source_id)
        target = self.registry.get(target_id)
        if source is None or target is None or source_id == target_id:
            return None

        connection = Connection(
            id=self._next_connection_id(),
            source_id=source_id,
            target_id=target_id,
            points=self.router.route(source, target),
        )
        self._connections[connection.id] = connection
        self._connection_handles[connection.id] = self._surface.draw_primitive(
            PrimitiveKind.POLYLINE,
            PolylineGeometry(tuple(connection.points)),
            CONNECTION_STYLE,
        )
        logger.info(f"Connected {source_id} -> {target_id} ({connection.id})")
        return connection

    def clear(self):
        """Remove every shape and connection."""
        self.cancel()
        self.registry.clear()

    # ==================================================================
    # State handling
    # ==================================================================

    def _set_state(self, new_state: ControllerState):
        previous = self._state
        if isinstance(previous, DraggingState):
            self._settle_drag(previous.session)
        self._clear_mode_artifacts()
        self._state = new_state
        if isinstance(new_state, SelectedState):
            self._show_selection(new_state.shape_id)
        for listener in self._state_listeners:
            listener(new_state)

    def _clear_mode_artifacts(self):
        if self._preview is not None:
            self._surface.remove_primitive(self._preview.body)
            self._surface.remove_primitive(self._preview.label)
            self._preview = None
        if self._overlay is not None:
            self._surface.remove_primitive(self._overlay)
            self._overlay = None
        for handles in self._menu.values():
            self._surface.remove_primitive(handles.body)
            self._surface.remove_primitive(handles.label)
        self._menu.clear()
        if self._rubber_band is not None:
            self._surface.remove_primitive(self._rubber_band)
            self._rubber_band = None
        self.alignment.clear()
        for handle in self._guide_handles.values():
            self._surface.remove_primitive(handle)
        self._guide_handles.clear()

    def _session_for(self, target: str) -> Optional[DragSession]:
        state = self._state
        if not isinstance(state, DraggingState) or state.session.shape_id != target:
            logger.warning(f"Drag event for '{target}' without an active drag ignored")
            return None
        return state.session

    # ==================================================================
    # Placement
    # ==================================================================

    def _update_preview(self, kind: ShapeKind, screen_x: float, screen_y: float):
        origin = self.grid.snap(*self.viewport.screen_to_world(screen_x, screen_y))
        body = body_geometry_for(kind, origin)
        label = label_geometry_for(kind, origin)
        if self._preview is None:
            self._preview = ShapeHandles(
                body=self._surface.draw_primitive(
                    primitive_kind_for(kind), body, body_style_for(kind, preview=True)),
                label=self._surface.draw_primitive(
                    PrimitiveKind.TEXT, label, label_style_for(kind, preview=True)),
            )
        else:
            self._surface.update_primitive(self._preview.body, body)
            self._surface.update_primitive(self._preview.label, label)

    def _place(self, kind: ShapeKind, world_x: float, world_y: float) -> Optional[Shape]:
        origin = self.grid.snap(world_x, world_y)
        cells = self.occupancy.cells_for_kind(kind, origin)

        if not self.occupancy.are_free(cells):
            if self.collision_policy == CollisionPolicy.ENFORCE:
                logger.debug(f"Placement of {kind.value} at {origin} rejected: cells occupied")
                return None
            logger.debug(f"Placement of {kind.value} at {origin} overlaps existing shapes")

        shape = self.registry.create(kind, *origin)
        self.occupancy.claim(shape.id, cells)
        self._draw_shape(shape)
        self._set_state(IdleState())
        return shape

    def _draw_shape(self, shape: Shape):
        self._shape_handles[shape.id] = ShapeHandles(
            body=self._surface.draw_primitive(
                shape.primitive_kind, shape.body_geometry(), body_style_for(shape.kind)),
            label=self._surface.draw_primitive(
                PrimitiveKind.TEXT, shape.label_geometry(), label_style_for(shape.kind)),
        )

    def _redraw_shape(self, shape: Shape):
        handles = self._shape_handles.get(shape.id)
        if handles is None:
            logger.warning(f"No surface handles for {shape.id}")
            return
        self._surface.update_primitive(handles.body, shape.body_geometry())
        self._surface.update_primitive(handles.label, shape.label_geometry())

    # ==================================================================
    # Selection
    # ==================================================================

    def _show_selection(self, shape_id: str):
        shape = self.registry.get(shape_id)
        if shape is None:
            return

        outline = shape.bounding_rect.adjusted(OVERLAY_MARGIN)
        self._overlay = self._surface.draw_primitive(
            PrimitiveKind.RECT,
            RectGeometry(outline.x, outline.y, outline.width, outline.height),
            OVERLAY_STYLE,
        )

        for option, rect in self._menu_layout(shape).items():
            self._menu[option] = ShapeHandles(
                body=self._surface.draw_primitive(
                    PrimitiveKind.RECT,
                    RectGeometry(rect.x, rect.y, rect.width, rect.height, 4),
                    MENU_STYLE,
                ),
                label=self._surface.draw_primitive(
                    PrimitiveKind.TEXT,
                    TextGeometry(*rect.center, MENU_ICONS[option]),
                    MENU_LABEL_STYLE,
                ),
            )

    @staticmethod
    def _menu_layout(shape: Shape) -> dict[MenuOption, Rect]:
        """Option icons stacked down the right side of the shape."""
        bounds = shape.bounding_rect
        x = bounds.right + MENU_MARGIN
        layout = {}
        for i, option in enumerate(MenuOption):
            y = bounds.top + i * (MENU_ICON_SIZE + MENU_ICON_SPACING)
            layout[option] = Rect(x, y, MENU_ICON_SIZE, MENU_ICON_SIZE)
        return layout

    def _menu_option_at(self, world_x: float, world_y: float) -> Optional[MenuOption]:
        for option, handles in self._menu.items():
            if self._surface.get_bounding_box(handles.body).contains(world_x, world_y):
                return option
        return None

    # ==================================================================
    # Dragging
    # ==================================================================

    def _drag_to(self, session: DragSession, screen_x: float, screen_y: float):
        world_x, world_y = self.viewport.screen_to_world(screen_x, screen_y)
        ox, oy = session.offset
        new_origin = self.grid.snap(world_x - ox, world_y - oy)

        current = self.registry.get(session.shape_id)
        if current is None:
            logger.warning(f"Dragged shape '{session.shape_id}' no longer exists")
            self._set_state(IdleState())
            return
        if current.origin == new_origin:
            return

        shape = self.registry.move_to(session.shape_id, *new_origin)
        self._redraw_shape(shape)
        self._reroute_connections(shape.id)
        self._refresh_guides()

    def _finish_drag(self, session: DragSession):
        if session.shape_id not in self.registry:
            logger.warning(f"Drag end for missing shape '{session.shape_id}'")
            self._set_state(IdleState())
            return
        self._set_state(SelectedState(session.shape_id))

    def _settle_drag(self, session: DragSession):
        """Commit the dragged position, or roll it back onto occupied cells."""
        shape = self.registry.get(session.shape_id)
        if shape is None:
            return

        cells = self.occupancy.cells_for(shape)
        conflicts = self.occupancy.conflicts(cells, ignore=shape.id)

        if conflicts and self.collision_policy == CollisionPolicy.ENFORCE:
            logger.debug(f"Move of {shape.id} rejected, overlaps {sorted(conflicts)}")
            shape = self.registry.move_to(shape.id, *session.start_origin)
            self._redraw_shape(shape)
            self._reroute_connections(shape.id)
        else:
            self.occupancy.forget(shape.id)
            self.occupancy.claim(shape.id, cells)

    def _refresh_guides(self):
        diff = self.alignment.update(self.registry.anchors())
        visible = self.viewport.visible_world_rect()

        for guide in diff.removed:
            handle = self._guide_handles.pop(guide.key, None)
            if handle is not None:
                self._surface.remove_primitive(handle)

        for guide in diff.added:
            self._guide_handles[guide.key] = self._surface.draw_primitive(
                PrimitiveKind.LINE,
                self.alignment.guide_segment(guide, visible, self.grid),
                GUIDE_STYLE,
            )

    # ==================================================================
    # Connections
    # ==================================================================

    def _update_rubber_band(self, source_id: str, screen_x: float, screen_y: float):
        source = self.registry.get(source_id)
        if source is None:
            self._set_state(IdleState())
            return

        cx, cy = source.center
        world_x, world_y = self.viewport.screen_to_world(screen_x, screen_y)
        line = LineGeometry(cx, cy, world_x, world_y)
        if self._rubber_band is None:
            self._rubber_band = self._surface.draw_primitive(
                PrimitiveKind.LINE, line, RUBBER_BAND_STYLE)
        else:
            self._surface.update_primitive(self._rubber_band, line)

    def _finish_connection(self, source_id: str, world_x: float, world_y: float):
        target = self.registry.shape_at(world_x, world_y)
        self._set_state(IdleState())

        if source_id not in self.registry:
            logger.debug(f"Connection source '{source_id}' was deleted, cancelled")
            return
        if target is None or target.id == source_id:
            logger.debug("Connection cancelled")
            return
        self.connect(source_id, target.id)

    def _reroute_connections(self, shape_id: str):
        for connection in self._connections.values():
            if not connection.involves(shape_id):
                continue
            source = self.registry.get(connection.source_id)
            target = self.registry.get(connection.target_id)
            if source is None or target is None:
                continue
            connection.points = self.router.route(source, target)
            self._surface.update_primitive(
                self._connection_handles[connection.id],
                PolylineGeometry(tuple(connection.points)),
            )

    def _next_connection_id(self) -> str:
        n = 1
        while f"connection-{n}" in self._connections:
            n += 1
        return f"connection-{n}"

    # ==================================================================
    # Removal and view
    # ==================================================================

    def _on_shape_removed(self, shape: Shape):
        self.occupancy.forget(shape.id)

        for guide in self.alignment.forget(shape.id):
            handle = self._guide_handles.pop(guide.key, None)
            if handle is not None:
                self._surface.remove_primitive(handle)

        for connection_id in [c.id for c in self._connections.values() if c.involves(shape.id)]:
            del self._connections[connection_id]
            self._surface.remove_primitive(self._connection_handles.pop(connection_id))

        handles = self._shape_handles.pop(shape.id, None)
        if handles is not None:
            self._surface.remove_primitive(handles.body)
            self._surface.remove_primitive(handles.label)

        state = self._state
        if (isinstance(state, SelectedState) and state.shape_id == shape.id) or \
           (isinstance(state, ConnectingState) and state.source_id == shape.id) or \
           (isinstance(state, DraggingState) and state.session.shape_id == shape.id):
            self._set_state(IdleState())

    def _apply_view(self):
        s = self.viewport.state
        self._surface.set_view_transform(s.k, s.tx, s.ty)

        if self._guide_handles:
            visible = self.viewport.visible_world_rect()
            for guide in self.alignment.guides:
                handle = self._guide_handles.get(guide.key)
                if handle is not None:
                    self._surface.update_primitive(
                        handle, self.alignment.guide_segment(guide, visible, self.grid))
