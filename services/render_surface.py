"""
Rendering surface interface.

The canvas engine draws through this protocol and never inspects the
rendered output to recover state. Handles are opaque to the engine.
"""

from typing import Any, Protocol

from models.primitives import Geometry, PrimitiveKind, PrimitiveStyle, Rect


PrimitiveHandle = Any


class RenderSurface(Protocol):
    """Drawing collaborator used by the interaction controller."""

    def draw_primitive(self, kind: PrimitiveKind, geometry: Geometry,
                       style: PrimitiveStyle) -> PrimitiveHandle:
        """Draw a new primitive and return its handle."""
        ...

    def update_primitive(self, handle: PrimitiveHandle, geometry: Geometry) -> None:
        """Replace the geometry of an existing primitive."""
        ...

    def remove_primitive(self, handle: PrimitiveHandle) -> None:
        ...

    def get_bounding_box(self, handle: PrimitiveHandle) -> Rect:
        """World-space bounds reflecting the last applied geometry."""
        ...

    def raise_primitive(self, handle: PrimitiveHandle) -> None:
        """Bring a primitive to the front."""
        ...

    def set_view_transform(self, scale: float, tx: float, ty: float) -> None:
        """Apply the world-to-screen transform (screen = world * scale + t)."""
        ...
