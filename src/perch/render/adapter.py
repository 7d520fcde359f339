"""Render adapter between the overlay lifecycle and a rendering surface.

The adapter turns the current visibility state and placement into either a
mounted overlay frame or an empty surface. It makes no placement decisions:
the box, the side and therefore the indicator orientation all come from the
resolver.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from perch.geometry.placement import PlacementResult, Side
from perch.geometry.primitives import Rect, Size
from perch.lifecycle.state import VisibilityState
from perch.overlay.config import OverlayConfig, OverlayKind

logger = logging.getLogger(__name__)

RGBA = tuple[int, int, int, int]


@dataclass(frozen=True)
class OverlayStyle:
    """Visual styling of one overlay kind.

    Attributes:
        background: Fill color of the box and indicator.
        border: Outline color of the box and indicator.
        text: Color of title, content and icon.
        icon: Single glyph drawn in the icon column.
        padding_x: Horizontal padding inside the box in pixels.
        padding_y: Vertical padding inside the box in pixels.
        radius: Corner radius of the box.
        font_size: Font size for title and content.
        line_height: Distance between text baselines.
        icon_size: Width of the icon column.
        icon_gap: Space between icon column and text.
        indicator_size: Half-width of the directional indicator.
    """

    background: RGBA = (249, 250, 251, 255)
    border: RGBA = (229, 231, 235, 255)
    text: RGBA = (17, 24, 39, 255)
    icon: str = "i"
    padding_x: int = 12
    padding_y: int = 8
    radius: int = 8
    font_size: int = 13
    line_height: int = 18
    icon_size: int = 16
    icon_gap: int = 8
    indicator_size: int = 6


STYLES: dict[OverlayKind, OverlayStyle] = {
    OverlayKind.INFO: OverlayStyle(),
    OverlayKind.HELP: OverlayStyle(
        background=(239, 246, 255, 255),
        border=(191, 219, 254, 255),
        text=(30, 58, 138, 255),
        icon="?",
    ),
    OverlayKind.WARNING: OverlayStyle(
        background=(255, 251, 235, 255),
        border=(253, 230, 138, 255),
        text=(120, 53, 15, 255),
        icon="!",
    ),
    OverlayKind.EXPLANATION: OverlayStyle(
        background=(250, 245, 255, 255),
        border=(233, 213, 255, 255),
        text=(88, 28, 135, 255),
        icon="i",
    ),
}


def style_for(kind: OverlayKind) -> OverlayStyle:
    """Return the style for an overlay kind (info style if unknown)."""
    return STYLES.get(kind, STYLES[OverlayKind.INFO])


def indicator_polygon(side: Side, box: Rect, size: float) -> list[tuple[float, float]]:
    """Triangle on the box edge facing the trigger, pointing at it.

    Args:
        side: Side of the trigger the overlay was placed on.
        box: The overlay's box.
        size: Half-width of the triangle base (and its height).

    Returns:
        Three (x, y) vertices: two on the box edge, then the tip.
    """
    center = box.center
    if side is Side.TOP:
        return [
            (center.x - size, box.bottom),
            (center.x + size, box.bottom),
            (center.x, box.bottom + size),
        ]
    if side is Side.BOTTOM:
        return [
            (center.x - size, box.top),
            (center.x + size, box.top),
            (center.x, box.top - size),
        ]
    if side is Side.LEFT:
        return [
            (box.right, center.y - size),
            (box.right, center.y + size),
            (box.right + size, center.y),
        ]
    return [
        (box.left, center.y - size),
        (box.left, center.y + size),
        (box.left - size, center.y),
    ]


@dataclass(frozen=True)
class OverlayFrame:
    """Everything a surface needs to draw one overlay.

    Attributes:
        config: The overlay's configuration (title, content, kind).
        box: Where the overlay box goes, in viewport coordinates.
        side: Side of the trigger the box is on.
        style: Visual style for the overlay kind.
        indicator: Vertices of the directional indicator.
    """

    config: OverlayConfig
    box: Rect
    side: Side
    style: OverlayStyle
    indicator: list[tuple[float, float]]


class RenderSurface(Protocol):
    """External rendering surface for overlay content.

    Implementations draw into a layer detached from the page's normal flow,
    so no ancestor clip region applies to it.
    """

    @property
    def viewport(self) -> Size:
        """Current size of the visible viewport."""
        ...

    def measure(self, config: OverlayConfig, style: OverlayStyle) -> Size | None:
        """Measure the overlay box for a config, or None if unmeasurable."""
        ...

    def mount(self, frame: OverlayFrame) -> None:
        """Draw (or redraw) the overlay."""
        ...

    def unmount(self) -> None:
        """Remove the overlay if drawn. Idempotent."""
        ...


class RenderAdapter:
    """Mounts or removes overlay content on a :class:`RenderSurface`."""

    def __init__(self, surface: RenderSurface) -> None:
        self.surface = surface

    def measure(self, config: OverlayConfig) -> Size | None:
        """Measure the overlay for ``config`` on the surface."""
        return self.surface.measure(config, style_for(config.kind))

    def sync(
        self,
        state: VisibilityState,
        placement: PlacementResult | None,
        config: OverlayConfig,
        overlay_size: Size | None = None,
    ) -> bool:
        """Make the surface match the state and placement.

        The overlay is mounted only when the state is VISIBLE and the
        placement is ready; in every other case it is removed.

        Returns:
            True if the overlay is mounted after the call.
        """
        if (
            state is not VisibilityState.VISIBLE
            or placement is None
            or placement.side is None
            or overlay_size is None
        ):
            self.surface.unmount()
            return False

        style = style_for(config.kind)
        box = placement.rect(overlay_size)
        side = placement.side
        frame = OverlayFrame(
            config=config,
            box=box,
            side=side,
            style=style,
            indicator=indicator_polygon(side, box, style.indicator_size),
        )
        self.surface.mount(frame)
        return True

    def clear(self) -> None:
        """Remove the overlay from the surface."""
        self.surface.unmount()
