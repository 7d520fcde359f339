"""Placement resolution for anchored overlays.

Given the trigger's bounding box, the overlay's measured size and the
viewport, :func:`resolve` picks the side of the trigger the overlay goes on
and the viewport-clamped top-left coordinate to draw it at.

The resolver is a pure function: no I/O, no cached state, identical input
always yields identical output.

Algorithm:
    1. A concrete requested side is used as-is. ``auto`` evaluates the
       space around the trigger and takes the first side, in the order
       top, bottom, right, left, with room for the overlay plus margin.
       When no side has room the overlay goes on the bottom regardless
       and may overflow.
    2. The overlay is centered on the trigger along the cross axis and
       offset by ``margin`` along the main axis.
    3. Both axes are clamped into ``[margin, viewport - size - margin]``.
       When the overlay is larger than that interval it is pinned to
       ``margin`` from the near edge and overflows the far edge.
"""

from __future__ import annotations

from enum import Enum
from typing import Self

from pydantic import BaseModel, Field, model_validator

from perch.geometry.primitives import Point, Rect, Size


class Side(str, Enum):
    """Side of the trigger an overlay is placed on."""

    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"

    @property
    def is_vertical(self) -> bool:
        """True for sides stacked along the y axis (top, bottom)."""
        return self in (Side.TOP, Side.BOTTOM)


class SidePreference(str, Enum):
    """Requested side; ``AUTO`` lets the resolver choose."""

    AUTO = "auto"
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"

    @property
    def side(self) -> Side | None:
        """Concrete side for this preference, or None for AUTO."""
        if self is SidePreference.AUTO:
            return None
        return Side(self.value)


# Order in which AUTO tries the sides; earlier wins ties.
AUTO_PRIORITY: tuple[Side, ...] = (Side.TOP, Side.BOTTOM, Side.RIGHT, Side.LEFT)

# Side used when AUTO finds no side with enough room.
FALLBACK_SIDE = Side.BOTTOM


class PlacementRequest(BaseModel, frozen=True):
    """Immutable input to :func:`resolve`.

    Attributes:
        trigger_rect: Bounding box of the trigger element.
        overlay_size: Measured size of the overlay content.
        side: Requested side, or AUTO.
        viewport: Size of the visible viewport.
        margin: Clearance from the trigger and from viewport edges.
    """

    trigger_rect: Rect
    overlay_size: Size
    side: SidePreference = SidePreference.AUTO
    viewport: Size
    margin: float = Field(default=10.0, ge=0)

    @property
    def is_measured(self) -> bool:
        """False if any input rectangle has not been laid out yet."""
        return not (
            self.trigger_rect.is_empty
            or self.overlay_size.is_empty
            or self.viewport.is_empty
        )


class PlacementResult(BaseModel, frozen=True):
    """Output of :func:`resolve`.

    A ready result carries the clamped top-left coordinate of the overlay
    and the side actually used. A not-ready result carries none of them and
    must not be rendered.

    Attributes:
        x: Left edge of the overlay, or None when not ready.
        y: Top edge of the overlay, or None when not ready.
        side: Side the overlay was placed on, or None when not ready.
    """

    x: float | None = None
    y: float | None = None
    side: Side | None = None

    @model_validator(mode="after")
    def _validate_consistency(self) -> Self:
        """Ensure a result is either fully ready or fully empty."""
        present = [value is not None for value in (self.x, self.y, self.side)]
        if any(present) and not all(present):
            raise ValueError("x, y and side must be set together")
        return self

    @classmethod
    def not_ready(cls) -> Self:
        """Create the result returned for unmeasured input."""
        return cls()

    @property
    def ready(self) -> bool:
        """True if this result can be rendered."""
        return self.side is not None

    @property
    def origin(self) -> Point:
        """Return the top-left corner.

        Raises:
            ValueError: If the result is not ready.
        """
        if self.x is None or self.y is None:
            raise ValueError("Placement is not ready")
        return Point(x=self.x, y=self.y)

    def rect(self, overlay_size: Size) -> Rect:
        """Return the box the overlay occupies at this placement."""
        return Rect.at(self.origin, overlay_size)


def available_space(trigger_rect: Rect, viewport: Size) -> dict[Side, float]:
    """Compute the free space between the trigger and each viewport edge.

    Args:
        trigger_rect: Bounding box of the trigger.
        viewport: Size of the viewport.

    Returns:
        Mapping of side to available pixels on that side. Values can be
        negative when the trigger extends past the viewport edge.
    """
    return {
        Side.TOP: trigger_rect.top,
        Side.BOTTOM: viewport.height - trigger_rect.bottom,
        Side.LEFT: trigger_rect.left,
        Side.RIGHT: viewport.width - trigger_rect.right,
    }


def choose_side(request: PlacementRequest) -> Side:
    """Pick the side to place the overlay on.

    A concrete requested side is returned unchanged. For AUTO, sides are
    tried in :data:`AUTO_PRIORITY` order and the first with at least
    ``overlay extent + margin`` pixels of space wins; with no such side the
    result is :data:`FALLBACK_SIDE`.
    """
    requested = request.side.side
    if requested is not None:
        return requested

    space = available_space(request.trigger_rect, request.viewport)
    for side in AUTO_PRIORITY:
        needed = (
            request.overlay_size.height
            if side.is_vertical
            else request.overlay_size.width
        )
        if space[side] >= needed + request.margin:
            return side
    return FALLBACK_SIDE


def candidate_origin(
    side: Side,
    trigger_rect: Rect,
    overlay_size: Size,
    margin: float,
) -> Point:
    """Compute the unclamped top-left corner for a side.

    The overlay is centered on the trigger along the cross axis and sits
    ``margin`` pixels away from it along the main axis.
    """
    center = trigger_rect.center
    if side is Side.TOP:
        return Point(
            x=center.x - overlay_size.width / 2,
            y=trigger_rect.top - overlay_size.height - margin,
        )
    if side is Side.BOTTOM:
        return Point(
            x=center.x - overlay_size.width / 2,
            y=trigger_rect.bottom + margin,
        )
    if side is Side.LEFT:
        return Point(
            x=trigger_rect.left - overlay_size.width - margin,
            y=center.y - overlay_size.height / 2,
        )
    return Point(
        x=trigger_rect.right + margin,
        y=center.y - overlay_size.height / 2,
    )


def clamp_axis(value: float, extent: float, limit: float, margin: float) -> float:
    """Clamp one coordinate into ``[margin, limit - extent - margin]``.

    Args:
        value: Candidate coordinate of the overlay's near edge.
        extent: Overlay size along this axis.
        limit: Viewport size along this axis.
        margin: Required clearance from both viewport edges.

    Returns:
        The clamped coordinate. If the interval is inverted (the overlay
        does not fit between the margins) the result is ``margin``.
    """
    low = margin
    high = limit - extent - margin
    if high < low:
        return low
    return max(low, min(value, high))


def resolve(request: PlacementRequest) -> PlacementResult:
    """Resolve where an overlay should be drawn.

    Args:
        request: Trigger box, overlay size, side preference and viewport.

    Returns:
        The clamped placement and the side used, or a not-ready result if
        any input has zero size.

    Example:
        >>> request = PlacementRequest(
        ...     trigger_rect=Rect(x=500, y=10, width=40, height=20),
        ...     overlay_size=Size(width=200, height=80),
        ...     viewport=Size(width=800, height=600),
        ... )
        >>> resolve(request)
        PlacementResult(x=420.0, y=40.0, side=<Side.BOTTOM: 'bottom'>)
    """
    if not request.is_measured:
        return PlacementResult.not_ready()

    side = choose_side(request)
    origin = candidate_origin(
        side, request.trigger_rect, request.overlay_size, request.margin
    )
    x = clamp_axis(
        origin.x, request.overlay_size.width, request.viewport.width, request.margin
    )
    y = clamp_axis(
        origin.y, request.overlay_size.height, request.viewport.height, request.margin
    )
    return PlacementResult(x=x, y=y, side=side)
