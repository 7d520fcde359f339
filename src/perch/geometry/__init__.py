"""Geometry module for Perch.

This package provides viewport coordinate primitives, the placement
resolver, and validation of resolved placements.

Key Components:
    - Primitives: Point, Size, Rect models in viewport coordinates
    - Placement: Side selection, centering and clamping (``resolve``)
    - Validators: Detecting best-effort overflow of a placement

Example:
    from perch.geometry import PlacementRequest, Rect, Size, resolve

    request = PlacementRequest(
        trigger_rect=Rect(x=500, y=10, width=40, height=20),
        overlay_size=Size(width=200, height=80),
        viewport=Size(width=800, height=600),
    )
    result = resolve(request)
    if result.ready:
        print(result.side, result.x, result.y)
"""

from perch.geometry.placement import (
    AUTO_PRIORITY,
    FALLBACK_SIDE,
    PlacementRequest,
    PlacementResult,
    Side,
    SidePreference,
    available_space,
    candidate_origin,
    choose_side,
    clamp_axis,
    resolve,
)
from perch.geometry.primitives import Point, Rect, Size
from perch.geometry.validators import PlacementOverflowError, PlacementValidator

__all__ = [
    "AUTO_PRIORITY",
    "FALLBACK_SIDE",
    "PlacementOverflowError",
    "PlacementRequest",
    "PlacementResult",
    "PlacementValidator",
    "Point",
    "Rect",
    "Side",
    "SidePreference",
    "Size",
    "available_space",
    "candidate_origin",
    "choose_side",
    "clamp_axis",
    "resolve",
]
