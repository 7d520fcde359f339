"""Rendering of overlay content on a detached layer."""

from perch.render.adapter import (
    STYLES,
    OverlayFrame,
    OverlayStyle,
    RenderAdapter,
    RenderSurface,
    indicator_polygon,
    style_for,
)
from perch.render.image import ImageLayerSurface, TextLayout

__all__ = [
    "STYLES",
    "ImageLayerSurface",
    "OverlayFrame",
    "OverlayStyle",
    "RenderAdapter",
    "RenderSurface",
    "TextLayout",
    "indicator_polygon",
    "style_for",
]
