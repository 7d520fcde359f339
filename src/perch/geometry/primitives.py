"""Geometry primitives for Perch.

This module provides immutable Pydantic models for representing points,
sizes, and rectangles in viewport coordinates. All coordinates follow the
convention where (0, 0) is the top-left corner of the viewport, x grows
rightward and y grows downward.

Unlike a viewport size, a rectangle's origin may be negative: a trigger
that is partially scrolled out of view still has a valid bounding box.
Zero-sized rectangles are legal and mean "not measured yet".
"""

from __future__ import annotations

from typing import Self

from pydantic import BaseModel, Field


class Point(BaseModel, frozen=True):
    """A 2D point in viewport coordinates.

    Attributes:
        x: Horizontal position (pixels from the viewport's left edge).
        y: Vertical position (pixels from the viewport's top edge).
    """

    x: float
    y: float

    def to_tuple(self) -> tuple[float, float]:
        """Convert to (x, y) tuple."""
        return (self.x, self.y)

    @classmethod
    def from_tuple(cls, coord: tuple[float, float]) -> Self:
        """Create Point from (x, y) tuple."""
        return cls(x=coord[0], y=coord[1])


class Size(BaseModel, frozen=True):
    """A 2D extent, used for overlay sizes and the viewport.

    Both dimensions must be non-negative. A zero dimension is allowed and
    marks a size that has not been laid out yet.

    Attributes:
        width: Horizontal extent in pixels.
        height: Vertical extent in pixels.
    """

    width: float = Field(..., ge=0, description="Width in pixels")
    height: float = Field(..., ge=0, description="Height in pixels")

    @property
    def is_empty(self) -> bool:
        """Return True if either dimension is zero."""
        return self.width <= 0 or self.height <= 0

    def to_tuple(self) -> tuple[float, float]:
        """Convert to (width, height) tuple."""
        return (self.width, self.height)

    @classmethod
    def from_tuple(cls, size: tuple[float, float]) -> Self:
        """Create Size from (width, height) tuple."""
        return cls(width=size[0], height=size[1])


class Rect(BaseModel, frozen=True):
    """A read-only bounding box snapshot in viewport coordinates.

    The rectangle is defined as:
    - Top-left: (x, y)
    - Bottom-right: (x + width, y + height)

    Rectangles are measured on demand and never cached across frames; treat
    every instance as valid only for the resolution pass that produced it.

    Attributes:
        x: Left edge X coordinate.
        y: Top edge Y coordinate.
        width: Horizontal extent in pixels (>= 0).
        height: Vertical extent in pixels (>= 0).
    """

    x: float = Field(..., description="Left edge X coordinate")
    y: float = Field(..., description="Top edge Y coordinate")
    width: float = Field(..., ge=0, description="Width in pixels")
    height: float = Field(..., ge=0, description="Height in pixels")

    @property
    def left(self) -> float:
        """Alias of x, matching DOM bounding-box naming."""
        return self.x

    @property
    def top(self) -> float:
        """Alias of y, matching DOM bounding-box naming."""
        return self.y

    @property
    def right(self) -> float:
        """Return the X coordinate of the right edge."""
        return self.x + self.width

    @property
    def bottom(self) -> float:
        """Return the Y coordinate of the bottom edge."""
        return self.y + self.height

    @property
    def size(self) -> Size:
        """Return the dimensions as a Size."""
        return Size(width=self.width, height=self.height)

    @property
    def center(self) -> Point:
        """Return the center point."""
        return Point(x=self.x + self.width / 2, y=self.y + self.height / 2)

    @property
    def is_empty(self) -> bool:
        """Return True if the rectangle has no area (not laid out)."""
        return self.width <= 0 or self.height <= 0

    def to_tuple(self) -> tuple[float, float, float, float]:
        """Convert to (x, y, width, height) tuple."""
        return (self.x, self.y, self.width, self.height)

    @classmethod
    def from_tuple(cls, bbox: tuple[float, float, float, float]) -> Self:
        """Create Rect from (x, y, width, height) tuple."""
        return cls(x=bbox[0], y=bbox[1], width=bbox[2], height=bbox[3])

    @classmethod
    def at(cls, origin: Point, size: Size) -> Self:
        """Create Rect from a top-left point and a size."""
        return cls(x=origin.x, y=origin.y, width=size.width, height=size.height)

    def contains_point(self, point: Point) -> bool:
        """Check if a point is inside this rectangle (edges inclusive).

        Args:
            point: Point to check.

        Returns:
            True if point is within the rectangle bounds.
        """
        return self.x <= point.x <= self.right and self.y <= point.y <= self.bottom
