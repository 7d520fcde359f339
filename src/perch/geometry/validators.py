"""Placement validation utilities for Perch.

This module checks a resolved placement against the viewport it was
resolved for. The resolver clamps rather than rejects, so the only way a
ready placement violates its bounds is the documented best-effort case of
an overlay larger than the viewport; validation lets callers detect and
report that degradation.
"""

from __future__ import annotations

from perch.geometry.placement import PlacementRequest, PlacementResult


class PlacementOverflowError(Exception):
    """Raised when a placement does not fit inside the viewport margins.

    Attributes:
        result: The placement that was validated.
        request: The request it was resolved from.
        axes: Axes ("x", "y") on which the overlay overflows.
    """

    def __init__(
        self,
        message: str,
        *,
        result: PlacementResult,
        request: PlacementRequest,
        axes: list[str],
    ) -> None:
        self.result = result
        self.request = request
        self.axes = axes
        super().__init__(
            f"{message} (origin=({result.x}, {result.y}), "
            f"overlay={request.overlay_size.to_tuple()}, "
            f"viewport={request.viewport.to_tuple()})"
        )


class PlacementValidator:
    """Validator for resolved placements against viewport bounds.

    The validator is stateless and operates purely on the inputs provided
    to each method.
    """

    def overflow_axes(
        self, result: PlacementResult, request: PlacementRequest
    ) -> list[str]:
        """List the axes on which the placed overlay leaves the margins.

        Args:
            result: A ready placement.
            request: The request it was resolved from.

        Returns:
            Subset of ``["x", "y"]``, empty when the overlay fits.

        Raises:
            ValueError: If the result is not ready.
        """
        if not result.ready:
            raise ValueError("Cannot validate a placement that is not ready")

        box = result.rect(request.overlay_size)
        margin = request.margin
        axes: list[str] = []
        if box.left < margin or box.right > request.viewport.width - margin:
            axes.append("x")
        if box.top < margin or box.bottom > request.viewport.height - margin:
            axes.append("y")
        return axes

    def validate(
        self,
        result: PlacementResult,
        request: PlacementRequest,
        *,
        strict: bool = True,
    ) -> bool:
        """Validate that a placement sits inside the viewport margins.

        Args:
            result: A ready placement.
            request: The request it was resolved from.
            strict: If True, raise PlacementOverflowError on failure.
                If False, return False instead.

        Returns:
            True if the overlay is fully inside the margins.

        Raises:
            PlacementOverflowError: If strict=True and the overlay overflows.
            ValueError: If the result is not ready.
        """
        axes = self.overflow_axes(result, request)
        if axes and strict:
            raise PlacementOverflowError(
                f"Overlay overflows viewport on {', '.join(axes)}",
                result=result,
                request=request,
                axes=axes,
            )
        return not axes

    def fits_viewport(self, request: PlacementRequest) -> bool:
        """Check whether the overlay can fit between the margins at all.

        When this is True, :func:`~perch.geometry.placement.resolve` always
        returns a placement that passes :meth:`validate`.
        """
        usable_width = request.viewport.width - 2 * request.margin
        usable_height = request.viewport.height - 2 * request.margin
        return (
            request.overlay_size.width <= usable_width
            and request.overlay_size.height <= usable_height
        )
