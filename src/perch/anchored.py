"""Anchored overlay: one tooltip bound to one trigger element.

:class:`AnchoredOverlay` wires the pieces together:

    trigger interaction -> VisibilityStateMachine
        -> on VISIBLE: measure, resolve(), RenderAdapter.sync(), watcher start
        -> on leaving VISIBLE: watcher stop, RenderAdapter.clear()
    EnvironmentWatcher resize -> re-measure and resolve again
    EnvironmentWatcher scroll / outside pointer-down -> hide

Creating the object mounts the overlay; :meth:`AnchoredOverlay.unmount`
tears it down and leaves no timer or listener behind.
"""

from __future__ import annotations

import logging
import uuid
from typing import Protocol

from perch.config import settings
from perch.events import EventSurface
from perch.geometry.placement import PlacementRequest, PlacementResult, resolve
from perch.geometry.primitives import Point, Rect, Size
from perch.geometry.validators import PlacementValidator
from perch.lifecycle.state import VisibilityState, VisibilityStateMachine
from perch.lifecycle.timers import Scheduler
from perch.lifecycle.watcher import EnvironmentWatcher
from perch.overlay.config import (
    TRIGGER_BINDINGS,
    Action,
    Interaction,
    OverlayConfig,
    TriggerMode,
)
from perch.render.adapter import RenderAdapter, RenderSurface

logger = logging.getLogger(__name__)


class OverlayDisposedError(RuntimeError):
    """Raised when an unmounted overlay is used as if still mounted."""


class Anchor(Protocol):
    """The trigger element an overlay is positioned against."""

    def bounding_rect(self) -> Rect | None:
        """Measure the element now, or None if it is not laid out."""
        ...


class FixedAnchor:
    """Anchor whose bounding box is pushed in by the host.

    Hosts that receive layout from elsewhere (a browser bridge, a game
    scene) call :meth:`move` whenever the element's box changes.
    """

    def __init__(self, rect: Rect | None = None) -> None:
        self.rect = rect

    def move(self, rect: Rect | None) -> None:
        self.rect = rect

    def bounding_rect(self) -> Rect | None:
        return self.rect


class AnchoredOverlay:
    """Overlay lifecycle and placement for a single trigger.

    Usage:
        overlay = AnchoredOverlay(
            get_config("confidenceScore"),
            anchor,
            surface=ImageLayerSurface(Size(width=1280, height=800)),
            events=events,
            scheduler=FrameScheduler(),
            trigger="hover",
        )
        overlay.handle(Interaction.POINTER_ENTER)
    """

    def __init__(  # noqa: PLR0913
        self,
        config: OverlayConfig,
        anchor: Anchor,
        *,
        surface: RenderSurface,
        events: EventSurface,
        scheduler: Scheduler,
        trigger: TriggerMode | str = TriggerMode.HOVER,
        disabled: bool = False,
        margin: float | None = None,
        overlay_id: str | None = None,
    ) -> None:
        """Mount an overlay for ``anchor``.

        Args:
            config: Immutable overlay configuration.
            anchor: Trigger element to measure.
            surface: Rendering surface; also reports the viewport size.
            events: Viewport event surface watched while visible.
            scheduler: Source of the show-delay timer.
            trigger: hover, click or focus. Unknown values fall back to hover.
            disabled: If True, show interactions are ignored.
            margin: Placement margin. Defaults to settings.PLACEMENT_MARGIN.
            overlay_id: Identifier used in logs. Generated if omitted.
        """
        self.config = config
        self.anchor = anchor
        self.trigger = TriggerMode.parse(trigger)
        self.disabled = disabled
        self.margin = (
            settings.PLACEMENT_MARGIN if margin is None else max(0.0, margin)
        )
        self.overlay_id = overlay_id or f"overlay-{uuid.uuid4().hex[:8]}"

        self._renderer = RenderAdapter(surface)
        self._validator = PlacementValidator()
        self._placement: PlacementResult | None = None
        self._overlay_size: Size | None = None
        self._machine = VisibilityStateMachine(
            scheduler,
            on_visible=self._enter_visible,
            on_hidden=self._exit_visible,
            name=self.overlay_id,
        )
        self._watcher = EnvironmentWatcher(
            events,
            on_resize=self.reposition,
            on_dismiss=self._dismiss,
            is_outside=self._is_outside if self.trigger is TriggerMode.CLICK else None,
        )

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> VisibilityState:
        """Current visibility state."""
        return self._machine.state

    @property
    def machine(self) -> VisibilityStateMachine:
        """The underlying state machine (for inspection)."""
        return self._machine

    @property
    def watcher(self) -> EnvironmentWatcher:
        """The underlying environment watcher (for inspection)."""
        return self._watcher

    @property
    def placement(self) -> PlacementResult | None:
        """Latest placement while visible, None otherwise."""
        return self._placement

    @property
    def is_visible(self) -> bool:
        return self._machine.is_visible

    @property
    def is_rendered(self) -> bool:
        """True when visible with a ready placement on the surface."""
        placement = self._placement
        return self.is_visible and placement is not None and placement.ready

    @property
    def mounted(self) -> bool:
        return not self._machine.disposed

    @property
    def delay_ms(self) -> int:
        """Show delay in effect for this overlay's trigger mode."""
        return self.config.effective_delay_ms(self.trigger)

    # ------------------------------------------------------------------
    # Interactions
    # ------------------------------------------------------------------

    def handle(self, interaction: Interaction | str) -> bool:
        """Apply a trigger interaction.

        Interactions not bound to this overlay's trigger mode are ignored,
        as are all interactions after unmount.

        Returns:
            True if the visibility state changed.
        """
        if not self.mounted:
            return False
        try:
            interaction = Interaction(interaction)
        except ValueError:
            logger.warning(
                "%s: ignoring unknown interaction %r", self.overlay_id, interaction
            )
            return False

        action = TRIGGER_BINDINGS[self.trigger].get(interaction)
        if action is None:
            return False
        if action is Action.HIDE:
            return self._machine.request_hide(interaction.value)
        if action is Action.TOGGLE and self.is_visible:
            return self._machine.request_hide(interaction.value)
        if self.disabled:
            logger.debug("%s: show ignored, overlay disabled", self.overlay_id)
            return False
        return self._machine.request_show(self.delay_ms, interaction.value)

    def pointer_enter(self) -> bool:
        return self.handle(Interaction.POINTER_ENTER)

    def pointer_leave(self) -> bool:
        return self.handle(Interaction.POINTER_LEAVE)

    def click(self) -> bool:
        return self.handle(Interaction.CLICK)

    def focus(self) -> bool:
        return self.handle(Interaction.FOCUS)

    def blur(self) -> bool:
        return self.handle(Interaction.BLUR)

    def show(self, *, immediate: bool = False) -> bool:
        """Programmatically start showing, regardless of trigger mode.

        Args:
            immediate: If True, use a zero delay instead of the configured one.

        Raises:
            OverlayDisposedError: If the overlay was unmounted.
        """
        self._ensure_mounted()
        if self.disabled:
            return False
        delay = 0 if immediate else self.delay_ms
        return self._machine.request_show(delay, "programmatic")

    def hide(self) -> bool:
        """Programmatically hide or cancel a pending show."""
        self._ensure_mounted()
        return self._machine.request_hide("programmatic")

    def unmount(self) -> None:
        """Tear down: cancel the timer, detach listeners, clear the surface.

        Safe to call more than once.
        """
        if not self.mounted:
            return
        self._machine.dispose()
        self._watcher.stop()
        self._renderer.clear()
        self._placement = None
        logger.debug("%s: unmounted", self.overlay_id)

    def __enter__(self) -> AnchoredOverlay:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.unmount()

    # ------------------------------------------------------------------
    # Placement
    # ------------------------------------------------------------------

    def measure(self) -> PlacementRequest | None:
        """Take fresh measurements and build a placement request.

        Returns:
            The request, or None when the trigger or overlay cannot be
            measured.
        """
        trigger_rect = self.anchor.bounding_rect()
        overlay_size = self._renderer.measure(self.config)
        if trigger_rect is None or overlay_size is None:
            return None
        return PlacementRequest(
            trigger_rect=trigger_rect,
            overlay_size=overlay_size,
            side=self.config.side,
            viewport=self._renderer.surface.viewport,
            margin=self.margin,
        )

    def reposition(self) -> PlacementResult | None:
        """Resolve and render again from live measurements.

        Does nothing unless visible. A not-ready result removes the
        overlay from the surface rather than drawing it misplaced.
        """
        if not self.is_visible:
            return None

        request = self.measure()
        if request is None:
            placement = PlacementResult.not_ready()
        else:
            placement = resolve(request)
        if request is not None and placement.ready:
            overflow = self._validator.overflow_axes(placement, request)
            if overflow:
                logger.warning(
                    "%s: overlay %s larger than viewport %s, overflows on %s",
                    self.overlay_id,
                    request.overlay_size.to_tuple(),
                    request.viewport.to_tuple(),
                    ",".join(overflow),
                )
        elif not placement.ready:
            logger.debug("%s: placement not ready, skipping render", self.overlay_id)

        self._placement = placement
        self._overlay_size = request.overlay_size if request is not None else None
        self._renderer.sync(self.state, placement, self.config, self._overlay_size)
        return placement

    # ------------------------------------------------------------------
    # Lifecycle callbacks
    # ------------------------------------------------------------------

    def _enter_visible(self) -> None:
        self.reposition()
        self._watcher.start()

    def _exit_visible(self) -> None:
        self._watcher.stop()
        self._renderer.clear()
        self._placement = None
        self._overlay_size = None

    def _dismiss(self, reason: str) -> None:
        self._machine.request_hide(reason)

    def _is_outside(self, point: Point) -> bool:
        trigger_rect = self.anchor.bounding_rect()
        placement = self._placement
        if trigger_rect is None or placement is None or not placement.ready:
            return False
        if self._overlay_size is None:
            return False
        overlay_rect = placement.rect(self._overlay_size)
        return not (
            trigger_rect.contains_point(point) or overlay_rect.contains_point(point)
        )

    def _ensure_mounted(self) -> None:
        if not self.mounted:
            raise OverlayDisposedError(f"Overlay {self.overlay_id} was unmounted")
