"""Environment watcher for visible overlays.

While an overlay is visible the watcher listens to the viewport:

- resize: the owner recomputes placement (the side may change);
  visibility is unaffected.
- scroll of the page or any scrollable ancestor: the overlay is dismissed.
  A scrolled trigger has likely moved, and following it on every scroll
  frame is not worth the cost for a tooltip.
- pointer-down outside both trigger and overlay: the overlay is dismissed.
  Only enabled for click-triggered overlays.

Subscriptions are acquired once per :meth:`EnvironmentWatcher.start` and
released once per :meth:`EnvironmentWatcher.stop`; repeated cycles never
accumulate receivers.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from perch.events import (
    EVENT_POINTER_DOWN,
    EVENT_RESIZE,
    EVENT_SCROLL,
    EventSurface,
    Subscription,
)
from perch.geometry.primitives import Point

logger = logging.getLogger(__name__)

DISMISS_SCROLL = "scroll"
DISMISS_OUTSIDE_POINTER = "outside_pointer"


class EnvironmentWatcher:
    """Scoped viewport listeners for one overlay instance."""

    def __init__(
        self,
        surface: EventSurface,
        *,
        on_resize: Callable[[], None],
        on_dismiss: Callable[[str], None],
        is_outside: Callable[[Point], bool] | None = None,
    ) -> None:
        """Initialize an inactive watcher.

        Args:
            surface: Event surface to subscribe to.
            on_resize: Called on every viewport resize.
            on_dismiss: Called with a reason when the overlay must hide.
            is_outside: Hit test for pointer-down dismissal. When None,
                pointer-down events are not watched at all.
        """
        self._surface = surface
        self._on_resize = on_resize
        self._on_dismiss = on_dismiss
        self._is_outside = is_outside
        self._subscriptions: list[Subscription] = []

    @property
    def active(self) -> bool:
        """True between :meth:`start` and :meth:`stop`."""
        return bool(self._subscriptions)

    @property
    def subscription_count(self) -> int:
        """Number of receivers this watcher currently holds."""
        return sum(1 for sub in self._subscriptions if sub.active)

    def start(self) -> None:
        """Attach listeners. A second call while active is a no-op."""
        if self.active:
            return
        self._subscriptions = [
            self._surface.subscribe(EVENT_RESIZE, self._handle_resize),
            self._surface.subscribe(EVENT_SCROLL, self._handle_scroll),
        ]
        if self._is_outside is not None:
            self._subscriptions.append(
                self._surface.subscribe(EVENT_POINTER_DOWN, self._handle_pointer_down)
            )
        logger.debug("Watcher attached %d listeners", len(self._subscriptions))

    def stop(self) -> None:
        """Detach all listeners. Safe to call when inactive."""
        subscriptions, self._subscriptions = self._subscriptions, []
        for subscription in subscriptions:
            subscription.release()
        if subscriptions:
            logger.debug("Watcher released %d listeners", len(subscriptions))

    def _handle_resize(self, sender: Any, **payload: Any) -> None:
        _ = sender, payload
        self._on_resize()

    def _handle_scroll(self, sender: Any, **payload: Any) -> None:
        _ = sender, payload
        self._on_dismiss(DISMISS_SCROLL)

    def _handle_pointer_down(self, sender: Any, **payload: Any) -> None:
        _ = sender
        x = payload.get("x")
        y = payload.get("y")
        if x is None or y is None or self._is_outside is None:
            return
        if self._is_outside(Point(x=float(x), y=float(y))):
            self._on_dismiss(DISMISS_OUTSIDE_POINTER)
