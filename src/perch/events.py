"""Environment event surface for anchored overlays.

The host application (a browser bridge, a game loop, a GUI toolkit) forwards
viewport-level events into an :class:`EventSurface`; overlays subscribe to
them only while they are visible.

Each overlay receives its events through a :class:`Subscription`, a scoped
acquisition of one receiver on one signal. Releasing a subscription is
idempotent, so every exit path can release unconditionally.

Event payloads:
    - ``resize``: width=float, height=float
    - ``scroll``: source=str|None (the scrolled container, None for the page)
    - ``pointer_down``: x=float, y=float
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from blinker import Signal

logger = logging.getLogger(__name__)

EVENT_RESIZE = "resize"
EVENT_SCROLL = "scroll"
EVENT_POINTER_DOWN = "pointer_down"

Handler = Callable[..., Any]


class Subscription:
    """One receiver connected to one signal until released.

    Usage:
        with surface.subscribe(EVENT_RESIZE, on_resize):
            ...  # receives resize events
        # released here
    """

    def __init__(self, signal: Signal, handler: Handler) -> None:
        self._signal = signal
        self._handler = handler
        # Strong reference so bound methods of short-lived owners still fire.
        signal.connect(handler, weak=False)
        self._active = True

    @property
    def active(self) -> bool:
        """True until :meth:`release` is called."""
        return self._active

    def release(self) -> None:
        """Disconnect the receiver. Safe to call more than once."""
        if not self._active:
            return
        self._signal.disconnect(self._handler)
        self._active = False

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()


class EventSurface:
    """Viewport-level events consumed by overlays, backed by blinker signals."""

    def __init__(self) -> None:
        self._signals: dict[str, Signal] = {
            name: Signal(name)
            for name in (EVENT_RESIZE, EVENT_SCROLL, EVENT_POINTER_DOWN)
        }

    def _signal(self, name: str) -> Signal:
        try:
            return self._signals[name]
        except KeyError:
            raise ValueError(f"Unknown event: {name}") from None

    def subscribe(self, name: str, handler: Handler) -> Subscription:
        """Connect a handler and return the subscription that owns it.

        Handlers are called as ``handler(sender, **payload)``.

        Raises:
            ValueError: If the event name is not one of the known events.
        """
        return Subscription(self._signal(name), handler)

    def emit(self, name: str, **payload: Any) -> None:
        """Deliver an event to all current subscribers."""
        signal = self._signal(name)
        logger.debug("Event %s delivered to %d receivers", name, len(signal.receivers))
        signal.send(self, **payload)

    def receiver_count(self, name: str | None = None) -> int:
        """Count connected receivers for one event, or for all events."""
        if name is not None:
            return len(self._signal(name).receivers)
        return sum(len(signal.receivers) for signal in self._signals.values())

    # Convenience emitters for hosts

    def resize(self, width: float, height: float) -> None:
        """Report that the viewport changed size."""
        self.emit(EVENT_RESIZE, width=width, height=height)

    def scroll(self, source: str | None = None) -> None:
        """Report a scroll of the page or of any scrollable ancestor."""
        self.emit(EVENT_SCROLL, source=source)

    def pointer_down(self, x: float, y: float) -> None:
        """Report a pointer press anywhere in the document."""
        self.emit(EVENT_POINTER_DOWN, x=x, y=y)
