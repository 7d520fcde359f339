"""Visibility state machine for anchored overlays.

The machine owns the overlay's visibility and its single show-delay timer:

- IDLE -> PENDING_SHOW: a show interaction; starts the delay timer.
- PENDING_SHOW -> VISIBLE: the timer elapses without an intervening hide.
- PENDING_SHOW -> IDLE: a hide interaction cancels the timer.
- VISIBLE -> HIDDEN -> IDLE: a hide interaction, an outside pointer-down or
  a scroll. HIDDEN is passed through immediately and only appears in the
  transition history.

Geometry and environment watching are not handled here; the owner reacts
to entering and leaving VISIBLE through the ``on_visible`` and
``on_hidden`` callbacks.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from functools import partial

from perch.lifecycle.timers import Scheduler, TimerHandle

logger = logging.getLogger(__name__)


class VisibilityState(Enum):
    """Visibility states of one overlay instance."""

    IDLE = "idle"
    PENDING_SHOW = "pending_show"
    VISIBLE = "visible"
    HIDDEN = "hidden"


@dataclass(frozen=True)
class Transition:
    """A recorded state change.

    Attributes:
        source: State before the change.
        target: State after the change.
        reason: What caused it (e.g. "pointer_enter", "scroll", "unmount").
    """

    source: VisibilityState
    target: VisibilityState
    reason: str


class VisibilityStateMachine:
    """Show/hide lifecycle with a cancellable show delay.

    Usage:
        machine = VisibilityStateMachine(
            scheduler, on_visible=place_overlay, on_hidden=remove_overlay
        )
        machine.request_show(delay_ms=500)
        machine.request_hide()  # before 500 ms: never becomes visible
    """

    def __init__(
        self,
        scheduler: Scheduler,
        *,
        on_visible: Callable[[], None],
        on_hidden: Callable[[], None],
        name: str = "overlay",
        history_size: int = 32,
    ) -> None:
        """Initialize an idle machine.

        Args:
            scheduler: Source of the show-delay timer.
            on_visible: Called once on every entry into VISIBLE.
            on_hidden: Called once on every exit from VISIBLE.
            name: Label used in log messages.
            history_size: Number of transitions kept for inspection.
        """
        self._scheduler = scheduler
        self._on_visible = on_visible
        self._on_hidden = on_hidden
        self.name = name
        self._state = VisibilityState.IDLE
        self._timer: TimerHandle | None = None
        # Bumped on every new timer; a callback carrying an older value is stale.
        self._generation = 0
        self._disposed = False
        self._history: deque[Transition] = deque(maxlen=history_size)

    @property
    def state(self) -> VisibilityState:
        """Current visibility state."""
        return self._state

    @property
    def is_visible(self) -> bool:
        """True while the overlay is shown."""
        return self._state is VisibilityState.VISIBLE

    @property
    def has_pending_timer(self) -> bool:
        """True while a show delay is running."""
        return self._timer is not None

    @property
    def disposed(self) -> bool:
        """True after :meth:`dispose`; the machine then ignores requests."""
        return self._disposed

    @property
    def history(self) -> tuple[Transition, ...]:
        """Most recent transitions, oldest first."""
        return tuple(self._history)

    def _transition(self, target: VisibilityState, reason: str) -> None:
        source = self._state
        self._state = target
        self._history.append(Transition(source, target, reason))
        logger.debug(
            "%s: %s -> %s (%s)", self.name, source.value, target.value, reason
        )

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def request_show(self, delay_ms: float, reason: str = "show") -> bool:
        """Start (or restart) the show delay.

        Args:
            delay_ms: Delay before becoming visible, in milliseconds.
                Negative values are treated as zero.
            reason: Label recorded in the transition history.

        Returns:
            True if a timer was started; False if the overlay is already
            visible or the machine is disposed.
        """
        if self._disposed or self._state is VisibilityState.VISIBLE:
            return False

        self._cancel_timer()
        self._generation += 1
        self._timer = self._scheduler.call_later(
            max(0.0, delay_ms) / 1000.0,
            partial(self._on_timer, self._generation),
        )
        self._transition(VisibilityState.PENDING_SHOW, reason)
        return True

    def request_hide(self, reason: str = "hide") -> bool:
        """Hide the overlay or abandon a pending show.

        Returns:
            True if the state changed.
        """
        if self._state is VisibilityState.PENDING_SHOW:
            self._cancel_timer()
            self._transition(VisibilityState.IDLE, reason)
            return True
        if self._state is VisibilityState.VISIBLE:
            self._leave_visible(reason)
            return True
        return False

    def toggle(self, delay_ms: float, reason: str = "toggle") -> bool:
        """Hide when visible, otherwise start showing."""
        if self._state is VisibilityState.VISIBLE:
            return self.request_hide(reason)
        return self.request_show(delay_ms, reason)

    def dispose(self) -> None:
        """Tear down on unmount: cancel the timer and leave VISIBLE.

        Safe to call more than once.
        """
        if self._disposed:
            return
        self._cancel_timer()
        if self._state is VisibilityState.VISIBLE:
            self._leave_visible("unmount")
        elif self._state is VisibilityState.PENDING_SHOW:
            self._transition(VisibilityState.IDLE, "unmount")
        self._disposed = True

    def _leave_visible(self, reason: str) -> None:
        self._transition(VisibilityState.HIDDEN, reason)
        try:
            self._on_hidden()
        finally:
            self._transition(VisibilityState.IDLE, reason)

    def _on_timer(self, generation: int) -> None:
        stale = generation != self._generation
        if stale or self._state is not VisibilityState.PENDING_SHOW:
            logger.debug("%s: ignoring stale show timer", self.name)
            return
        self._timer = None
        self._transition(VisibilityState.VISIBLE, "delay_elapsed")
        self._on_visible()
