"""Cancellable delay timers for the visibility lifecycle.

The state machine suspends only at the show delay. It does so through an
explicit :class:`TimerHandle` it owns and cancels, never through a bare
platform callback. Two schedulers are provided:

- :class:`AsyncioScheduler` for hosts running an asyncio event loop.
- :class:`FrameScheduler` for frame-driven hosts (game loops, GUI idle
  callbacks) that advance time explicitly, and for deterministic tests.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    """A pending callback that can be cancelled."""

    def cancel(self) -> None:
        """Prevent the callback from running. Idempotent."""
        ...

    def cancelled(self) -> bool:
        """True once :meth:`cancel` has been called."""
        ...


class Scheduler(Protocol):
    """Source of one-shot delayed callbacks."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Run ``callback`` after ``delay`` seconds."""
        ...


class AsyncioScheduler:
    """Scheduler backed by ``loop.call_later``.

    ``asyncio.TimerHandle`` already satisfies :class:`TimerHandle`.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        """Initialize with an explicit loop, or the running loop on first use.

        Args:
            loop: Event loop to schedule on. Defaults to the loop running
                when :meth:`call_later` is first called.
        """
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(max(0.0, delay), callback)


@dataclass(eq=False)
class FrameTimer:
    """Timer handle issued by :class:`FrameScheduler`."""

    due: float
    callback: Callable[[], None]
    _cancelled: bool = field(default=False, init=False)

    def cancel(self) -> None:
        self._cancelled = True

    def cancelled(self) -> bool:
        return self._cancelled


class FrameScheduler:
    """Scheduler driven by explicit time steps.

    The host calls :meth:`advance` once per frame with the elapsed time;
    due callbacks run synchronously inside that call, in due order.

    Usage:
        scheduler = FrameScheduler()
        handle = scheduler.call_later(0.5, show)
        scheduler.advance(0.25)  # nothing yet
        scheduler.advance(0.25)  # show() runs
    """

    def __init__(self) -> None:
        self._now = 0.0
        self._queue: list[tuple[float, int, FrameTimer]] = []
        self._sequence = itertools.count()

    @property
    def now(self) -> float:
        """Seconds elapsed since the scheduler was created."""
        return self._now

    @property
    def pending_count(self) -> int:
        """Number of timers that are scheduled and not cancelled."""
        return sum(1 for _, _, timer in self._queue if not timer.cancelled())

    def call_later(self, delay: float, callback: Callable[[], None]) -> FrameTimer:
        timer = FrameTimer(due=self._now + max(0.0, delay), callback=callback)
        heapq.heappush(self._queue, (timer.due, next(self._sequence), timer))
        return timer

    def advance(self, dt: float) -> int:
        """Move time forward and run every callback that became due.

        Args:
            dt: Elapsed seconds. Negative values are treated as zero.

        Returns:
            Number of callbacks that ran.
        """
        self._now += max(0.0, dt)
        fired = 0
        while self._queue and self._queue[0][0] <= self._now:
            _, _, timer = heapq.heappop(self._queue)
            if timer.cancelled():
                continue
            timer.callback()
            fired += 1
        return fired
