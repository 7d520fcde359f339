"""Overlay lifecycle: visibility state, delay timers and environment watching."""

from perch.lifecycle.state import Transition, VisibilityState, VisibilityStateMachine
from perch.lifecycle.timers import (
    AsyncioScheduler,
    FrameScheduler,
    FrameTimer,
    Scheduler,
    TimerHandle,
)
from perch.lifecycle.watcher import (
    DISMISS_OUTSIDE_POINTER,
    DISMISS_SCROLL,
    EnvironmentWatcher,
)

__all__ = [
    "DISMISS_OUTSIDE_POINTER",
    "DISMISS_SCROLL",
    "AsyncioScheduler",
    "EnvironmentWatcher",
    "FrameScheduler",
    "FrameTimer",
    "Scheduler",
    "TimerHandle",
    "Transition",
    "VisibilityState",
    "VisibilityStateMachine",
]
