"""Overlay configuration and the named configuration catalog."""

from perch.overlay.catalog import get_config, get_contextual_config
from perch.overlay.config import (
    TRIGGER_BINDINGS,
    Action,
    Interaction,
    OverlayConfig,
    OverlayKind,
    TriggerMode,
)

__all__ = [
    "TRIGGER_BINDINGS",
    "Action",
    "Interaction",
    "OverlayConfig",
    "OverlayKind",
    "TriggerMode",
    "get_config",
    "get_contextual_config",
]
