"""Per-instance overlay configuration.

An :class:`OverlayConfig` is supplied once per overlay and never changes
afterwards. Malformed values are not fatal: each field falls back to the
nearest valid default and the substitution is logged, so one bad config
degrades one tooltip instead of breaking the page around it.

Field names also accept the camelCase keys used by front-end configs
(``type``, ``position``, ``delay``, ``maxWidth``).
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from perch.config import settings
from perch.geometry.placement import SidePreference

logger = logging.getLogger(__name__)


class OverlayKind(str, Enum):
    """Visual flavour of an overlay."""

    INFO = "info"
    HELP = "help"
    WARNING = "warning"
    EXPLANATION = "explanation"


class TriggerMode(str, Enum):
    """How the trigger element opens the overlay."""

    HOVER = "hover"
    CLICK = "click"
    FOCUS = "focus"

    @classmethod
    def parse(cls, value: Any) -> TriggerMode:
        """Parse a trigger mode, falling back to HOVER for unknown input."""
        try:
            return cls(value)
        except ValueError:
            logger.warning("Unsupported trigger mode %r, using hover", value)
            return cls.HOVER


class Interaction(str, Enum):
    """Interactions on the trigger element forwarded by the host."""

    POINTER_ENTER = "pointer_enter"
    POINTER_LEAVE = "pointer_leave"
    CLICK = "click"
    FOCUS = "focus"
    BLUR = "blur"


class Action(Enum):
    """What an interaction asks the visibility state machine to do."""

    SHOW = "show"
    HIDE = "hide"
    TOGGLE = "toggle"


# Interactions each trigger mode listens to; anything else is ignored.
TRIGGER_BINDINGS: dict[TriggerMode, dict[Interaction, Action]] = {
    TriggerMode.HOVER: {
        Interaction.POINTER_ENTER: Action.SHOW,
        Interaction.POINTER_LEAVE: Action.HIDE,
    },
    TriggerMode.FOCUS: {
        Interaction.FOCUS: Action.SHOW,
        Interaction.BLUR: Action.HIDE,
    },
    TriggerMode.CLICK: {
        Interaction.CLICK: Action.TOGGLE,
    },
}


class OverlayConfig(BaseModel):
    """Immutable configuration of one overlay.

    Attributes:
        title: Optional heading shown above the content.
        content: Body text.
        kind: Visual flavour (info, help, warning, explanation).
        side: Requested side, or AUTO.
        delay_ms: Show delay in milliseconds. None uses the trigger
            mode's default.
        max_width: Maximum overlay width in pixels.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str = ""
    content: str
    kind: OverlayKind = Field(
        default=OverlayKind.INFO, validation_alias=AliasChoices("kind", "type")
    )
    side: SidePreference = Field(
        default=SidePreference.AUTO,
        validation_alias=AliasChoices("side", "position"),
    )
    delay_ms: int | None = Field(
        default=None, validation_alias=AliasChoices("delay_ms", "delay")
    )
    max_width: int = Field(
        default_factory=lambda: settings.OVERLAY_MAX_WIDTH,
        validation_alias=AliasChoices("max_width", "maxWidth"),
    )

    @field_validator("kind", mode="before")
    @classmethod
    def _normalize_kind(cls, value: Any) -> Any:
        if value is None:
            return OverlayKind.INFO
        try:
            return OverlayKind(value)
        except ValueError:
            logger.warning("Unknown overlay kind %r, using info", value)
            return OverlayKind.INFO

    @field_validator("side", mode="before")
    @classmethod
    def _normalize_side(cls, value: Any) -> Any:
        if value is None:
            return SidePreference.AUTO
        try:
            return SidePreference(value)
        except ValueError:
            logger.warning("Unknown side %r, using auto", value)
            return SidePreference.AUTO

    @field_validator("delay_ms", mode="before")
    @classmethod
    def _normalize_delay(cls, value: Any) -> Any:
        if value is None:
            return None
        try:
            delay = int(value)
        except (TypeError, ValueError):
            logger.warning("Invalid delay %r, using trigger default", value)
            return None
        if delay < 0:
            logger.warning("Negative delay %d floored at 0", delay)
            return 0
        return delay

    @field_validator("max_width", mode="before")
    @classmethod
    def _normalize_max_width(cls, value: Any) -> Any:
        try:
            width = int(value)
        except (TypeError, ValueError):
            width = 0
        if width <= 0:
            logger.warning(
                "Invalid max width %r, using %d", value, settings.OVERLAY_MAX_WIDTH
            )
            return settings.OVERLAY_MAX_WIDTH
        return width

    def effective_delay_ms(self, trigger: TriggerMode) -> int:
        """Return the show delay for a trigger mode.

        An explicit ``delay_ms`` wins; otherwise hover triggers wait
        ``HOVER_DELAY_MS`` and click/focus triggers ``INSTANT_DELAY_MS``.
        """
        if self.delay_ms is not None:
            return self.delay_ms
        return settings.default_delay_ms(hover=trigger is TriggerMode.HOVER)
