"""Perch configuration using pydantic-settings.

All configuration is strongly typed and supports environment variables
and .env files.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "console"  # "console" or "json"

    # Placement: clearance from trigger and viewport edges
    PLACEMENT_MARGIN: float = Field(default=10.0, ge=0)

    # Visibility delays
    HOVER_DELAY_MS: int = Field(default=500, ge=0)
    INSTANT_DELAY_MS: int = Field(default=0, ge=0)  # click and focus triggers

    # Overlay box
    OVERLAY_MAX_WIDTH: int = Field(default=300, gt=0)
    OVERLAY_MIN_WIDTH: int = Field(default=200, gt=0)

    def default_delay_ms(self, hover: bool) -> int:
        """Return the delay used when an overlay does not set one."""
        return self.HOVER_DELAY_MS if hover else self.INSTANT_DELAY_MS


# Singleton instance for import convenience
settings = Settings()
