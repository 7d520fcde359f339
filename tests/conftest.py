"""Shared pytest fixtures and configuration."""

from collections.abc import Callable, Iterator

import pytest

from perch.anchored import AnchoredOverlay, FixedAnchor
from perch.config import Settings
from perch.events import EventSurface
from perch.geometry import Rect, Size
from perch.lifecycle.timers import FrameScheduler
from perch.overlay.config import OverlayConfig, TriggerMode
from perch.render.adapter import OverlayFrame, OverlayStyle
from perch.utils.logging import configure_logging


class RecordingSurface:
    """Render surface with a fixed overlay size that records mount calls."""

    def __init__(
        self,
        viewport: Size | None = None,
        overlay_size: Size | None = None,
    ) -> None:
        self.viewport = viewport or Size(width=800, height=600)
        self.overlay_size = overlay_size or Size(width=200, height=80)
        self.frames: list[OverlayFrame] = []
        self.frame: OverlayFrame | None = None
        self.unmount_calls = 0

    def measure(self, config: OverlayConfig, style: OverlayStyle) -> Size | None:
        _ = config, style
        if self.overlay_size.is_empty:
            return None
        return self.overlay_size

    def mount(self, frame: OverlayFrame) -> None:
        self.frames.append(frame)
        self.frame = frame

    def unmount(self) -> None:
        self.unmount_calls += 1
        self.frame = None

    @property
    def mounted(self) -> bool:
        return self.frame is not None


@pytest.fixture
def test_settings() -> Settings:
    """Create a Settings instance with test-safe defaults."""
    return Settings(
        LOG_LEVEL="DEBUG",
        LOG_FORMAT="console",
    )


@pytest.fixture
def configure_test_logging() -> Iterator[None]:
    """Configure logging for tests with console output."""
    configure_logging(level="DEBUG", log_format="console")
    yield


@pytest.fixture
def scheduler() -> FrameScheduler:
    return FrameScheduler()


@pytest.fixture
def events() -> EventSurface:
    return EventSurface()


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture
def anchor() -> FixedAnchor:
    """Trigger near the top of an 800x600 viewport (no room above)."""
    return FixedAnchor(Rect(x=500, y=10, width=40, height=20))


@pytest.fixture
def make_overlay(
    anchor: FixedAnchor,
    surface: RecordingSurface,
    events: EventSurface,
    scheduler: FrameScheduler,
) -> Iterator[Callable[..., AnchoredOverlay]]:
    """Factory for overlays wired to the shared test fixtures.

    Every overlay created here is unmounted at teardown.
    """
    created: list[AnchoredOverlay] = []

    def factory(
        trigger: TriggerMode | str = TriggerMode.HOVER,
        config: OverlayConfig | None = None,
        **kwargs: object,
    ) -> AnchoredOverlay:
        overlay = AnchoredOverlay(
            config or OverlayConfig(title="Title", content="Body"),
            anchor,
            surface=surface,
            events=events,
            scheduler=scheduler,
            trigger=trigger,
            **kwargs,  # type: ignore[arg-type]
        )
        created.append(overlay)
        return overlay

    yield factory
    for overlay in created:
        overlay.unmount()
