"""Offline preview rendering used by ``perch preview``."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from PIL import Image, ImageDraw

from perch.anchored import AnchoredOverlay, FixedAnchor
from perch.events import EventSurface
from perch.geometry import Rect, SidePreference, Size
from perch.lifecycle.timers import FrameScheduler
from perch.overlay.catalog import get_config
from perch.overlay.config import OverlayConfig, OverlayKind
from perch.render.image import ImageLayerSurface

PAGE_BACKGROUND = (255, 255, 255)
TRIGGER_OUTLINE = (107, 114, 128)


@dataclass(frozen=True)
class PreviewResult:
    """Outcome of a preview render."""

    rendered: bool
    side: str | None = None
    x: float | None = None
    y: float | None = None


def build_config(
    key: str | None,
    title: str,
    content: str,
    kind: OverlayKind,
    side: SidePreference,
) -> OverlayConfig:
    """Catalog entry for ``key``, or an ad-hoc config from the given text."""
    if key is not None:
        config = get_config(key)
        if side is not SidePreference.AUTO:
            config = config.model_copy(update={"side": side})
        return config
    return OverlayConfig(title=title, content=content, kind=kind, side=side)


def render_preview(  # noqa: PLR0913
    *,
    trigger_rect: Rect,
    viewport: Size,
    output: Path,
    key: str | None = None,
    title: str = "",
    content: str = "",
    kind: OverlayKind = OverlayKind.INFO,
    side: SidePreference = SidePreference.AUTO,
) -> PreviewResult:
    """Show an overlay once against a fixed trigger and save the page as PNG.

    The page is a blank viewport with the trigger outlined. The overlay is
    shown with no delay, captured, then unmounted.
    """
    config = build_config(key, title, content, kind, side)
    surface = ImageLayerSurface(viewport)
    scheduler = FrameScheduler()

    page = Image.new(
        "RGB",
        (max(1, int(viewport.width)), max(1, int(viewport.height))),
        PAGE_BACKGROUND,
    )
    if not trigger_rect.is_empty:
        draw = ImageDraw.Draw(page)
        draw.rectangle(
            [
                (trigger_rect.left, trigger_rect.top),
                (trigger_rect.right, trigger_rect.bottom),
            ],
            outline=TRIGGER_OUTLINE,
        )

    with AnchoredOverlay(
        config,
        FixedAnchor(trigger_rect),
        surface=surface,
        events=EventSurface(),
        scheduler=scheduler,
        overlay_id="preview",
    ) as overlay:
        overlay.show(immediate=True)
        scheduler.advance(0)
        placement = overlay.placement
        rendered = overlay.is_rendered
        image = surface.composite(page) if rendered else page

    output.parent.mkdir(parents=True, exist_ok=True)
    image.save(output, format="PNG")

    if not rendered or placement is None or placement.side is None:
        return PreviewResult(rendered=False)
    return PreviewResult(
        rendered=True, side=placement.side.value, x=placement.x, y=placement.y
    )
