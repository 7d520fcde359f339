"""Pillow rendering surface for overlays.

:class:`ImageLayerSurface` keeps the overlay on its own transparent RGBA
layer the size of the viewport. The layer is composited over the page
image last, so nothing drawn on the page (clipped panels, scroll areas)
can cut the overlay off.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from PIL import Image, ImageDraw, ImageFont

from perch.config import settings
from perch.geometry.primitives import Size
from perch.overlay.config import OverlayConfig
from perch.render.adapter import OverlayFrame, OverlayStyle

logger = logging.getLogger(__name__)

Font = ImageFont.FreeTypeFont | ImageFont.ImageFont


@dataclass(frozen=True)
class TextLayout:
    """Wrapped text and resulting box size for one overlay.

    Attributes:
        title_lines: Wrapped title lines (empty without a title).
        content_lines: Wrapped content lines.
        size: Outer size of the overlay box.
    """

    title_lines: tuple[str, ...]
    content_lines: tuple[str, ...]
    size: Size


class ImageLayerSurface:
    """Detached RGBA layer that overlays are drawn on.

    Usage:
        surface = ImageLayerSurface(Size(width=800, height=600))
        ...  # an AnchoredOverlay mounts into it
        page_with_overlay = surface.composite(page_image)
    """

    def __init__(
        self,
        viewport: Size,
        *,
        min_width: int | None = None,
        strict_font_check: bool = False,
    ) -> None:
        """Initialize an empty surface.

        Args:
            viewport: Initial viewport size.
            min_width: Minimum overlay width. Defaults to settings.
            strict_font_check: If True, raise instead of falling back to
                Pillow's built-in bitmap font.
        """
        self._viewport = viewport
        self.min_width = (
            min_width if min_width is not None else settings.OVERLAY_MIN_WIDTH
        )
        self.strict_font_check = strict_font_check
        self._frame: OverlayFrame | None = None
        self._layer: Image.Image | None = None
        self._fonts: dict[int, Font] = {}

    @property
    def viewport(self) -> Size:
        return self._viewport

    @property
    def frame(self) -> OverlayFrame | None:
        """The currently mounted frame, if any."""
        return self._frame

    @property
    def mounted(self) -> bool:
        """True while an overlay is drawn."""
        return self._frame is not None

    @property
    def layer(self) -> Image.Image | None:
        """The overlay layer, or None when nothing is mounted."""
        return self._layer

    def resize(self, width: float, height: float) -> None:
        """Update the viewport size.

        The mounted overlay is kept as is; its owner repositions it on the
        resize event that follows.
        """
        self._viewport = Size(width=width, height=height)

    def measure(self, config: OverlayConfig, style: OverlayStyle) -> Size | None:
        if not config.title and not config.content:
            return None
        return self.layout(config, style).size

    def layout(self, config: OverlayConfig, style: OverlayStyle) -> TextLayout:
        """Wrap title and content and compute the box size.

        The box is as wide as its longest line plus padding and icon column,
        clamped to ``[min_width, config.max_width]``.
        """
        font = self._get_font(style.font_size)
        chrome = 2 * style.padding_x + style.icon_size + style.icon_gap
        text_limit = max(1.0, config.max_width - chrome)

        title_lines = tuple(self._wrap(config.title, font, text_limit))
        content_lines = tuple(self._wrap(config.content, font, text_limit))
        all_lines = title_lines + content_lines
        longest = max((font.getlength(line) for line in all_lines), default=0.0)

        # max_width wins if it is configured below the minimum
        width = min(max(self.min_width, longest + chrome), config.max_width)
        title_gap = style.line_height // 4 if title_lines else 0
        height = (
            2 * style.padding_y
            + style.line_height * len(all_lines)
            + title_gap
        )
        return TextLayout(
            title_lines=title_lines,
            content_lines=content_lines,
            size=Size(width=float(width), height=float(height)),
        )

    def mount(self, frame: OverlayFrame) -> None:
        width, height = int(self._viewport.width), int(self._viewport.height)
        layer = Image.new("RGBA", (max(1, width), max(1, height)), (0, 0, 0, 0))
        draw = ImageDraw.Draw(layer)
        style = frame.style
        box = frame.box

        draw.rounded_rectangle(
            [(box.left, box.top), (box.right, box.bottom)],
            radius=style.radius,
            fill=style.background,
            outline=style.border,
        )
        draw.polygon(frame.indicator, fill=style.background, outline=style.border)

        font = self._get_font(style.font_size)
        layout = self.layout(frame.config, style)
        icon_x = box.left + style.padding_x
        text_x = icon_x + style.icon_size + style.icon_gap
        y = box.top + style.padding_y

        icon_box = style.icon_size - 2
        draw.ellipse(
            [(icon_x, y + 1), (icon_x + icon_box, y + 1 + icon_box)],
            outline=style.text,
        )
        glyph_width = font.getlength(style.icon)
        draw.text(
            (icon_x + (icon_box - glyph_width) / 2, y + 1),
            style.icon,
            fill=style.text,
            font=font,
        )

        for line in layout.title_lines:
            # Faux bold: draw twice with a one pixel offset
            draw.text((text_x, y), line, fill=style.text, font=font)
            draw.text((text_x + 1, y), line, fill=style.text, font=font)
            y += style.line_height
        if layout.title_lines:
            y += style.line_height // 4
        for line in layout.content_lines:
            draw.text((text_x, y), line, fill=style.text, font=font)
            y += style.line_height

        self._layer = layer
        self._frame = frame
        logger.debug(
            "Mounted %s overlay at (%.1f, %.1f) on %s",
            frame.config.kind.value,
            box.left,
            box.top,
            frame.side.value,
        )

    def unmount(self) -> None:
        if self._frame is not None:
            logger.debug("Unmounted overlay")
        self._frame = None
        self._layer = None

    def composite(self, page: Image.Image) -> Image.Image:
        """Composite the overlay layer onto a page image.

        Args:
            page: Image of the page, same size as the viewport.

        Returns:
            RGB image with the overlay on top, or a copy of the page when
            nothing is mounted.

        Raises:
            ValueError: If the page size differs from the layer size.
        """
        page_rgba = page.convert("RGBA") if page.mode != "RGBA" else page
        if self._layer is None:
            return page_rgba.convert("RGB")
        if page_rgba.size != self._layer.size:
            raise ValueError(
                f"Page size {page_rgba.size} does not match viewport "
                f"{self._layer.size}"
            )
        return Image.alpha_composite(page_rgba, self._layer).convert("RGB")

    def _wrap(self, text: str, font: Font, limit: float) -> list[str]:
        """Greedy word wrap by rendered width; overlong words get a line each."""
        lines: list[str] = []
        for paragraph in text.split("\n"):
            words = paragraph.split()
            if not words:
                if lines:
                    lines.append("")
                continue
            current = words[0]
            for word in words[1:]:
                candidate = f"{current} {word}"
                if font.getlength(candidate) <= limit:
                    current = candidate
                else:
                    lines.append(current)
                    current = word
            lines.append(current)
        return lines

    def _get_font(self, size: int) -> Font:
        """Get font for overlay text, with fallback to default.

        Raises:
            RuntimeError: If strict_font_check is True and no TrueType font found.
        """
        cached = self._fonts.get(size)
        if cached is not None:
            return cached
        font: Font
        try:
            font = ImageFont.truetype("DejaVuSans.ttf", size)
        except OSError:
            try:
                font = ImageFont.truetype("Arial.ttf", size)
            except OSError:
                if self.strict_font_check:
                    raise RuntimeError(
                        "No TrueType fonts available (DejaVuSans.ttf, Arial.ttf). "
                        "Strict font check is enabled. Install system fonts."
                    ) from None
                logger.warning(
                    "No TrueType fonts available (DejaVuSans.ttf, Arial.ttf). "
                    "Using Pillow's default font."
                )
                font = ImageFont.load_default()
        self._fonts[size] = font
        return font
