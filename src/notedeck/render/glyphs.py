"""Process-wide cache of rendered icon halves and tag badges."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from PIL import Image
from rich.color import Color
from rich.style import Style
from rich.text import Text

from notedeck.config.models import GlyphSettings

from .icons import IconRenderer, PillowIconRenderer, scale_to_height

LOGGER = logging.getLogger(__name__)

# Each character cell shows two vertically stacked pixels via half blocks,
# so a two-row icon samples down to four pixel rows.
_SAMPLE_ROWS = 4
_ALPHA_THRESHOLD = 128


@dataclass(frozen=True, slots=True)
class CellMetrics:
    """Pixel size of one character cell on the display surface."""

    width_px: int = 8
    height_px: int = 16


@dataclass(frozen=True, slots=True)
class IconFragments:
    """Top and bottom halves of an icon, each one character row tall.

    Fragments are shared cache values; copy them before mutating.
    """

    top: Text
    bottom: Text
    columns: int


def fit_to_columns(image: Image.Image, cell_width_px: int, max_columns: int) -> Image.Image:
    """Pad or crop ``image`` horizontally to a whole number of cell columns.

    The column count is the rounded natural width. Extra pixels are split
    between both sides, with the odd pixel on the right.
    """
    columns = min(max_columns, max(1, round(image.width / cell_width_px)))
    target = columns * cell_width_px
    delta = target - image.width
    if delta >= 0:
        canvas = Image.new("RGBA", (target, image.height), (0, 0, 0, 0))
        canvas.paste(image, (delta // 2, 0))
        return canvas
    left = -delta // 2
    return image.crop((left, 0, left + target, image.height))


def _pixel_color(pixel: tuple[int, int, int, int]) -> Optional[Color]:
    red, green, blue, alpha = pixel
    if alpha < _ALPHA_THRESHOLD:
        return None
    return Color.from_rgb(red, green, blue)


def _half_block_row(image: Image.Image, upper_row: int) -> Text:
    text = Text(no_wrap=True)
    for x in range(image.width):
        upper = _pixel_color(image.getpixel((x, upper_row)))
        lower = _pixel_color(image.getpixel((x, upper_row + 1)))
        if upper is None and lower is None:
            text.append(" ")
        elif lower is None:
            text.append("▀", Style(color=upper))
        elif upper is None:
            text.append("▄", Style(color=lower))
        else:
            text.append("▀", Style(color=upper, bgcolor=lower))
    return text


class GlyphCache:
    """Memoize icon fragments and tag badges by their normalized spec.

    Entries live as long as the cache and are never evicted. Output depends on
    the icon spec and on the cell metrics given at construction; if the metrics
    change, call ``clear`` since the cache does not notice on its own.

    Inserts are idempotent per key and need no lock: two threads racing on the
    same spec both render and the last write wins.
    """

    def __init__(
        self,
        metrics: CellMetrics | None = None,
        *,
        renderer: IconRenderer | None = None,
        max_icon_columns: int = 4,
        inbox_tag: str = "INBOX",
        inbox_style: str = "bold reverse",
        tag_style: str = "dim",
    ) -> None:
        self.metrics = metrics or CellMetrics()
        self.renderer = renderer or PillowIconRenderer()
        self.max_icon_columns = max_icon_columns
        self.inbox_tag = inbox_tag
        self.inbox_style = inbox_style
        self.tag_style = tag_style
        self._icons: Dict[str, IconFragments] = {}
        self._tags: Dict[str, Text] = {}
        self.render_count = 0

    @classmethod
    def from_settings(
        cls, settings: GlyphSettings, *, renderer: IconRenderer | None = None
    ) -> "GlyphCache":
        """Build a cache configured from ``settings``."""
        return cls(
            CellMetrics(settings.cell_width_px, settings.cell_height_px),
            renderer=renderer,
            max_icon_columns=settings.max_icon_columns,
            inbox_tag=settings.inbox_tag,
            inbox_style=settings.inbox_style,
            tag_style=settings.tag_style,
        )

    def icon(self, spec: str) -> IconFragments:
        """Return the two-row fragments for an icon spec, rendering on first use."""
        key = spec.strip()
        cached = self._icons.get(key)
        if cached is not None:
            return cached
        fragments = self._render_icon(key)
        self._icons[key] = fragments
        return fragments

    def tag(self, text: str) -> Text:
        """Return the badge for a tag, rendering on first use."""
        key = text.strip()
        cached = self._tags.get(key)
        if cached is not None:
            return cached
        self.render_count += 1
        style = self.inbox_style if key == self.inbox_tag else self.tag_style
        badge = Text(f" {key} ", style=style, no_wrap=True)
        self._tags[key] = badge
        return badge

    def clear(self) -> None:
        """Drop every cached entry and reset the render counter."""
        self._icons = {}
        self._tags = {}
        self.render_count = 0

    def __len__(self) -> int:
        return len(self._icons) + len(self._tags)

    def _render_icon(self, spec: str) -> IconFragments:
        self.render_count += 1
        height_px = 2 * self.metrics.height_px
        image = self.renderer.rasterize(spec, height_px).convert("RGBA")
        if image.height != height_px:
            image = scale_to_height(image, height_px)
        fitted = fit_to_columns(image, self.metrics.width_px, self.max_icon_columns)
        columns = fitted.width // self.metrics.width_px
        sampled = fitted.resize((columns, _SAMPLE_ROWS), Image.Resampling.BOX)
        LOGGER.debug("Rendered icon %r at %d columns", spec, columns)
        return IconFragments(
            top=_half_block_row(sampled, 0),
            bottom=_half_block_row(sampled, 2),
            columns=columns,
        )


__all__ = ["CellMetrics", "GlyphCache", "IconFragments", "fit_to_columns"]
