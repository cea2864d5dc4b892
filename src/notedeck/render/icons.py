"""Icon rasterization.

The glyph cache asks an ``IconRenderer`` for a Pillow image of a given pixel
height. Vector icon collections are not rasterized here: a renderer that knows
how to draw them can be plugged in. The default renderer loads image files and
draws a tinted placeholder tile for ``collection/name`` specs.
"""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

from PIL import Image, ImageDraw

LOGGER = logging.getLogger(__name__)

ICON_COLLECTIONS = frozenset(
    {"material", "octicons", "bootstrap", "boxicons", "simple", "fontawesome"}
)


@runtime_checkable
class IconRenderer(Protocol):
    """Rasterize an icon spec to an RGBA image exactly ``height_px`` tall."""

    def rasterize(self, spec: str, height_px: int) -> Image.Image: ...


def split_icon_spec(spec: str) -> tuple[str, str] | None:
    """Return ``(collection, name)`` for a collection spec, else ``None``."""
    collection, sep, name = spec.partition("/")
    if not sep or not name or "/" in name:
        return None
    if collection.lower() not in ICON_COLLECTIONS:
        return None
    return collection.lower(), name


def scale_to_height(image: Image.Image, height_px: int) -> Image.Image:
    """Resize ``image`` to ``height_px`` rows, keeping its aspect ratio."""
    width, height = image.size
    target_width = max(1, round(width * height_px / max(1, height)))
    return image.resize((target_width, height_px), Image.Resampling.LANCZOS)


class PillowIconRenderer:
    """Default renderer: image files via Pillow, placeholder tiles otherwise."""

    def rasterize(self, spec: str, height_px: int) -> Image.Image:
        path = Path(spec).expanduser()
        if split_icon_spec(spec) is None and path.is_file():
            try:
                with Image.open(path) as img:
                    return scale_to_height(img.convert("RGBA"), height_px)
            except OSError as exc:
                LOGGER.debug("Cannot load icon image %s: %s", path, exc)
        return self._tile(spec, height_px)

    def _tile(self, spec: str, size: int) -> Image.Image:
        digest = hashlib.sha1(spec.encode("utf-8")).digest()
        fill = (64 + digest[0] % 160, 64 + digest[1] % 160, 64 + digest[2] % 160, 255)
        image = Image.new("RGBA", (size, size), (0, 0, 0, 0))
        draw = ImageDraw.Draw(image)
        inset = max(1, size // 8)
        draw.rounded_rectangle(
            (inset, inset, size - 1 - inset, size - 1 - inset),
            radius=max(1, size // 5),
            fill=fill,
        )
        return image


__all__ = [
    "ICON_COLLECTIONS",
    "IconRenderer",
    "PillowIconRenderer",
    "scale_to_height",
    "split_icon_spec",
]
