"""Rendering: glyph cache, icon rasterization, and two-line block layout."""

from .glyphs import CellMetrics, GlyphCache, IconFragments
from .icons import IconRenderer, PillowIconRenderer
from .layout import LayoutEngine, RenderedBlock

__all__ = [
    "CellMetrics",
    "GlyphCache",
    "IconFragments",
    "IconRenderer",
    "PillowIconRenderer",
    "LayoutEngine",
    "RenderedBlock",
]
