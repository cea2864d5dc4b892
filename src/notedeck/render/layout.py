"""Two-line, two-column justified layout for note records.

Every block is two lines of exactly ``width`` terminal cells::

    [icon-top]    title ......................... date
    [icon-bottom] summary ....................... tags

Widths are measured in terminal cells (``Text.cell_len``) so wide characters
and emoji are accounted for, and truncation ends in a single ellipsis.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Tuple

from rich.style import Style
from rich.text import Text

from notedeck.config.models import DateField, LayoutSettings
from notedeck.index.models import NoteRecord
from notedeck.index.parser import single_line

from .glyphs import GlyphCache

ICON_GAP = " "
TAG_SEPARATOR = " "


@dataclass(frozen=True, slots=True)
class RenderedBlock:
    """Two rendered lines tagged with the identity of the note they show."""

    identity: Path
    lines: Tuple[Text, Text]

    @property
    def height(self) -> int:
        return len(self.lines)


class LayoutEngine:
    """Render ``NoteRecord`` objects into exact-width two-line blocks."""

    def __init__(
        self,
        glyphs: GlyphCache,
        *,
        margin: int = 2,
        date_field: DateField = "modified",
        date_format: str = "%Y-%m-%d %H:%M",
        title_style: str = "bold",
        summary_style: str = "italic",
        date_style: str = "dim",
    ) -> None:
        self.glyphs = glyphs
        self.margin = margin
        self.date_field = date_field
        self.date_format = date_format
        self.title_style = title_style
        self.summary_style = summary_style
        self.date_style = date_style

    @classmethod
    def from_settings(cls, glyphs: GlyphCache, settings: LayoutSettings) -> "LayoutEngine":
        return cls(
            glyphs,
            margin=settings.margin,
            date_field=settings.date_field,
            date_format=settings.date_format,
            title_style=settings.title_style,
            summary_style=settings.summary_style,
            date_style=settings.date_style,
        )

    def render(
        self,
        note: NoteRecord,
        width: int,
        *,
        show_icons: bool = True,
        show_date: bool = True,
        show_tags: bool = True,
    ) -> RenderedBlock:
        """Lay out ``note`` as two lines of exactly ``width`` cells.

        Args:
            note: Record to render.
            width: Target width in terminal cells.
            show_icons: Whether the icon column is drawn.
            show_date: Whether the date column is drawn.
            show_tags: Whether the tag column is drawn.

        Returns:
            RenderedBlock: The two lines tagged with the note's path.
        """
        width = max(0, width)
        top_icon, bottom_icon = self._icon_columns(note, show_icons)
        date = self._date_column(note) if show_date else Text()
        tags = self._tags_column(note) if show_tags else Text()

        # Tabs and control characters measure as zero cells but print wider.
        title = Text(single_line(note.title), style=self.title_style)
        summary = Text(single_line(note.summary), style=self.summary_style)
        first = self._justify(top_icon, title, date, width)
        second = self._justify(bottom_icon, summary, tags, width)

        meta = Style.from_meta({"note": str(note.path)})
        for line in (first, second):
            line.stylize(meta)
        return RenderedBlock(identity=note.path, lines=(first, second))

    def minimum_width(
        self,
        note: NoteRecord,
        *,
        show_icons: bool = True,
        show_date: bool = True,
        show_tags: bool = True,
    ) -> int:
        """Return the narrowest width at which only the title and summary shrink."""
        top_icon, _ = self._icon_columns(note, show_icons)
        date = self._date_column(note).cell_len if show_date else 0
        tags = self._tags_column(note).cell_len if show_tags else 0
        # One cell for the ellipsis of the truncated left column.
        return top_icon.cell_len + self.margin + max(date, tags) + 1

    def format_date(self, note: NoteRecord) -> str:
        """Return the configured timestamp of ``note`` formatted in local time."""
        value: datetime = getattr(note, self.date_field)
        return value.astimezone().strftime(self.date_format)

    # Internal helpers -------------------------------------------------

    def _icon_columns(self, note: NoteRecord, show_icons: bool) -> tuple[Text, Text]:
        if not show_icons:
            return Text(), Text()
        fragments = self.glyphs.icon(note.icon)
        top = Text(no_wrap=True)
        top.append_text(fragments.top)
        top.append(ICON_GAP)
        bottom = Text(no_wrap=True)
        bottom.append_text(fragments.bottom)
        bottom.append(ICON_GAP)
        return top, bottom

    def _date_column(self, note: NoteRecord) -> Text:
        return Text(self.format_date(note), style=self.date_style, no_wrap=True)

    def _tags_column(self, note: NoteRecord) -> Text:
        badges = [self.glyphs.tag(tag) for tag in note.tags]
        return Text(TAG_SEPARATOR, no_wrap=True).join(badges)

    def _justify(self, icon: Text, left: Text, right: Text, width: int) -> Text:
        """Join ``icon + left`` and ``right`` with filler to exactly ``width`` cells."""
        room = width - icon.cell_len - self.margin
        right = self._fit(right, room - 1)
        left = self._fit(left, room - right.cell_len)

        line = Text(no_wrap=True)
        line.append_text(icon)
        line.append_text(left)
        filler = width - line.cell_len - right.cell_len
        line.append(" " * max(0, filler))
        line.append_text(right)
        # Guard for widths below the minimum: crop or pad to the exact width.
        line.truncate(width, overflow="crop", pad=True)
        return line

    @staticmethod
    def _fit(text: Text, limit: int) -> Text:
        """Return a copy of ``text`` no wider than ``limit`` cells, ellipsized if cut."""
        if limit <= 0:
            return Text(no_wrap=True)
        fitted = text.copy()
        if fitted.cell_len > limit:
            fitted.truncate(limit, overflow="ellipsis")
        return fitted


__all__ = ["LayoutEngine", "RenderedBlock"]
