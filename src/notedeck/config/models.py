"""Configuration models describing notedeck settings."""

from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

SortKey = Literal["title", "accessed", "created", "modified"]
DateField = Literal["modified", "accessed", "created", "declared"]

DEFAULT_ICON = "material/note-outline"


class NoteDeckBaseModel(BaseModel):
    """Shared configuration for notedeck Pydantic models."""

    model_config = ConfigDict(extra="forbid")


class NotesSettings(NoteDeckBaseModel):
    """Where notes live and how their headers are read.

    Attributes:
        directories: Directories scanned (non-recursively) for notes.
        extensions: File suffixes recognized as notes.
        include_hidden: Whether dot-files are indexed.
        header_lines: Maximum number of lines read from each note header.
        header_bytes: Maximum number of characters read from each note header.
        scan_workers: Number of directories scanned concurrently.
    """

    directories: List[str] = Field(default_factory=lambda: ["~/notes"])
    extensions: List[str] = Field(default_factory=lambda: [".org"])
    include_hidden: bool = False
    header_lines: int = Field(default=32, ge=1)
    header_bytes: int = Field(default=8192, ge=64)
    scan_workers: int = Field(default=1, ge=1)

    @field_validator("extensions")
    @classmethod
    def _normalize_extensions(cls, value: List[str]) -> List[str]:
        normalized = []
        for suffix in value:
            suffix = suffix.strip().lower()
            if not suffix:
                continue
            normalized.append(suffix if suffix.startswith(".") else f".{suffix}")
        return normalized


class GlyphSettings(NoteDeckBaseModel):
    """Icon and tag badge rendering options.

    Attributes:
        cell_width_px: Width of one character cell in pixels.
        cell_height_px: Height of one character cell in pixels.
        max_icon_columns: Upper bound on the number of columns an icon occupies.
        default_icon: Icon spec used by notes that declare none.
        inbox_tag: Tag rendered with emphasized styling.
        inbox_style: Rich style applied to the inbox tag badge.
        tag_style: Rich style applied to every other tag badge.
    """

    cell_width_px: int = Field(default=8, ge=1)
    cell_height_px: int = Field(default=16, ge=1)
    max_icon_columns: int = Field(default=4, ge=1)
    default_icon: str = DEFAULT_ICON
    inbox_tag: str = "INBOX"
    inbox_style: str = "bold reverse"
    tag_style: str = "dim"


class LayoutSettings(NoteDeckBaseModel):
    """Two-line block layout options.

    Attributes:
        margin: Minimum number of cells kept between the left and right columns.
        date_field: Timestamp shown in the date column.
        date_format: ``strftime`` format for the date column.
        title_style: Rich style for note titles.
        summary_style: Rich style for note summaries.
        date_style: Rich style for the date column.
    """

    margin: int = Field(default=2, ge=0)
    date_field: DateField = "modified"
    date_format: str = "%Y-%m-%d %H:%M"
    title_style: str = "bold"
    summary_style: str = "italic"
    date_style: str = "dim"


class ViewSettings(NoteDeckBaseModel):
    """Initial view state for the note list.

    Attributes:
        sort_key: Field used to order notes.
        descending: Whether the order is reversed.
        show_icons: Whether the icon column is drawn.
        show_date: Whether the date column is drawn.
        show_tags: Whether the tag column is drawn.
        selection_style: Rich style layered over the selected block.
    """

    sort_key: SortKey = "modified"
    descending: bool = True
    show_icons: bool = True
    show_date: bool = True
    show_tags: bool = True
    selection_style: str = "on grey23"


class LoggingSettings(NoteDeckBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
    """

    level: str = "WARNING"


class NoteDeckConfig(NoteDeckBaseModel):
    """Top-level configuration struct for notedeck."""

    notes: NotesSettings = Field(default_factory=NotesSettings)
    glyphs: GlyphSettings = Field(default_factory=GlyphSettings)
    layout: LayoutSettings = Field(default_factory=LayoutSettings)
    view: ViewSettings = Field(default_factory=ViewSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


__all__ = [
    "DEFAULT_ICON",
    "DateField",
    "SortKey",
    "NoteDeckBaseModel",
    "NotesSettings",
    "GlyphSettings",
    "LayoutSettings",
    "ViewSettings",
    "LoggingSettings",
    "NoteDeckConfig",
]
