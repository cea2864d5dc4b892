"""Data models produced by the note index."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field

from notedeck.config.models import DEFAULT_ICON

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class NoteRecord(BaseModel):
    """Parsed header metadata and filesystem times for one note file.

    Records are immutable; a changed file is parsed into a new record.

    Attributes:
        path: Absolute path of the note, used as its identity.
        title: Declared title, or the file name stem.
        icon: Icon spec (``collection/name`` or an image path).
        summary: One-line summary, empty when not declared.
        tags: Declared file tags in header order.
        declared: Declared date, or ``EPOCH`` when absent or unparseable.
        created: Declared date, platform birth time, or modification time.
        modified: Filesystem modification time.
        accessed: Filesystem access time.
        size_bytes: File size in bytes.
    """

    model_config = ConfigDict(frozen=True)

    path: Path
    title: str
    icon: str = DEFAULT_ICON
    summary: str = ""
    tags: Tuple[str, ...] = Field(default_factory=tuple)
    declared: datetime = EPOCH
    created: datetime = EPOCH
    modified: datetime = EPOCH
    accessed: datetime = EPOCH
    size_bytes: int = 0

    @property
    def has_declared_date(self) -> bool:
        """Return whether the header carried a parseable date."""
        return self.declared != EPOCH


__all__ = ["EPOCH", "NoteRecord"]
