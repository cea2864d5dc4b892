"""Header metadata extraction for note files."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional

from notedeck.config.models import DEFAULT_ICON
from notedeck.errors import NoteReadError

from .models import EPOCH, NoteRecord

RECOGNIZED_KEYS = frozenset({"TITLE", "ICON", "DATE", "SUMMARY", "FILETAGS"})

_KEYWORD = re.compile(r"^\s*#\+(?P<key>[A-Za-z_][\w-]*)\s*:\s?(?P<value>.*?)\s*$")
_CONTROL = re.compile(r"[\x00-\x1f\x7f-\x9f]")
_DATE = re.compile(
    r"^[<\[]?\s*(?P<year>\d{4})-(?P<month>\d{1,2})-(?P<day>\d{1,2})"
    r"(?:\s+[^\d\s>\]]+)?"
    r"(?:\s+(?P<hour>\d{1,2}):(?P<minute>\d{2}))?"
)


def parse_declared_date(value: str) -> Optional[datetime]:
    """Parse an ISO-like calendar date, returning ``None`` when it is not one.

    Accepts ``2024-03-01``, ``<2024-03-01 Fri>`` and ``[2024-03-01 Fri 09:30]``.
    The value is read as local time and returned in UTC.
    """
    match = _DATE.match(value.strip())
    if not match:
        return None
    parts = {key: int(raw) for key, raw in match.groupdict().items() if raw is not None}
    try:
        local = datetime(
            parts["year"],
            parts["month"],
            parts["day"],
            parts.get("hour", 0),
            parts.get("minute", 0),
        )
        return local.astimezone().astimezone(timezone.utc)
    except (ValueError, OverflowError, OSError):
        return None


def single_line(value: str) -> str:
    """Replace tabs and other control characters with single spaces."""
    return " ".join(_CONTROL.sub(" ", value).split())


def split_tags(value: str) -> tuple[str, ...]:
    """Split a FILETAGS value on whitespace and org-style colons."""
    return tuple(token for token in re.split(r"[\s:]+", value) if token)


class MetadataParser:
    """Turn a note's header and filesystem attributes into a ``NoteRecord``."""

    def __init__(
        self,
        *,
        header_lines: int = 32,
        header_bytes: int = 8192,
        default_icon: str = DEFAULT_ICON,
    ) -> None:
        self.header_lines = header_lines
        self.header_bytes = header_bytes
        self.default_icon = default_icon

    def parse(self, path: Path) -> NoteRecord:
        """Return the record for ``path``.

        Args:
            path: Note file to read.

        Returns:
            NoteRecord: Record with every field populated from the header or its default.

        Raises:
            NoteReadError: If the file cannot be stat'ed or opened.
        """
        path = path.expanduser().resolve()
        try:
            stat = path.stat()
            header = self.read_header(path)
        except OSError as exc:
            raise NoteReadError(f"{path}: {exc}") from exc

        modified = datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc)
        accessed = datetime.fromtimestamp(stat.st_atime, tz=timezone.utc)

        declared = None
        if header.get("DATE"):
            declared = parse_declared_date(header["DATE"])

        if declared is not None:
            created = declared
        else:
            birth = getattr(stat, "st_birthtime", None)
            created = datetime.fromtimestamp(birth, tz=timezone.utc) if birth else modified

        return NoteRecord(
            path=path,
            title=header.get("TITLE") or path.stem,
            icon=header.get("ICON") or self.default_icon,
            summary=header.get("SUMMARY", ""),
            tags=split_tags(header.get("FILETAGS", "")),
            declared=declared or EPOCH,
            created=created,
            modified=modified,
            accessed=accessed,
            size_bytes=stat.st_size,
        )

    def read_header(self, path: Path) -> Dict[str, str]:
        """Return recognized header keywords from the bounded prefix of ``path``.

        Reading stops at the first body line, after ``header_lines`` lines, or
        after ``header_bytes`` characters, whichever comes first. Org property
        drawers (``:PROPERTIES:`` ... ``:END:``) inside the header are skipped.
        Values are collapsed to a single line of plain spaces.
        """
        with path.open("r", encoding="utf-8-sig", errors="replace") as fh:
            sample = fh.read(self.header_bytes)

        fields: Dict[str, str] = {}
        in_drawer = False
        for line in sample.splitlines()[: self.header_lines]:
            stripped = line.strip()
            if in_drawer:
                in_drawer = stripped.upper() != ":END:"
                continue
            if not stripped:
                continue
            if stripped.upper() == ":PROPERTIES:":
                in_drawer = True
                continue
            if not stripped.startswith("#"):
                break
            match = _KEYWORD.match(line)
            if not match:
                continue
            key = match.group("key").upper()
            if key in RECOGNIZED_KEYS:
                fields.setdefault(key, single_line(match.group("value")))
        return fields


__all__ = [
    "MetadataParser",
    "RECOGNIZED_KEYS",
    "parse_declared_date",
    "single_line",
    "split_tags",
]
