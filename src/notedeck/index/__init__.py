"""Note indexing: directory discovery, header parsing, and the in-memory index."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from notedeck.config.models import NotesSettings
from notedeck.errors import NoteReadError

from .discovery import NoteScanner
from .models import EPOCH, NoteRecord
from .parser import MetadataParser

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class IndexSnapshot:
    """Result of one completed scan: records, their lookup map, and skipped files."""

    records: tuple[NoteRecord, ...] = ()
    by_path: Mapping[Path, NoteRecord] = field(default_factory=lambda: MappingProxyType({}))
    errors: tuple[str, ...] = ()

    def get(self, path: Path) -> Optional[NoteRecord]:
        return self.by_path.get(path)


class NoteIndex:
    """Own the current collection of note records.

    ``collect`` builds a complete new collection before swapping it in, so
    readers see either the previous or the new scan. The records, the
    path lookup and the skipped-file messages are swapped as one ``IndexSnapshot``.
    Files that cannot be read are skipped and reported through ``errors``.
    """

    def __init__(
        self,
        scanner: NoteScanner,
        parser: MetadataParser,
        *,
        workers: int = 1,
    ) -> None:
        self.scanner = scanner
        self.parser = parser
        self.workers = max(1, workers)
        self._snapshot = IndexSnapshot()

    @classmethod
    def from_settings(cls, settings: NotesSettings, *, default_icon: str) -> "NoteIndex":
        """Build an index wired according to ``settings``."""
        return cls(
            NoteScanner(extensions=settings.extensions, include_hidden=settings.include_hidden),
            MetadataParser(
                header_lines=settings.header_lines,
                header_bytes=settings.header_bytes,
                default_icon=default_icon,
            ),
            workers=settings.scan_workers,
        )

    @property
    def records(self) -> tuple[NoteRecord, ...]:
        """Return the records produced by the last completed scan."""
        return self._snapshot.records

    @property
    def errors(self) -> tuple[str, ...]:
        """Return messages for files skipped during the last scan."""
        return self._snapshot.errors

    def get(self, path: Path) -> Optional[NoteRecord]:
        """Return the record whose identity is ``path``, if indexed."""
        return self._snapshot.get(path)

    @property
    def snapshot(self) -> IndexSnapshot:
        """Return the last completed scan as one consistent value."""
        return self._snapshot

    def __len__(self) -> int:
        return len(self._snapshot.records)

    def collect(self, directories: Iterable[Path | str]) -> tuple[NoteRecord, ...]:
        """Scan ``directories`` and replace the index with the result.

        Args:
            directories: Directories searched (non-recursively) for notes.

        Returns:
            tuple[NoteRecord, ...]: The new index contents, in directory order.
        """
        roots = [Path(directory).expanduser() for directory in directories]
        if self.workers > 1 and len(roots) > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                batches = list(pool.map(self._scan_directory, roots))
        else:
            batches = [self._scan_directory(root) for root in roots]

        records: list[NoteRecord] = []
        by_path: dict[Path, NoteRecord] = {}
        errors: list[str] = []
        for batch, batch_errors in batches:
            errors.extend(batch_errors)
            for record in batch:
                if record.path in by_path:
                    continue
                by_path[record.path] = record
                records.append(record)

        self._snapshot = IndexSnapshot(
            records=tuple(records),
            by_path=MappingProxyType(by_path),
            errors=tuple(errors),
        )
        LOGGER.info(
            "Indexed %d notes from %d directories (%d skipped)",
            len(records),
            len(roots),
            len(errors),
        )
        return self._snapshot.records

    def _scan_directory(self, root: Path) -> tuple[list[NoteRecord], list[str]]:
        records: list[NoteRecord] = []
        errors: list[str] = []
        for path in self.scanner.scan(root):
            try:
                records.append(self.parser.parse(path))
            except NoteReadError as exc:
                LOGGER.warning("Skipping unreadable note %s", exc)
                errors.append(str(exc))
        return records, errors


__all__ = [
    "EPOCH",
    "IndexSnapshot",
    "MetadataParser",
    "NoteIndex",
    "NoteRecord",
    "NoteScanner",
]
