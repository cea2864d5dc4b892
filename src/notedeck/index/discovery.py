"""Note file discovery."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator

LOGGER = logging.getLogger(__name__)


class NoteScanner:
    """Discover note files directly inside a directory (no recursion)."""

    def __init__(self, *, extensions: Iterable[str], include_hidden: bool = False) -> None:
        self.extensions = frozenset(suffix.lower() for suffix in extensions)
        self.include_hidden = include_hidden

    def scan(self, root: Path) -> Iterator[Path]:
        """Yield absolute paths of note files in ``root`` sorted by name.

        Missing or unreadable directories yield nothing.
        """
        root = root.expanduser()
        try:
            entries = sorted(root.iterdir(), key=lambda entry: entry.name)
        except OSError as exc:
            LOGGER.debug("Skipping directory %s: %s", root, exc)
            return

        for path in entries:
            if not self.include_hidden and path.name.startswith("."):
                continue
            if path.suffix.lower() not in self.extensions:
                continue
            # is_file() follows symlinks, so dangling links and directories drop out.
            if not path.is_file():
                continue
            yield path.resolve()


__all__ = ["NoteScanner"]
