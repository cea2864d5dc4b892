"""Display surfaces that receive rendered note blocks."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Sequence

from rich.console import Console
from rich.text import Text

from notedeck.render.layout import RenderedBlock


class DisplaySurface(ABC):
    """A fixed-width line buffer with a cursor, owned by the host."""

    def __init__(self) -> None:
        self._lines: List[Text] = []
        self._identities: List[Optional[Path]] = []
        self._cursor = 0

    @property
    @abstractmethod
    def visible(self) -> bool:
        """Return whether the surface is currently shown."""

    @abstractmethod
    def measure_width(self) -> Optional[int]:
        """Return the usable width in cells, or ``None`` if it cannot be measured."""

    def write(self, blocks: Sequence[RenderedBlock]) -> None:
        """Replace the buffer with ``blocks``."""
        lines: List[Text] = []
        identities: List[Optional[Path]] = []
        for block in blocks:
            lines.extend(block.lines)
            identities.extend([block.identity] * block.height)
        self._lines, self._identities = lines, identities
        self._cursor = min(self._cursor, max(0, len(lines) - 1))

    @property
    def lines(self) -> List[Text]:
        return list(self._lines)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    @property
    def cursor_line(self) -> int:
        return self._cursor

    @cursor_line.setter
    def cursor_line(self, value: int) -> None:
        self._cursor = max(0, min(value, max(0, len(self._lines) - 1)))

    def identity_at(self, line: int) -> Optional[Path]:
        """Return the identity tag of the block covering ``line``."""
        if 0 <= line < len(self._identities):
            return self._identities[line]
        return None


class ConsoleSurface(DisplaySurface):
    """Surface backed by a ``rich`` console."""

    def __init__(
        self,
        console: Console | None = None,
        *,
        selection_style: str = "on grey23",
        clear_on_paint: bool = False,
    ) -> None:
        super().__init__()
        self.console = console or Console()
        self.selection_style = selection_style
        self.clear_on_paint = clear_on_paint
        self._visible = True

    @property
    def visible(self) -> bool:
        return self._visible

    def show(self) -> None:
        self._visible = True

    def hide(self) -> None:
        self._visible = False

    def measure_width(self) -> Optional[int]:
        width = self.console.width
        return width if width > 0 else None

    def paint(self, *, highlight_selection: bool = True) -> None:
        """Print the buffer, layering the selection style over the cursor's block."""
        if self.clear_on_paint:
            self.console.clear()
        selected = self.identity_at(self._cursor) if highlight_selection else None
        for line, identity in zip(self._lines, self._identities):
            if selected is not None and identity == selected:
                line = line.copy()
                line.stylize(self.selection_style)
            self.console.print(line, no_wrap=True, overflow="crop", crop=True, soft_wrap=False)


__all__ = ["ConsoleSurface", "DisplaySurface"]
