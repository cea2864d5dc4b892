"""View controller driving a display surface from the note index."""

from __future__ import annotations

import logging
from bisect import bisect_right
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Literal, Optional, Sequence

from notedeck.config.models import SortKey, ViewSettings
from notedeck.index import NoteIndex
from notedeck.render.layout import LayoutEngine, RenderedBlock

from .sorting import SORT_KEYS, SortController
from .surface import DisplaySurface

LOGGER = logging.getLogger(__name__)

ViewStatus = Literal["empty", "populated"]


@dataclass(slots=True)
class ViewState:
    """Mutable presentation state that survives rebuilds.

    Attributes:
        selected: Identity (path) of the selected note.
        sort_key: Field used to order the list.
        descending: Whether the order is reversed.
        show_icons: Whether the icon column is drawn.
        show_date: Whether the date column is drawn.
        show_tags: Whether the tag column is drawn.
    """

    selected: Optional[Path] = None
    sort_key: SortKey = "modified"
    descending: bool = True
    show_icons: bool = True
    show_date: bool = True
    show_tags: bool = True

    @classmethod
    def from_settings(cls, settings: ViewSettings) -> "ViewState":
        return cls(
            sort_key=settings.sort_key,
            descending=settings.descending,
            show_icons=settings.show_icons,
            show_date=settings.show_date,
            show_tags=settings.show_tags,
        )


class ViewController:
    """Compose sorting and layout into a selection-preserving list on a surface.

    The controller starts ``empty`` and becomes ``populated`` after the first
    reload or render. ``refresh`` rebuilds the whole list and puts the cursor
    back on the previously selected note, falling back to the previous line
    offset when that note is gone.
    """

    def __init__(
        self,
        index: NoteIndex,
        layout: LayoutEngine,
        *,
        directories: Iterable[Path | str] = (),
        sorter: SortController | None = None,
        surface: DisplaySurface | None = None,
        state: ViewState | None = None,
    ) -> None:
        self.index = index
        self.layout = layout
        self.directories: List[Path] = [Path(directory) for directory in directories]
        self.sorter = sorter or SortController()
        self.surface = surface
        self.state = state or ViewState()
        self.last_width: Optional[int] = None
        self.pending_refresh = False
        self.render_count = 0
        self._status: ViewStatus = "empty"
        self._blocks: List[RenderedBlock] = []
        self._positions: dict[Path, int] = {}
        self._starts: List[int] = []

    @property
    def status(self) -> ViewStatus:
        return self._status

    @property
    def blocks(self) -> Sequence[RenderedBlock]:
        """Return the blocks written by the last render."""
        return tuple(self._blocks)

    def line_of(self, path: Path) -> Optional[int]:
        """Return the first line of the block showing ``path``, if rendered."""
        return self._positions.get(path)

    # Commands ---------------------------------------------------------

    def reload(self) -> bool:
        """Rescan the configured directories, then refresh."""
        self.index.collect(self.directories)
        self._status = "populated"
        return self.refresh()

    def refresh(self) -> bool:
        """Re-sort and re-render the current index without rescanning.

        Returns:
            bool: True when the surface was rewritten; False when there is no
            visible surface or its width cannot be measured yet.
        """
        surface = self.surface
        if surface is None or not surface.visible:
            LOGGER.debug("No visible surface; refresh skipped")
            return False
        width = surface.measure_width()
        if width is None:
            LOGGER.debug("Surface width unavailable; refresh deferred")
            self.pending_refresh = True
            return False
        return self._render(surface, width)

    def on_resize(self, width: Optional[int] = None) -> bool:
        """React to a viewport size change; cheap when nothing changed.

        Args:
            width: New width reported by the host, or None to measure the surface.

        Returns:
            bool: True if the change triggered a render.
        """
        surface = self.surface
        if surface is None or not surface.visible:
            return False
        measured = width if width is not None else surface.measure_width()
        if measured is None:
            return False
        if measured == self.last_width and not self.pending_refresh:
            return False
        return self._render(surface, measured)

    def toggle_icons(self) -> bool:
        self.state.show_icons = not self.state.show_icons
        return self.refresh()

    def toggle_date(self) -> bool:
        self.state.show_date = not self.state.show_date
        return self.refresh()

    def toggle_tags(self) -> bool:
        self.state.show_tags = not self.state.show_tags
        return self.refresh()

    def reverse_sort_order(self) -> bool:
        self.state.descending = not self.state.descending
        return self.refresh()

    def sort_by(self, key: SortKey) -> bool:
        """Order the list by ``key`` and refresh.

        Raises:
            ValueError: If ``key`` is not a known sort key.
        """
        if key not in SORT_KEYS:
            raise ValueError(f"Unknown sort key {key!r}; expected one of {SORT_KEYS}")
        self.state.sort_key = key
        return self.refresh()

    def select_next(self) -> Optional[Path]:
        return self._move(1)

    def select_previous(self) -> Optional[Path]:
        return self._move(-1)

    def select(self, path: Path) -> bool:
        """Move the cursor to the note identified by ``path`` if it is listed."""
        line = self._positions.get(path)
        if line is None or self.surface is None:
            return False
        self.surface.cursor_line = line
        self.state.selected = path
        return True

    def resolve_selected_path(self) -> Optional[Path]:
        """Return the identity of the note under the cursor."""
        surface = self.surface
        if surface is not None and surface.line_count:
            return surface.identity_at(surface.cursor_line)
        return None

    # Internal helpers -------------------------------------------------

    def _render(self, surface: DisplaySurface, width: int) -> bool:
        previous_line = surface.cursor_line
        selected = surface.identity_at(previous_line) or self.state.selected

        records = self.sorter.order(
            self.index.records, self.state.sort_key, self.state.descending
        )
        blocks = [
            self.layout.render(
                record,
                width,
                show_icons=self.state.show_icons,
                show_date=self.state.show_date,
                show_tags=self.state.show_tags,
            )
            for record in records
        ]

        positions: dict[Path, int] = {}
        starts: List[int] = []
        line = 0
        for block in blocks:
            positions.setdefault(block.identity, line)
            starts.append(line)
            line += block.height

        surface.write(blocks)
        self._blocks, self._positions, self._starts = blocks, positions, starts

        target = positions.get(selected) if selected is not None else None
        if target is None:
            target = self._block_start(previous_line)
            LOGGER.debug("Selection %s not listed; keeping line %d", selected, target)
        surface.cursor_line = target
        current = surface.identity_at(surface.cursor_line)
        if current is not None:
            self.state.selected = current

        self.last_width = width
        self.pending_refresh = False
        self.render_count += 1
        self._status = "populated"
        LOGGER.debug("Rendered %d notes at width %d", len(blocks), width)
        return True

    def _block_start(self, line: int) -> int:
        """Return the first line of the block covering ``line``, clamped to the list."""
        if not self._starts:
            return 0
        position = bisect_right(self._starts, max(0, line)) - 1
        return self._starts[max(0, position)]

    def _move(self, step: int) -> Optional[Path]:
        surface = self.surface
        if surface is None or not self._starts:
            return None
        current = bisect_right(self._starts, surface.cursor_line) - 1
        target = max(0, min(len(self._starts) - 1, current + step))
        surface.cursor_line = self._starts[target]
        self.state.selected = self._blocks[target].identity
        return self.state.selected


__all__ = ["ViewController", "ViewState", "ViewStatus"]
