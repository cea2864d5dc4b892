"""Ordering of note records."""

from __future__ import annotations

from operator import attrgetter
from typing import Any, Callable, Dict, Iterable, List, get_args

from notedeck.config.models import SortKey
from notedeck.index.models import NoteRecord

SORT_KEYS: tuple[str, ...] = get_args(SortKey)


class SortController:
    """Order records by one field, stably, in either direction."""

    def __init__(self) -> None:
        self._keys: Dict[str, Callable[[NoteRecord], Any]] = {
            key: attrgetter(key) for key in SORT_KEYS
        }

    def order(
        self, records: Iterable[NoteRecord], key: SortKey, descending: bool = False
    ) -> List[NoteRecord]:
        """Return ``records`` sorted by ``key``.

        Titles compare case-sensitively; times compare chronologically. Equal
        keys keep their input order in both directions: descending is the
        ascending order reversed with ties left as they came in.

        Raises:
            ValueError: If ``key`` is not a known sort key.
        """
        try:
            getter = self._keys[key]
        except KeyError:
            raise ValueError(f"Unknown sort key {key!r}; expected one of {SORT_KEYS}") from None
        return sorted(records, key=getter, reverse=descending)

    @staticmethod
    def next_key(key: SortKey) -> SortKey:
        """Return the sort key after ``key`` in cycling order."""
        index = SORT_KEYS.index(key) if key in SORT_KEYS else -1
        return SORT_KEYS[(index + 1) % len(SORT_KEYS)]  # type: ignore[return-value]


__all__ = ["SORT_KEYS", "SortController"]
