"""Exceptions shared across notedeck components."""


class NoteDeckError(Exception):
    """Base exception for notedeck operations."""


class NoteReadError(NoteDeckError):
    """Raised when a note file cannot be read from disk."""
