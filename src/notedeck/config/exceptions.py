"""Custom exceptions for configuration management."""

from notedeck.errors import NoteDeckError


class ConfigError(NoteDeckError):
    """Raised when configuration data cannot be processed."""
