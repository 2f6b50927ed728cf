"""Exception hierarchy for fanwrite."""

from __future__ import annotations


class FanwriteError(Exception):
    """Base exception for all fanwrite-specific errors."""

    def __init__(self, message: str, details: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(FanwriteError):
    """Raised when configuration is invalid or missing."""
