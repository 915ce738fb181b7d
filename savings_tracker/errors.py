"""
Error taxonomy shared by the loader, aggregator and API layer.
"""
from __future__ import annotations


class SavingsError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(SavingsError):
    """Missing or malformed query input."""

    status_code = 400


class NotFoundError(SavingsError):
    """Requested device does not exist."""

    status_code = 404


class DataSourceError(Exception):
    """A CSV source is missing or unreadable. Caught by the loader."""

    def __init__(self, path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class ParseWarning(UserWarning):
    """A single field or timestamp was coerced to a safe default."""
