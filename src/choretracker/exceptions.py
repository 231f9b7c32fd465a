"""Custom exception hierarchy for the chore tracker package."""

from __future__ import annotations


class ChoreTrackerError(Exception):
    """Base class for all chore tracker specific errors."""


class ValidationError(ChoreTrackerError, ValueError):
    """Raised when input is malformed or out of range."""


class NotFoundError(ChoreTrackerError, LookupError):
    """Raised when a user or chore lookup fails."""


__all__ = ["ChoreTrackerError", "NotFoundError", "ValidationError"]
