"""Domain exceptions for the content intelligence core."""

from typing import Optional


class PlaywiseError(Exception):
    """Base exception for Playwise operations."""

    pass


class InvalidInputError(PlaywiseError, ValueError):
    """Raised when a caller passes input outside a function's documented domain."""

    pass


class InvalidScheduleError(InvalidInputError):
    """Raised when a schedule rule violates its time or weekday invariants."""

    pass


class SnapshotError(PlaywiseError):
    """Raised when a catalog snapshot file cannot be read or parsed."""

    def __init__(self, path: str, message: Optional[str] = None):
        self.path = path
        super().__init__(message or f"Invalid catalog snapshot: {path}")


# Short name used by callers that follow the classifier's contract wording
InvalidInput = InvalidInputError
