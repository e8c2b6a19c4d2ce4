"""Kitchen error taxonomy on top of protean's exceptions.

``ValidationError`` and ``ObjectNotFoundError`` come from protean directly.
"""

from protean.exceptions import ValidationError


class InvalidTransitionError(ValidationError):
    """Requested status is neither the current one, the next one, nor an allowed exception."""


class ConflictError(Exception):
    """A compare-and-swap write lost the race; the caller must re-read and retry."""

    def __init__(self, message: str, current_status: str | None = None):
        super().__init__(message)
        self.current_status = current_status


class AlreadyProcessedError(Exception):
    """The operation already happened; callers treat this as a benign no-op."""
