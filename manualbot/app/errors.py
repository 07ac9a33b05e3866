"""Error taxonomy for the dialogue and search core."""

from enum import Enum


class ManualBotError(Exception):
    """Base class for all core errors."""

    pass


class ValidationError(ManualBotError):
    """User input rejected by a step validator. Always recoverable."""

    def __init__(self, reason: str, example: str | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.example = example


class DuplicateError(ValidationError):
    """Email address already registered."""

    pass


class UnclearResponse(ManualBotError):
    """Yes/No confirmation could not be classified."""

    pass


class InvalidQuery(ManualBotError):
    """Search query rejected before matching."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class PersistenceErrorKind(str, Enum):
    """Failure class reported by a record store."""

    transient = "transient"
    permanent = "permanent"


class PersistenceError(ManualBotError):
    """External record store call failed or timed out.

    The core treats both kinds identically (abort flow, clear session);
    the kind is kept for callers that own a retry policy.
    """

    def __init__(
        self,
        message: str,
        kind: PersistenceErrorKind = PersistenceErrorKind.transient,
    ) -> None:
        super().__init__(message)
        self.kind = kind
