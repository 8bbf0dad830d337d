"""Exception hierarchy shared by the pipeline, stores and HTTP layer."""

from __future__ import annotations


class YogaFlowError(Exception):
    """Base class for all yogaflow errors."""


class ParseError(YogaFlowError):
    """Raised when model output cannot be parsed into the expected structure.

    The raw text is kept so callers can surface it for diagnosis.
    """

    def __init__(self, message: str, raw_text: str = "") -> None:
        super().__init__(message)
        self.raw_text = raw_text


class MatchError(YogaFlowError):
    """Raised when a suggested pose has no catalog match and the policy forbids substitution."""


class CatalogEmptyError(YogaFlowError):
    """Raised when the pose catalog has no poses to choose from."""


class NotFoundError(YogaFlowError):
    """Raised when a pose, sequence, phase or placement does not exist."""


class AuthorizationError(YogaFlowError):
    """Raised when the acting user may not touch a resource."""

    def __init__(self, message: str, *, authenticated: bool = True) -> None:
        super().__init__(message)
        self.authenticated = authenticated


class PersistenceError(YogaFlowError):
    """Raised when a write to the backing store fails."""


class BackendError(YogaFlowError):
    """Raised when the text generation backend fails or is unreachable."""


class InvalidEditError(YogaFlowError):
    """Raised when an edit would break a sequence constraint or names a read-only field."""
