"""Error taxonomy raised by the dictation authoring services."""

from __future__ import annotations

from enum import Enum


class AuthoringError(Exception):
    """Base class for errors surfaced by the authoring services."""

    code = "authoring_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInputError(AuthoringError):
    """Client-fixable payload problem; never retried."""

    code = "validation_error"


class ContentErrorKind(str, Enum):
    """Reasons a word's text is rejected."""

    TOO_LONG = "too_long"
    SCRIPT_MISMATCH = "script_mismatch"
    EMPTY_CONTENT = "empty_content"


class ContentError(InvalidInputError):
    """Raised when a word violates the language or length rules."""

    def __init__(self, kind: ContentErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind

    @property
    def code(self) -> str:  # type: ignore[override]
        return self.kind.value


class NotFoundError(AuthoringError):
    """Raised when a referenced dictation or word does not exist."""

    code = "not_found"


class AccessDeniedError(AuthoringError):
    """Raised when the acting user does not own the resource."""

    code = "access_denied"


class StorageFailure(AuthoringError):
    """Raised when a database transaction or connection fails."""

    code = "storage_failure"


__all__ = [
    "AuthoringError",
    "InvalidInputError",
    "ContentErrorKind",
    "ContentError",
    "NotFoundError",
    "AccessDeniedError",
    "StorageFailure",
]
