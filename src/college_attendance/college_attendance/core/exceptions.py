from __future__ import annotations

from typing import Any, Optional, Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    """Raised when input data is malformed. Carries every offending field."""

    def __init__(self, errors: Sequence[str] | str, message: str = "Validation failed"):
        if isinstance(errors, str):
            errors = [errors]
        super().__init__(message)
        self.errors = list(errors)

    def __str__(self) -> str:
        return "; ".join(self.errors) or self.message


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class ConflictError(DomainError):
    """Raised on a uniqueness violation.

    `existing` identifies the record that already holds the key so the caller
    can fetch or update it instead of retrying blindly.
    """

    def __init__(self, message: str, *, existing: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.existing = existing


class StorageError(DomainError):
    """Raised when the database fails underneath a repository call."""


class DuplicateKeyError(StorageError):
    """A unique index rejected the write."""
