from __future__ import annotations

from typing import Optional, Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules.

    ``errors`` holds one ``{"field": ..., "message": ...}`` pair per violated rule.
    """

    def __init__(self, message: str = "Validation failed", errors: Optional[Sequence[dict]] = None):
        super().__init__(message)
        self.message = message
        self.errors = list(errors or [])


class AuthenticationError(DomainError):
    """Raised when the request carries no authenticated user."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised at the HTTP boundary when a looked-up record does not exist."""


class PersistenceError(Exception):
    """Base exception for storage failures."""


class DuplicateFactorError(PersistenceError):
    def __init__(self, factor: str):
        super().__init__(f"Threshold with factor '{factor}' already exists")
        self.factor = factor
