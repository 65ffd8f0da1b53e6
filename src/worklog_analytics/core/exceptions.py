from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""

    code = "INTERNAL_ERROR"
    status = 500


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules.

    ``details`` is a list of ``{"field": ..., "message": ...}`` entries so the
    client can point at the offending parameter.
    """

    code = "VALIDATION_ERROR"
    status = 400

    def __init__(self, message: str, *, field: Optional[str] = None, details: Optional[list[dict]] = None):
        super().__init__(message)
        self.field = field
        if details is None and field is not None:
            details = [{"field": field, "message": message}]
        self.details = details or []


class AuthenticationError(DomainError):
    """Raised when the caller has no identity."""

    code = "UNAUTHORIZED"
    status = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action.

    ``reason`` is ``"role"`` when the caller's role does not allow the scope and
    ``"owner"`` when the caller does not own (or belong to) the target.
    """

    code = "FORBIDDEN"
    status = 403

    def __init__(self, message: str, *, reason: str = "role"):
        super().__init__(message)
        self.reason = reason


class NotFoundError(DomainError):
    code = "NOT_FOUND"
    status = 404


class InternalError(DomainError):
    """Raised when the record store fails. The message is safe to show."""

    code = "INTERNAL_ERROR"
    status = 500
