"""Error taxonomy shared by services and the HTTP boundary."""

from __future__ import annotations

from typing import Any, Optional


class BudgetTrackerError(Exception):
    """Base class for failures that map onto a client-visible error kind."""

    code = "internal_error"
    status_code = 500
    default_message = "An error occurred while processing your request"

    def __init__(self, message: Optional[str] = None, *, details: Any = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.code, "message": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ValidationFailed(BudgetTrackerError):
    code = "validation_failed"
    status_code = 400
    default_message = "Validation failed"


class BadRequest(BudgetTrackerError):
    code = "bad_request"
    status_code = 400
    default_message = "Bad request"


class Unauthorized(BudgetTrackerError):
    code = "unauthorized"
    status_code = 401
    default_message = "Authentication required"


class TokenExpired(Unauthorized):
    code = "token_expired"
    default_message = "Token expired, please login again"


class InvalidSession(BudgetTrackerError):
    code = "invalid_session"
    status_code = 401
    default_message = "Session not found or has been logged out"


class InvalidCredentials(BudgetTrackerError):
    code = "invalid_credentials"
    status_code = 401
    default_message = "Email or password is incorrect"


class EmailNotVerified(BudgetTrackerError):
    """Raised when a correct password is presented for an unverified account."""

    code = "email_not_verified"
    status_code = 403
    default_message = "Please verify your email address before logging in."

    def __init__(self, email: str, message: Optional[str] = None) -> None:
        super().__init__(message)
        self.email = email

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["emailNotVerified"] = True
        payload["email"] = self.email
        return payload


class Forbidden(BudgetTrackerError):
    code = "forbidden"
    status_code = 403
    default_message = "You do not have access to this resource"


class NotFound(BudgetTrackerError):
    code = "not_found"
    status_code = 404
    default_message = "Resource not found"


class Conflict(BudgetTrackerError):
    code = "conflict"
    status_code = 409
    default_message = "Duplicate entry"


class InternalError(BudgetTrackerError):
    pass


__all__ = [
    "BadRequest",
    "BudgetTrackerError",
    "Conflict",
    "EmailNotVerified",
    "Forbidden",
    "InternalError",
    "InvalidCredentials",
    "InvalidSession",
    "NotFound",
    "TokenExpired",
    "Unauthorized",
    "ValidationFailed",
]
