"""
Domain errors raised by the service layer.

Each error carries the HTTP status and a short machine-readable code; the
handlers registered in ``healthvault.main`` render them as ``ErrorResponse``
bodies. Messages are fixed per error kind so that callers cannot tell apart
"unknown email" from "wrong password", or "wrong code" from "expired code".
"""

from typing import Any, Optional


class HealthVaultError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = 500
    error_code: str = "server_error"
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, detail: Any = None):
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message)


class ConflictError(HealthVaultError):
    status_code = 409
    error_code = "conflict"
    default_message = "Email already registered"


class InvalidCredentialsError(HealthVaultError):
    status_code = 401
    error_code = "invalid_credentials"
    default_message = "Invalid credentials"


class InvalidOrExpiredCodeError(HealthVaultError):
    status_code = 400
    error_code = "invalid_or_expired_code"
    default_message = "Invalid or expired OTP"


class NotFoundError(HealthVaultError):
    status_code = 404
    error_code = "not_found"
    default_message = "Not found"


class ValidationError(HealthVaultError):
    status_code = 422
    error_code = "validation_error"
    default_message = "Invalid request"


class UnauthorizedError(HealthVaultError):
    status_code = 401
    error_code = "unauthorized"
    default_message = "Authentication required"
