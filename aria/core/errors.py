"""
Error taxonomy for the Aria API.

Every error the API produces on purpose is an `AriaError` carrying its HTTP
status and a stable machine-readable code. The app-level exception handler
turns these into JSON responses; anything else becomes an opaque 500.
"""

from __future__ import annotations

from typing import Any


class AriaError(Exception):
    """Base exception for all expected API errors."""

    status_code: int = 500
    code: str = "error"
    message: str = "Internal server error"
    # When False the client gets the class message; the detail stays in logs
    expose_message: bool = True

    def __init__(self, message: str | None = None, details: list[dict[str, Any]] | None = None):
        self.message = message or self.message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "status": "error",
            "code": self.code,
            "message": self.message if self.expose_message else type(self).message,
        }
        if self.details:
            body["errors"] = self.details
        return body


class InvalidInput(AriaError):
    """Malformed or missing request fields."""

    status_code = 400
    code = "invalid_input"
    message = "Invalid input"


# =============================================================================
# Authentication (401)
#
# The three causes share one client-facing shape so that a caller cannot
# tell which one happened.
# =============================================================================


class AuthenticationError(AriaError):
    status_code = 401
    code = "unauthenticated"
    message = "Not authenticated"
    expose_message = False


class Unauthenticated(AuthenticationError):
    """No credential was supplied."""


class InvalidToken(AuthenticationError):
    """Credential signature, payload or expiry check failed."""


class InvalidCredentials(AuthenticationError):
    """Unknown email or wrong password."""

    code = "invalid_credentials"
    message = "Invalid email or password"


# =============================================================================
# Resources
# =============================================================================


class EmailTaken(AriaError):
    status_code = 409
    code = "email_taken"
    message = "Email already registered"


class NotFound(AriaError):
    """Missing, or owned by somebody else. Callers cannot tell which."""

    status_code = 404
    code = "not_found"
    message = "Not found"


class ValidationError(AriaError):
    """A document violates the schema constraints."""

    status_code = 422
    code = "validation_error"
    message = "Invalid character data"


class StorageError(AriaError):
    """The document store failed unexpectedly."""

    status_code = 500
    code = "storage_error"
    message = "Internal server error"
    expose_message = False


class ConfigurationError(Exception):
    """Raised when the process cannot start with the given configuration."""
