"""
auth/errors.py -- Exception taxonomy for the register/login flow.

Every error carries the HTTP status it maps to and a message that is safe to
show to the end user. api/main.py turns any AuthError into {"error": message}.
"""

from __future__ import annotations


class AuthError(Exception):
    """Base exception for authentication failures."""

    status_code: int = 500
    default_message: str = "Server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AuthError):
    """Input failed a field rule. Raised before any store access."""

    status_code = 400
    default_message = "Invalid input"

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(message)


class DuplicateIdentity(AuthError):
    """A user with the same normalized email already exists."""

    status_code = 400
    default_message = "User already exists"


class InvalidCredentials(AuthError):
    """Unknown email or wrong password -- deliberately indistinguishable."""

    status_code = 401
    default_message = "Invalid credentials"


class ServerError(AuthError):
    """Unexpected store or signing failure. Details are logged, never returned."""

    status_code = 500
    default_message = "Server error"
