from __future__ import annotations

"""Centralized, structured exception hierarchy for the session service.

Each exception carries a machine-readable `code` for programmatic error
handling and a human-readable `message` for logging and user feedback. The
API layer maps these onto HTTP status codes in `src.core.handlers`; the
client library raises `AuthorizationFailure` and records `LogoutFailure`.
"""

from typing import Final

__all__: Final = [
    "ProventoError",
    "AuthenticationError",
    "InvalidCredentialsError",
    "PermissionError",
    "UserNotFoundError",
    "DatabaseError",
    "SessionCreationError",
    "ValidationError",
    "AuthorizationFailure",
    "LogoutFailure",
]


class ProventoError(Exception):
    """Base exception class for all custom errors in the application.

    Attributes:
        message (str): A human-readable error message, suitable for logging.
                       This message can be translated.
        code (str): A unique, machine-readable error code for identifying
                    the type of error programmatically.
    """

    message: str
    code: str = "generic_error"

    def __init__(self, message: str, code: str = "generic_error"):
        self.message = message
        self.code = code
        Exception.__init__(self, self.message)

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Auth-related errors
# ---------------------------------------------------------------------------


class AuthenticationError(ProventoError):
    """Raised for general authentication failures.

    Maps to a `401 Unauthorized` HTTP status code.
    """

    def __init__(self, message: str, code: str = "authentication_error"):
        super().__init__(message, code)


class InvalidCredentialsError(AuthenticationError):
    """Raised when user-provided credentials are malformed or incomplete.

    Maps to a `400 Bad Request` on the sign-in route, where the payload itself
    is at fault rather than the stored account.
    """

    def __init__(self, message: str, code: str = "invalid_credentials"):
        super().__init__(message, code)


class PermissionError(ProventoError):
    """Raised when an account exists but may not sign in.

    Covers wrong passwords, unset passwords and restricted roles. Maps to a
    `403 Forbidden` HTTP status code.
    """

    def __init__(self, message: str, code: str = "permission_denied"):
        super().__init__(message, code)


class UserNotFoundError(ProventoError):
    """Raised when no account matches the supplied email.

    Maps to a `404 Not Found` HTTP status code.
    """

    def __init__(self, message: str = "User not found", code: str = "user_not_found"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Session store errors
# ---------------------------------------------------------------------------


class DatabaseError(ProventoError):
    """Raised for low-level database interaction errors.

    The message is one of a small fixed set of actionable descriptions
    produced by `src.infrastructure.database.errors.translate_database_error`,
    never a raw driver message. Maps to a `500 Internal Server Error`.
    """

    def __init__(self, message: str, code: str = "database_error"):
        super().__init__(message, code)


class SessionCreationError(DatabaseError):
    """Raised when a session could not be issued.

    Either the store was unreachable or the insert failed; the surrounding
    transaction has been rolled back, so no partial session is validatable.
    Fatal to the sign-in flow.
    """

    def __init__(self, message: str, code: str = "session_creation_failed"):
        super().__init__(message, code)


class ValidationError(DatabaseError):
    """Raised when the store is unavailable while validating a session.

    Callers must fail closed and treat the session as not found; this error
    is never surfaced to clients of the validation endpoint.
    """

    def __init__(self, message: str, code: str = "session_validation_unavailable"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Client-side errors
# ---------------------------------------------------------------------------


class AuthorizationFailure(ProventoError):
    """A `401 Unauthorized` answer from a downstream call.

    This is the only trigger for the client resilience protocol; every other
    status passes through untouched.
    """

    status_code: int = 401

    def __init__(self, message: str = "Unauthorized", code: str = "authorization_failure"):
        super().__init__(message, code)


class LogoutFailure(ProventoError):
    """One teardown step that failed during logout.

    Never raised past the logout boundary: instances are collected on the
    logout result so the failure stays observable while the caller still sees
    a successful logout.
    """

    def __init__(self, step: str, cause: BaseException | str, code: str = "logout_step_failed"):
        self.step = step
        self.cause = cause
        super().__init__(f"{step}: {cause}", code)
