import pytest

from src.core.exceptions import (
    AuthenticationError,
    AuthorizationFailure,
    DatabaseError,
    InvalidCredentialsError,
    LogoutFailure,
    PermissionError,
    ProventoError,
    SessionCreationError,
    UserNotFoundError,
    ValidationError,
)


@pytest.mark.parametrize(
    "exc_class,parent,code",
    [
        (AuthenticationError, ProventoError, "authentication_error"),
        (InvalidCredentialsError, AuthenticationError, "invalid_credentials"),
        (PermissionError, ProventoError, "permission_denied"),
        (DatabaseError, ProventoError, "database_error"),
        (SessionCreationError, DatabaseError, "session_creation_failed"),
        (ValidationError, DatabaseError, "session_validation_unavailable"),
    ],
)
def test_hierarchy_and_default_codes(exc_class, parent, code):
    exc = exc_class("message")

    assert isinstance(exc, parent)
    assert exc.code == code
    assert str(exc) == "message"


def test_user_not_found_defaults():
    exc = UserNotFoundError()

    assert exc.message == "User not found"
    assert exc.code == "user_not_found"


def test_authorization_failure_carries_401():
    exc = AuthorizationFailure()

    assert exc.status_code == 401
    assert exc.message == "Unauthorized"


def test_logout_failure_names_step_and_cause():
    cause = OSError("disk full")
    failure = LogoutFailure("clear_credentials", cause)

    assert failure.step == "clear_credentials"
    assert failure.cause is cause
    assert str(failure) == "clear_credentials: disk full"
