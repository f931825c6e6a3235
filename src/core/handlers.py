from __future__ import annotations

"""
Global exception handlers for the FastAPI application.

This module contains centralized handlers for custom application exceptions,
translating them into appropriate HTTP responses.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette import status
from structlog import get_logger

from src.core.exceptions import (
    AuthenticationError,
    DatabaseError,
    InvalidCredentialsError,
    PermissionError,
    ProventoError,
    SessionCreationError,
    UserNotFoundError,
)
from src.utils.i18n import get_request_language, get_translated_message

__all__ = [
    "authentication_error_handler",
    "invalid_credentials_error_handler",
    "permission_error_handler",
    "user_not_found_error_handler",
    "session_creation_error_handler",
    "database_error_handler",
    "provento_error_handler",
    "register_exception_handlers",
]

logger = get_logger(__name__)


def _client_ip(request: Request) -> str | None:
    return request.client.host if request.client else None


async def authentication_error_handler(request: Request, exc: AuthenticationError) -> JSONResponse:
    """Handles `AuthenticationError`, returning a `401 Unauthorized`.

    Args:
        request: The incoming `Request` object.
        exc: The `AuthenticationError` instance.

    Returns:
        A `JSONResponse` with a 401 status code and error detail.
    """
    logger.warning(
        "Authentication failure",
        error=exc.code,
        client_ip=_client_ip(request),
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"detail": str(exc)},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def invalid_credentials_error_handler(
    request: Request, exc: InvalidCredentialsError
) -> JSONResponse:
    """Handles `InvalidCredentialsError`, returning a `400 Bad Request`.

    Raised on sign-in when the payload is malformed or the password is
    blank. Kept apart from `401` so that a bad form never looks like an
    expired session to the client.
    """
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": exc.message},
    )


async def permission_error_handler(request: Request, exc: PermissionError) -> JSONResponse:
    """Handles `PermissionError`, returning a `403 Forbidden`.

    On sign-in this covers an unset or incorrect password.
    """
    logger.warning(
        "Permission denied",
        error=exc.code,
        client_ip=_client_ip(request),
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN,
        content={"detail": str(exc)},
    )


async def user_not_found_error_handler(request: Request, exc: UserNotFoundError) -> JSONResponse:
    """Handles `UserNotFoundError`, returning a `404 Not Found`."""
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": exc.message},
    )


async def session_creation_error_handler(
    request: Request, exc: SessionCreationError
) -> JSONResponse:
    """Handles `SessionCreationError`, returning a `500 Internal Server Error`.

    The store-level cause is logged; the client only gets a translated,
    generic message.
    """
    logger.error(
        "Sign-in aborted, session could not be created",
        error_message=exc.message,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": get_translated_message(
                "signin_service_unavailable", get_request_language(request)
            )
        },
    )


async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    """Handles `DatabaseError`, returning a `500 Internal Server Error`.

    Args:
        request: The incoming `Request` object.
        exc: The `DatabaseError` instance.

    Returns:
        A `JSONResponse` with a 500 status code and a generic error message.
    """
    logger.critical(
        "A critical database error occurred",
        error_message=str(exc),
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": get_translated_message("internal_server_error", get_request_language(request))
        },
    )


async def provento_error_handler(request: Request, exc: ProventoError) -> JSONResponse:
    """Handles the base `ProventoError`, returning a `500 Internal Server Error`.

    This serves as a fallback for any custom application errors that do not
    have a more specific handler.
    """
    logger.error(
        "An unhandled application error occurred",
        error_code=exc.code,
        error_message=exc.message,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": get_translated_message("internal_server_error", get_request_language(request))
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Registers all custom exception handlers with the FastAPI application.

    Starlette resolves handlers along the exception's MRO, so subclasses such
    as `InvalidCredentialsError` and `SessionCreationError` get their own
    status even though their parents are registered too.

    Args:
        app: The `FastAPI` application instance.
    """
    app.add_exception_handler(InvalidCredentialsError, invalid_credentials_error_handler)
    app.add_exception_handler(AuthenticationError, authentication_error_handler)
    app.add_exception_handler(PermissionError, permission_error_handler)
    app.add_exception_handler(UserNotFoundError, user_not_found_error_handler)
    app.add_exception_handler(SessionCreationError, session_creation_error_handler)
    app.add_exception_handler(DatabaseError, database_error_handler)
    app.add_exception_handler(ProventoError, provento_error_handler)
