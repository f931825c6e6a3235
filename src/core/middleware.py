"""Middleware configuration for the FastAPI application.

This module handles the configuration and registration of all middleware
components: CORS and per-request language selection.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from src.core.config.settings import settings
from src.utils.i18n import get_request_language


def configure_middleware(app: FastAPI) -> None:
    """Configure all middleware for the FastAPI application.

    Args:
        app (FastAPI): The FastAPI application instance
    """
    # CORS middleware configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Language middleware
    app.middleware("http")(set_language_middleware)


async def set_language_middleware(request: Request, call_next):
    """Middleware for handling language preferences in requests.

    Stores the negotiated language on `request.state.language` and echoes it
    in the `Content-Language` response header.

    Args:
        request (Request): The incoming request
        call_next: The next middleware or route handler

    Returns:
        Response: The response with language headers
    """
    lang = get_request_language(request)
    request.state.language = lang
    response = await call_next(request)
    response.headers["Content-Language"] = lang
    return response
