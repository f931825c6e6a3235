from __future__ import annotations

"""FastAPI dependency providers for authentication services."""

from typing import Annotated

from fastapi import Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from src.domain.services.auth.logout import LogoutService
from src.domain.services.auth.session import SessionService
from src.domain.services.auth.session_validation import SessionValidationService
from src.domain.services.auth.token import TokenService
from src.domain.services.auth.user_authentication import UserAuthenticationService
from src.infrastructure.database.async_db import get_async_db

# ---------------------------------------------------------------------------
# Type aliases for dependency overrides – keeps signature noise low.
# ---------------------------------------------------------------------------

AsyncDB = Annotated[AsyncSession, Depends(get_async_db)]

# ---------------------------------------------------------------------------
# Public factories
# ---------------------------------------------------------------------------


def get_user_auth_service(db: AsyncDB) -> UserAuthenticationService:  # noqa: D401
    """Factory that returns :class:`UserAuthenticationService`."""

    return UserAuthenticationService(db)


def get_token_service() -> TokenService:  # noqa: D401
    """Factory that returns :class:`TokenService`.  Stateless, no store needed."""

    return TokenService()


def get_session_service(db: AsyncDB) -> SessionService:  # noqa: D401
    """Factory that returns :class:`SessionService` bound to the request session."""

    return SessionService(db)


def get_session_validation_service(
    session_service: Annotated[SessionService, Depends(get_session_service)],
    token_service: Annotated[TokenService, Depends(get_token_service)],
) -> SessionValidationService:  # noqa: D401
    """Factory that returns :class:`SessionValidationService`."""

    return SessionValidationService(session_service, token_service)


def get_logout_service(
    session_service: Annotated[SessionService, Depends(get_session_service)],
    token_service: Annotated[TokenService, Depends(get_token_service)],
) -> LogoutService:  # noqa: D401
    """Factory that returns :class:`LogoutService`."""

    return LogoutService(session_service, token_service)
