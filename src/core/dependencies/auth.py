from __future__ import annotations

# FastAPI & typing
from dataclasses import dataclass
from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException, Request, status
from sqlmodel.ext.asyncio.session import AsyncSession
from structlog import get_logger

# Project imports
from src.domain.services.auth.session import SessionService
from src.domain.services.auth.session_validation import (
    REASON_NOT_FOUND,
    REASON_USER_MISMATCH,
    SessionValidationService,
)
from src.domain.services.auth.token import TokenService
from src.infrastructure.database import get_async_db
from src.utils.i18n import get_translated_message

__all__ = [
    "AuthContext",
    "CurrentSession",
    "get_current_session",
]

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Type-annotated dependency shortcuts
# ---------------------------------------------------------------------------


DBSession = Annotated[AsyncSession, Depends(get_async_db)]
AuthorizationHeader = Annotated[Optional[str], Header(alias="Authorization")]

_REJECTION_MESSAGES = {
    REASON_NOT_FOUND: "session_expired_or_not_found",
    REASON_USER_MISMATCH: "session_user_mismatch",
}


@dataclass(frozen=True)
class AuthContext:
    """Caller identity established by a validated bearer token."""

    user_id: str
    session_id: Optional[str]
    org_id: Optional[str] = None
    legacy: bool = False


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _auth_fail(request: Request, key: str) -> HTTPException:  # noqa: D401
    """Consistently shaped *401* UNAUTHORIZED response."""
    detail = get_translated_message(key, getattr(request.state, "language", "en"))
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


# ---------------------------------------------------------------------------
# Public dependencies
# ---------------------------------------------------------------------------


async def get_current_session(  # noqa: D401
    request: Request, db_session: DBSession, authorization: AuthorizationHeader = None
) -> AuthContext:
    """Return the :class:`AuthContext` of a bearer whose session is still valid.

    Every protected request asks the session store, so a logged-out or evicted
    session is rejected even while its token has not expired yet. Tokens
    without an embedded session id are accepted as legacy. Anything else,
    including a store outage, is a *401* and the client should start its
    re-authentication protocol.
    """

    validator = SessionValidationService(SessionService(db_session), TokenService())
    result = await validator.validate_authorization(authorization)

    if not result.valid:
        await logger.ainfo(
            "Protected request rejected", reason=result.reason, path=request.url.path
        )
        raise _auth_fail(request, _REJECTION_MESSAGES.get(result.reason, "invalid_token"))

    return AuthContext(
        user_id=result.user_id,
        session_id=result.session_id,
        org_id=result.org_id,
        legacy=bool(result.legacy),
    )


CurrentSession = Annotated[AuthContext, Depends(get_current_session)]
