"""Server-side logout.

Logout must always look successful to the caller, otherwise a client can be
stuck in an authenticated-looking state. Partial cleanup failures are kept
observable on `LogoutResult` instead of being raised.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from structlog import get_logger

from src.core.exceptions import AuthenticationError, LogoutFailure
from src.domain.services.auth.session import SessionService
from src.domain.services.auth.session_validation import extract_bearer_token
from src.domain.services.auth.token import TokenService
from src.utils.security import mask_identifier

logger = get_logger(__name__)


@dataclass
class LogoutResult:
    """Outcome of a logout.

    `logged_out` is always True: from the caller's perspective logout
    succeeded. `failures` lists the cleanup steps that did not complete.
    """

    logged_out: bool = True
    scope: str = "none"
    user_id: Optional[str] = None
    failures: List[LogoutFailure] = field(default_factory=list)

    @property
    def clean(self) -> bool:
        return not self.failures


class LogoutService:
    def __init__(self, session_service: SessionService, token_service: TokenService):
        self._session_service = session_service
        self._token_service = token_service

    async def logout(self, authorization: Optional[str], all_sessions: bool = False) -> LogoutResult:
        """Invalidate the current session, or every session of the user.

        Args:
            authorization: Raw Authorization header; may be missing.
            all_sessions: Log out everywhere instead of only this session.

        Returns:
            LogoutResult: Always `logged_out=True`.
        """
        result = LogoutResult()
        token = extract_bearer_token(authorization)
        if not token:
            return result

        try:
            payload = self._token_service.decode_token(token)
        except AuthenticationError as exc:
            # An unusable token still logs out; there is just nothing to revoke.
            result.failures.append(LogoutFailure("verify_token", exc))
            await logger.awarning("Invalid token during logout", error=exc.code)
            return result

        result.user_id = str(payload["user_id"])
        session_id = payload.get("session_id")

        if all_sessions:
            result.scope = "all"
            if not await self._session_service.invalidate_all_sessions(result.user_id):
                result.failures.append(
                    LogoutFailure("invalidate_all_sessions", "session store unavailable")
                )
        elif session_id:
            result.scope = "current"
            revoked = await self._session_service.invalidate_session(session_id)
            if not revoked:
                await logger.ainfo(
                    "Session already inactive at logout",
                    user_id=result.user_id,
                    session_id=mask_identifier(session_id),
                )

        await logger.ainfo(
            "User logged out",
            user_id=result.user_id,
            scope=result.scope,
            failures=[failure.step for failure in result.failures],
        )
        return result
