"""Second-opinion session validation for bearer tokens.

This is the logic behind `POST /auth/validate-session` and the protected-route
dependency. It never raises for business-level invalidity: every outcome is a
structured `SessionValidationResult` so callers can always parse an answer.
"""

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from structlog import get_logger

from src.core.exceptions import AuthenticationError, ValidationError
from src.domain.services.auth.session import SessionService
from src.domain.services.auth.token import TokenService
from src.utils.security import mask_identifier
from src.utils.timezone import as_utc

logger = get_logger(__name__)

REASON_NO_HEADER = "No valid authorization header"
REASON_NO_TOKEN = "No token provided"
REASON_INVALID_JWT = "Invalid JWT token"
REASON_LEGACY = "Legacy token format"
REASON_NOT_FOUND = "Session expired or not found"
REASON_USER_MISMATCH = "Session user mismatch"
REASON_VALID = "Session valid"
REASON_ERROR = "Validation error occurred"


@dataclass(frozen=True)
class SessionValidationResult:
    valid: bool
    reason: str
    session_id: Optional[str] = None
    user_id: Optional[str] = None
    org_id: Optional[str] = None
    expires_at: Optional[datetime] = None
    legacy: Optional[bool] = None

    def to_response(self) -> Dict[str, Any]:
        """Wire shape: optional fields are omitted when unset."""
        return {
            key: value
            for key, value in asdict(self).items()
            if value is not None and key != "org_id"
        }


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token of a `Bearer <token>` header, "" when it is empty, None otherwise."""
    if not authorization or not authorization.startswith("Bearer "):
        return None
    parts = authorization.split(" ")
    return parts[1] if len(parts) > 1 else ""


class SessionValidationService:
    """Checks a bearer token against the session store.

    Outcomes, in evaluation order: missing header, empty token, bad signature
    or expiry, legacy token without an embedded session id (accepted), session
    not valid (including store failure, which fails closed), session owned by
    another user, valid.
    """

    def __init__(self, session_service: SessionService, token_service: TokenService):
        self._session_service = session_service
        self._token_service = token_service

    async def validate_authorization(self, authorization: Optional[str]) -> SessionValidationResult:
        token = extract_bearer_token(authorization)
        if token is None:
            return SessionValidationResult(valid=False, reason=REASON_NO_HEADER)
        if not token:
            return SessionValidationResult(valid=False, reason=REASON_NO_TOKEN)

        try:
            payload = self._token_service.decode_token(token)
        except AuthenticationError:
            return SessionValidationResult(valid=False, reason=REASON_INVALID_JWT)

        user_id = str(payload["user_id"])
        session_id = payload.get("session_id")
        if not session_id:
            # Tokens issued before sessions existed stay valid until they expire.
            await logger.awarning("Token without session id accepted", user_id=user_id)
            return SessionValidationResult(
                valid=True,
                reason=REASON_LEGACY,
                user_id=user_id,
                org_id=payload.get("org_id"),
                legacy=True,
            )

        try:
            session = await self._session_service.validate_session(session_id)
        except ValidationError:
            session = None

        if session is None:
            return SessionValidationResult(valid=False, reason=REASON_NOT_FOUND)

        if str(session.user_id) != user_id:
            await logger.awarning(
                "Session user mismatch",
                token_user_id=user_id,
                session_id=mask_identifier(session_id),
            )
            return SessionValidationResult(valid=False, reason=REASON_USER_MISMATCH)

        return SessionValidationResult(
            valid=True,
            reason=REASON_VALID,
            session_id=session_id,
            user_id=user_id,
            org_id=payload.get("org_id"),
            expires_at=as_utc(session.expires_at),
        )
