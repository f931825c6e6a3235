from datetime import timedelta
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from structlog import get_logger

from src.core.config.settings import settings
from src.core.exceptions import AuthenticationError
from src.utils.i18n import get_translated_message
from src.utils.security import mask_identifier
from src.utils.timezone import utc_now

logger = get_logger(__name__)


class TokenService:
    """Signs and verifies bearer tokens.

    The token is an opaque capability for clients: it carries `user_id`,
    `email`, `org_id` and `session_id`, and its `exp` matches the TTL of the
    session it was issued with. Revocation is handled by the session store,
    not by the token, so verification here only covers signature and expiry.

    Attributes:
        secret_key (str): Signing key, defaults to JWT_SECRET_KEY.
        algorithm (str): JOSE algorithm, defaults to JWT_ALGORITHM.
    """

    def __init__(self, secret_key: Optional[str] = None, algorithm: Optional[str] = None):
        self.secret_key = secret_key or settings.JWT_SECRET_KEY.get_secret_value()
        self.algorithm = algorithm or settings.JWT_ALGORITHM

    def create_access_token(
        self,
        user_id: str,
        session_id: Optional[str],
        email: Optional[str] = None,
        org_id: Optional[str] = None,
        ttl_hours: Optional[int] = None,
    ) -> str:
        """Create a signed token for a freshly issued session.

        Args:
            user_id (str): Owner of the session.
            session_id (Optional[str]): Session to embed. Tokens without one are
                the legacy format and are only produced by tests.
            email (Optional[str]): Echoed for client display.
            org_id (Optional[str]): Echoed for client routing.
            ttl_hours (Optional[int]): Token lifetime, defaults to
                SESSION_TTL_HOURS so token and session expire together.

        Returns:
            str: Encoded JWT.
        """
        now = utc_now()
        payload: Dict[str, Any] = {
            "user_id": user_id,
            "email": email,
            "org_id": org_id,
            "iat": now,
            "exp": now + timedelta(hours=ttl_hours or settings.SESSION_TTL_HOURS),
        }
        if session_id:
            payload["session_id"] = session_id

        token = jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
        logger.debug(
            "Access token created", user_id=user_id, session_id=mask_identifier(session_id)
        )
        return token

    def decode_token(self, token: str, language: str = "en") -> Dict[str, Any]:
        """Verify signature and expiry and return the claims.

        Raises:
            AuthenticationError: If the token is malformed, tampered with or
                expired, or carries no `user_id`.
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as exc:
            logger.debug("Token verification failed", error=str(exc))
            raise AuthenticationError(
                get_translated_message("invalid_token", language), "invalid_token"
            ) from exc

        if payload.get("user_id") in (None, ""):
            raise AuthenticationError(
                get_translated_message("invalid_token", language), "invalid_token"
            )
        return payload
