"""HTTP session probe against ``POST /api/v1/auth/validate-session``."""

from typing import Optional

import httpx
from structlog import get_logger

from src.client.interfaces import ISessionProbe

logger = get_logger(__name__)

VALIDATE_SESSION_PATH = "/api/v1/auth/validate-session"
DEFAULT_TIMEOUT_SECONDS = 5.0


class SessionValidationClient(ISessionProbe):
    """Fail-soft probe: anything but an explicit ``{"valid": true}`` is False.

    Attributes:
        base_url (str): Server origin, e.g. ``https://app.example.com``.
        timeout (float): Per-request timeout in seconds. Kept short so an
            escalation never hangs the caller.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        path: str = VALIDATE_SESSION_PATH,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.path = path
        self._transport = transport

    async def validate(self, token: str) -> bool:
        if not token:
            return False

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    self.path, headers={"Authorization": f"Bearer {token}"}
                )
                response.raise_for_status()
                body = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            await logger.awarning(
                "Session validation failed", error_type=type(exc).__name__, error=str(exc)
            )
            return False

        if not isinstance(body, dict):
            return False
        if body.get("valid") is not True:
            await logger.ainfo("Session reported invalid", reason=body.get("reason"))
            return False
        return True
