"""httpx wrapper that runs every 401 through the resilience controller."""

from typing import Any, Dict, Optional

import httpx
from structlog import get_logger

from src.client.auth_resilience import AuthResilienceController
from src.core.exceptions import AuthorizationFailure

logger = get_logger(__name__)


class AuthenticatedClient:
    """Bearer-authenticated HTTP client with bounded 401 retries.

    The token is read from the controller's credential store on every
    attempt, so a token refreshed elsewhere is picked up by the retry. A
    request is identified by ``"<METHOD> <url>"`` unless a `request_key` is
    given; its retry count is reset as soon as a non-401 answer arrives.

    Raises `AuthorizationFailure` when the controller gives up, either
    because the session is gone (a logout has been scheduled) or because
    the server keeps failing while the session is still valid.
    """

    def __init__(
        self,
        controller: AuthResilienceController,
        base_url: str = "",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.controller = controller
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def __aenter__(self) -> "AuthenticatedClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _headers(self, headers: Optional[Dict[str, str]]) -> Dict[str, str]:
        merged = dict(headers or {})
        token = self.controller.credential_store.get_token()
        if token:
            merged["Authorization"] = f"Bearer {token}"
        return merged

    async def request(
        self,
        method: str,
        url: str,
        *,
        request_key: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        method = method.upper()
        key = request_key or f"{method} {url}"

        while True:
            response = await self._client.request(
                method, url, headers=self._headers(headers), **kwargs
            )
            if response.status_code != 401:
                self.controller.reset_retry_count(key)
                return response

            failure = AuthorizationFailure(f"{method} {url} returned 401")
            retrying = self.controller.should_retry(failure, key)
            logged_out = await self.controller.handle_auth_failure(
                failure, context=f"{method} {url}", request_key=key
            )
            if retrying:
                continue

            if logged_out:
                raise AuthorizationFailure("Session expired", "session_expired") from failure
            await logger.awarning("Request failed with a valid session", request_key=key)
            raise AuthorizationFailure(
                "Temporary server issue", "transient_auth_failure"
            ) from failure

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", url, **kwargs)

    async def put(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PUT", url, **kwargs)

    async def delete(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("DELETE", url, **kwargs)
