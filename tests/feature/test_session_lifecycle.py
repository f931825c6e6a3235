"""End-to-end session lifecycle: sign in, validate, revoke, and the client
library reacting to the revoked session."""

import pytest
from httpx import ASGITransport

from src.client import (
    AuthenticatedClient,
    AuthResilienceController,
    InMemoryAuthState,
    InMemoryCredentialStore,
    INavigator,
    ResilienceOptions,
    SessionValidationClient,
)
from src.core.exceptions import AuthorizationFailure

SIGNIN_URL = "/api/v1/auth/signin"
VALIDATE_URL = "/api/v1/auth/validate-session"
LOGOUT_URL = "/api/v1/auth/logout"
SESSIONS_URL = "/api/v1/auth/sessions"
CREDENTIALS = {"email": "jane@example.com", "password": "Str0ngP@ssw0rd"}


class ListNavigator(INavigator):
    def __init__(self):
        self.visited = []

    async def navigate_to(self, path: str) -> None:
        self.visited.append(path)

    def hard_navigate(self, path: str) -> None:
        self.visited.append(path)


async def _sign_in(async_client, user_agent="Mozilla/5.0 (Windows NT 10.0; Win64; x64)"):
    response = await async_client.post(
        SIGNIN_URL, json=CREDENTIALS, headers={"User-Agent": user_agent}
    )
    assert response.status_code == 201
    return response.json()


def _bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.mark.asyncio
async def test_sign_in_validate_and_log_out_everywhere(async_client, create_user):
    await create_user()
    laptop = await _sign_in(async_client)
    phone = await _sign_in(async_client, "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0) Mobile")

    response = await async_client.post(VALIDATE_URL, headers=_bearer(laptop["token"]))
    assert response.status_code == 200
    assert response.json()["valid"] is True
    assert response.json()["session_id"] == laptop["user"]["session_id"]

    response = await async_client.get(SESSIONS_URL, headers=_bearer(phone["token"]))
    devices = {s["device_info"] for s in response.json()["sessions"]}
    assert devices == {"Windows PC", "iPhone"}

    response = await async_client.post(
        LOGOUT_URL, headers=_bearer(laptop["token"]), json={"all_sessions": True}
    )
    assert response.status_code == 200
    assert response.json()["status"] == "success"

    for signed_in in (laptop, phone):
        response = await async_client.post(VALIDATE_URL, headers=_bearer(signed_in["token"]))
        assert response.status_code == 200
        assert response.json()["valid"] is False
        assert response.json()["reason"] == "Session expired or not found"


@pytest.mark.asyncio
async def test_logout_current_session_keeps_the_others(async_client, create_user):
    await create_user()
    first = await _sign_in(async_client)
    second = await _sign_in(async_client)

    await async_client.post(LOGOUT_URL, headers=_bearer(first["token"]))

    first_check = await async_client.post(VALIDATE_URL, headers=_bearer(first["token"]))
    second_check = await async_client.post(VALIDATE_URL, headers=_bearer(second["token"]))
    assert first_check.json()["valid"] is False
    assert second_check.json()["valid"] is True


@pytest.mark.asyncio
async def test_client_library_logs_out_after_server_side_revocation(app, async_client, create_user):
    await create_user()
    signed_in = await _sign_in(async_client)

    credential_store = InMemoryCredentialStore()
    credential_store.set_credentials(signed_in["token"], signed_in["user"])
    auth_state = InMemoryAuthState(signed_in["user"])
    navigator = ListNavigator()
    controller = AuthResilienceController(
        session_probe=SessionValidationClient("http://test", transport=ASGITransport(app=app)),
        credential_store=credential_store,
        navigator=navigator,
        auth_state=auth_state,
        options=ResilienceOptions(retry_attempts=2, retry_delay=0, auto_logout_delay=0),
    )

    async with AuthenticatedClient(
        controller, "http://test", transport=ASGITransport(app=app)
    ) as client:
        response = await client.get(SESSIONS_URL)
        assert response.status_code == 200

        await async_client.post(LOGOUT_URL, headers=_bearer(signed_in["token"]))

        with pytest.raises(AuthorizationFailure) as exc_info:
            await client.get(SESSIONS_URL)

    assert exc_info.value.code == "session_expired"
    await controller.pending_logout
    assert credential_store.get_token() is None
    assert auth_state.user is None
    assert navigator.visited == ["/login"]
