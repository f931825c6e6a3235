from unittest.mock import AsyncMock

import pytest

from src.adapters.api.v1.auth.dependencies import get_session_validation_service

VALIDATE_URL = "/api/v1/auth/validate-session"


@pytest.mark.asyncio
async def test_valid_session(async_client, signed_in):
    response = await async_client.post(
        VALIDATE_URL, headers={"Authorization": f"Bearer {signed_in['token']}"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["valid"] is True
    assert body["reason"] == "Session valid"
    assert body["session_id"] == signed_in["user"]["session_id"]
    assert body["user_id"] == "user-1"
    assert "expires_at" in body
    assert "legacy" not in body


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "headers,reason",
    [
        ({}, "No valid authorization header"),
        ({"Authorization": "Basic abc"}, "No valid authorization header"),
        ({"Authorization": "Bearer "}, "No token provided"),
        ({"Authorization": "Bearer not-a-jwt"}, "Invalid JWT token"),
    ],
)
async def test_invalid_requests_still_return_200(async_client, headers, reason):
    response = await async_client.post(VALIDATE_URL, headers=headers)

    assert response.status_code == 200
    assert response.json() == {"valid": False, "reason": reason}


@pytest.mark.asyncio
async def test_legacy_token(async_client, token_service):
    token = token_service.create_access_token("user-1", None)

    response = await async_client.post(VALIDATE_URL, headers={"Authorization": f"Bearer {token}"})

    body = response.json()
    assert body["valid"] is True
    assert body["legacy"] is True
    assert body["reason"] == "Legacy token format"


@pytest.mark.asyncio
async def test_unknown_session(async_client, token_service):
    token = token_service.create_access_token("user-1", "0" * 64)

    response = await async_client.post(VALIDATE_URL, headers={"Authorization": f"Bearer {token}"})

    assert response.json() == {"valid": False, "reason": "Session expired or not found"}


@pytest.mark.asyncio
async def test_unexpected_error_is_reported_as_invalid(app, async_client):
    broken = AsyncMock()
    broken.validate_authorization = AsyncMock(side_effect=RuntimeError("boom"))
    app.dependency_overrides[get_session_validation_service] = lambda: broken

    response = await async_client.post(VALIDATE_URL, headers={"Authorization": "Bearer x"})

    assert response.status_code == 200
    assert response.json() == {"valid": False, "reason": "Validation error occurred"}
