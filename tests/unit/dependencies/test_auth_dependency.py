from unittest.mock import MagicMock

import pytest
from fastapi import HTTPException

from src.core.dependencies.auth import AuthContext, get_current_session
from src.domain.services.auth.session import SessionService


@pytest.fixture
def request_mock():
    request = MagicMock()
    request.state.language = "en"
    request.url.path = "/api/v1/auth/sessions"
    return request


@pytest.mark.asyncio
async def test_valid_session_yields_context(request_mock, store_session, token_service):
    session_id = await SessionService(store_session).create_session("user-1")
    token = token_service.create_access_token("user-1", session_id, org_id="org-1")

    context = await get_current_session(request_mock, store_session, f"Bearer {token}")

    assert context == AuthContext(
        user_id="user-1", session_id=session_id, org_id="org-1", legacy=False
    )


@pytest.mark.asyncio
async def test_legacy_token_is_accepted(request_mock, store_session, token_service):
    token = token_service.create_access_token("user-1", None)

    context = await get_current_session(request_mock, store_session, f"Bearer {token}")

    assert context.legacy is True
    assert context.session_id is None


@pytest.mark.asyncio
@pytest.mark.parametrize("authorization", [None, "Bearer ", "Bearer not-a-jwt"])
async def test_bad_credentials_are_401(request_mock, store_session, authorization):
    with pytest.raises(HTTPException) as exc_info:
        await get_current_session(request_mock, store_session, authorization)

    assert exc_info.value.status_code == 401
    assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}
    assert exc_info.value.detail == "Invalid or expired authentication token."


@pytest.mark.asyncio
async def test_revoked_session_is_401(request_mock, store_session, token_service):
    service = SessionService(store_session)
    session_id = await service.create_session("user-1")
    await service.invalidate_session(session_id)
    token = token_service.create_access_token("user-1", session_id)

    with pytest.raises(HTTPException) as exc_info:
        await get_current_session(request_mock, store_session, f"Bearer {token}")

    assert exc_info.value.status_code == 401
    assert exc_info.value.detail == "Your session has expired or was signed out."


@pytest.mark.asyncio
async def test_session_of_another_user_is_401(request_mock, store_session, token_service):
    session_id = await SessionService(store_session).create_session("user-2")
    token = token_service.create_access_token("user-1", session_id)

    with pytest.raises(HTTPException) as exc_info:
        await get_current_session(request_mock, store_session, f"Bearer {token}")

    assert exc_info.value.detail == "Session does not belong to this user."
