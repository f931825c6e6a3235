from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.core.exceptions import ValidationError
from src.domain.services.auth.session import SessionService
from src.domain.services.auth.session_validation import (
    SessionValidationResult,
    SessionValidationService,
    extract_bearer_token,
)
from src.domain.services.auth.token import TokenService
from src.utils.timezone import utc_now


@pytest.fixture
def session_service():
    service = AsyncMock(spec=SessionService)
    service.validate_session = AsyncMock(return_value=None)
    return service


@pytest.fixture
def token_service():
    return TokenService()


@pytest.fixture
def validation_service(session_service, token_service):
    return SessionValidationService(session_service, token_service)


def _session(user_id="user-1"):
    session = MagicMock()
    session.user_id = user_id
    session.expires_at = utc_now() + timedelta(hours=1)
    return session


@pytest.mark.parametrize(
    "header,expected",
    [
        (None, None),
        ("", None),
        ("Basic abc", None),
        ("bearer abc", None),
        ("Bearer ", ""),
        ("Bearer abc", "abc"),
    ],
)
def test_extract_bearer_token(header, expected):
    assert extract_bearer_token(header) == expected


@pytest.mark.asyncio
@pytest.mark.parametrize("header", [None, "", "Token abc"])
async def test_missing_or_foreign_header(validation_service, header):
    result = await validation_service.validate_authorization(header)

    assert result.valid is False
    assert result.reason == "No valid authorization header"


@pytest.mark.asyncio
async def test_empty_token(validation_service):
    result = await validation_service.validate_authorization("Bearer ")

    assert result.valid is False
    assert result.reason == "No token provided"


@pytest.mark.asyncio
async def test_invalid_jwt(validation_service, session_service):
    result = await validation_service.validate_authorization("Bearer not-a-jwt")

    assert result.valid is False
    assert result.reason == "Invalid JWT token"
    session_service.validate_session.assert_not_awaited()


@pytest.mark.asyncio
async def test_legacy_token_is_accepted(validation_service, token_service, session_service):
    token = token_service.create_access_token("user-1", None, org_id="org-1")

    result = await validation_service.validate_authorization(f"Bearer {token}")

    assert result.valid is True
    assert result.legacy is True
    assert result.reason == "Legacy token format"
    assert result.user_id == "user-1"
    session_service.validate_session.assert_not_awaited()


@pytest.mark.asyncio
async def test_session_not_found(validation_service, token_service):
    token = token_service.create_access_token("user-1", "s" * 64)

    result = await validation_service.validate_authorization(f"Bearer {token}")

    assert result.valid is False
    assert result.reason == "Session expired or not found"


@pytest.mark.asyncio
async def test_store_failure_fails_closed(validation_service, token_service, session_service):
    session_service.validate_session.side_effect = ValidationError("Database query failed")
    token = token_service.create_access_token("user-1", "s" * 64)

    result = await validation_service.validate_authorization(f"Bearer {token}")

    assert result.valid is False
    assert result.reason == "Session expired or not found"


@pytest.mark.asyncio
async def test_session_user_mismatch(validation_service, token_service, session_service):
    session_service.validate_session.return_value = _session(user_id="someone-else")
    token = token_service.create_access_token("user-1", "s" * 64)

    result = await validation_service.validate_authorization(f"Bearer {token}")

    assert result.valid is False
    assert result.reason == "Session user mismatch"


@pytest.mark.asyncio
async def test_valid_session(validation_service, token_service, session_service):
    session = _session()
    session_service.validate_session.return_value = session
    token = token_service.create_access_token("user-1", "s" * 64)

    result = await validation_service.validate_authorization(f"Bearer {token}")

    assert result.valid is True
    assert result.reason == "Session valid"
    assert result.session_id == "s" * 64
    assert result.user_id == "user-1"
    assert result.expires_at == session.expires_at
    session_service.validate_session.assert_awaited_once_with("s" * 64)


def test_to_response_omits_unset_fields():
    body = SessionValidationResult(valid=False, reason="No token provided").to_response()

    assert body == {"valid": False, "reason": "No token provided"}
