from datetime import timedelta

import pytest
from jose import jwt

from src.core.config.settings import settings
from src.core.exceptions import AuthenticationError
from src.domain.services.auth.token import TokenService
from src.utils.timezone import utc_now


@pytest.fixture
def token_service():
    return TokenService()


def _secret() -> str:
    return settings.JWT_SECRET_KEY.get_secret_value()


def test_create_access_token_carries_session_claims(token_service):
    token = token_service.create_access_token(
        "user-1", "s" * 64, email="jane@example.com", org_id="org-1"
    )

    payload = jwt.decode(token, _secret(), algorithms=[settings.JWT_ALGORITHM])
    assert payload["user_id"] == "user-1"
    assert payload["session_id"] == "s" * 64
    assert payload["email"] == "jane@example.com"
    assert payload["org_id"] == "org-1"
    # Token lifetime matches the session TTL.
    assert payload["exp"] - payload["iat"] == settings.SESSION_TTL_HOURS * 3600


def test_create_access_token_without_session_is_legacy_format(token_service):
    token = token_service.create_access_token("user-1", None)

    assert "session_id" not in token_service.decode_token(token)


def test_decode_token_round_trip(token_service):
    token = token_service.create_access_token("user-1", "abc", ttl_hours=1)

    payload = token_service.decode_token(token)

    assert payload["user_id"] == "user-1"
    assert payload["session_id"] == "abc"


def test_decode_token_rejects_wrong_signature(token_service):
    forged = jwt.encode({"user_id": "user-1"}, "x" * 40, algorithm="HS256")

    with pytest.raises(AuthenticationError) as exc_info:
        token_service.decode_token(forged)

    assert exc_info.value.code == "invalid_token"


def test_decode_token_rejects_expired_token(token_service):
    expired = jwt.encode(
        {"user_id": "user-1", "exp": utc_now() - timedelta(minutes=1)},
        _secret(),
        algorithm=settings.JWT_ALGORITHM,
    )

    with pytest.raises(AuthenticationError):
        token_service.decode_token(expired)


def test_decode_token_requires_user_id(token_service):
    token = jwt.encode({"session_id": "abc"}, _secret(), algorithm=settings.JWT_ALGORITHM)

    with pytest.raises(AuthenticationError):
        token_service.decode_token(token)


@pytest.mark.parametrize("garbage", ["", "not-a-jwt", "a.b.c"])
def test_decode_token_rejects_garbage(token_service, garbage):
    with pytest.raises(AuthenticationError):
        token_service.decode_token(garbage)


def test_decode_token_translates_message(token_service):
    with pytest.raises(AuthenticationError) as exc_info:
        token_service.decode_token("not-a-jwt", language="es")

    assert exc_info.value.message == "Token de autenticación inválido o expirado."
