from __future__ import annotations

"""Request‐payload Pydantic models for authentication endpoints."""

from pydantic import BaseModel, Field, field_validator

# ---------------------------------------------------------------------------
# Concrete request models ----------------------------------------------------
# ---------------------------------------------------------------------------


class SignInRequest(BaseModel):
    """Payload expected by ``POST /auth/signin``.

    The email is normalised (trimmed, lower-cased) before lookup. The password
    is checked for blankness by the authentication service so the error can be
    translated.
    """

    email: str = Field(..., min_length=1, max_length=255, examples=["jane@example.com"])
    password: str = Field(..., max_length=128, examples=["Str0ngP@ssw0rd"])

    @field_validator("email")
    @classmethod
    def normalise_email(cls, value: str) -> str:
        value = value.strip().lower()
        if not value:
            raise ValueError("email must not be blank")
        return value


class LogoutRequest(BaseModel):
    """Payload accepted by ``POST /auth/logout``. The body itself is optional."""

    all_sessions: bool = Field(
        default=False, description="Log out every session of the user, not only this one."
    )
