from __future__ import annotations

"""Response models for the sign-in endpoint."""

from typing import Optional

from pydantic import BaseModel


class SignInUser(BaseModel):
    """Identity echoed back to the client after a successful sign-in."""

    user_id: str
    email: str
    org_id: Optional[str] = None
    session_id: str


class SignInResponse(BaseModel):
    status: str = "success"
    token: str
    user: SignInUser
    redirect: str = "/profile"
