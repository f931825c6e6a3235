from __future__ import annotations

"""Re-export response models for authentication endpoints."""

# flake8: noqa: F401 – re-export

from .auth import SignInResponse, SignInUser
from .session import SessionListResponse, SessionOut, SessionValidationResponse

__all__ = [
    "SignInUser",
    "SignInResponse",
    "SessionValidationResponse",
    "SessionOut",
    "SessionListResponse",
]
