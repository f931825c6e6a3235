from __future__ import annotations

"""Authentication API schemas package.

Request and response models are grouped into focused modules. All public
symbols are re-exported so routes and tests import from
``src.adapters.api.v1.auth.schemas``.
"""

# flake8: noqa: F401 – re-export

from .misc import MessageResponse
from .requests import LogoutRequest, SignInRequest
from .responses.auth import SignInResponse, SignInUser
from .responses.session import SessionListResponse, SessionOut, SessionValidationResponse

__all__ = [
    "SignInRequest",
    "LogoutRequest",
    "SignInUser",
    "SignInResponse",
    "SessionValidationResponse",
    "SessionOut",
    "SessionListResponse",
    "MessageResponse",
]
