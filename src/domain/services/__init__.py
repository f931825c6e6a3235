"""Domain services for the session bounded context.

- Session store management: issue, validate, limit, revoke and sweep sessions
- Token signing: bearer tokens bound to a session id
- Credential check: email and password at the sign-in boundary
- Session validation: structured second opinion on a bearer token
- Logout: current-session or all-session revocation that always succeeds
"""

from .auth import (
    LogoutResult,
    LogoutService,
    SessionService,
    SessionValidationResult,
    SessionValidationService,
    TokenService,
    UserAuthenticationService,
)

__all__ = [
    "SessionService",
    "TokenService",
    "UserAuthenticationService",
    "SessionValidationService",
    "SessionValidationResult",
    "LogoutService",
    "LogoutResult",
]
