from .logout import LogoutResult, LogoutService
from .session import SessionService
from .session_validation import SessionValidationResult, SessionValidationService
from .token import TokenService
from .user_authentication import UserAuthenticationService

__all__ = [
    "UserAuthenticationService",
    "TokenService",
    "SessionService",
    "SessionValidationService",
    "SessionValidationResult",
    "LogoutService",
    "LogoutResult",
]
