"""Export session-related domain entities for use across the application."""

from .session import UserSession
from .user import User

__all__ = ["User", "UserSession"]
