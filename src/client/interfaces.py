"""Ports used by the client-side auth resilience controller.

The controller never touches storage, routing or UI directly. Each concern is
an injected port so the same logic runs in a browser-like shell, a CLI or a
test with in-memory doubles.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from structlog import get_logger

logger = get_logger(__name__)


class ISessionProbe(ABC):
    """Asks the server whether the session behind a token is still valid."""

    @abstractmethod
    async def validate(self, token: str) -> bool:
        """Returns True only on an explicit `valid: true` answer.

        Implementations must be fail-soft: transport errors, timeouts and
        unparseable bodies all yield False instead of raising.
        """
        raise NotImplementedError


class ICredentialStore(ABC):
    """Client-side storage for the bearer token and the cached user."""

    @abstractmethod
    def get_token(self) -> Optional[str]:
        raise NotImplementedError

    @abstractmethod
    def clear(self) -> None:
        """Removes both the stored token and the cached user."""
        raise NotImplementedError


class IAuthState(ABC):
    """In-memory authentication state shared with the rest of the client."""

    @abstractmethod
    def set_auth_user(self, user: Optional[Dict[str, Any]]) -> None:
        raise NotImplementedError


class INavigator(ABC):
    """Routing for the client shell."""

    @abstractmethod
    async def navigate_to(self, path: str) -> None:
        """Soft navigation inside the running client. May raise."""
        raise NotImplementedError

    @abstractmethod
    def hard_navigate(self, path: str) -> None:
        """Last-resort navigation, e.g. a full page load."""
        raise NotImplementedError


class INotifier(ABC):
    """User-facing notifications."""

    @abstractmethod
    def show_warning(self, message: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def show_error(self, message: str) -> None:
        raise NotImplementedError


# ---------------------------------------------------------------------------
# Default implementations
# ---------------------------------------------------------------------------


class InMemoryCredentialStore(ICredentialStore):
    def __init__(self, token: Optional[str] = None, user: Optional[Dict[str, Any]] = None):
        self.token = token
        self.user = user

    def set_credentials(self, token: str, user: Optional[Dict[str, Any]] = None) -> None:
        self.token = token
        self.user = user

    def get_token(self) -> Optional[str]:
        return self.token

    def clear(self) -> None:
        self.token = None
        self.user = None


class InMemoryAuthState(IAuthState):
    def __init__(self, user: Optional[Dict[str, Any]] = None):
        self.user = user

    def set_auth_user(self, user: Optional[Dict[str, Any]]) -> None:
        self.user = user


class LoggingNotifier(INotifier):
    """Sends notifications to the structured log instead of a UI."""

    def show_warning(self, message: str) -> None:
        logger.warning("auth_notification", level="warning", message=message)

    def show_error(self, message: str) -> None:
        logger.error("auth_notification", level="error", message=message)
