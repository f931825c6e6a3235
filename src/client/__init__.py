"""Client-side auth resilience: bounded 401 retries, server-confirmed logout."""

from .auth_resilience import (
    AuthResilienceController,
    ClientLogoutResult,
    ResilienceOptions,
    extract_status_code,
)
from .http import AuthenticatedClient
from .interfaces import (
    IAuthState,
    ICredentialStore,
    INavigator,
    INotifier,
    ISessionProbe,
    InMemoryAuthState,
    InMemoryCredentialStore,
    LoggingNotifier,
)
from .retry_ledger import RetryLedger
from .session_probe import SessionValidationClient

__all__ = [
    "AuthResilienceController",
    "AuthenticatedClient",
    "ClientLogoutResult",
    "ResilienceOptions",
    "RetryLedger",
    "SessionValidationClient",
    "extract_status_code",
    "IAuthState",
    "ICredentialStore",
    "INavigator",
    "INotifier",
    "ISessionProbe",
    "InMemoryAuthState",
    "InMemoryCredentialStore",
    "LoggingNotifier",
]
