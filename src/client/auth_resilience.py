"""Client-side handling of 401 answers.

A single 401 does not prove a session is gone: a load balancer hiccup or a
briefly unavailable session store look the same to the client. The
controller retries a bounded number of times per request, then asks the
server for a second opinion before logging the user out.
"""

import asyncio
import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from structlog import get_logger

from src.client.interfaces import (
    IAuthState,
    ICredentialStore,
    INavigator,
    INotifier,
    ISessionProbe,
    LoggingNotifier,
)
from src.client.retry_ledger import RetryLedger
from src.core.exceptions import LogoutFailure

logger = get_logger(__name__)

RETRY_NOTICE = "Connection issue detected. Retrying..."
TRANSIENT_NOTICE = "Temporary server issues detected. Please try again in a moment."
EXPIRED_NOTICE = "Your session has expired. You will be redirected to login."


@dataclass(frozen=True)
class ResilienceOptions:
    """Tuning knobs of the controller. Delays are in seconds."""

    retry_attempts: int = 2
    retry_delay: float = 1.0
    auto_logout_delay: float = 5.0
    show_notification: bool = True
    login_path: str = "/login"


@dataclass
class ClientLogoutResult:
    """Outcome of a client-side logout.

    `logged_out` is always True; `failures` lists the teardown steps that
    raised and were skipped.
    """

    context: str
    logged_out: bool = True
    failures: List[LogoutFailure] = field(default_factory=list)

    @property
    def clean(self) -> bool:
        return not self.failures


def extract_status_code(error: Any) -> Optional[int]:
    """HTTP status carried by an error, or None.

    Understands `status_code` attributes (``AuthorizationFailure``), errors
    wrapping a response (``httpx.HTTPStatusError``) and plain mappings.
    """
    if isinstance(error, Mapping):
        code = error.get("status_code", error.get("statusCode"))
        response = error.get("response")
        if code is None and isinstance(response, Mapping):
            code = response.get("status_code", response.get("status"))
    else:
        code = getattr(error, "status_code", None)
        if code is None:
            response = getattr(error, "response", None)
            code = getattr(response, "status_code", None) or getattr(response, "status", None)
    return code if isinstance(code, int) else None


def _epoch_ms() -> int:
    return int(time.time() * 1000)


class AuthResilienceController:
    """Decides whether a 401 means "retry" or "log out".

    Protocol for one request key:
    1. While the key has fewer than `retry_attempts` recorded 401s, record
       one more, back off linearly and ask the caller to retry
    2. At the ceiling, escalate once to the session probe
    3. Probe says valid: the failure was transient, forget the key
    4. Probe says invalid: notify, schedule one delayed logout and report it

    Non-401 errors pass through without touching any state.

    Attributes:
        options (ResilienceOptions): Retry and logout tuning.
        ledger (RetryLedger): Per-key 401 counters, owned by this instance.
    """

    def __init__(
        self,
        session_probe: ISessionProbe,
        credential_store: ICredentialStore,
        navigator: INavigator,
        auth_state: Optional[IAuthState] = None,
        notifier: Optional[INotifier] = None,
        options: Optional[ResilienceOptions] = None,
        ledger: Optional[RetryLedger] = None,
    ):
        self.session_probe = session_probe
        self.credential_store = credential_store
        self.navigator = navigator
        self.auth_state = auth_state
        self.notifier = notifier or LoggingNotifier()
        self.options = options or ResilienceOptions()
        self.ledger = ledger if ledger is not None else RetryLedger()
        self._pending_logout: Optional[asyncio.Task] = None

    @property
    def pending_logout(self) -> Optional[asyncio.Task]:
        """The scheduled logout task, if one has been started."""
        return self._pending_logout

    async def handle_auth_failure(
        self, error: Any, context: str = "API request", request_key: Optional[str] = None
    ) -> bool:
        """Process one failed call.

        Args:
            error: The failure; only a 401 status is acted upon.
            context: Human-readable origin, used in logs and the default key.
            request_key: Stable identity of the logical request. Without one
                every call gets a fresh key and never reaches escalation.

        Returns:
            bool: True only when a logout has been scheduled.
        """
        if extract_status_code(error) != 401:
            return False

        key = request_key or f"{context}_{_epoch_ms()}"
        retries = self.ledger.get(key)
        await logger.awarning("Authentication error", context=context, error=str(error))

        if retries < self.options.retry_attempts:
            self.ledger.increment(key)
            if retries == 0:
                self._notify_warning(RETRY_NOTICE)
            await asyncio.sleep(self.options.retry_delay * (retries + 1))
            return False

        if await self.validate_current_session():
            self._notify_warning(TRANSIENT_NOTICE)
            self.ledger.reset(key)
            return False

        self._notify_error(EXPIRED_NOTICE)
        self._schedule_logout(context)
        return True

    def should_retry(self, error: Any, request_key: Optional[str] = None) -> bool:
        """Whether `handle_auth_failure` would currently ask for a retry.

        Never changes the ledger.
        """
        if extract_status_code(error) != 401:
            return False
        key = request_key or f"default_{_epoch_ms()}"
        return self.ledger.get(key) < self.options.retry_attempts

    def reset_retry_count(self, request_key: str) -> None:
        self.ledger.reset(request_key)

    def get_retry_count(self, request_key: str) -> int:
        return self.ledger.get(request_key)

    async def validate_current_session(self) -> bool:
        """Ask the server about the stored token without side effects.

        Fail-soft: no token, or any failure of the probe, counts as invalid.
        """
        try:
            token = self.credential_store.get_token()
            if not token:
                return False
            return await self.session_probe.validate(token)
        except Exception as exc:  # noqa: BLE001 - escalation must always produce an answer
            await logger.awarning("Session validation failed", error=str(exc))
            return False

    async def perform_logout(self, context: str = "auth error") -> ClientLogoutResult:
        """Tear down client-side auth state and go to the login page.

        Every step is attempted even if an earlier one fails. A failed soft
        navigation falls back to `hard_navigate`.
        """
        await logger.ainfo("Performing logout", context=context)
        result = ClientLogoutResult(context=context)

        steps: List[tuple[str, Callable[[], None]]] = [
            ("clear_credentials", self.credential_store.clear),
            ("clear_retry_ledger", self.ledger.clear),
        ]
        if self.auth_state is not None:
            steps.insert(1, ("clear_auth_state", lambda: self.auth_state.set_auth_user(None)))

        for step, action in steps:
            try:
                action()
            except Exception as exc:  # noqa: BLE001 - recorded on the result
                self._record_failure(result, step, exc)

        login_path = self.options.login_path
        try:
            await self.navigator.navigate_to(login_path)
        except Exception as exc:  # noqa: BLE001 - recorded on the result
            self._record_failure(result, "navigate", exc)
            try:
                self.navigator.hard_navigate(login_path)
            except Exception as hard_exc:  # noqa: BLE001 - recorded on the result
                self._record_failure(result, "hard_navigate", hard_exc)

        return result

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _schedule_logout(self, context: str) -> None:
        if self._pending_logout is not None and not self._pending_logout.done():
            return
        self._pending_logout = asyncio.create_task(self._delayed_logout(context))

    async def _delayed_logout(self, context: str) -> ClientLogoutResult:
        await asyncio.sleep(self.options.auto_logout_delay)
        return await self.perform_logout(context)

    def _notify_warning(self, message: str) -> None:
        if self.options.show_notification:
            self.notifier.show_warning(message)

    def _notify_error(self, message: str) -> None:
        if self.options.show_notification:
            self.notifier.show_error(message)

    @staticmethod
    def _record_failure(result: ClientLogoutResult, step: str, exc: BaseException) -> None:
        failure = LogoutFailure(step, exc)
        result.failures.append(failure)
        logger.error("Logout step failed", step=step, error=str(exc))
