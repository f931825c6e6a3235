from unittest.mock import AsyncMock, MagicMock

import pytest

from src.client import (
    AuthResilienceController,
    INavigator,
    InMemoryAuthState,
    InMemoryCredentialStore,
    ISessionProbe,
    ResilienceOptions,
)


class RecordingNavigator(INavigator):
    def __init__(self, fail_soft: bool = False):
        self.fail_soft = fail_soft
        self.visited = []
        self.hard_visited = []

    async def navigate_to(self, path: str) -> None:
        if self.fail_soft:
            raise RuntimeError("router not mounted")
        self.visited.append(path)

    def hard_navigate(self, path: str) -> None:
        self.hard_visited.append(path)


@pytest.fixture
def probe():
    session_probe = MagicMock(spec=ISessionProbe)
    session_probe.validate = AsyncMock(return_value=False)
    return session_probe


@pytest.fixture
def credential_store():
    return InMemoryCredentialStore(token="token-abc", user={"user_id": "user-1"})


@pytest.fixture
def navigator():
    return RecordingNavigator()


@pytest.fixture
def broken_navigator():
    return RecordingNavigator(fail_soft=True)


@pytest.fixture
def auth_state():
    return InMemoryAuthState(user={"user_id": "user-1"})


@pytest.fixture
def notifier():
    return MagicMock()


@pytest.fixture
def options():
    return ResilienceOptions(retry_attempts=2, retry_delay=0, auto_logout_delay=0)


@pytest.fixture
def controller(probe, credential_store, navigator, auth_state, notifier, options):
    return AuthResilienceController(
        session_probe=probe,
        credential_store=credential_store,
        navigator=navigator,
        auth_state=auth_state,
        notifier=notifier,
        options=options,
    )
