import pytest_asyncio
from unittest.mock import AsyncMock, MagicMock
from sqlmodel.ext.asyncio.session import AsyncSession


@pytest_asyncio.fixture
def db_session():
    """Provides a mocked asynchronous database session."""
    mock_session = AsyncMock(spec=AsyncSession)
    mock_session.exec = AsyncMock()
    mock_session.exec.return_value = MagicMock()
    mock_session.exec.return_value.first = MagicMock(return_value=None)
    mock_session.exec.return_value.all = MagicMock(return_value=[])
    mock_session.get = AsyncMock(return_value=None)
    mock_session.add = MagicMock()
    mock_session.commit = AsyncMock()
    mock_session.rollback = AsyncMock()
    mock_session.refresh = AsyncMock()

    return mock_session
