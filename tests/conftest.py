import os

# Settings are read once at import time, so the environment must be in place
# before anything under src is imported.
os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-that-is-at-least-32-characters"
os.environ["BCRYPT_WORK_FACTOR"] = "4"
os.environ["LOG_JSON"] = "false"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from src.core.application import create_application
from src.domain import entities  # noqa: F401 - registers tables
from src.domain.entities.user import User
from src.domain.services.auth.token import TokenService
from src.infrastructure.database import get_async_db
from src.utils.i18n import setup_i18n
from src.utils.security import hash_password

TEST_PASSWORD = "Str0ngP@ssw0rd"


@pytest.fixture(scope="session", autouse=True)
def setup_i18n_for_tests():
    """Load the message catalogs once for the whole run."""
    setup_i18n()


@pytest_asyncio.fixture
async def engine():
    """Fresh in-memory SQLite store per test, shared across connections."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def store_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def create_user(session_factory):
    """Insert a user able to sign in and return it."""

    async def _create_user(
        user_id: str = "user-1",
        email: str = "jane@example.com",
        password: str | None = TEST_PASSWORD,
        org_id: str | None = "org-1",
        role_id: int = 1,
    ) -> User:
        user = User(
            user_id=user_id,
            email=email,
            hashed_password=hash_password(password) if password else None,
            org_id=org_id,
            role_id=role_id,
        )
        async with session_factory() as session:
            session.add(user)
            await session.commit()
        return user

    return _create_user


@pytest.fixture
def token_service():
    return TokenService()


@pytest.fixture
def app(session_factory):
    """Application wired to the per-test store."""
    application = create_application()

    async def override_get_async_db():
        async with session_factory() as session:
            yield session

    application.dependency_overrides[get_async_db] = override_get_async_db
    yield application
    application.dependency_overrides.clear()


@pytest_asyncio.fixture
async def async_client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
