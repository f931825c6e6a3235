from __future__ import annotations

"""
Asynchronous Database Utilities Module

This module owns the process-wide async engine for the session store and the
helpers built on it. Request handlers never touch the engine directly: they
receive a request-scoped `AsyncSession` through `get_async_db`, and the
session service works only with the handle it is given.

**Security Note**: Ensure that DATABASE_URL is configured for SSL/TLS when
connecting over untrusted networks. Avoid logging connection details.

Key Components:
    - engine: The asynchronous SQLAlchemy engine.
    - AsyncSessionFactory: A factory for creating asynchronous database sessions.
    - get_async_db: FastAPI dependency yielding a request-scoped session.
    - check_database_health: Connectivity probe used at startup and by /health.
    - create_db_and_tables: Table creation with retry for slow-starting databases.
"""

import time
from typing import Any, AsyncGenerator, Dict

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from src.core.config.settings import settings
from src.core.logging import logger
from src.domain import entities  # noqa: F401 - registers tables on SQLModel.metadata
from src.infrastructure.database.errors import translate_database_error


def _engine_options(url: str) -> Dict[str, Any]:
    """Pool options only apply to server databases, not SQLite."""
    if make_url(url).get_backend_name() == "sqlite":
        return {}
    return {
        "pool_size": settings.POSTGRES_POOL_SIZE,
        "max_overflow": settings.POSTGRES_MAX_OVERFLOW,
        "pool_timeout": settings.POSTGRES_POOL_TIMEOUT,
        "pool_pre_ping": True,  # Check connection health before use
    }


engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=False,
    **_engine_options(settings.DATABASE_URL),
)

AsyncSessionFactory = async_sessionmaker(
    bind=engine, class_=AsyncSession, expire_on_commit=False
)


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:  # noqa: D401
    """
    FastAPI dependency that yields an AsyncSession.

    It rolls back the transaction if an exception escapes the request and
    always closes the session.

    Yields:
        AsyncSession: An asynchronous database session for use in FastAPI routes.
    """
    async with AsyncSessionFactory() as session:  # pragma: no cover - boilerplate
        logger.debug("Async database session created")
        try:
            yield session
        except Exception:  # noqa: BLE001 - Any DB error must trigger rollback
            await session.rollback()
            logger.error("Async database session rollback due to error")
            raise
        finally:
            await session.close()
            logger.debug("Async database session closed")


async def check_database_health(db_engine: AsyncEngine | None = None) -> bool:
    """
    Performs a health check on the database connection.

    Returns:
        bool: True if database is healthy and responsive, False otherwise.
    """
    db_engine = db_engine or engine
    start_time = time.time()
    try:
        async with db_engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("database_health_check_success", execution_time=time.time() - start_time)
        return True
    except (SQLAlchemyError, OSError) as e:
        logger.error(
            "database_health_check_failed",
            error=translate_database_error(e).message,
            execution_time=time.time() - start_time,
        )
        return False


@retry(
    stop=stop_after_attempt(5),
    wait=wait_exponential(multiplier=1, min=4, max=10),
    retry=retry_if_exception_type(OperationalError),
    reraise=True,
)
async def create_db_and_tables(db_engine: AsyncEngine | None = None) -> None:
    """
    Creates database tables with retry logic.

    Raises:
        OperationalError: If database operations fail after all retry attempts.
    """
    db_engine = db_engine or engine
    start_time = time.time()
    try:
        async with db_engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
    except OperationalError as e:
        logger.warning("database_tables_creation_retry", error=translate_database_error(e).message)
        raise
    logger.info(
        "database_tables_created",
        execution_time=time.time() - start_time,
        tables=list(SQLModel.metadata.tables.keys()),
    )
