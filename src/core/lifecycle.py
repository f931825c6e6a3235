"""Application lifecycle management.

This module handles application startup and shutdown events, ensuring proper
initialization and cleanup of application resources.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from tenacity import RetryError, retry, retry_if_result, stop_after_attempt, wait_exponential

from src.core.config.settings import settings
from src.core.logging import logger
from src.infrastructure.database import (
    AsyncSessionFactory,
    check_database_health,
    create_db_and_tables,
)
from src.infrastructure.services.session_cleanup import SessionCleanupScheduler


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=4),
    retry=retry_if_result(lambda healthy: not healthy),
)
async def wait_for_database() -> bool:
    return await check_database_health()


def create_lifespan_manager():
    """Create the application lifespan manager.

    Returns:
        AsyncContextManager: The lifespan manager for the FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager that handles startup and shutdown events.

        Startup checks the session store, creates missing tables, runs one
        global cleanup sweep and then schedules the periodic sweep. Shutdown
        cancels the sweep.

        Args:
            app (FastAPI): The FastAPI application instance

        Raises:
            RuntimeError: If database is unavailable during startup
        """
        # Startup
        try:
            await wait_for_database()
        except RetryError as exc:
            logger.error("database_unavailable_on_startup")
            raise RuntimeError("Database unavailable") from exc
        await create_db_and_tables()

        cleanup = SessionCleanupScheduler(
            AsyncSessionFactory, settings.SESSION_CLEANUP_INTERVAL_MINUTES
        )
        removed = await cleanup.run_once()
        cleanup.start()
        app.state.session_cleanup = cleanup
        logger.info(
            "application_startup",
            env=settings.APP_ENV,
            version=settings.VERSION,
            expired_sessions_removed=removed,
        )

        yield

        # Shutdown
        await cleanup.stop()
        logger.info("application_shutdown", env=settings.APP_ENV)

    return lifespan
