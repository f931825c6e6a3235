"""Application initialization and setup.

This module handles the initialization tasks required before the application starts,
including environment variable loading, logging configuration, and i18n setup.
"""

from dotenv import load_dotenv

from src.core.config.settings import settings
from src.core.logging import configure_logging, logger
from src.utils.i18n import setup_i18n


def initialize_application() -> None:
    """Initialize the application with all necessary setup tasks.

    1. Load environment variables from `.env` without overriding the process
       environment
    2. Configure structlog
    3. Load the message catalogs
    """
    load_dotenv(override=False)

    configure_logging(log_level=settings.LOG_LEVEL, json_logs=settings.LOG_JSON)

    setup_i18n()
    logger.info(
        "application_initialized",
        project=settings.PROJECT_NAME,
        languages=settings.SUPPORTED_LANGUAGES,
        session_ttl_hours=settings.SESSION_TTL_HOURS,
        max_sessions_per_user=settings.MAX_SESSIONS_PER_USER,
    )
