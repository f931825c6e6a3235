"""Database infrastructure for the session store."""

from .async_db import (
    AsyncSessionFactory,
    check_database_health,
    create_db_and_tables,
    engine,
    get_async_db,
)
from .errors import STORE_ERRORS, translate_database_error

__all__ = [
    "AsyncSessionFactory",
    "check_database_health",
    "create_db_and_tables",
    "engine",
    "get_async_db",
    "translate_database_error",
    "STORE_ERRORS",
]
