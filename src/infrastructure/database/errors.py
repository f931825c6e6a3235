"""Translation of raw driver failures into a small set of actionable messages.

Store-layer errors never leave the infrastructure boundary as raw driver
exceptions. They are mapped onto one of a handful of messages an operator can
act on. Nothing here retries: retry policy belongs to the client.
"""

import errno
import socket
from typing import Callable, Iterator, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError

from src.core.exceptions import DatabaseError

CONNECTION_REFUSED = "Database connection refused - check if database is running"
HOST_NOT_FOUND = "Database host not found - check database configuration"
AUTHENTICATION_FAILED = "Database authentication failed - check credentials"
DATABASE_MISSING = "Database does not exist - check database name"
QUERY_FAILED = "Database query failed"


def _error_chain(exc: BaseException) -> Iterator[BaseException]:
    """Walk the SQLAlchemy wrapper, the DBAPI error and their causes."""
    seen = set()
    pending: List[Optional[BaseException]] = [exc]
    while pending:
        current = pending.pop(0)
        if current is None or id(current) in seen:
            continue
        seen.add(id(current))
        yield current
        pending.extend(
            [getattr(current, "orig", None), current.__cause__, current.__context__]
        )


def _sqlstate(exc: BaseException) -> Optional[str]:
    # asyncpg exposes `sqlstate`, psycopg exposes `pgcode`
    return getattr(exc, "sqlstate", None) or getattr(exc, "pgcode", None)


def _is_connection_refused(exc: BaseException) -> bool:
    return isinstance(exc, ConnectionRefusedError) or (
        isinstance(exc, OSError) and exc.errno == errno.ECONNREFUSED
    )


def _is_host_not_found(exc: BaseException) -> bool:
    return isinstance(exc, socket.gaierror)


# Evaluated top to bottom; the first match wins.
_RULES: List[Tuple[Callable[[BaseException], bool], str, str]] = [
    (_is_connection_refused, CONNECTION_REFUSED, "database_connection_refused"),
    (_is_host_not_found, HOST_NOT_FOUND, "database_host_not_found"),
    (lambda e: _sqlstate(e) == "28P01", AUTHENTICATION_FAILED, "database_auth_failed"),
    (lambda e: _sqlstate(e) == "3D000", DATABASE_MISSING, "database_missing"),
]


def translate_database_error(exc: BaseException) -> DatabaseError:
    """Map any store failure onto a `DatabaseError` with a fixed message.

    Args:
        exc: The exception raised by SQLAlchemy or the driver.

    Returns:
        DatabaseError: Carries one of the module-level messages and a stable code.
    """
    for candidate in _error_chain(exc):
        for predicate, message, code in _RULES:
            if predicate(candidate):
                return DatabaseError(message, code)
    return DatabaseError(QUERY_FAILED, "database_query_failed")


# Exceptions that mean "the store could not answer". asyncpg connection errors
# surface as plain OSError subclasses rather than SQLAlchemy wrappers.
STORE_ERRORS = (SQLAlchemyError, OSError)
