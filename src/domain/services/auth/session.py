import secrets
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy import func, or_
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from structlog import get_logger

from src.core.config.settings import settings
from src.core.exceptions import SessionCreationError, ValidationError
from src.domain.entities.session import UserSession
from src.domain.entities.user import User
from src.infrastructure.database.errors import STORE_ERRORS, translate_database_error
from src.utils.client_info import extract_client_address, extract_device_info
from src.utils.security import mask_identifier
from src.utils.timezone import utc_now

logger = get_logger(__name__)


class SessionService:
    """Session store manager: issues, validates, limits and revokes sessions.

    Every operation is an independent transaction on the injected store
    handle. No in-process locking is used; the per-user ceiling relies on the
    cleanup-then-evict-then-insert sequence running inside one transaction,
    which is a best-effort bound under concurrent sign-ins for the same user.

    Nothing here retries store failures. Creation failures surface as
    `SessionCreationError`, validation failures as `ValidationError` (callers
    fail closed), and invalidation or cleanup failures are logged and
    reported through the return value.

    Attributes:
        db_session (AsyncSession): Request-scoped SQLModel async session.
        max_sessions_per_user (int): Ceiling of simultaneously valid sessions.
    """

    extract_device_info = staticmethod(extract_device_info)
    extract_client_address = staticmethod(extract_client_address)

    def __init__(self, db_session: AsyncSession, max_sessions_per_user: Optional[int] = None):
        self.db_session = db_session
        self.max_sessions_per_user = max_sessions_per_user or settings.MAX_SESSIONS_PER_USER

    async def create_session(
        self,
        user_id: str,
        device_info: Optional[str] = None,
        ip_address: Optional[str] = None,
        ttl_hours: Optional[int] = None,
    ) -> str:
        """Issue a new session for a user.

        Runs in a single transaction, in order:
        1. Purge the user's expired or inactive rows
        2. Evict least-recently-active sessions until one slot is free
        3. Insert the new session
        4. Refresh the user's active-session counter and last login

        Args:
            user_id (str): Owner of the session. Must be non-empty.
            device_info (Optional[str]): Device label for the session.
            ip_address (Optional[str]): Origin address of the sign-in.
            ttl_hours (Optional[int]): Lifetime in hours, defaults to
                SESSION_TTL_HOURS (24).

        Returns:
            str: The new session id (64 hex characters).

        Raises:
            SessionCreationError: If `user_id` is empty or the store fails. The
                transaction is rolled back, so nothing partial is validatable.
        """
        if not user_id:
            raise SessionCreationError("Session creation requires a user id", "session_user_missing")

        ttl_hours = ttl_hours or settings.SESSION_TTL_HOURS
        now = utc_now()
        session_id = secrets.token_hex(32)

        try:
            purged = await self._purge_invalid_sessions(now, user_id)
            evicted = await self._enforce_session_limit(user_id, now)

            self.db_session.add(
                UserSession(
                    session_id=session_id,
                    user_id=user_id,
                    device_info=device_info,
                    ip_address=ip_address,
                    is_active=True,
                    created_at=now,
                    last_active=now,
                    expires_at=now + timedelta(hours=ttl_hours),
                )
            )
            await self.db_session.flush()
            active_count = await self._refresh_user_counters(user_id, now, signed_in=True)
            await self.db_session.commit()
        except STORE_ERRORS as exc:
            await self._rollback()
            error = translate_database_error(exc)
            await logger.aerror(
                "Session creation failed",
                user_id=user_id,
                error=error.message,
                error_type=type(exc).__name__,
            )
            raise SessionCreationError(error.message) from exc

        await logger.ainfo(
            "Session created",
            user_id=user_id,
            session_id=mask_identifier(session_id),
            device_info=device_info,
            purged_sessions=purged,
            evicted_sessions=evicted,
            active_sessions=active_count,
        )
        return session_id

    async def validate_session(self, session_id: str) -> Optional[UserSession]:
        """Return the session if it is active and unexpired, bumping `last_active`.

        Absence is a normal result, never an error.

        Args:
            session_id (str): Id embedded in the bearer token.

        Returns:
            Optional[UserSession]: The refreshed record, or None.

        Raises:
            ValidationError: If the store is unavailable. Callers must treat
                this as "not found".
        """
        if not session_id:
            return None

        now = utc_now()
        try:
            result = await self.db_session.exec(
                select(UserSession).where(
                    UserSession.session_id == session_id,
                    UserSession.is_active.is_(True),
                    UserSession.expires_at > now,
                )
            )
            session = result.first()
            if session is None:
                await logger.adebug(
                    "Session expired or not found", session_id=mask_identifier(session_id)
                )
                return None

            session.touch(now)
            self.db_session.add(session)
            await self.db_session.commit()
            await self.db_session.refresh(session)
            return session
        except STORE_ERRORS as exc:
            await self._rollback()
            error = translate_database_error(exc)
            await logger.awarning(
                "Session validation unavailable",
                session_id=mask_identifier(session_id),
                error=error.message,
            )
            raise ValidationError(error.message) from exc

    async def invalidate_session(self, session_id: str) -> bool:
        """Soft-delete one session.

        Idempotent: invalidating an unknown or already inactive session
        returns False rather than raising.

        Returns:
            bool: True if an active session was deactivated by this call.
        """
        try:
            result = await self.db_session.exec(
                select(UserSession).where(
                    UserSession.session_id == session_id,
                    UserSession.is_active.is_(True),
                )
            )
            session = result.first()
            if session is None:
                return False

            owner = session.user_id
            session.is_active = False
            self.db_session.add(session)
            await self.db_session.commit()
        except STORE_ERRORS as exc:
            await self._rollback()
            await logger.aerror(
                "Session invalidation failed",
                session_id=mask_identifier(session_id),
                error=translate_database_error(exc).message,
            )
            return False

        await logger.ainfo(
            "Session invalidated", user_id=owner, session_id=mask_identifier(session_id)
        )
        return True

    async def invalidate_all_sessions(self, user_id: str) -> bool:
        """Soft-delete every session of a user ("log out everywhere").

        Also resets the user's active-session counter to 0.

        Returns:
            bool: True unless the store failed.
        """
        try:
            result = await self.db_session.exec(
                select(UserSession).where(
                    UserSession.user_id == user_id,
                    UserSession.is_active.is_(True),
                )
            )
            sessions = result.all()
            for session in sessions:
                session.is_active = False
                self.db_session.add(session)

            user = await self.db_session.get(User, user_id)
            if user is not None:
                user.active_sessions_count = 0
                self.db_session.add(user)

            await self.db_session.commit()
        except STORE_ERRORS as exc:
            await self._rollback()
            await logger.aerror(
                "User session invalidation failed",
                user_id=user_id,
                error=translate_database_error(exc).message,
            )
            return False

        await logger.ainfo("All user sessions invalidated", user_id=user_id, count=len(sessions))
        return True

    async def cleanup_expired(self, user_id: Optional[str] = None) -> int:
        """Hard-delete expired or inactive rows, for one user or globally.

        Pure garbage collection: safe to run repeatedly and concurrently.

        Returns:
            int: Number of rows removed (0 when the store failed).
        """
        try:
            removed = await self._purge_invalid_sessions(utc_now(), user_id)
            await self.db_session.commit()
        except STORE_ERRORS as exc:
            await self._rollback()
            await logger.awarning(
                "Session cleanup failed",
                user_id=user_id,
                error=translate_database_error(exc).message,
            )
            return 0

        if removed:
            await logger.ainfo("Expired sessions cleaned up", user_id=user_id, count=removed)
        return removed

    async def get_user_sessions(self, user_id: str) -> List[UserSession]:
        """Valid sessions of a user, most recently active first.

        Returns:
            List[UserSession]: Empty when the user has none or the store failed.
        """
        try:
            result = await self.db_session.exec(
                self._valid_sessions_query(user_id, utc_now()).order_by(
                    UserSession.last_active.desc()
                )
            )
            return list(result.all())
        except STORE_ERRORS as exc:
            await logger.aerror(
                "Failed to get user sessions",
                user_id=user_id,
                error=translate_database_error(exc).message,
            )
            return []

    # ------------------------------------------------------------------
    # Internal helpers (run inside the caller's transaction)
    # ------------------------------------------------------------------

    @staticmethod
    def _valid_sessions_query(user_id: str, now: datetime):
        return select(UserSession).where(
            UserSession.user_id == user_id,
            UserSession.is_active.is_(True),
            UserSession.expires_at > now,
        )

    async def _purge_invalid_sessions(self, now: datetime, user_id: Optional[str] = None) -> int:
        statement = select(UserSession).where(
            or_(UserSession.expires_at <= now, UserSession.is_active.is_(False))
        )
        if user_id is not None:
            statement = statement.where(UserSession.user_id == user_id)

        result = await self.db_session.exec(statement)
        sessions = result.all()
        for session in sessions:
            await self.db_session.delete(session)
        return len(sessions)

    async def _enforce_session_limit(self, user_id: str, now: datetime) -> int:
        """Soft-delete the least-recently-active sessions until one slot is free.

        Returns:
            int: Number of sessions evicted.
        """
        result = await self.db_session.exec(
            self._valid_sessions_query(user_id, now).order_by(
                UserSession.last_active.asc(), UserSession.created_at.asc()
            )
        )
        active_sessions = result.all()
        overflow = len(active_sessions) - (self.max_sessions_per_user - 1)
        if overflow <= 0:
            return 0

        for session in active_sessions[:overflow]:
            session.is_active = False
            self.db_session.add(session)
            await logger.ainfo(
                "Least recently active session evicted to enforce limit",
                user_id=user_id,
                session_id=mask_identifier(session.session_id),
            )
        return overflow

    async def _count_valid_sessions(self, user_id: str, now: datetime) -> int:
        result = await self.db_session.exec(
            select(func.count())
            .select_from(UserSession)
            .where(
                UserSession.user_id == user_id,
                UserSession.is_active.is_(True),
                UserSession.expires_at > now,
            )
        )
        return int(result.one())

    async def _refresh_user_counters(self, user_id: str, now: datetime, signed_in: bool = False) -> int:
        """Keep the denormalized counter on the user row in step."""
        count = await self._count_valid_sessions(user_id, now)
        user = await self.db_session.get(User, user_id)
        if user is not None:
            user.active_sessions_count = count
            if signed_in:
                user.last_login = now
            self.db_session.add(user)
        return count

    async def _rollback(self) -> None:
        try:
            await self.db_session.rollback()
        except STORE_ERRORS as exc:
            await logger.awarning("Session store rollback failed", error=str(exc))
