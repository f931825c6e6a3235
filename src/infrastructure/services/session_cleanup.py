"""Periodic garbage collection of expired and logged-out sessions.

Creation already purges the signing-in user's dead rows; this sweep removes
the rest so the table does not grow with users who never sign in again.
"""

import asyncio
from typing import Callable, Optional

from sqlmodel.ext.asyncio.session import AsyncSession
from structlog import get_logger

from src.domain.services.auth.session import SessionService

logger = get_logger(__name__)


class SessionCleanupScheduler:
    """Runs `SessionService.cleanup_expired()` on a fixed interval.

    Each sweep opens its own store session. Sweeps are idempotent, so a
    sweep overlapping a sign-in or another process's sweep is harmless.

    Attributes:
        session_factory: Callable returning a new `AsyncSession` context manager.
        interval_seconds: Pause between sweeps.
    """

    def __init__(self, session_factory: Callable[[], AsyncSession], interval_minutes: float):
        self.session_factory = session_factory
        self.interval_seconds = interval_minutes * 60
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_once(self) -> int:
        async with self.session_factory() as db_session:
            return await SessionService(db_session).cleanup_expired()

    def start(self) -> None:
        if self.interval_seconds <= 0 or self.running:
            return
        self._task = asyncio.create_task(self._loop())
        logger.info("session_cleanup_scheduled", interval_seconds=self.interval_seconds)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("session_cleanup_stopped")

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                await self.run_once()
            except Exception as exc:  # noqa: BLE001 - one failed sweep must not end the loop
                await logger.aerror("session_cleanup_sweep_failed", error=str(exc))
