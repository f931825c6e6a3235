import asyncio
from datetime import timedelta

import pytest
from sqlmodel import select

from src.domain.entities.session import UserSession
from src.infrastructure.services.session_cleanup import SessionCleanupScheduler
from src.utils.timezone import utc_now


async def _add_session(session_factory, session_id, expires_in_hours, is_active=True):
    now = utc_now()
    async with session_factory() as db_session:
        db_session.add(
            UserSession(
                session_id=session_id,
                user_id="user-1",
                is_active=is_active,
                created_at=now,
                last_active=now,
                expires_at=now + timedelta(hours=expires_in_hours),
            )
        )
        await db_session.commit()


async def _remaining_ids(session_factory):
    async with session_factory() as db_session:
        result = await db_session.exec(select(UserSession.session_id))
        return set(result.all())


@pytest.mark.asyncio
async def test_run_once_removes_dead_rows(session_factory):
    await _add_session(session_factory, "live", 1)
    await _add_session(session_factory, "expired", -1)
    await _add_session(session_factory, "logged-out", 1, is_active=False)

    removed = await SessionCleanupScheduler(session_factory, 15).run_once()

    assert removed == 2
    assert await _remaining_ids(session_factory) == {"live"}


@pytest.mark.asyncio
async def test_start_and_stop(session_factory):
    scheduler = SessionCleanupScheduler(session_factory, 15)

    scheduler.start()
    assert scheduler.running is True
    first_task = scheduler._task
    scheduler.start()
    assert scheduler._task is first_task

    await scheduler.stop()
    assert scheduler.running is False
    await scheduler.stop()


@pytest.mark.asyncio
async def test_disabled_interval_never_starts(session_factory):
    scheduler = SessionCleanupScheduler(session_factory, 0)

    scheduler.start()

    assert scheduler.running is False


@pytest.mark.asyncio
async def test_loop_sweeps_and_survives_failures(session_factory, mocker):
    scheduler = SessionCleanupScheduler(session_factory, 0.0001)
    run_once = mocker.patch.object(
        scheduler, "run_once", side_effect=[RuntimeError("store down"), 0, 0, 0, 0, 0]
    )

    scheduler.start()
    for _ in range(50):
        if run_once.call_count >= 2:
            break
        await asyncio.sleep(0.01)
    await scheduler.stop()

    assert run_once.call_count >= 2
