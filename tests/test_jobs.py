"""Tests for the session sweep job and scheduler."""

import pytest

from jukebox.auth.session import SessionManager
from jukebox.auth.store import InMemorySessionStore


@pytest.mark.asyncio
async def test_sweep_expired_sessions_summary(identities, clock):
    from jukebox.jobs.cleanup import sweep_expired_sessions

    manager = SessionManager(InMemorySessionStore(), identities, clock=clock)
    manager.create(identities.find_by_username("user1"))
    clock.advance(hours=23)
    manager.create(identities.find_by_username("user2"))
    clock.advance(hours=2)

    summary = await sweep_expired_sessions(manager)
    assert summary == {
        "strategy": "cookie",
        "expired": 1,
        "sessions": 1,
    }

    summary = await sweep_expired_sessions(manager)
    assert summary["expired"] == 0


@pytest.mark.asyncio
async def test_scheduler_registers_sweep_job(identities):
    from jukebox.jobs.scheduler import get_scheduler, setup_scheduler, shutdown_scheduler

    manager = SessionManager(InMemorySessionStore(), identities)
    scheduler = setup_scheduler(manager)
    try:
        assert get_scheduler() is scheduler
        job = scheduler.get_job("session_sweep")
        assert job is not None
        assert job.args == (manager,)
    finally:
        shutdown_scheduler()

    assert get_scheduler() is None


@pytest.mark.asyncio
async def test_sweep_summary_for_signed_strategy(identities, clock):
    from jukebox.auth.session import SignedSessionManager
    from jukebox.jobs.cleanup import sweep_expired_sessions

    manager = SignedSessionManager("job-secret", identities, clock=clock)
    manager.destroy(manager.create(identities.find_by_username("user1")))

    summary = await sweep_expired_sessions(manager)
    assert summary == {"strategy": "signed", "expired": 0, "revoked": 1}

    clock.advance(hours=25)
    summary = await sweep_expired_sessions(manager)
    assert summary == {"strategy": "signed", "expired": 1, "revoked": 0}
