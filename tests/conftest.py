"""Pytest configuration and fixtures."""

import os
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

# Set test environment variables before imports
os.environ["PUBLIC_URL"] = "http://localhost:3000"
os.environ["SESSION_STRATEGY"] = "cookie"
os.environ["SESSION_SECRET_KEY"] = "test-session-secret"
os.environ["COOKIE_SECURE"] = "false"


class FakeClock:
    """Controllable replacement for the session managers' clock."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    """A fixed clock that tests can move forward."""
    return FakeClock()


@pytest.fixture
def identities():
    """Identity store holding the demo accounts."""
    from jukebox.auth.identity import IdentityStore

    return IdentityStore.seeded()


def _make_client(monkeypatch, strategy: str):
    from jukebox.config import get_settings
    from jukebox.main import app

    monkeypatch.setenv("SESSION_STRATEGY", strategy)
    get_settings.cache_clear()
    with TestClient(app) as c:
        yield c
    get_settings.cache_clear()


@pytest.fixture
def client(monkeypatch):
    """Test client using server-side sessions in a cookie."""
    yield from _make_client(monkeypatch, "cookie")


@pytest.fixture
def token_client(monkeypatch):
    """Test client using explicit bearer tokens."""
    yield from _make_client(monkeypatch, "token")


@pytest.fixture
def signed_client(monkeypatch):
    """Test client using client-held signed session tokens."""
    yield from _make_client(monkeypatch, "signed")

