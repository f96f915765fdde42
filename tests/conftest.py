"""Shared fixtures: throwaway SQLite database, API client, manual loop clock, fake collaborators."""

import asyncio
import os
import tempfile
import uuid
from pathlib import Path

_DB_DIR = Path(tempfile.mkdtemp(prefix="quickreps-tests-"))
os.environ.setdefault("DATABASE_URL_OVERRIDE", f"sqlite+aiosqlite:///{_DB_DIR / 'test.db'}")
os.environ.setdefault("AUTO_CREATE_TABLES", "true")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from quickreps.buffer.machine import BufferedCounterMachine  # noqa: E402
from quickreps.core.enums import SetSource  # noqa: E402
from quickreps.db.base import Base  # noqa: E402
from quickreps.db.session import engine  # noqa: E402
from quickreps.main import app  # noqa: E402
from quickreps.models.set_record import SetRecord  # noqa: E402

API = "/api/v1"
EXERCISE_ID = uuid.UUID("11111111-1111-1111-1111-111111111111")


# ── API ──────────────────────────────────────────────────────────────────

async def _drop_all() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def client():
    """TestClient with lifespan (tables created on startup), fresh database per test."""
    with TestClient(app) as c:
        yield c
    asyncio.run(_drop_all())


@pytest.fixture
def signup(client):
    """Create an account and return Authorization headers for it."""

    def _signup(email: str | None = None, timezone: str | None = None) -> dict:
        body = {"email": email or f"user-{uuid.uuid4().hex[:8]}@example.com", "password": "correct-horse"}
        if timezone:
            body["timezone"] = timezone
        r = client.post(f"{API}/auth/signup", json=body)
        assert r.status_code == 201, r.text
        return {"Authorization": f"Bearer {r.json()['access_token']}"}

    return _signup


@pytest.fixture
def auth_headers(signup):
    return signup()


@pytest.fixture
def exercise(client, auth_headers):
    r = client.post(f"{API}/exercises", json={"type": "pullups", "goal": 100}, headers=auth_headers)
    assert r.status_code == 201, r.text
    return r.json()


# ── Buffer fakes ─────────────────────────────────────────────────────────

class FakeHandle:
    def __init__(self, when, callback, args):
        self.when = when
        self.cancelled = False
        self.fired = False
        self._callback = callback
        self._args = args

    def cancel(self):
        self.cancelled = True

    def run(self):
        self.fired = True
        self._callback(*self._args)


class FakeLoop:
    """Manual clock exposing the loop methods the machine uses.

    Timers only run inside advance(); tasks are handed to the real running loop.
    """

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.handles: list[FakeHandle] = []

    def time(self) -> float:
        return self.now

    def call_at(self, when, callback, *args):
        handle = FakeHandle(when, callback, args)
        self.handles.append(handle)
        return handle

    def call_later(self, delay, callback, *args):
        return self.call_at(self.now + delay, callback, *args)

    def create_task(self, coro):
        return asyncio.get_running_loop().create_task(coro)

    def pending(self) -> list[FakeHandle]:
        return [h for h in self.handles if not h.cancelled and not h.fired]

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [h for h in self.pending() if h.when <= target]
            if not due:
                break
            handle = min(due, key=lambda h: h.when)
            self.now = max(self.now, handle.when)
            handle.run()
        self.now = target


class FakeRepository:
    def __init__(self, history=(), create_error=None, history_error=None):
        self.history = list(history)
        self.create_error = create_error
        self.history_error = history_error
        self.create_calls: list[tuple[uuid.UUID, int, SetSource]] = []

    async def create_set(self, exercise_id, reps, source=SetSource.QUICKBUTTON):
        self.create_calls.append((exercise_id, reps, source))
        if self.create_error is not None:
            raise self.create_error
        return SetRecord(id=uuid.uuid4(), exercise_id=exercise_id, reps=reps, source=source)

    async def list_recent_reps(self, exercise_id, limit):
        if self.history_error is not None:
            raise self.history_error
        return self.history[:limit]


class RecordingTelemetry:
    def __init__(self, error: Exception | None = None):
        self.events = []
        self.error = error

    def record(self, event):
        self.events.append(event)
        if self.error is not None:
            raise self.error


@pytest.fixture
def fake_loop():
    return FakeLoop()


@pytest.fixture
def repository():
    return FakeRepository()


@pytest.fixture
def telemetry():
    return RecordingTelemetry()


@pytest.fixture
def make_machine(fake_loop, repository, telemetry):
    """Factory for machines wired to the fake loop and fakes (override any kwarg)."""

    def _make(**kwargs) -> BufferedCounterMachine:
        kwargs.setdefault("telemetry", telemetry)
        kwargs.setdefault("loop", fake_loop)
        return BufferedCounterMachine(EXERCISE_ID, kwargs.pop("repository", repository), **kwargs)

    return _make
