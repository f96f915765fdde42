"""Per-(profile, exercise) buffers hosted inside the API process."""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Callable

from quickreps.buffer.collaborators import SessionProvider, SetsRepository, StaticSessionProvider, TelemetrySink
from quickreps.buffer.machine import BufferedCounterMachine
from quickreps.core.config import Settings

logger = logging.getLogger(__name__)

RepositoryFactory = Callable[[SessionProvider], SetsRepository]
Key = tuple[uuid.UUID, uuid.UUID]


class BufferRegistry:
    """
    Creates a machine on first use, seeds its history, and keeps it until the
    exercise is deleted, its token is logged out, it sits idle longer than
    `buffer_idle_ttl_seconds`, or the app shuts down. Each machine commits
    with the token of the request that last touched it.
    """

    def __init__(
        self,
        repository_factory: RepositoryFactory,
        telemetry: TelemetrySink,
        settings: Settings,
        clock: Callable[[], float] | None = None,
    ):
        self._repository_factory = repository_factory
        self._telemetry = telemetry
        self._settings = settings
        self._clock = clock
        self._machines: dict[Key, BufferedCounterMachine] = {}
        self._sessions: dict[Key, StaticSessionProvider] = {}
        self._last_used: dict[Key, float] = {}

    def __len__(self) -> int:
        return len(self._machines)

    def _now(self) -> float:
        return self._clock() if self._clock else asyncio.get_running_loop().time()

    def peek(self, profile_id: uuid.UUID, exercise_id: uuid.UUID) -> BufferedCounterMachine | None:
        return self._machines.get((profile_id, exercise_id))

    async def get(self, profile_id: uuid.UUID, exercise_id: uuid.UUID, token: str) -> BufferedCounterMachine:
        key = (profile_id, exercise_id)
        now = self._now()
        self.evict_idle(now, keep=key)
        self._last_used[key] = now
        machine = self._machines.get(key)
        if machine is not None:
            self._sessions[key].token = token
            return machine

        session = StaticSessionProvider(token)
        machine = BufferedCounterMachine(
            exercise_id,
            self._repository_factory(session),
            telemetry=self._telemetry,
            window_seconds=self._settings.buffer_window_seconds,
            max_value=self._settings.buffer_max_value,
            history_limit=self._settings.history_limit,
        )
        # Registered before the first await so concurrent requests share one machine
        self._machines[key] = machine
        self._sessions[key] = session
        logger.debug("Mounted buffer for exercise %s", exercise_id)
        await machine.load_history()
        return machine

    def evict_idle(self, now: float | None = None, keep: Key | None = None) -> int:
        """Drop machines with nothing buffered or in flight that were unused for the idle TTL."""
        now = self._now() if now is None else now
        cutoff = now - self._settings.buffer_idle_ttl_seconds
        stale = [
            key
            for key, machine in self._machines.items()
            if key != keep
            and self._last_used.get(key, now) <= cutoff
            and not machine.is_active
            and not machine.busy
        ]
        for key in stale:
            self._remove(key)
        if stale:
            logger.debug("Evicted %d idle quick-entry buffers", len(stale))
        return len(stale)

    def discard(self, exercise_id: uuid.UUID) -> None:
        """Tear down every buffer for an exercise (e.g. after it is deleted)."""
        for key in [k for k in self._machines if k[1] == exercise_id]:
            self._remove(key)

    def discard_token(self, token: str) -> None:
        """Tear down buffers driven by a token that was just logged out."""
        for key in [k for k, s in self._sessions.items() if s.token == token]:
            self._remove(key)

    def _remove(self, key: Key) -> None:
        self._machines.pop(key).close()
        self._sessions.pop(key, None)
        self._last_used.pop(key, None)

    async def aclose(self) -> None:
        machines = list(self._machines.values())
        self._machines.clear()
        self._sessions.clear()
        self._last_used.clear()
        for machine in machines:
            await machine.aclose()
        if machines:
            logger.info("Closed %d quick-entry buffers", len(machines))
