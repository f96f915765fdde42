"""
BufferedCounterMachine behaviour over time.

A FakeLoop stands in for the event loop clock: timers only fire inside
`fake_loop.advance(...)`, so deadlines and countdown ticks are exact.
Commits run as real tasks and are awaited with `machine.drain()`.
"""

import asyncio

import pytest

from conftest import FakeRepository
from quickreps.buffer.state import Buffering, Idle
from quickreps.core.enums import ApiErrorCode, BufferMessageKind, SetSource
from quickreps.core.errors import ApiError


class TestAccumulation:
    def test_rapid_taps_coalesce_and_reset_countdown(self, make_machine, fake_loop):
        machine = make_machine()
        assert machine.tap(5)
        assert (machine.value, machine.is_active, machine.time_left_seconds) == (5, True, 5)

        fake_loop.advance(0.8)
        assert machine.tap(5)
        assert (machine.value, machine.is_active, machine.time_left_seconds) == (10, True, 5)

    def test_rejected_tap_keeps_value_and_deadline(self, make_machine, fake_loop):
        machine = make_machine()
        machine.tap(60)
        fake_loop.advance(2)
        assert not machine.tap(50)
        assert machine.value == 60
        assert machine.message.kind == BufferMessageKind.RANGE_REJECTED
        assert machine.time_left_seconds == 3

    def test_decrement_needs_something_saved_today(self, make_machine):
        machine = make_machine(today_total=0)
        assert not machine.tap(-1)
        assert machine.message.kind == BufferMessageKind.DECREMENT_REJECTED
        assert isinstance(machine.state, Idle)

    def test_decrement_within_buffer(self, make_machine):
        machine = make_machine()
        machine.tap(3)
        assert machine.tap(-1)
        assert machine.value == 2
        assert not machine.tap(-3)
        assert machine.value == 2
        assert machine.message.kind == BufferMessageKind.RANGE_REJECTED

    def test_countdown_follows_deadline(self, make_machine, fake_loop):
        seen = []
        machine = make_machine(on_change=lambda snap: seen.append(snap.time_left_seconds))
        machine.tap(4)
        for expected in (4, 3, 2, 1):
            fake_loop.advance(1)
            assert machine.time_left_seconds == expected
        assert seen[:5] == [5, 4, 3, 2, 1]

    def test_only_one_commit_handle_is_ever_armed(self, make_machine, fake_loop):
        machine = make_machine()
        for _ in range(5):
            machine.tap(1)
            fake_loop.advance(0.5)
        commit_handles = [h for h in fake_loop.pending() if h.when == machine.state.deadline]
        assert len(commit_handles) == 1


class TestCommit:
    async def test_deadline_resets_on_every_tap(self, make_machine, fake_loop, repository):
        machine = make_machine()
        machine.tap(5)
        fake_loop.advance(4)
        machine.tap(5)
        fake_loop.advance(4.9)  # past the first tap's deadline
        assert repository.create_calls == []
        assert machine.is_active

        fake_loop.advance(0.2)
        await machine.drain()
        assert repository.create_calls == [(machine.exercise_id, 10, SetSource.QUICKBUTTON)]
        assert (machine.value, machine.is_active) == (0, False)

    async def test_success_updates_history_and_notifies_parent(self, make_machine, fake_loop, repository, telemetry):
        added = []
        repository.history = [4, 5, 6, 5, 4]
        machine = make_machine(on_added=lambda: added.append(1))
        await machine.load_history()
        assert machine.suggestions == [3, 5, 7]

        machine.tap(9)
        fake_loop.advance(5)
        await machine.drain()

        assert machine.history.as_list()[0] == 9
        assert added == [1]
        assert machine.message.kind == BufferMessageKind.COMMITTED
        assert [(e.event, e.reps) for e in telemetry.events] == [("buffer_commit", 9)]

    async def test_failed_commit_resets_without_retry(self, make_machine, fake_loop, repository):
        repository.create_error = ApiError(ApiErrorCode.INTERNAL_ERROR, "Network down")
        repository.history = [4, 4]
        added = []
        machine = make_machine(on_added=lambda: added.append(1))
        await machine.load_history()
        machine.tap(5)

        fake_loop.advance(5)
        await machine.drain()

        assert (machine.value, machine.is_active) == (0, False)
        assert machine.history.as_list() == [4, 4]
        assert machine.message.kind == BufferMessageKind.COMMIT_FAILED
        assert machine.message.text == "Network down"
        assert added == []

        fake_loop.advance(60)
        await machine.drain()
        assert len(repository.create_calls) == 1
        assert fake_loop.pending() == []

    async def test_unexpected_repository_error_is_contained(self, make_machine, fake_loop, repository):
        repository.create_error = RuntimeError("boom")
        machine = make_machine()
        machine.tap(2)
        fake_loop.advance(5)
        await machine.drain()
        assert machine.message.kind == BufferMessageKind.COMMIT_FAILED
        assert isinstance(machine.state, Idle)

    async def test_zero_value_is_never_submitted(self, make_machine, fake_loop, repository, telemetry):
        machine = make_machine()
        machine.tap(1)
        machine.tap(-1)
        assert machine.value == 0 and machine.is_active

        fake_loop.advance(5)
        await machine.drain()
        assert repository.create_calls == []
        assert telemetry.events == []
        assert not machine.is_active

    async def test_telemetry_failure_does_not_affect_commit(self, make_machine, fake_loop, repository, telemetry):
        telemetry.error = ConnectionError("telemetry down")
        machine = make_machine()
        machine.tap(3)
        fake_loop.advance(5)
        await machine.drain()
        assert machine.message.kind == BufferMessageKind.COMMITTED
        assert len(repository.create_calls) == 1

    async def test_commit_now_skips_the_wait(self, make_machine, fake_loop, repository):
        machine = make_machine()
        machine.tap(3)
        message = await machine.commit_now()
        assert message.kind == BufferMessageKind.COMMITTED
        assert repository.create_calls == [(machine.exercise_id, 3, SetSource.QUICKBUTTON)]
        assert fake_loop.pending() == []

    async def test_history_load_failure_is_reported(self, make_machine, repository):
        repository.history_error = ApiError(ApiErrorCode.UNAUTHORIZED, "No session")
        machine = make_machine()
        await machine.load_history()
        assert machine.message.kind == BufferMessageKind.HISTORY_FAILED
        assert machine.suggestions == [3, 5, 8]


class TestCancelAndClose:
    async def test_cancel_discards_buffer(self, make_machine, fake_loop, repository):
        machine = make_machine()
        machine.tap(7)
        machine.cancel()
        assert (machine.value, machine.is_active) == (0, False)
        assert fake_loop.pending() == []

        fake_loop.advance(10)
        await machine.drain()
        assert repository.create_calls == []

    def test_cancel_on_idle_is_noop(self, make_machine):
        machine = make_machine()
        machine.cancel()
        machine.cancel()
        assert isinstance(machine.state, Idle)
        assert machine.message is None

    async def test_close_releases_timers_and_blocks_taps(self, make_machine, fake_loop, repository):
        machine = make_machine()
        machine.tap(5)
        assert isinstance(machine.state, Buffering)

        await machine.aclose()
        assert fake_loop.pending() == []
        fake_loop.advance(10)
        assert repository.create_calls == []
        with pytest.raises(RuntimeError):
            machine.tap(1)

    def test_close_is_idempotent(self, make_machine):
        machine = make_machine()
        machine.close()
        machine.close()
        assert machine.closed


class GatedRepository(FakeRepository):
    """create_set blocks until its reps value is released."""

    def __init__(self):
        super().__init__()
        self.gates: dict[int, asyncio.Event] = {}
        self.finished: list[int] = []

    def _gate(self, reps: int) -> asyncio.Event:
        return self.gates.setdefault(reps, asyncio.Event())

    def release(self, reps: int) -> None:
        self._gate(reps).set()

    async def create_set(self, exercise_id, reps, source=SetSource.QUICKBUTTON):
        await self._gate(reps).wait()
        self.finished.append(reps)
        return await super().create_set(exercise_id, reps, source)


class TestOverlappingCommits:
    async def test_close_waits_for_every_in_flight_commit(self, make_machine, fake_loop):
        repository = GatedRepository()
        machine = make_machine(repository=repository)
        machine.tap(3)
        fake_loop.advance(5)
        machine.tap(4)
        fake_loop.advance(5)
        await asyncio.sleep(0)
        assert machine.busy

        repository.release(4)
        asyncio.get_running_loop().call_later(0.05, repository.release, 3)
        await machine.aclose()

        assert repository.finished == [4, 3]
        assert not machine.busy
        assert machine.history.as_list()[:2] == [3, 4]

    async def test_commit_now_on_idle_reports_nothing(self, make_machine):
        machine = make_machine()
        machine.tap(6)
        assert (await machine.commit_now()).kind == BufferMessageKind.COMMITTED

        assert await machine.commit_now() is None
        assert machine.message.kind == BufferMessageKind.COMMITTED
