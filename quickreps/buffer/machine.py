"""BufferedCounterMachine - debounced quick-entry buffer for one exercise.

Taps accumulate into a pending delta; every accepted tap pushes the commit
deadline a full window into the future. When the deadline passes (or on a
manual commit) the buffered value is submitted once as a `quickbutton` set.

Runs on a single asyncio loop. The machine owns two loop handles: the commit
timer and the 1 Hz countdown tick. Both are cancelled on every re-arm,
commit, cancel and close, so a cancelled or closed buffer can never commit.
"""

from __future__ import annotations

import asyncio
import logging
import math
import uuid
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from quickreps.buffer.collaborators import NullTelemetrySink, SetsRepository, TelemetrySink
from quickreps.buffer.history import HistoryCache
from quickreps.buffer.state import (
    IDLE,
    ArmTimer,
    BufferEvent,
    BufferMessage,
    Buffering,
    BufferState,
    Cancel,
    ClearTimer,
    Commit,
    Effect,
    Submit,
    Tap,
    TimerFired,
    TransitionContext,
    transition,
)
from quickreps.core.constants import (
    BUFFER_MAX_VALUE,
    BUFFER_WINDOW_SECONDS,
    COUNTDOWN_TICK_SECONDS,
    HISTORY_LIMIT,
)
from quickreps.core.enums import BufferMessageKind, SetSource
from quickreps.core.errors import ApiError
from quickreps.schemas.telemetry import TelemetryEvent
from quickreps.services.suggestions import suggest_increments

logger = logging.getLogger(__name__)

# Float slack when turning a remaining duration into whole countdown seconds
_EPSILON = 1e-6


@dataclass(frozen=True)
class BufferSnapshot:
    exercise_id: uuid.UUID
    value: int
    is_active: bool
    time_left_seconds: int
    message: BufferMessage | None = None
    suggestions: list[int] = field(default_factory=list)


class BufferedCounterMachine:
    def __init__(
        self,
        exercise_id: uuid.UUID,
        repository: SetsRepository,
        *,
        telemetry: TelemetrySink | None = None,
        history: Iterable[int] | HistoryCache = (),
        on_added: Callable[[], None] | None = None,
        on_change: Callable[[BufferSnapshot], None] | None = None,
        today_total: int = 0,
        window_seconds: float = BUFFER_WINDOW_SECONDS,
        max_value: int = BUFFER_MAX_VALUE,
        history_limit: int = HISTORY_LIMIT,
        loop: asyncio.AbstractEventLoop | None = None,
    ):
        self.exercise_id = exercise_id
        self.today_total = today_total  # saved total for today, gates the -1 tap while idle
        self.message: BufferMessage | None = None
        self._repository = repository
        self._telemetry = telemetry or NullTelemetrySink()
        self._on_added = on_added
        self._on_change = on_change
        self._window = window_seconds
        self._max_value = max_value
        self._loop = loop or asyncio.get_running_loop()
        self.history = (
            history if isinstance(history, HistoryCache) else HistoryCache(history, limit=history_limit)
        )

        self._state: BufferState = IDLE
        self._commit_handle: asyncio.TimerHandle | None = None
        self._tick_handle: asyncio.TimerHandle | None = None
        self._commit_tasks: set[asyncio.Task] = set()
        self._closed = False

    # ── Observed state ───────────────────────────────────────────────────

    @property
    def state(self) -> BufferState:
        return self._state

    @property
    def value(self) -> int:
        return self._state.value

    @property
    def is_active(self) -> bool:
        return self._commit_handle is not None

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def time_left_seconds(self) -> int:
        """Whole seconds until commit, derived from the deadline (0 when idle)."""
        if not isinstance(self._state, Buffering):
            return 0
        remaining = self._state.deadline - self._loop.time()
        return max(0, min(math.ceil(self._window), math.ceil(remaining - _EPSILON)))

    @property
    def suggestions(self) -> list[int]:
        return suggest_increments(self.history)

    def snapshot(self) -> BufferSnapshot:
        return BufferSnapshot(
            exercise_id=self.exercise_id,
            value=self.value,
            is_active=self.is_active,
            time_left_seconds=self.time_left_seconds,
            message=self.message,
            suggestions=self.suggestions,
        )

    # ── Commands ─────────────────────────────────────────────────────────

    def tap(self, amount: int) -> bool:
        """Add `amount` to the buffer. Returns False if the tap was rejected."""
        before = self._state
        self._dispatch(Tap(amount))
        return self._state is not before

    def cancel(self) -> None:
        self._dispatch(Cancel())

    async def commit_now(self) -> BufferMessage | None:
        """
        Commit the pending value without waiting for the deadline, and await the
        result. Returns None when there was nothing to submit.
        """
        effects = self._dispatch(Commit())
        await self.drain()
        if not any(isinstance(e, Submit) for e in effects):
            return None
        return self.message

    def dismiss_message(self) -> None:
        self.message = None
        self._notify_change()

    async def load_history(self, limit: int | None = None) -> None:
        """Seed the history cache from the repository (on mount or explicit refresh)."""
        try:
            reps = await self._repository.list_recent_reps(self.exercise_id, limit or self.history.limit)
        except ApiError as e:
            logger.warning("Loading recent sets for %s failed: %s", self.exercise_id, e)
            self.message = BufferMessage(BufferMessageKind.HISTORY_FAILED, f"Could not load history: {e.message}")
        else:
            self.history.seed(reps)
        self._notify_change()

    def close(self) -> None:
        """Tear down: release both timers. A pending buffer is dropped, never committed."""
        if self._closed:
            return
        self._closed = True
        if isinstance(self._state, Buffering):
            logger.debug("Dropping %s buffered reps for %s on close", self._state.value, self.exercise_id)
        self._clear_timers()
        self._state = IDLE

    @property
    def busy(self) -> bool:
        """True while a commit is still talking to the repository."""
        return bool(self._commit_tasks)

    async def drain(self) -> None:
        """Wait for every in-flight commit, including ones started while waiting."""
        while self._commit_tasks:
            await asyncio.shield(asyncio.gather(*self._commit_tasks, return_exceptions=True))

    async def aclose(self) -> None:
        self.close()
        await self.drain()

    # ── Transition plumbing ──────────────────────────────────────────────

    def _dispatch(self, event: BufferEvent) -> tuple[Effect, ...]:
        if self._closed:
            raise RuntimeError(f"Buffer for exercise {self.exercise_id} is closed")
        ctx = TransitionContext(
            now=self._loop.time(),
            today_total=self.today_total,
            window=self._window,
            max_value=self._max_value,
        )
        self._state, effects = transition(self._state, event, ctx)
        for effect in effects:
            self._apply(effect)
        self._notify_change()
        return effects

    def _apply(self, effect: Effect) -> None:
        if isinstance(effect, ArmTimer):
            self._clear_timers()
            self._commit_handle = self._loop.call_at(effect.deadline, self._on_deadline, effect.deadline)
            self._arm_tick()
        elif isinstance(effect, ClearTimer):
            self._clear_timers()
        elif isinstance(effect, Submit):
            task = self._loop.create_task(self._submit(effect.reps))
            self._commit_tasks.add(task)
            task.add_done_callback(self._commit_tasks.discard)
        elif isinstance(effect, BufferMessage):
            self.message = effect

    def _clear_timers(self) -> None:
        if self._commit_handle is not None:
            self._commit_handle.cancel()
            self._commit_handle = None
        if self._tick_handle is not None:
            self._tick_handle.cancel()
            self._tick_handle = None

    def _arm_tick(self) -> None:
        # Next tick lands where the displayed countdown drops by one second
        if not isinstance(self._state, Buffering):
            return
        steps = self.time_left_seconds - 1
        if steps <= 0:
            return
        at = self._state.deadline - steps * COUNTDOWN_TICK_SECONDS
        self._tick_handle = self._loop.call_at(at, self._on_tick)

    def _on_tick(self) -> None:
        self._tick_handle = None
        self._arm_tick()
        self._notify_change()

    def _on_deadline(self, deadline: float) -> None:
        self._commit_handle = None
        if not self._closed:
            self._dispatch(TimerFired(deadline))

    async def _submit(self, reps: int) -> None:
        try:
            await self._repository.create_set(self.exercise_id, reps, SetSource.QUICKBUTTON)
        except ApiError as e:
            logger.warning("Quick-entry commit of %s reps for %s failed: %s", reps, self.exercise_id, e)
            self.message = BufferMessage(BufferMessageKind.COMMIT_FAILED, e.message)
        except Exception:
            logger.exception("Quick-entry commit of %s reps for %s crashed", reps, self.exercise_id)
            self.message = BufferMessage(BufferMessageKind.COMMIT_FAILED, "Unexpected error")
        else:
            logger.info("Committed %s buffered reps for %s", reps, self.exercise_id)
            self.history.prepend(reps)
            self.message = BufferMessage(BufferMessageKind.COMMITTED, f"Saved +{reps}")
            if self._on_added is not None:
                self._on_added()
        finally:
            self._record_telemetry(reps)
        self._notify_change()

    def _record_telemetry(self, reps: int) -> None:
        try:
            self._telemetry.record(
                TelemetryEvent(event="buffer_commit", exercise_id=self.exercise_id, reps=reps)
            )
        except Exception:
            logger.debug("Telemetry for %s dropped", self.exercise_id, exc_info=True)

    def _notify_change(self) -> None:
        if self._on_change is not None:
            self._on_change(self.snapshot())
