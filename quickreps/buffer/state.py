"""Quick-entry buffer states, events and the pure transition table.

The buffer is either Idle or Buffering(value, deadline). `transition` never
touches clocks, timers or the network: it returns the next state plus the
effects the machine must carry out (arm/clear the commit timer, submit a
set, show a message).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from quickreps.core.constants import BUFFER_MAX_VALUE, BUFFER_MIN_VALUE, BUFFER_WINDOW_SECONDS
from quickreps.core.enums import BufferMessageKind

DECREMENT = -1


# ── States ───────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Idle:
    value: int = 0


@dataclass(frozen=True)
class Buffering:
    value: int
    deadline: float  # loop clock time at which the buffer commits


BufferState = Union[Idle, Buffering]
IDLE = Idle()


# ── Events ───────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Tap:
    amount: int


@dataclass(frozen=True)
class TimerFired:
    deadline: float  # deadline the timer was armed for; stale firings are ignored


@dataclass(frozen=True)
class Commit:
    """Commit right away instead of waiting for the deadline."""


@dataclass(frozen=True)
class Cancel:
    pass


BufferEvent = Union[Tap, TimerFired, Commit, Cancel]


# ── Effects ──────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ArmTimer:
    deadline: float


@dataclass(frozen=True)
class ClearTimer:
    pass


@dataclass(frozen=True)
class Submit:
    reps: int


@dataclass(frozen=True)
class BufferMessage:
    kind: BufferMessageKind
    text: str


Effect = Union[ArmTimer, ClearTimer, Submit, BufferMessage]


@dataclass(frozen=True)
class TransitionContext:
    now: float
    today_total: int = 0
    window: float = BUFFER_WINDOW_SECONDS
    min_value: int = BUFFER_MIN_VALUE
    max_value: int = BUFFER_MAX_VALUE


def transition(
    state: BufferState, event: BufferEvent, ctx: TransitionContext
) -> tuple[BufferState, tuple[Effect, ...]]:
    """Apply one event. Rejected taps return the same state object and only a message."""
    if isinstance(event, Tap):
        return _tap(state, event.amount, ctx)

    if isinstance(event, TimerFired):
        if not isinstance(state, Buffering) or state.deadline != event.deadline:
            return state, ()
        return _flush(state)

    if isinstance(event, Commit):
        if not isinstance(state, Buffering):
            return state, ()
        return _flush(state)

    if isinstance(event, Cancel):
        if not isinstance(state, Buffering):
            return state, ()
        return IDLE, (ClearTimer(),)

    raise TypeError(f"Unknown buffer event: {event!r}")


def _tap(state: BufferState, amount: int, ctx: TransitionContext):
    if amount == DECREMENT:
        # -1 needs something to subtract from: today's saved total when idle, the buffer otherwise
        floor = ctx.today_total if isinstance(state, Idle) else state.value
        if floor <= 0:
            return state, (BufferMessage(BufferMessageKind.DECREMENT_REJECTED, "Nothing to subtract"),)

    value = state.value + amount
    if not ctx.min_value <= value <= ctx.max_value:
        text = f"Buffer must stay between {ctx.min_value} and {ctx.max_value} (would be {value})"
        return state, (BufferMessage(BufferMessageKind.RANGE_REJECTED, text),)

    deadline = ctx.now + ctx.window
    return Buffering(value=value, deadline=deadline), (ArmTimer(deadline),)


def _flush(state: Buffering):
    # Zero-rep buffers are dropped like a cancel
    if state.value == 0:
        return IDLE, (ClearTimer(),)
    return IDLE, (ClearTimer(), Submit(state.value))
