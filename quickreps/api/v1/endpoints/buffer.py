"""Quick-entry buffer endpoints: tap, cancel and commit a hosted buffer."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from quickreps.api.v1.deps import get_current_profile, get_registry, get_token
from quickreps.buffer.machine import BufferedCounterMachine
from quickreps.buffer.registry import BufferRegistry
from quickreps.buffer.state import BufferMessage
from quickreps.db.session import get_db
from quickreps.models.profile import Profile
from quickreps.schemas.buffer import BufferMessageRead, BufferRead, TapRequest
from quickreps.services.sets import get_owned_exercise
from quickreps.services.summary import today_total

router = APIRouter()


async def _mounted(
    exercise_id: uuid.UUID,
    profile: Profile,
    token: str,
    db: AsyncSession,
    registry: BufferRegistry,
) -> BufferedCounterMachine:
    exercise = await get_owned_exercise(db, profile.id, exercise_id)
    machine = await registry.get(profile.id, exercise.id, token)
    machine.today_total = await today_total(db, profile, exercise)
    return machine


def _message(message: BufferMessage | None) -> BufferMessageRead | None:
    return BufferMessageRead(kind=message.kind, text=message.text) if message else None


def _read(machine: BufferedCounterMachine, accepted: bool | None = None) -> BufferRead:
    snap = machine.snapshot()
    return BufferRead(
        exercise_id=snap.exercise_id,
        value=snap.value,
        is_active=snap.is_active,
        time_left_seconds=snap.time_left_seconds,
        accepted=accepted,
        message=_message(snap.message),
        suggestions=snap.suggestions,
        today_total=machine.today_total,
    )


@router.get("/{exercise_id}/buffer", response_model=BufferRead)
async def get_buffer(
    exercise_id: uuid.UUID,
    profile: Profile = Depends(get_current_profile),
    token: str = Depends(get_token),
    db: AsyncSession = Depends(get_db),
    registry: BufferRegistry = Depends(get_registry),
):
    """Current buffer state and suggested quick-tap amounts."""
    machine = await _mounted(exercise_id, profile, token, db, registry)
    return _read(machine)


@router.post("/{exercise_id}/buffer/taps", response_model=BufferRead)
async def tap(
    exercise_id: uuid.UUID,
    payload: TapRequest,
    profile: Profile = Depends(get_current_profile),
    token: str = Depends(get_token),
    db: AsyncSession = Depends(get_db),
    registry: BufferRegistry = Depends(get_registry),
):
    """Add an amount to the buffer; the set is saved once taps stop for the commit window."""
    machine = await _mounted(exercise_id, profile, token, db, registry)
    accepted = machine.tap(payload.amount)
    return _read(machine, accepted)


@router.post("/{exercise_id}/buffer/commit", response_model=BufferRead)
async def commit(
    exercise_id: uuid.UUID,
    profile: Profile = Depends(get_current_profile),
    token: str = Depends(get_token),
    db: AsyncSession = Depends(get_db),
    registry: BufferRegistry = Depends(get_registry),
):
    """Save the buffered value now instead of waiting for the deadline. `message` is null when nothing was buffered."""
    machine = await _mounted(exercise_id, profile, token, db, registry)
    message = await machine.commit_now()
    exercise = await get_owned_exercise(db, profile.id, exercise_id)
    machine.today_total = await today_total(db, profile, exercise)
    body = _read(machine)
    # Only report the outcome of this commit, never an earlier message
    body.message = _message(message)
    return body


@router.delete("/{exercise_id}/buffer", response_model=BufferRead)
async def cancel(
    exercise_id: uuid.UUID,
    profile: Profile = Depends(get_current_profile),
    token: str = Depends(get_token),
    db: AsyncSession = Depends(get_db),
    registry: BufferRegistry = Depends(get_registry),
):
    """Drop the buffered value without saving anything."""
    machine = await _mounted(exercise_id, profile, token, db, registry)
    machine.cancel()
    return _read(machine)
