"""Set and exercise queries shared by endpoints and the buffer repository."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from quickreps.core.constants import MAX_SET_REPS, MAX_SETS_LIMIT, MIN_SET_REPS
from quickreps.core.enums import ApiErrorCode, SetSource
from quickreps.core.errors import ApiError
from quickreps.models.exercise import Exercise
from quickreps.models.set_record import SetRecord


async def get_owned_exercise(db: AsyncSession, profile_id: uuid.UUID, exercise_id: uuid.UUID) -> Exercise:
    """Exercise by id, only if it belongs to the profile (404 otherwise, never 403)."""
    result = await db.execute(
        select(Exercise).where(Exercise.id == exercise_id, Exercise.profile_id == profile_id)
    )
    exercise = result.scalar_one_or_none()
    if exercise is None:
        raise ApiError(ApiErrorCode.NOT_FOUND, "Exercise not found")
    return exercise


async def get_owned_exercise_by_type(db: AsyncSession, profile_id: uuid.UUID, type_: str) -> Exercise:
    """Exercise by name (case-insensitive), only among the profile's own."""
    result = await db.execute(
        select(Exercise).where(
            Exercise.profile_id == profile_id, func.lower(Exercise.type) == type_.strip().lower()
        )
    )
    exercise = result.scalar_one_or_none()
    if exercise is None:
        raise ApiError(ApiErrorCode.NOT_FOUND, "Exercise not found")
    return exercise


async def add_set(
    db: AsyncSession,
    exercise: Exercise,
    reps: int,
    source: SetSource = SetSource.QUICKBUTTON,
    note: str | None = None,
) -> SetRecord:
    if not MIN_SET_REPS <= reps <= MAX_SET_REPS:
        raise ApiError(
            ApiErrorCode.VALIDATION_ERROR, f"reps must be between {MIN_SET_REPS} and {MAX_SET_REPS}"
        )
    record = SetRecord(exercise_id=exercise.id, reps=reps, source=source, note=note)
    db.add(record)
    await db.flush()
    await db.refresh(record)
    return record


def live_sets():
    """Base query over sets that have not been deleted."""
    return select(SetRecord).where(SetRecord.deleted_at.is_(None))


async def recent_reps(db: AsyncSession, exercise_id: uuid.UUID, limit: int) -> list[int]:
    """Reps of the latest live sets, most recent first."""
    result = await db.execute(
        select(SetRecord.reps)
        .where(SetRecord.exercise_id == exercise_id, SetRecord.deleted_at.is_(None))
        .order_by(SetRecord.created_at.desc())
        .limit(min(limit, MAX_SETS_LIMIT))
    )
    return list(result.scalars().all())


async def total_reps(
    db: AsyncSession, exercise_id: uuid.UUID, start: datetime, end: datetime
) -> int:
    """Sum of live reps with start <= created_at < end."""
    result = await db.execute(
        select(func.coalesce(func.sum(SetRecord.reps), 0)).where(
            SetRecord.exercise_id == exercise_id,
            SetRecord.deleted_at.is_(None),
            SetRecord.created_at >= start,
            SetRecord.created_at < end,
        )
    )
    return int(result.scalar() or 0)
