"""Set logging endpoints."""

import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from quickreps.api.v1.deps import get_current_profile
from quickreps.core.constants import DEFAULT_SETS_LIMIT, MAX_SETS_LIMIT
from quickreps.core.enums import ApiErrorCode
from quickreps.core.errors import ApiError
from quickreps.db.session import get_db
from quickreps.models.exercise import Exercise
from quickreps.models.profile import Profile
from quickreps.models.set_record import SetRecord
from quickreps.schemas.set_record import SetCreate, SetRead
from quickreps.services.sets import add_set, get_owned_exercise, get_owned_exercise_by_type, live_sets

router = APIRouter()


def _utc(value: datetime) -> datetime:
    return value.astimezone(timezone.utc) if value.tzinfo else value.replace(tzinfo=timezone.utc)


async def _resolve_exercise(
    db: AsyncSession, profile: Profile, exercise_id: uuid.UUID | None, exercise: str | None
) -> Exercise | None:
    if exercise_id is not None:
        return await get_owned_exercise(db, profile.id, exercise_id)
    if exercise:
        return await get_owned_exercise_by_type(db, profile.id, exercise)
    return None


@router.get("", response_model=list[SetRead])
async def list_sets(
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
    exercise_id: uuid.UUID | None = None,
    exercise: str | None = Query(None, description="Exercise name, used when exercise_id is not given"),
    limit: int = Query(DEFAULT_SETS_LIMIT, ge=1, le=MAX_SETS_LIMIT),
    from_date: datetime | None = Query(None, alias="from"),
    to_date: datetime | None = Query(None, alias="to"),
):
    """Latest sets first, optionally for one exercise (by id or name) and within [from, to]."""
    target = await _resolve_exercise(db, profile, exercise_id, exercise)
    stmt = live_sets().join(Exercise, Exercise.id == SetRecord.exercise_id).where(
        Exercise.profile_id == profile.id
    )
    if target is not None:
        stmt = stmt.where(SetRecord.exercise_id == target.id)
    if from_date:
        stmt = stmt.where(SetRecord.created_at >= _utc(from_date))
    if to_date:
        stmt = stmt.where(SetRecord.created_at <= _utc(to_date))
    result = await db.execute(stmt.order_by(SetRecord.created_at.desc()).limit(limit))
    return list(result.scalars().all())


@router.post("", response_model=SetRead, status_code=201)
async def create_set(
    payload: SetCreate,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
):
    """Log a set directly (manual entry or a client-side buffer commit)."""
    exercise = await _resolve_exercise(db, profile, payload.exercise_id, payload.exercise)
    if exercise is None:
        raise ApiError(ApiErrorCode.VALIDATION_ERROR, "exercise_id or exercise is required")
    return await add_set(db, exercise, payload.reps, payload.source, payload.note)


@router.delete("/{set_id}", status_code=204)
async def delete_set(
    set_id: uuid.UUID,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
):
    """Soft-delete a set; it stops counting toward totals and history."""
    result = await db.execute(
        live_sets()
        .join(Exercise, Exercise.id == SetRecord.exercise_id)
        .where(SetRecord.id == set_id, Exercise.profile_id == profile.id)
    )
    record = result.scalar_one_or_none()
    if record is None:
        raise ApiError(ApiErrorCode.NOT_FOUND, "Set not found")
    record.deleted_at = datetime.now(timezone.utc)
    await db.flush()
    return None
