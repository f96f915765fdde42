"""Exercise CRUD endpoints (scoped to the current profile)."""

import logging
import uuid

from fastapi import APIRouter, Depends
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from quickreps.api.v1.deps import get_current_profile, get_registry
from quickreps.buffer.registry import BufferRegistry
from quickreps.core.constants import DEFAULT_EXERCISE_GOAL, DEFAULT_EXERCISE_TYPES
from quickreps.core.enums import ApiErrorCode
from quickreps.core.errors import ApiError
from quickreps.db.session import get_db
from quickreps.models.exercise import Exercise
from quickreps.models.profile import Profile
from quickreps.models.set_record import SetRecord
from quickreps.schemas.exercise import ExerciseCreate, ExerciseRead, ExerciseUpdate
from quickreps.services.sets import get_owned_exercise

logger = logging.getLogger(__name__)
router = APIRouter()


async def _ensure_unique_type(
    db: AsyncSession, profile_id: uuid.UUID, type_: str, exclude_id: uuid.UUID | None = None
) -> None:
    """Exercise names are unique per profile, ignoring case."""
    stmt = select(Exercise.id).where(
        Exercise.profile_id == profile_id, func.lower(Exercise.type) == type_.lower()
    )
    if exclude_id is not None:
        stmt = stmt.where(Exercise.id != exclude_id)
    result = await db.execute(stmt.limit(1))
    if result.scalar_one_or_none() is not None:
        raise ApiError(ApiErrorCode.CONFLICT, "Exercise with this name already exists")


@router.get("", response_model=list[ExerciseRead])
async def list_exercises(
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
):
    """List the profile's exercises, oldest first."""
    result = await db.execute(
        select(Exercise).where(Exercise.profile_id == profile.id).order_by(Exercise.created_at)
    )
    return list(result.scalars().all())


@router.post("", response_model=ExerciseRead, status_code=201)
async def create_exercise(
    payload: ExerciseCreate,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
):
    await _ensure_unique_type(db, profile.id, payload.type)
    exercise = Exercise(profile_id=profile.id, **payload.model_dump())
    db.add(exercise)
    await db.flush()
    await db.refresh(exercise)
    return exercise


@router.post("/defaults", response_model=list[ExerciseRead], status_code=201)
async def create_default_exercises(
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
):
    """Create pullups / pushups / squats (goal 100), skipping names the profile already has."""
    result = await db.execute(select(func.lower(Exercise.type)).where(Exercise.profile_id == profile.id))
    existing = set(result.scalars().all())
    created = [
        Exercise(profile_id=profile.id, type=t, goal=DEFAULT_EXERCISE_GOAL)
        for t in DEFAULT_EXERCISE_TYPES
        if t not in existing
    ]
    db.add_all(created)
    await db.flush()
    for exercise in created:
        await db.refresh(exercise)
    return created


@router.get("/{exercise_id}", response_model=ExerciseRead)
async def get_exercise(
    exercise_id: uuid.UUID,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
):
    return await get_owned_exercise(db, profile.id, exercise_id)


@router.put("/{exercise_id}", response_model=ExerciseRead)
async def update_exercise(
    exercise_id: uuid.UUID,
    payload: ExerciseUpdate,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
):
    """Rename an exercise and/or change its goal."""
    exercise = await get_owned_exercise(db, profile.id, exercise_id)
    if exercise.type.lower() != payload.type.lower():
        await _ensure_unique_type(db, profile.id, payload.type, exclude_id=exercise.id)
    exercise.type = payload.type
    exercise.goal = payload.goal
    await db.flush()
    await db.refresh(exercise)
    return exercise


@router.delete("/{exercise_id}", status_code=204)
async def delete_exercise(
    exercise_id: uuid.UUID,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
    registry: BufferRegistry = Depends(get_registry),
):
    """Delete an exercise. Refused while it still has sets; its quick-entry buffer is torn down."""
    exercise = await get_owned_exercise(db, profile.id, exercise_id)
    live = await db.execute(
        select(SetRecord.id)
        .where(SetRecord.exercise_id == exercise.id, SetRecord.deleted_at.is_(None))
        .limit(1)
    )
    if live.scalar_one_or_none() is not None:
        raise ApiError(
            ApiErrorCode.CONFLICT, "Cannot delete exercise with existing sets. Please delete all sets first."
        )
    registry.discard(exercise.id)
    await db.execute(delete(SetRecord).where(SetRecord.exercise_id == exercise.id))
    await db.execute(delete(Exercise).where(Exercise.id == exercise.id))
    logger.info("Deleted exercise %s", exercise.id)
    return None
