"""Today's totals per exercise, bucketed by the profile's local day."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from quickreps.models.exercise import Exercise
from quickreps.models.profile import Profile
from quickreps.schemas.summary import ExerciseTotal, TodaySummary
from quickreps.services.day_bounds import day_bounds
from quickreps.services.sets import total_reps


async def today_summary(
    db: AsyncSession,
    profile: Profile,
    tz_name: str | None = None,
    at: datetime | None = None,
) -> TodaySummary:
    tz_name = tz_name or profile.timezone
    start, end = day_bounds(tz_name, at)
    result = await db.execute(
        select(Exercise).where(Exercise.profile_id == profile.id).order_by(Exercise.created_at)
    )
    totals = [
        ExerciseTotal(
            exercise_id=exercise.id,
            type=exercise.type,
            goal=exercise.goal,
            total=await total_reps(db, exercise.id, start, end),
        )
        for exercise in result.scalars().all()
    ]
    return TodaySummary(
        timezone=tz_name,
        day_start=start,
        day_end=end,
        exercises=totals,
        total=sum(t.total for t in totals),
    )


async def today_total(db: AsyncSession, profile: Profile, exercise: Exercise, at: datetime | None = None) -> int:
    start, end = day_bounds(profile.timezone, at)
    return await total_reps(db, exercise.id, start, end)
