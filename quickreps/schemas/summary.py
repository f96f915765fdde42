"""Today summary schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class ExerciseTotal(BaseModel):
    exercise_id: UUID
    type: str
    goal: int
    total: int


class TodaySummary(BaseModel):
    timezone: str
    day_start: datetime
    day_end: datetime
    exercises: list[ExerciseTotal] = []
    total: int = 0
