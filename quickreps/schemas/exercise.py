"""Exercise schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from quickreps.core.constants import EXERCISE_TYPE_PATTERN, MAX_GOAL, MIN_GOAL


class ExerciseBase(BaseModel):
    type: str = Field(..., min_length=2, max_length=100, pattern=EXERCISE_TYPE_PATTERN)
    goal: int = Field(..., ge=MIN_GOAL, le=MAX_GOAL)

    @field_validator("type")
    @classmethod
    def _strip(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("type must have at least 2 non-space characters")
        return v


class ExerciseCreate(ExerciseBase):
    pass


class ExerciseUpdate(ExerciseBase):
    pass


class ExerciseRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    type: str
    goal: int
    created_at: datetime
