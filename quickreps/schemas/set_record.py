"""Set record schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from quickreps.core.constants import MAX_NOTE_LENGTH, MAX_SET_REPS, MIN_SET_REPS
from quickreps.core.enums import SetSource


class SetCreate(BaseModel):
    """Either `exercise_id` or `exercise` (the exercise name) identifies the target; the id wins."""

    exercise_id: UUID | None = None
    exercise: str | None = Field(None, min_length=1, max_length=100)
    reps: int = Field(..., ge=MIN_SET_REPS, le=MAX_SET_REPS)
    note: str | None = Field(None, max_length=MAX_NOTE_LENGTH)
    source: SetSource = SetSource.QUICKBUTTON


class SetRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    exercise_id: UUID
    reps: int
    note: str | None = None
    source: SetSource
    created_at: datetime
