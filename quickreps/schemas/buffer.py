"""Quick-entry buffer schemas."""

from uuid import UUID

from pydantic import BaseModel, Field

from quickreps.core.enums import BufferMessageKind


class TapRequest(BaseModel):
    amount: int = Field(..., ge=-1000, le=1000)


class BufferMessageRead(BaseModel):
    kind: BufferMessageKind
    text: str


class BufferRead(BaseModel):
    exercise_id: UUID
    value: int
    is_active: bool
    time_left_seconds: int
    accepted: bool | None = None
    message: BufferMessageRead | None = None
    suggestions: list[int] = []
    today_total: int = 0
