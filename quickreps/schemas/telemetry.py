"""Telemetry and log inspection schemas."""

from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class TelemetryEvent(BaseModel):
    event: str = Field(..., min_length=1, max_length=100)
    exercise_id: UUID | None = None
    reps: int | None = None
    extra: dict[str, Any] = {}


class LogEntry(BaseModel):
    level: str
    message: str
    timestamp: str
    component: str | None = None
    error: str | None = None
