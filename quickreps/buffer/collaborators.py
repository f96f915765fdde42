"""Interfaces the quick-entry buffer depends on, plus the simple in-process ones."""

from __future__ import annotations

import uuid
from typing import Protocol

from quickreps.core.enums import SetSource
from quickreps.models.set_record import SetRecord
from quickreps.schemas.telemetry import TelemetryEvent


class SetsRepository(Protocol):
    async def create_set(
        self, exercise_id: uuid.UUID, reps: int, source: SetSource = SetSource.QUICKBUTTON
    ) -> SetRecord:
        """Persist a set. Raises ApiError on any failure."""
        ...

    async def list_recent_reps(self, exercise_id: uuid.UUID, limit: int) -> list[int]:
        """Reps of the latest sets, most recent first."""
        ...


class SessionProvider(Protocol):
    def current_access_token(self) -> str | None: ...


class TelemetrySink(Protocol):
    def record(self, event: TelemetryEvent) -> None: ...


class StaticSessionProvider:
    """Holds the bearer token of whoever last drove the buffer."""

    def __init__(self, token: str | None = None):
        self.token = token

    def current_access_token(self) -> str | None:
        return self.token


class NullTelemetrySink:
    def record(self, event: TelemetryEvent) -> None:
        return None
