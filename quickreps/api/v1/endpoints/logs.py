"""Recent in-process log records, for debugging a running instance."""

from typing import Literal

from fastapi import APIRouter, Query

from quickreps.core.logging import recent_logs
from quickreps.schemas.telemetry import LogEntry

router = APIRouter()

LogLevel = Literal["debug", "info", "warning", "error", "critical"]


@router.get("", response_model=list[LogEntry])
async def get_logs(level: LogLevel | None = None, limit: int = Query(50, ge=1, le=1000)):
    return recent_logs.get_logs(level, limit)


@router.delete("")
async def clear_logs():
    recent_logs.clear()
    return {"success": True}
