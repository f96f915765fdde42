"""Lightweight client telemetry: events are only logged server side."""

from fastapi import APIRouter, Response

from quickreps.schemas.telemetry import TelemetryEvent
from quickreps.services.telemetry import LoggingTelemetrySink

router = APIRouter()
sink = LoggingTelemetrySink()


@router.post("", status_code=204)
async def record_event(payload: TelemetryEvent):
    sink.record(payload)
    return Response(status_code=204)
