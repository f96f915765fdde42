"""Telemetry sink that writes events to the log."""

import logging

from quickreps.schemas.telemetry import TelemetryEvent

logger = logging.getLogger("quickreps.telemetry")


class LoggingTelemetrySink:
    """Best-effort: events go to the `quickreps.telemetry` logger and nowhere else."""

    def record(self, event: TelemetryEvent) -> None:
        logger.info("[telemetry] %s", event.model_dump_json(exclude_none=True))
