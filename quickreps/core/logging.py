"""Logging setup and the in-memory handler backing the /logs endpoint."""

from __future__ import annotations

import logging
import threading
from collections import deque
from datetime import datetime, timezone

from quickreps.core.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class RecentLogHandler(logging.Handler):
    """Keeps the last `capacity` records as plain dicts for inspection over HTTP."""

    def __init__(self, capacity: int = 500, level: int = logging.NOTSET):
        super().__init__(level)
        self._records: deque[dict] = deque(maxlen=capacity)
        self._guard = threading.Lock()

    def emit(self, record: logging.LogRecord) -> None:
        try:
            entry = {
                "level": record.levelname.lower(),
                "message": record.getMessage(),
                "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
                "component": record.name,
                "error": self.formatter.formatException(record.exc_info)
                if record.exc_info and self.formatter
                else None,
            }
        except Exception:
            self.handleError(record)
            return
        with self._guard:
            self._records.append(entry)

    def get_logs(self, level: str | None = None, limit: int = 50) -> list[dict]:
        with self._guard:
            records = list(self._records)
        if level:
            records = [r for r in records if r["level"] == level.lower()]
        return records[-limit:] if limit > 0 else []

    def clear(self) -> None:
        with self._guard:
            self._records.clear()

    def resize(self, capacity: int) -> None:
        with self._guard:
            if self._records.maxlen != capacity:
                self._records = deque(self._records, maxlen=capacity)


recent_logs = RecentLogHandler()


def configure_logging(settings: Settings) -> None:
    """Attach a stream handler and the recent-records handler to the package logger."""
    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level.upper(), logging.INFO)
    package_logger = logging.getLogger("quickreps")
    package_logger.setLevel(level)

    formatter = logging.Formatter(LOG_FORMAT)
    recent_logs.setFormatter(formatter)
    recent_logs.resize(settings.log_buffer_size)

    if not any(isinstance(h, RecentLogHandler) for h in package_logger.handlers):
        package_logger.addHandler(recent_logs)
    if not any(type(h) is logging.StreamHandler for h in package_logger.handlers):
        stream = logging.StreamHandler()
        stream.setFormatter(formatter)
        package_logger.addHandler(stream)
