"""Timezone-aware day boundaries for "today" totals."""

from datetime import datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def validate_timezone(name: str) -> str:
    """Return `name` if it is a known IANA zone, else raise ValueError."""
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"Unknown timezone: {name}") from e
    return name


def day_bounds(tz_name: str, at: datetime | None = None) -> tuple[datetime, datetime]:
    """
    Return (start, end) in UTC of the local calendar day containing `at` in `tz_name`.
    start is local midnight, end is the next local midnight (exclusive), so DST days
    are 23 or 25 hours long.
    """
    tz = ZoneInfo(tz_name)
    at = at or datetime.now(timezone.utc)
    if at.tzinfo is None:
        at = at.replace(tzinfo=timezone.utc)
    local_day = at.astimezone(tz).date()
    start = datetime.combine(local_day, time.min, tzinfo=tz)
    end = datetime.combine(local_day + timedelta(days=1), time.min, tzinfo=tz)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)
