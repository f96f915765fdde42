from datetime import datetime, timedelta, timezone

import pytest

from quickreps.services.day_bounds import day_bounds, validate_timezone

UTC = timezone.utc


def test_moscow_evening_belongs_to_next_local_day():
    # 22:30Z is 01:30 on the 20th in Moscow (UTC+3)
    start, end = day_bounds("Europe/Moscow", datetime(2026, 10, 19, 22, 30, tzinfo=UTC))
    assert start == datetime(2026, 10, 19, 21, 0, tzinfo=UTC)
    assert end == datetime(2026, 10, 20, 21, 0, tzinfo=UTC)


def test_naive_input_is_treated_as_utc():
    aware = day_bounds("Europe/Moscow", datetime(2026, 10, 19, 12, 0, tzinfo=UTC))
    naive = day_bounds("Europe/Moscow", datetime(2026, 10, 19, 12, 0))
    assert aware == naive


def test_dst_start_day_is_23_hours():
    start, end = day_bounds("America/New_York", datetime(2026, 3, 8, 12, 0, tzinfo=UTC))
    assert end - start == timedelta(hours=23)


def test_dst_end_day_is_25_hours():
    start, end = day_bounds("America/New_York", datetime(2026, 11, 1, 12, 0, tzinfo=UTC))
    assert end - start == timedelta(hours=25)


def test_bounds_are_utc():
    start, end = day_bounds("Asia/Tokyo")
    assert start.utcoffset() == timedelta(0)
    assert start <= datetime.now(UTC) < end


def test_validate_timezone():
    assert validate_timezone("Europe/Moscow") == "Europe/Moscow"
    with pytest.raises(ValueError):
        validate_timezone("Mars/Olympus")
