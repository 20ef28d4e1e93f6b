from __future__ import annotations

from datetime import date, timedelta

import pytest

from src.pos_timeclock.pos_timeclock.common.datetime_utils import (
    day_bounds,
    format_duration,
    format_hours_minutes,
    to_millis,
    week_days,
)
from src.pos_timeclock.pos_timeclock.common.validators import (
    optional_positive_id,
    require_iso_date,
    require_positive_id,
)
from src.pos_timeclock.pos_timeclock.core.exceptions import ValidationError


def test_to_millis_truncates_microseconds():
    assert to_millis(timedelta(hours=1, microseconds=999)) == 3_600_000


def test_format_helpers():
    assert format_hours_minutes(27_000_000) == "07:30"
    assert format_hours_minutes(-5) == "00:00"
    assert format_duration(27_000_000) == "7:30:00"
    assert format_duration(90_061_000) == "25:01:01"
    assert format_duration(-1000) == "0:00:00"


def test_week_days_from_sunday():
    days = week_days(date(2025, 1, 8), week_start=6)

    assert days[0] == date(2025, 1, 5)
    assert days[-1] == date(2025, 1, 11)


def test_week_days_when_day_is_week_start():
    assert week_days(date(2025, 1, 5), week_start=6)[0] == date(2025, 1, 5)


def test_day_bounds_are_half_open():
    start, end = day_bounds(date(2025, 1, 6))

    assert end - start == timedelta(days=1)
    assert start.date() == date(2025, 1, 6)


def test_id_validators():
    assert require_positive_id("12", "employee_id") == 12
    assert optional_positive_id(None, "employee_id") is None
    assert optional_positive_id("  ", "employee_id") is None
    for bad in ("0", "-3", "x", None):
        with pytest.raises(ValidationError):
            require_positive_id(bad, "employee_id")


def test_require_iso_date():
    assert require_iso_date(" 2025-01-06 ", "start") == date(2025, 1, 6)
    with pytest.raises(ValidationError):
        require_iso_date("06/01/2025", "start")
    with pytest.raises(ValidationError):
        require_iso_date("", "start")
