from __future__ import annotations

from datetime import date, datetime, time, timedelta

from ..core.constants import ONE_DAY, ONE_MILLISECOND


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def to_millis(delta: timedelta) -> int:
    """Whole milliseconds in a timedelta (truncates sub-millisecond parts)."""
    return delta // ONE_MILLISECOND


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """Half-open [midnight, next midnight) for a calendar day."""
    start = start_of_day(day)
    return start, start + ONE_DAY


def week_days(day: date, *, week_start: int) -> list[date]:
    """The seven dates of the week containing ``day``.

    ``week_start`` uses ``date.weekday()`` numbering (0 = Monday, 6 = Sunday).
    """
    offset = (day.weekday() - week_start) % 7
    first = day - timedelta(days=offset)
    return [first + timedelta(days=i) for i in range(7)]


def format_hours_minutes(millis: int) -> str:
    """``HH:MM`` used by the payroll tables."""
    minutes = max(int(millis), 0) // 60000
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def format_duration(millis: int) -> str:
    """``H:MM:SS`` used by the live time card; negative values show as zero."""
    total_seconds = max(int(millis), 0) // 1000
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60
    return f"{hours}:{minutes:02d}:{seconds:02d}"
