from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import ClockStatusKind, EventType


@dataclass(frozen=True)
class TimeClockEvent:
    """Domain entity: one timekeeping action, append-only.

    ``event_time`` is assigned server-side and drives all accounting;
    ``created_at`` is the insertion time and is kept for audit only.
    """

    event_id: int
    employee_id: int
    event_type: EventType
    event_time: datetime
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class ClockStatus:
    """Read-model for the time card header."""

    employee_id: int
    is_clocked_in: bool
    is_on_break: bool
    since: Optional[datetime]
    open_session_worked_millis: int = 0

    @property
    def status(self) -> ClockStatusKind:
        if self.is_on_break:
            return ClockStatusKind.ON_BREAK
        if self.is_clocked_in:
            return ClockStatusKind.CLOCKED_IN
        return ClockStatusKind.CLOCKED_OUT


@dataclass(frozen=True)
class DayOverview:
    """One day of the weekly time card."""

    work_date: date
    event_count: int
    worked_millis: int
