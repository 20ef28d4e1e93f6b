from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import EventType
from .model import TimeClockEvent


class TimeClockEventRepository(Protocol):
    """Append-only store of clock events.

    Reads return events ascending by (event_time, event_id); ``start`` is
    inclusive and ``end`` exclusive.
    """

    def fetch_events(
        self,
        employee_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[TimeClockEvent]:
        raise NotImplementedError

    def fetch_all_events(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[TimeClockEvent]:
        raise NotImplementedError

    def last_clock_outs(
        self,
        before: datetime,
        employee_id: Optional[int] = None,
    ) -> dict[int, Optional[datetime]]:
        """Latest clock-out time before ``before`` per employee with earlier events.

        Employees that have events before ``before`` but never clocked out map
        to None. Employees with no earlier events are left out.
        """

        raise NotImplementedError

    def append(self, *, employee_id: int, event_type: EventType, event_time: datetime) -> TimeClockEvent:
        """Insert one event unconditionally and return it with its new id."""

        raise NotImplementedError
