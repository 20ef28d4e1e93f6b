from __future__ import annotations

from datetime import datetime
from typing import Optional

import pytest

from src.pos_timeclock.pos_timeclock.core.enums import EventType
from src.pos_timeclock.pos_timeclock.timeclock.model import TimeClockEvent


class InMemoryTimeClockEvents:
    """Test double for TimeClockEventRepository (same ordering/bounds rules)."""

    def __init__(self, events=()):
        self._events: list[TimeClockEvent] = list(events)
        self._id = max((e.event_id for e in self._events), default=0)
        self.fetch_calls: list[dict] = []
        self.anchor_calls: list[dict] = []

    @staticmethod
    def _in_window(e: TimeClockEvent, start: Optional[datetime], end: Optional[datetime]) -> bool:
        if start is not None and e.event_time < start:
            return False
        if end is not None and e.event_time >= end:
            return False
        return True

    def fetch_events(self, employee_id: int, start: Optional[datetime] = None, end: Optional[datetime] = None):
        self.fetch_calls.append({"employee_id": employee_id, "start": start, "end": end})
        items = [e for e in self._events if e.employee_id == employee_id and self._in_window(e, start, end)]
        return sorted(items, key=lambda e: (e.event_time, e.event_id))

    def fetch_all_events(self, start: Optional[datetime] = None, end: Optional[datetime] = None):
        self.fetch_calls.append({"employee_id": None, "start": start, "end": end})
        items = [e for e in self._events if self._in_window(e, start, end)]
        return sorted(items, key=lambda e: (e.event_time, e.event_id))

    def last_clock_outs(self, before: datetime, employee_id: Optional[int] = None):
        self.anchor_calls.append({"employee_id": employee_id, "before": before})
        anchors: dict[int, Optional[datetime]] = {}
        for e in self._events:
            if e.event_time >= before or (employee_id is not None and e.employee_id != employee_id):
                continue
            last = anchors.get(e.employee_id)
            if e.event_type == EventType.CLOCK_OUT and (last is None or e.event_time > last):
                anchors[e.employee_id] = e.event_time
            else:
                anchors.setdefault(e.employee_id, None)
        return anchors

    def append(self, *, employee_id: int, event_type: EventType, event_time: datetime) -> TimeClockEvent:
        self._id += 1
        event = TimeClockEvent(
            event_id=self._id,
            employee_id=employee_id,
            event_type=event_type,
            event_time=event_time,
            created_at=event_time,
        )
        self._events.append(event)
        return event

    def add(self, employee_id: int, event_type: str, event_time: datetime) -> TimeClockEvent:
        return self.append(employee_id=employee_id, event_type=EventType(event_type), event_time=event_time)

    @property
    def events(self) -> list[TimeClockEvent]:
        return list(self._events)


@pytest.fixture
def fixed_now() -> datetime:
    # Monday
    return datetime(2025, 1, 6, 10, 0, 0)


@pytest.fixture
def event_repo() -> InMemoryTimeClockEvents:
    return InMemoryTimeClockEvents()
