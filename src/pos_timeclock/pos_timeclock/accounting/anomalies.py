from __future__ import annotations

from datetime import datetime
from typing import Iterable, Sequence

from ..timeclock.model import TimeClockEvent
from .model import Anomaly
from .reducer import reduce_events


def detect_anomalies(events: Iterable[TimeClockEvent]) -> tuple[Anomaly, ...]:
    """Grammar violations in one employee's events, in chronological order."""
    anomalies = reduce_events(events).anomalies
    return tuple(sorted(anomalies, key=lambda a: (a.event_time, a.event_id)))


def anomalies_in_period(anomalies: Sequence[Anomaly], *, start: datetime, end: datetime) -> tuple[Anomaly, ...]:
    return tuple(a for a in anomalies if start <= a.event_time < end)
