from __future__ import annotations

from datetime import date, datetime, time

from src.pos_timeclock.pos_timeclock.accounting.anomalies import anomalies_in_period, detect_anomalies
from src.pos_timeclock.pos_timeclock.core.enums import AnomalyKind, EventType
from src.pos_timeclock.pos_timeclock.timeclock.model import TimeClockEvent

DAY = date(2025, 1, 6)


def at(hour: int, minute: int = 0) -> datetime:
    return datetime.combine(DAY, time(hour, minute))


def ev(event_id: int, event_type: str, when: datetime, employee_id: int = 4) -> TimeClockEvent:
    return TimeClockEvent(event_id=event_id, employee_id=employee_id, event_type=EventType(event_type), event_time=when)


def test_double_clock_in_references_second_event():
    anomalies = detect_anomalies([ev(10, "clock-in", at(9)), ev(11, "clock-in", at(9, 5))])

    assert len(anomalies) == 1
    anomaly = anomalies[0]
    assert anomaly.kind == AnomalyKind.DOUBLE_CLOCK_IN
    assert anomaly.event_id == 11
    assert anomaly.employee_id == 4
    assert anomaly.event_time == at(9, 5)


def test_every_kind_is_detected_in_chronological_order():
    events = [
        ev(1, "break-end", at(7)),
        ev(2, "clock-out", at(7, 30)),
        ev(3, "break-start", at(7, 45)),
        ev(4, "clock-in", at(8)),
        ev(5, "clock-in", at(8, 5)),
        ev(6, "break-start", at(10)),
        ev(7, "break-start", at(10, 5)),
        ev(8, "break-end", at(10, 15)),
        ev(9, "clock-out", at(16)),
    ]

    kinds = [(a.event_id, a.kind) for a in detect_anomalies(events)]

    assert kinds == [
        (1, AnomalyKind.ORPHAN_BREAK_END),
        (2, AnomalyKind.ORPHAN_CLOCK_OUT),
        (3, AnomalyKind.ORPHAN_BREAK_START),
        (5, AnomalyKind.DOUBLE_CLOCK_IN),
        (7, AnomalyKind.DOUBLE_BREAK_START),
    ]


def test_well_formed_day_has_no_anomalies():
    events = [
        ev(1, "clock-in", at(9)),
        ev(2, "break-start", at(12)),
        ev(3, "break-end", at(12, 30)),
        ev(4, "clock-out", at(17)),
    ]

    assert detect_anomalies(events) == ()


def test_detection_does_not_touch_input():
    events = [ev(2, "clock-out", at(17)), ev(1, "clock-out", at(9))]
    snapshot = list(events)

    detect_anomalies(events)

    assert events == snapshot


def test_period_filter_is_half_open():
    anomalies = detect_anomalies([ev(1, "clock-out", at(8)), ev(2, "clock-out", at(12))])

    kept = anomalies_in_period(anomalies, start=at(8), end=at(12))

    assert [a.event_id for a in kept] == [1]
