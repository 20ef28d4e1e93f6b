from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime
from typing import Iterable, Optional

from ..common.datetime_utils import to_millis
from ..core.exceptions import InvalidRangeError
from ..timeclock.model import TimeClockEvent
from .anomalies import anomalies_in_period
from .bucketing.base import DayBucketing
from .bucketing.start_day import StartDayBucketing
from .model import BreakInterval, DailyTotal, PeriodSummary, Session, SessionReport
from .reducer import reduce_events

logger = logging.getLogger(__name__)


def _check_range(start: datetime, end: datetime) -> None:
    if end < start:
        raise InvalidRangeError(f"Period end {end.isoformat()} is before start {start.isoformat()}")


def _clip_session(
    session: Session,
    *,
    start: datetime,
    end: datetime,
    now: datetime,
) -> Optional[tuple[datetime, datetime, tuple[BreakInterval, ...], bool]]:
    """Clip a session and its breaks to [start, end); None when outside it.

    Open sessions run until ``now``; open breaks run until the session end.
    The last item is True when the session had to be clamped to zero length.
    """
    raw_end = session.end if session.end is not None else now

    if session.start >= end:
        return None
    if session.start < start and raw_end <= start:
        return None

    clipped_start = max(session.start, start)
    clipped_end = min(raw_end, end)
    clamped = clipped_end < clipped_start
    if clamped:
        logger.warning(
            "session for employee %s starting %s ends before it starts (end=%s); counting zero",
            session.employee_id, session.start.isoformat(), raw_end.isoformat(),
        )
        clipped_end = clipped_start

    breaks: list[BreakInterval] = []
    for b in session.breaks:
        b_end = b.end if b.end is not None else raw_end
        lo = max(b.start, clipped_start)
        hi = min(b_end, clipped_end)
        if hi > lo:
            breaks.append(BreakInterval(start=lo, end=hi))
    return clipped_start, clipped_end, tuple(breaks), clamped


def aggregate(
    events: Iterable[TimeClockEvent],
    *,
    start: datetime,
    end: datetime,
    now: datetime,
    bucketing: Optional[DayBucketing] = None,
    employee_id: Optional[int] = None,
) -> PeriodSummary:
    """Net worked and break time for one employee over [start, end).

    Sessions still open are closed at ``now`` and every session is clipped
    to the period. Net worked time is floored at zero. Only anomalies whose
    event falls inside the period are returned.
    """
    _check_range(start, end)
    if end == start:
        return PeriodSummary(employee_id=employee_id, start=start, end=end)
    bucketing = bucketing or StartDayBucketing()

    fold = reduce_events(events)

    sessions: list[SessionReport] = []
    daily: dict[tuple[int, date], list[int]] = defaultdict(lambda: [0, 0])
    total_worked = 0
    total_break = 0

    for session in fold.sessions:
        clipped = _clip_session(session, start=start, end=end, now=now)
        if clipped is None:
            continue
        s_start, s_end, breaks, clamped = clipped

        break_millis = sum(to_millis(b.end - b.start) for b in breaks)
        net = to_millis(s_end - s_start) - break_millis
        if net < 0:
            logger.warning(
                "negative net time (%s ms) for employee %s session at %s; flooring to zero",
                net, session.employee_id, session.start.isoformat(),
            )
            net = 0
            clamped = True

        sessions.append(
            SessionReport(
                employee_id=session.employee_id,
                session_start=s_start,
                session_end=s_end,
                is_open=session.is_open,
                work_date=s_start.date(),
                break_intervals=breaks,
                break_millis=break_millis,
                net_worked_millis=net,
                clamped=clamped,
            )
        )
        total_worked += net
        total_break += break_millis

        for share in bucketing.split(start=s_start, end=s_end, breaks=breaks):
            bucket = daily[(session.employee_id, share.work_date)]
            bucket[0] += share.worked_millis
            bucket[1] += share.break_millis

    daily_totals = tuple(
        DailyTotal(employee_id=emp, work_date=day, worked_millis=v[0], break_millis=v[1])
        for (emp, day), v in sorted(daily.items(), key=lambda item: (item[0][1], item[0][0]))
    )

    if employee_id is None and sessions:
        employee_id = sessions[0].employee_id

    return PeriodSummary(
        employee_id=employee_id,
        start=start,
        end=end,
        sessions=tuple(sessions),
        daily_totals=daily_totals,
        total_worked_millis=total_worked,
        total_break_millis=total_break,
        anomalies=anomalies_in_period(fold.anomalies, start=start, end=end),
    )


def aggregate_many(
    events: Iterable[TimeClockEvent],
    *,
    start: datetime,
    end: datetime,
    now: datetime,
    bucketing: Optional[DayBucketing] = None,
) -> PeriodSummary:
    """Same as aggregate() for a mixed list of employees, merged."""
    _check_range(start, end)

    by_employee: dict[int, list[TimeClockEvent]] = defaultdict(list)
    for event in events:
        by_employee[event.employee_id].append(event)

    parts = [
        aggregate(evts, start=start, end=end, now=now, bucketing=bucketing, employee_id=emp)
        for emp, evts in sorted(by_employee.items())
    ]

    return PeriodSummary(
        employee_id=None,
        start=start,
        end=end,
        sessions=tuple(sorted((s for p in parts for s in p.sessions), key=lambda s: (s.session_start, s.employee_id))),
        daily_totals=tuple(
            sorted((d for p in parts for d in p.daily_totals), key=lambda d: (d.work_date, d.employee_id))
        ),
        total_worked_millis=sum(p.total_worked_millis for p in parts),
        total_break_millis=sum(p.total_break_millis for p in parts),
        anomalies=tuple(
            sorted((a for p in parts for a in p.anomalies), key=lambda a: (a.event_time, a.event_id))
        ),
    )
