from __future__ import annotations

import logging
from collections import Counter
from datetime import date, datetime, timedelta
from typing import Callable, Optional, Sequence

from ..accounting.aggregator import aggregate, aggregate_many
from ..accounting.bucketing.factory import DayBucketingFactory
from ..accounting.bucketing.split_day import SplitDayBucketing
from ..accounting.model import PeriodSummary
from ..accounting.reducer import reduce_events
from ..common.datetime_utils import now_local, start_of_day, week_days
from ..common.validators import require_positive_id
from ..core.constants import DEFAULT_STATUS_LOOKBACK_DAYS, DEFAULT_WEEK_START, ONE_DAY
from ..core.enums import EventType
from ..core.exceptions import InvalidRangeError
from .model import ClockStatus, DayOverview, TimeClockEvent
from .repository import TimeClockEventRepository

logger = logging.getLogger(__name__)


def _after_anchors(
    events: Sequence[TimeClockEvent],
    anchors: dict[int, Optional[datetime]],
) -> list[TimeClockEvent]:
    # Drop each employee's events up to and including the anchoring clock-out.
    # Relies on the repository's (event_time, event_id) order.
    cut: dict[int, int] = {}
    for i, e in enumerate(events):
        if e.event_type == EventType.CLOCK_OUT and e.event_time == anchors.get(e.employee_id):
            cut[e.employee_id] = i
    return [e for i, e in enumerate(events) if i > cut.get(e.employee_id, -1)]


class TimeClockService:
    """Records clock actions and derives status/reports from the event log.

    Recording never consults the current state: every action is appended
    as-is and sequence problems are only reported when the log is read.
    """

    def __init__(
        self,
        events: TimeClockEventRepository,
        *,
        bucketing_factory: DayBucketingFactory | None = None,
        week_start: int = DEFAULT_WEEK_START,
        status_lookback_days: int = DEFAULT_STATUS_LOOKBACK_DAYS,
        clock: Callable[[], datetime] = now_local,
    ):
        self._events = events
        self._buckets = bucketing_factory or DayBucketingFactory()
        self._week_start = int(week_start) % 7
        self._status_lookback = timedelta(days=int(status_lookback_days))
        self._clock = clock

    # -- recording -------------------------------------------------------

    def _record(self, employee_id: int, event_type: EventType, now: datetime | None) -> TimeClockEvent:
        employee_id = require_positive_id(employee_id, "employee_id")
        event_time = now or self._clock()
        event = self._events.append(employee_id=employee_id, event_type=event_type, event_time=event_time)
        logger.info(
            "recorded %s for employee %s at %s (event %s)",
            event_type.value, employee_id, event_time.isoformat(), event.event_id,
        )
        return event

    def clock_in(self, employee_id: int, *, now: datetime | None = None) -> TimeClockEvent:
        return self._record(employee_id, EventType.CLOCK_IN, now)

    def clock_out(self, employee_id: int, *, now: datetime | None = None) -> TimeClockEvent:
        return self._record(employee_id, EventType.CLOCK_OUT, now)

    def start_break(self, employee_id: int, *, now: datetime | None = None) -> TimeClockEvent:
        return self._record(employee_id, EventType.BREAK_START, now)

    def end_break(self, employee_id: int, *, now: datetime | None = None) -> TimeClockEvent:
        return self._record(employee_id, EventType.BREAK_END, now)

    # -- derived views ---------------------------------------------------

    def current_status(self, employee_id: int, *, now: datetime | None = None) -> ClockStatus:
        employee_id = require_positive_id(employee_id, "employee_id")
        now = now or self._clock()

        events = [
            e for e in self._events.fetch_events(employee_id, now - self._status_lookback, None)
            if e.event_time <= now
        ]
        state = reduce_events(events).state

        worked = 0
        if state.is_clocked_in and state.open_session_start is not None:
            session_start = state.open_session_start
            summary = aggregate(
                events,
                start=session_start,
                end=max(now, session_start),
                now=now,
                employee_id=employee_id,
            )
            worked = summary.total_worked_millis

        return ClockStatus(
            employee_id=employee_id,
            is_clocked_in=state.is_clocked_in,
            is_on_break=state.is_on_break,
            since=state.since,
            open_session_worked_millis=worked,
        )

    def _fetch_for_period(self, employee_id: Optional[int], start: datetime, end: datetime) -> Sequence[TimeClockEvent]:
        """Events needed to rebuild every session overlapping [start, end).

        A clock-out always leaves the employee clocked out with no running
        break, so replaying from each employee's last clock-out before
        ``start`` gives the same result as the full history. Employees who
        never clocked out before ``start`` need their full history.
        """
        anchors = self._events.last_clock_outs(start, employee_id)
        if not anchors:
            fetch_start = start
        elif any(t is None for t in anchors.values()):
            fetch_start = None
        else:
            fetch_start = min(anchors.values())

        if employee_id is None:
            events = self._events.fetch_all_events(fetch_start, end)
        else:
            events = self._events.fetch_events(employee_id, fetch_start, end)
        return _after_anchors(events, anchors)

    def period_report(
        self,
        employee_id: Optional[int],
        start: datetime,
        end: datetime,
        *,
        now: datetime | None = None,
        bucketing: str | None = None,
    ) -> PeriodSummary:
        """Sessions and totals for one employee, or everyone when employee_id is None."""
        if end < start:
            raise InvalidRangeError(f"Period end {end.isoformat()} is before start {start.isoformat()}")
        if employee_id is not None:
            employee_id = require_positive_id(employee_id, "employee_id")
        strategy = self._buckets.for_mode(bucketing)
        now = now or self._clock()

        events = self._fetch_for_period(employee_id, start, end)
        if employee_id is None:
            return aggregate_many(events, start=start, end=end, now=now, bucketing=strategy)
        return aggregate(events, start=start, end=end, now=now, bucketing=strategy, employee_id=employee_id)

    def today_worked_millis(self, employee_id: int, *, now: datetime | None = None) -> int:
        """Net time worked since midnight, counting an open session up to now."""
        now = now or self._clock()
        summary = self.period_report(employee_id, start_of_day(now.date()), now, now=now)
        return summary.total_worked_millis

    def week_overview(
        self,
        employee_id: int,
        *,
        day: date | None = None,
        now: datetime | None = None,
    ) -> list[DayOverview]:
        employee_id = require_positive_id(employee_id, "employee_id")
        now = now or self._clock()
        days = week_days(day or now.date(), week_start=self._week_start)
        start = start_of_day(days[0])
        end = start_of_day(days[-1]) + ONE_DAY

        events = self._fetch_for_period(employee_id, start, end)
        summary = aggregate(
            events,
            start=start,
            end=end,
            now=now,
            bucketing=SplitDayBucketing(),
            employee_id=employee_id,
        )

        counts = Counter(e.event_time.date() for e in events if start <= e.event_time < end)
        worked = {d.work_date: d.worked_millis for d in summary.daily_totals}
        return [DayOverview(work_date=d, event_count=counts.get(d, 0), worked_millis=worked.get(d, 0)) for d in days]
