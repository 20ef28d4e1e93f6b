from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional

from ..core.enums import AnomalyKind, EventType
from ..timeclock.model import TimeClockEvent
from .model import Anomaly, BreakInterval, ClockState, FoldResult, Session

logger = logging.getLogger(__name__)


def sort_events(events: Iterable[TimeClockEvent]) -> list[TimeClockEvent]:
    """Stable chronological order; ties fall back to insertion id."""
    return sorted(events, key=lambda e: (e.event_time, e.event_id))


class _Fold:
    """Mutable accumulator for a single reduce_events() call."""

    def __init__(self) -> None:
        self.session_start: Optional[TimeClockEvent] = None
        self.break_start: Optional[datetime] = None
        self.breaks: list[BreakInterval] = []
        self.sessions: list[Session] = []
        self.anomalies: list[Anomaly] = []

    def flag(self, event: TimeClockEvent, kind: AnomalyKind, reason: str) -> None:
        logger.warning(
            "time clock anomaly %s: employee=%s event=%s at %s (%s)",
            kind.value, event.employee_id, event.event_id, event.event_time.isoformat(), reason,
        )
        self.anomalies.append(
            Anomaly(
                event_id=event.event_id,
                employee_id=event.employee_id,
                event_time=event.event_time,
                kind=kind,
                reason=reason,
            )
        )

    def clock_in(self, event: TimeClockEvent) -> None:
        if self.session_start is not None:
            self.flag(
                event,
                AnomalyKind.DOUBLE_CLOCK_IN,
                f"session already open since {self.session_start.event_time.isoformat()}",
            )
            return
        self.session_start = event
        self.break_start = None
        self.breaks = []

    def clock_out(self, event: TimeClockEvent) -> None:
        if self.session_start is None:
            self.flag(event, AnomalyKind.ORPHAN_CLOCK_OUT, "clock-out without an open session")
            return
        if self.break_start is not None:
            # Clocking out ends the running break.
            self.breaks.append(BreakInterval(start=self.break_start, end=event.event_time))
            self.break_start = None
        self.sessions.append(
            Session(
                employee_id=self.session_start.employee_id,
                start=self.session_start.event_time,
                end=event.event_time,
                breaks=tuple(self.breaks),
                clock_in_event_id=self.session_start.event_id,
                clock_out_event_id=event.event_id,
            )
        )
        self.session_start = None
        self.breaks = []

    def break_begin(self, event: TimeClockEvent) -> None:
        if self.session_start is None:
            self.flag(event, AnomalyKind.ORPHAN_BREAK_START, "break-start without an open session")
            return
        if self.break_start is not None:
            self.flag(
                event,
                AnomalyKind.DOUBLE_BREAK_START,
                f"break already running since {self.break_start.isoformat()}",
            )
            return
        self.break_start = event.event_time

    def break_finish(self, event: TimeClockEvent) -> None:
        if self.break_start is None:
            self.flag(event, AnomalyKind.ORPHAN_BREAK_END, "break-end without a running break")
            return
        self.breaks.append(BreakInterval(start=self.break_start, end=event.event_time))
        self.break_start = None

    def result(self) -> FoldResult:
        sessions = list(self.sessions)
        if self.session_start is None:
            state = ClockState()
        else:
            open_breaks = list(self.breaks)
            if self.break_start is not None:
                open_breaks.append(BreakInterval(start=self.break_start, end=None))
            sessions.append(
                Session(
                    employee_id=self.session_start.employee_id,
                    start=self.session_start.event_time,
                    end=None,
                    breaks=tuple(open_breaks),
                    clock_in_event_id=self.session_start.event_id,
                )
            )
            state = ClockState(
                is_clocked_in=True,
                is_on_break=self.break_start is not None,
                open_session_start=self.session_start.event_time,
                open_break_start=self.break_start,
            )
        return FoldResult(state=state, sessions=tuple(sessions), anomalies=tuple(self.anomalies))


def reduce_events(events: Iterable[TimeClockEvent]) -> FoldResult:
    """Fold one employee's events into status, sessions and anomalies.

    Malformed sequences never raise: offending events are skipped and
    reported as anomalies, and the best-effort state is returned. The
    first clock-in of a doubled pair stays authoritative.
    """
    fold = _Fold()
    handlers = {
        EventType.CLOCK_IN: fold.clock_in,
        EventType.CLOCK_OUT: fold.clock_out,
        EventType.BREAK_START: fold.break_begin,
        EventType.BREAK_END: fold.break_finish,
    }
    for event in sort_events(events):
        handlers[event.event_type](event)
    return fold.result()


def current_state(events: Iterable[TimeClockEvent]) -> ClockState:
    return reduce_events(events).state
