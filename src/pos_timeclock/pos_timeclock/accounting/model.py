from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AnomalyKind


@dataclass(frozen=True)
class BreakInterval:
    start: datetime
    end: Optional[datetime] = None


@dataclass(frozen=True)
class Session:
    """A clock-in with its matching clock-out (``end`` is None while open)."""

    employee_id: int
    start: datetime
    end: Optional[datetime]
    breaks: tuple[BreakInterval, ...]
    clock_in_event_id: int
    clock_out_event_id: Optional[int] = None

    @property
    def is_open(self) -> bool:
        return self.end is None


@dataclass(frozen=True)
class ClockState:
    is_clocked_in: bool = False
    is_on_break: bool = False
    open_session_start: Optional[datetime] = None
    open_break_start: Optional[datetime] = None

    @property
    def since(self) -> Optional[datetime]:
        if self.is_on_break:
            return self.open_break_start
        return self.open_session_start


@dataclass(frozen=True)
class Anomaly:
    event_id: int
    employee_id: int
    event_time: datetime
    kind: AnomalyKind
    reason: str


@dataclass(frozen=True)
class FoldResult:
    state: ClockState
    sessions: tuple[Session, ...]
    anomalies: tuple[Anomaly, ...]


@dataclass(frozen=True)
class SessionReport:
    """A session as seen through a reporting period (clipped to it).

    ``clamped`` marks sessions whose times were inconsistent (ending before
    they start, or more break than session) and were counted as zero.
    """

    employee_id: int
    session_start: datetime
    session_end: datetime
    is_open: bool
    work_date: date
    break_intervals: tuple[BreakInterval, ...]
    break_millis: int
    net_worked_millis: int
    clamped: bool = False


@dataclass(frozen=True)
class DailyTotal:
    employee_id: int
    work_date: date
    worked_millis: int
    break_millis: int


@dataclass(frozen=True)
class PeriodSummary:
    employee_id: Optional[int]
    start: datetime
    end: datetime
    sessions: tuple[SessionReport, ...] = ()
    daily_totals: tuple[DailyTotal, ...] = ()
    total_worked_millis: int = 0
    total_break_millis: int = 0
    anomalies: tuple[Anomaly, ...] = ()
