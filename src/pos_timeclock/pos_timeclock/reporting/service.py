from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..accounting.model import PeriodSummary
from ..common.datetime_utils import format_duration, format_hours_minutes
from ..timeclock.service import TimeClockService


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]
    daily: list[dict]
    anomalies: list[dict]
    total_worked_millis: int = 0
    total_break_millis: int = 0


def _fmt(value: Optional[datetime], pattern: str = "%Y-%m-%d %H:%M") -> str:
    return value.strftime(pattern) if value else "-"


class TimeReportService:
    """Payroll review tables built on top of TimeClockService.period_report()."""

    def __init__(self, timeclock: TimeClockService):
        self._timeclock = timeclock

    def build_time_report(
        self,
        *,
        start: datetime,
        end: datetime,
        employee_id: Optional[int] = None,
        now: Optional[datetime] = None,
        bucketing: Optional[str] = None,
    ) -> ReportData:
        period = self._timeclock.period_report(employee_id, start, end, now=now, bucketing=bucketing)
        return self.to_report_data(period)

    def to_report_data(self, period: PeriodSummary) -> ReportData:
        out_rows: list[dict] = []
        summary_map: dict[int, dict] = {}

        for s in period.sessions:
            out_rows.append(
                {
                    "employee_id": s.employee_id,
                    "work_date": s.work_date.strftime("%Y-%m-%d"),
                    "clock_in": _fmt(s.session_start, "%H:%M"),
                    "clock_out": "-" if s.is_open else _fmt(s.session_end, "%H:%M"),
                    "session_start": s.session_start.isoformat(),
                    "session_end": s.session_end.isoformat(),
                    "is_open": s.is_open,
                    "breaks": [
                        {"start": b.start.isoformat(), "end": b.end.isoformat()} for b in s.break_intervals
                    ],
                    "break_millis": s.break_millis,
                    "net_worked_millis": s.net_worked_millis,
                    "worked_hours": format_hours_minutes(s.net_worked_millis),
                    "duration": format_duration(s.net_worked_millis),
                    "clamped": s.clamped,
                }
            )

            row = summary_map.get(s.employee_id)
            if not row:
                row = {"employee_id": s.employee_id, "sessions": 0, "total_millis": 0, "break_millis": 0}
                summary_map[s.employee_id] = row
            row["sessions"] += 1
            row["total_millis"] += s.net_worked_millis
            row["break_millis"] += s.break_millis

        summary = []
        for row in summary_map.values():
            summary.append(
                {
                    "employee_id": row["employee_id"],
                    "sessions": row["sessions"],
                    "total_worked_millis": row["total_millis"],
                    "total_break_millis": row["break_millis"],
                    "total_hours": format_hours_minutes(row["total_millis"]),
                }
            )
        summary.sort(key=lambda x: (-x["total_worked_millis"], x["employee_id"]))

        daily = [
            {
                "employee_id": d.employee_id,
                "work_date": d.work_date.strftime("%Y-%m-%d"),
                "worked_millis": d.worked_millis,
                "break_millis": d.break_millis,
                "worked_hours": format_hours_minutes(d.worked_millis),
            }
            for d in period.daily_totals
        ]

        anomalies = [
            {
                "event_id": a.event_id,
                "employee_id": a.employee_id,
                "event_time": a.event_time.isoformat(),
                "anomaly_kind": a.kind.value,
                "reason": a.reason,
            }
            for a in period.anomalies
        ]

        return ReportData(
            rows=out_rows,
            summary=summary,
            daily=daily,
            anomalies=anomalies,
            total_worked_millis=period.total_worked_millis,
            total_break_millis=period.total_break_millis,
        )
