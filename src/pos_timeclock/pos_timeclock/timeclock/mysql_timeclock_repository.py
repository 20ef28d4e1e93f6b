from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import EventType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_datetime
from .model import TimeClockEvent
from .repository import TimeClockEventRepository

_COLUMNS = "event_id, employee_id, event_type, event_time, created_at"


def _to_event(r: Dict[str, Any]) -> TimeClockEvent:
    return TimeClockEvent(
        event_id=int(r["event_id"]),
        employee_id=int(r["employee_id"]),
        event_type=EventType(r["event_type"]),
        event_time=normalize_mysql_datetime(r["event_time"]),
        created_at=normalize_mysql_datetime(r.get("created_at")),
    )


def _time_clauses(start: Optional[datetime], end: Optional[datetime]) -> tuple[list[str], list[object]]:
    clauses: list[str] = []
    params: list[object] = []
    if start is not None:
        clauses.append("event_time >= %s")
        params.append(start)
    if end is not None:
        clauses.append("event_time < %s")
        params.append(end)
    return clauses, params


class MySQLTimeClockEventRepository(TimeClockEventRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def fetch_events(
        self,
        employee_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[TimeClockEvent]:
        clauses, params = _time_clauses(start, end)
        clauses.insert(0, "employee_id=%s")
        params.insert(0, int(employee_id))
        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM time_clock_events
                WHERE {where}
                ORDER BY event_time ASC, event_id ASC
                """,
                tuple(params),
            )
            return [_to_event(r) for r in fetchall(cur)]

    def fetch_all_events(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[TimeClockEvent]:
        clauses, params = _time_clauses(start, end)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM time_clock_events
                {where}
                ORDER BY event_time ASC, event_id ASC
                """,
                tuple(params),
            )
            return [_to_event(r) for r in fetchall(cur)]

    def last_clock_outs(
        self,
        before: datetime,
        employee_id: Optional[int] = None,
    ) -> Dict[int, Optional[datetime]]:
        clauses = ["event_time < %s"]
        params: list[object] = [EventType.CLOCK_OUT.value, before]
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(employee_id))
        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT employee_id,
                       MAX(CASE WHEN event_type = %s THEN event_time END) AS last_clock_out
                FROM time_clock_events
                WHERE {where}
                GROUP BY employee_id
                """,
                tuple(params),
            )
            return {
                int(r["employee_id"]): normalize_mysql_datetime(r["last_clock_out"])
                for r in fetchall(cur)
            }

    def append(self, *, employee_id: int, event_type: EventType, event_time: datetime) -> TimeClockEvent:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO time_clock_events(employee_id, event_type, event_time)
                VALUES(%s,%s,%s)
                """,
                (int(employee_id), event_type.value, event_time),
            )
            event_id = int(cur.lastrowid)
            cur.execute(
                f"SELECT {_COLUMNS} FROM time_clock_events WHERE event_id=%s",
                (event_id,),
            )
            row = fetchone(cur)

        if row is None:
            return TimeClockEvent(
                event_id=event_id,
                employee_id=int(employee_id),
                event_type=event_type,
                event_time=event_time,
            )
        return _to_event(row)
