from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import date, timedelta
from functools import wraps

from flask import Flask, jsonify, request

from ..common.datetime_utils import format_duration, format_hours_minutes, now_local, start_of_day
from ..common.validators import optional_positive_id, require_iso_date
from ..container import Container
from ..core.constants import DEFAULT_REPORT_DAYS, ONE_DAY
from ..core.exceptions import InvalidRangeError, ValidationError
from .model import ClockStatus, TimeClockEvent

logger = logging.getLogger(__name__)


def _event_json(event: TimeClockEvent) -> dict:
    return {
        "id": event.event_id,
        "employee_id": event.employee_id,
        "event_type": event.event_type.value,
        "event_time": event.event_time.isoformat(),
        "created_at": event.created_at.isoformat() if event.created_at else None,
    }


def _status_json(status: ClockStatus) -> dict:
    return {
        "employee_id": status.employee_id,
        "status": status.status.value,
        "is_clocked_in": status.is_clocked_in,
        "is_on_break": status.is_on_break,
        "since": status.since.isoformat() if status.since else None,
        "open_session_worked_millis": status.open_session_worked_millis,
        "open_session_duration": format_duration(status.open_session_worked_millis),
    }


def _period_from_args(args) -> tuple[date, date]:
    """Inclusive [start, end] dates from the query string, last week by default."""
    today = now_local().date()
    start_s = args.get("start")
    end_s = args.get("end")
    end = require_iso_date(end_s, "end") if end_s else today
    start = require_iso_date(start_s, "start") if start_s else end - timedelta(days=DEFAULT_REPORT_DAYS - 1)
    if end < start:
        raise InvalidRangeError(f"end {end:%Y-%m-%d} is before start {start:%Y-%m-%d}")
    return start, end


def register(app: Flask, container: Container) -> None:
    timeclock = container.timeclock_service
    reports = container.report_service

    def json_errors(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except ValidationError as e:
                return jsonify({"success": False, "message": str(e)}), 400
            except Exception:
                logger.exception("time clock API failure on %s", request.path)
                return jsonify({"success": False, "message": "Internal error"}), 500

        return wrapper

    def record(action, employee_id: int):
        event = action(employee_id)
        # The event is committed; a failed status read must not look like a failed action.
        try:
            status = _status_json(timeclock.current_status(employee_id, now=event.event_time))
        except Exception:
            logger.exception("status lookup failed after recording event %s", event.event_id)
            status = None
        return jsonify({"success": True, "event": _event_json(event), "status": status}), 201

    @app.route("/api/users/<int:employee_id>/clock-in", methods=["POST"], endpoint="timeclock_clock_in")
    @json_errors
    def clock_in(employee_id: int):
        return record(timeclock.clock_in, employee_id)

    @app.route("/api/users/<int:employee_id>/clock-out", methods=["POST"], endpoint="timeclock_clock_out")
    @json_errors
    def clock_out(employee_id: int):
        return record(timeclock.clock_out, employee_id)

    @app.route("/api/users/<int:employee_id>/start-break", methods=["POST"], endpoint="timeclock_start_break")
    @json_errors
    def start_break(employee_id: int):
        return record(timeclock.start_break, employee_id)

    @app.route("/api/users/<int:employee_id>/end-break", methods=["POST"], endpoint="timeclock_end_break")
    @json_errors
    def end_break(employee_id: int):
        return record(timeclock.end_break, employee_id)

    @app.route("/api/users/<int:employee_id>/status", methods=["GET"], endpoint="timeclock_status")
    @json_errors
    def status(employee_id: int):
        now = now_local()
        payload = _status_json(timeclock.current_status(employee_id, now=now))
        payload["today_worked_millis"] = timeclock.today_worked_millis(employee_id, now=now)
        payload["today_hours"] = format_duration(payload["today_worked_millis"])
        return jsonify(payload)

    @app.route("/api/users/<int:employee_id>/week", methods=["GET"], endpoint="timeclock_week")
    @json_errors
    def week(employee_id: int):
        day_s = request.args.get("date")
        day = require_iso_date(day_s, "date") if day_s else None
        days = timeclock.week_overview(employee_id, day=day)
        return jsonify(
            {
                "employee_id": employee_id,
                "days": [
                    {
                        "date": d.work_date.strftime("%Y-%m-%d"),
                        "event_count": d.event_count,
                        "worked_millis": d.worked_millis,
                        "worked_hours": format_hours_minutes(d.worked_millis),
                    }
                    for d in days
                ],
            }
        )

    @app.route("/api/reports/time", methods=["GET"], endpoint="timeclock_report")
    @json_errors
    def time_report():
        start, end = _period_from_args(request.args)
        employee_id = optional_positive_id(request.args.get("employee_id"), "employee_id")
        data = reports.build_time_report(
            start=start_of_day(start),
            end=start_of_day(end) + ONE_DAY,
            employee_id=employee_id,
            bucketing=request.args.get("bucketing") or None,
        )
        payload = asdict(data)
        payload.update(
            {
                "employee_id": employee_id,
                "start": start.strftime("%Y-%m-%d"),
                "end": end.strftime("%Y-%m-%d"),
            }
        )
        return jsonify(payload)

    @app.route("/api/reports/time/anomalies", methods=["GET"], endpoint="timeclock_anomalies")
    @json_errors
    def time_anomalies():
        start, end = _period_from_args(request.args)
        employee_id = optional_positive_id(request.args.get("employee_id"), "employee_id")
        data = reports.build_time_report(
            start=start_of_day(start),
            end=start_of_day(end) + ONE_DAY,
            employee_id=employee_id,
        )
        return jsonify({"employee_id": employee_id, "anomalies": data.anomalies})
