from __future__ import annotations

from datetime import datetime

import pytest
from flask import Flask

from src.pos_timeclock.pos_timeclock.container import build_services
from src.pos_timeclock.pos_timeclock.main import create_app
from src.pos_timeclock.pos_timeclock.timeclock.controller import register


def make_client(repo):
    app = Flask(__name__)
    app.config["TESTING"] = True
    register(app, build_services(repo))
    return app.test_client()


@pytest.fixture
def client(event_repo):
    return make_client(event_repo)


def test_clock_in_then_status(client, event_repo):
    resp = client.post("/api/users/7/clock-in")

    assert resp.status_code == 201
    body = resp.get_json()
    assert body["success"] is True
    assert body["event"]["event_type"] == "clock-in"
    assert body["event"]["employee_id"] == 7
    assert body["status"]["status"] == "clocked-in"

    status = client.get("/api/users/7/status").get_json()
    assert status["is_clocked_in"] is True
    assert status["is_on_break"] is False
    assert status["since"] == body["event"]["event_time"]


def test_break_and_clock_out_actions(client, event_repo):
    client.post("/api/users/7/clock-in")
    assert client.post("/api/users/7/start-break").get_json()["status"]["status"] == "on-break"
    assert client.post("/api/users/7/end-break").get_json()["status"]["status"] == "clocked-in"
    assert client.post("/api/users/7/clock-out").get_json()["status"]["status"] == "clocked-out"

    assert [e.event_type.value for e in event_repo.events] == ["clock-in", "break-start", "break-end", "clock-out"]


def test_orphan_action_is_still_recorded(client, event_repo):
    resp = client.post("/api/users/7/clock-out")

    assert resp.status_code == 201
    assert len(event_repo.events) == 1


def test_non_positive_employee_is_bad_request(client):
    resp = client.post("/api/users/0/clock-in")

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_report_over_explicit_dates(client, event_repo):
    event_repo.add(1, "clock-in", datetime(2025, 1, 6, 9))
    event_repo.add(1, "break-start", datetime(2025, 1, 6, 12))
    event_repo.add(1, "break-end", datetime(2025, 1, 6, 12, 30))
    event_repo.add(1, "clock-out", datetime(2025, 1, 6, 17))
    event_repo.add(2, "clock-in", datetime(2025, 1, 7, 8))
    event_repo.add(2, "clock-out", datetime(2025, 1, 7, 12))

    body = client.get("/api/reports/time?start=2025-01-06&end=2025-01-07").get_json()

    assert body["start"] == "2025-01-06"
    assert body["end"] == "2025-01-07"
    assert body["total_worked_millis"] == 41_400_000
    assert body["total_break_millis"] == 30 * 60 * 1000
    assert [r["employee_id"] for r in body["rows"]] == [1, 2]

    single = client.get("/api/reports/time?start=2025-01-06&end=2025-01-07&employee_id=2").get_json()
    assert [r["employee_id"] for r in single["rows"]] == [2]


def test_report_rejects_inverted_dates(client):
    resp = client.get("/api/reports/time?start=2025-01-07&end=2025-01-06")

    assert resp.status_code == 400


def test_report_rejects_bad_input(client):
    assert client.get("/api/reports/time?start=06/01/2025&end=2025-01-07").status_code == 400
    assert client.get("/api/reports/time?employee_id=abc").status_code == 400
    assert client.get("/api/reports/time?bucketing=hourly").status_code == 400


def test_anomalies_endpoint(client, event_repo):
    event_repo.add(3, "clock-in", datetime(2025, 1, 6, 9))
    event_repo.add(3, "clock-in", datetime(2025, 1, 6, 9, 5))
    event_repo.add(3, "break-end", datetime(2025, 1, 6, 9, 10))

    body = client.get("/api/reports/time/anomalies?start=2025-01-06&end=2025-01-06&employee_id=3").get_json()

    assert [a["anomaly_kind"] for a in body["anomalies"]] == ["DOUBLE_CLOCK_IN", "ORPHAN_BREAK_END"]


def test_week_endpoint(client, event_repo):
    event_repo.add(1, "clock-in", datetime(2025, 1, 5, 9))
    event_repo.add(1, "clock-out", datetime(2025, 1, 5, 17))

    body = client.get("/api/users/1/week?date=2025-01-08").get_json()

    assert [d["date"] for d in body["days"]][0] == "2025-01-05"
    assert len(body["days"]) == 7
    assert body["days"][0]["worked_hours"] == "08:00"
    assert body["days"][0]["event_count"] == 2


class BrokenRepo:
    def fetch_events(self, employee_id, start=None, end=None):
        raise RuntimeError("database is down")

    def fetch_all_events(self, start=None, end=None):
        raise RuntimeError("database is down")

    def last_clock_outs(self, before, employee_id=None):
        raise RuntimeError("database is down")

    def append(self, *, employee_id, event_type, event_time):
        raise RuntimeError("database is down")


def test_storage_failure_is_internal_error():
    client = make_client(BrokenRepo())

    resp = client.get("/api/users/1/status")

    assert resp.status_code == 500
    assert resp.get_json() == {"success": False, "message": "Internal error"}
    assert client.post("/api/users/1/clock-in").status_code == 500


def test_recorded_action_succeeds_when_status_read_fails(monkeypatch, caplog, event_repo):
    def unreadable(employee_id, start=None, end=None):
        raise RuntimeError("database is down")

    monkeypatch.setattr(event_repo, "fetch_events", unreadable)
    client = make_client(event_repo)

    resp = client.post("/api/users/7/clock-in")

    assert resp.status_code == 201
    body = resp.get_json()
    assert body["success"] is True
    assert body["event"]["event_type"] == "clock-in"
    assert body["status"] is None
    assert len(event_repo.events) == 1
    assert "status lookup failed" in caplog.text


def test_create_app_with_prebuilt_container(monkeypatch, event_repo):
    monkeypatch.setenv("APP_ENV", "testing")
    container = build_services(event_repo)

    app = create_app(container)

    assert app.extensions["pos_timeclock"] is container
    assert app.config["TESTING"] is True
    resp = app.test_client().post("/api/users/2/clock-in")
    assert resp.status_code == 201
