from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .accounting.bucketing.factory import DayBucketingFactory
from .core.constants import (
    DEFAULT_DAY_BUCKETING,
    DEFAULT_STATUS_LOOKBACK_DAYS,
    DEFAULT_WEEK_START,
)
from .database.connection import DBConfig, DatabaseConnection
from .reporting.service import TimeReportService
from .timeclock.mysql_timeclock_repository import MySQLTimeClockEventRepository
from .timeclock.repository import TimeClockEventRepository
from .timeclock.service import TimeClockService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    events_repo: TimeClockEventRepository

    timeclock_service: TimeClockService
    report_service: TimeReportService


def build_services(
    events_repo: TimeClockEventRepository,
    *,
    conn: Optional[DatabaseConnection] = None,
    day_bucketing: str = DEFAULT_DAY_BUCKETING,
    week_start: int = DEFAULT_WEEK_START,
    status_lookback_days: int = DEFAULT_STATUS_LOOKBACK_DAYS,
) -> Container:
    bucketing_factory = DayBucketingFactory(default_mode=day_bucketing)
    # Fail at startup on a bad DAY_BUCKETING setting.
    bucketing_factory.for_mode()

    timeclock_service = TimeClockService(
        events_repo,
        bucketing_factory=bucketing_factory,
        week_start=week_start,
        status_lookback_days=status_lookback_days,
    )
    report_service = TimeReportService(timeclock_service)

    return Container(
        conn=conn,
        events_repo=events_repo,
        timeclock_service=timeclock_service,
        report_service=report_service,
    )


def build_container(*, db_config: dict, **options) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
    events_repo = MySQLTimeClockEventRepository(conn)
    return build_services(events_repo, conn=conn, **options)
