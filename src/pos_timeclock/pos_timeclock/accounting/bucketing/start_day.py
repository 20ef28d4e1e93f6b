from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ...common.datetime_utils import to_millis
from ..model import BreakInterval
from .base import DayBucketing, DayShare, overlap_millis


class StartDayBucketing(DayBucketing):
    """Whole session counts toward the day it started, even past midnight."""

    name = "start-day"

    def split(self, *, start: datetime, end: datetime, breaks: Sequence[BreakInterval]) -> list[DayShare]:
        break_millis = overlap_millis(start, end, breaks)
        worked = max(to_millis(end - start) - break_millis, 0)
        return [DayShare(work_date=start.date(), worked_millis=worked, break_millis=break_millis)]
