from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ...common.datetime_utils import day_bounds, to_millis
from ..model import BreakInterval
from .base import DayBucketing, DayShare, overlap_millis


class SplitDayBucketing(DayBucketing):
    """Cut a session at each midnight; every day keeps the time worked on it."""

    name = "split"

    def split(self, *, start: datetime, end: datetime, breaks: Sequence[BreakInterval]) -> list[DayShare]:
        if end <= start:
            return [DayShare(work_date=start.date(), worked_millis=0, break_millis=0)]

        shares: list[DayShare] = []
        day = start.date()
        while True:
            day_start, day_end = day_bounds(day)
            lo = max(start, day_start)
            hi = min(end, day_end)
            if hi > lo:
                break_millis = overlap_millis(lo, hi, breaks)
                worked = max(to_millis(hi - lo) - break_millis, 0)
                shares.append(DayShare(work_date=day, worked_millis=worked, break_millis=break_millis))
            if end <= day_end:
                return shares
            day = day_end.date()
