from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime
from typing import Sequence

from ...common.datetime_utils import to_millis
from ..model import BreakInterval


@dataclass(frozen=True)
class DayShare:
    work_date: date
    worked_millis: int
    break_millis: int


class DayBucketing(ABC):
    """Strategy Pattern: decide which calendar day(s) a session counts toward.

    Implementations receive a session already clipped to the reporting
    period, with closed break intervals contained in it.
    """

    name: str = ""

    @abstractmethod
    def split(self, *, start: datetime, end: datetime, breaks: Sequence[BreakInterval]) -> list[DayShare]:
        raise NotImplementedError


def overlap_millis(start: datetime, end: datetime, breaks: Sequence[BreakInterval]) -> int:
    total = 0
    for b in breaks:
        lo = max(start, b.start)
        hi = min(end, b.end)
        if hi > lo:
            total += to_millis(hi - lo)
    return total
