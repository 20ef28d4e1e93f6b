from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ...core.constants import DEFAULT_DAY_BUCKETING
from ...core.exceptions import ValidationError
from .base import DayBucketing
from .split_day import SplitDayBucketing
from .start_day import StartDayBucketing


@dataclass
class DayBucketingFactory:
    """Factory Pattern: choose a day-bucketing strategy by name."""

    default_mode: str = DEFAULT_DAY_BUCKETING

    def for_mode(self, mode: Optional[str] = None) -> DayBucketing:
        mode = (mode or self.default_mode).strip().lower()
        if mode == StartDayBucketing.name:
            return StartDayBucketing()
        if mode == SplitDayBucketing.name:
            return SplitDayBucketing()
        raise ValidationError(f"Unknown day bucketing {mode!r} (expected 'start-day' or 'split')")
