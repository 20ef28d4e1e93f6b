from __future__ import annotations

from enum import Enum


class EventType(str, Enum):
    """Timekeeping actions an employee can perform (closed set)."""

    CLOCK_IN = "clock-in"
    CLOCK_OUT = "clock-out"
    BREAK_START = "break-start"
    BREAK_END = "break-end"


class ClockStatusKind(str, Enum):
    """Status shown on the time card."""

    CLOCKED_OUT = "clocked-out"
    CLOCKED_IN = "clocked-in"
    ON_BREAK = "on-break"


class AnomalyKind(str, Enum):
    """Violations of the clock event grammar, surfaced for payroll review."""

    DOUBLE_CLOCK_IN = "DOUBLE_CLOCK_IN"
    ORPHAN_CLOCK_OUT = "ORPHAN_CLOCK_OUT"
    ORPHAN_BREAK_START = "ORPHAN_BREAK_START"
    ORPHAN_BREAK_END = "ORPHAN_BREAK_END"
    DOUBLE_BREAK_START = "DOUBLE_BREAK_START"
