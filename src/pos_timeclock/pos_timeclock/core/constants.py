"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import timedelta

DEFAULT_STATUS_LOOKBACK_DAYS = 7
DEFAULT_REPORT_DAYS = 7

# 0 = Monday ... 6 = Sunday (same numbering as date.weekday()).
DEFAULT_WEEK_START = 6

DEFAULT_DAY_BUCKETING = "start-day"

ONE_MILLISECOND = timedelta(milliseconds=1)
ONE_DAY = timedelta(days=1)
