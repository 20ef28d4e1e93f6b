"""POS time-clock package.

This package is organized by feature modules (timeclock, accounting, reporting)
with a thin Flask controller layer and service/repository layers. The
accounting package is pure: it never touches storage or the clock.
"""
