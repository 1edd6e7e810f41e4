"""Human readable "time since" formatting for last-seen timestamps."""
from __future__ import annotations

MINUTE_IN_SECONDS = 60
HOUR_IN_SECONDS = 60 * MINUTE_IN_SECONDS
DAY_IN_SECONDS = 24 * HOUR_IN_SECONDS
WEEK_IN_SECONDS = 7 * DAY_IN_SECONDS
MONTH_IN_SECONDS = 30 * DAY_IN_SECONDS
YEAR_IN_SECONDS = 365 * DAY_IN_SECONDS

_BUCKETS = (
    (HOUR_IN_SECONDS, MINUTE_IN_SECONDS, "min"),
    (DAY_IN_SECONDS, HOUR_IN_SECONDS, "hour"),
    (WEEK_IN_SECONDS, DAY_IN_SECONDS, "day"),
    (MONTH_IN_SECONDS, WEEK_IN_SECONDS, "week"),
    (YEAR_IN_SECONDS, MONTH_IN_SECONDS, "month"),
)


def human_time_diff(then: int, now: int) -> str:
    """Return the distance between two timestamps as ``"<n> <unit>"``."""

    diff = abs(now - then)
    if diff < MINUTE_IN_SECONDS:
        return _pluralize(max(diff, 1), "second")

    for upper_bound, unit_seconds, unit in _BUCKETS:
        if diff < upper_bound:
            return _pluralize(_rounded(diff, unit_seconds), unit)

    return _pluralize(_rounded(diff, YEAR_IN_SECONDS), "year")


def format_time_since(then: int, now: int) -> str:
    """Return the ``"%s ago"`` label shown next to offline players."""

    return f"{human_time_diff(then, now)} ago"


def _rounded(diff: int, unit_seconds: int) -> int:
    # Half-up rounding, never below one unit.
    return max(int(diff / unit_seconds + 0.5), 1)


def _pluralize(value: int, unit: str) -> str:
    return f"{value} {unit}" if value == 1 else f"{value} {unit}s"
