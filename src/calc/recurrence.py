"""Expand a recurring series into the concrete days it falls on.

A series starts on `start`, repeats every `interval_days` and optionally
stops after `end`. Only occurrences inside a closed window of days are
returned. Stepping uses integer day ordinals, so daylight-saving changes
and time zones cannot shift an occurrence.
"""

from datetime import date
from typing import List, Optional

from calc.dates import DayLike, to_day


def occurrences(start: DayLike,
                end: Optional[DayLike],
                interval_days: int,
                window_start: DayLike,
                window_end: DayLike) -> List[date]:
    """Return the ascending occurrence days of a series within a window.

    Args:
        start: First day of the series
        end: Last allowed day of the series, or None for an unbounded series
        interval_days: Days between occurrences; values <= 0 yield nothing
        window_start: First day of the window (inclusive)
        window_end: Last day of the window (inclusive)

    Returns:
        Days on the grid start, start + interval, ... within the window and
        on or before `end`
    """
    if interval_days <= 0:
        return []

    first_ord = to_day(start).toordinal()
    window_start_ord = to_day(window_start).toordinal()
    window_end_ord = to_day(window_end).toordinal()

    last_ord = window_end_ord
    if end is not None:
        last_ord = min(last_ord, to_day(end).toordinal())
    if last_ord < window_start_ord:
        return []

    if first_ord < window_start_ord:
        gap = window_start_ord - first_ord
        steps = -(-gap // interval_days)  # ceiling division
        first_ord += steps * interval_days

    return [date.fromordinal(o) for o in range(first_ord, last_ord + 1, interval_days)]


def occurrences_for(entity, window_start: DayLike, window_end: DayLike) -> List[date]:
    """Occurrences of a Job or PassiveIncome within a window."""
    return occurrences(entity.start_date, entity.end_date, entity.interval_days,
                       window_start, window_end)
