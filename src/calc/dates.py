"""Calendar-day helpers shared by the projection and scheduling code.

Every date in the planner is a calendar day. Times of day are discarded as
soon as a value enters the system, and all stepping is done on integer day
ordinals so recurring series never drift.
"""

import calendar
from datetime import date, datetime, timedelta
from typing import Tuple, Union

DayLike = Union[date, datetime, str]

SUNDAY = calendar.SUNDAY
MONDAY = calendar.MONDAY

WEEK_START_NAMES = {
    'sunday': SUNDAY,
    'monday': MONDAY,
}


def to_day(value: DayLike) -> date:
    """Truncate a date, datetime or ISO-8601 string to its calendar day.

    Strings may be plain dates ('2025-01-31') or full date-times, including
    the trailing 'Z' form found in older snapshot files ('2025-01-31T08:00:00Z').

    Raises:
        ValueError: if a string cannot be parsed.
        TypeError: for any other input type.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if len(text) == 10:
            return date.fromisoformat(text)
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        return datetime.fromisoformat(text).date()
    raise TypeError(f"Cannot convert {type(value).__name__} to a calendar day")


def add_days(day: date, days: int) -> date:
    return date.fromordinal(day.toordinal() + days)


def days_between(start: date, end: date) -> int:
    """Whole days from start to end (negative if end precedes start)."""
    return end.toordinal() - start.toordinal()


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """Return the first and last calendar day of a month."""
    last = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last)


def parse_month(text: str) -> Tuple[int, int]:
    """Parse a 'YYYY-MM' string into (year, month)."""
    try:
        year_text, month_text = text.strip().split('-')
        year, month = int(year_text), int(month_text)
    except ValueError:
        raise ValueError(f"Invalid month '{text}', expected YYYY-MM")
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month '{text}', month must be 1-12")
    return year, month


def start_of_week(day: date, first_weekday: int = SUNDAY) -> date:
    """Return the first day of the week containing `day`.

    `first_weekday` uses the calendar module numbering (MONDAY=0 ... SUNDAY=6).
    """
    offset = (day.weekday() - first_weekday) % 7
    return day - timedelta(days=offset)


def week_start_from_name(name: str) -> int:
    try:
        return WEEK_START_NAMES[name.strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown week start '{name}', expected one of: {', '.join(WEEK_START_NAMES)}")
