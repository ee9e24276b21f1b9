"""
time_utils.py
-------------
Date and time-of-day helpers shared by the scheduling services.

Wire formats are fixed: dates are 'YYYY-MM-DD', times are 'HH:MM'.
"""

from datetime import date, datetime, time, timedelta
from django.utils import timezone

from ..exceptions import InvalidDateFormat, InvalidTimeFormat


def _parse_hhmm(value: str) -> time:
    h, m = value.split(":")
    for part in (h, m):
        if len(part) != 2 or not (part.isascii() and part.isdigit()):
            raise ValueError(value)
    return time(int(h), int(m))


def to_time(value) -> time:
    """
    Accept a time object or an 'HH:MM' string.
    Seconds are dropped; slots have minute precision.
    """
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)
    try:
        return _parse_hhmm((value or "").strip())
    except (AttributeError, ValueError):
        raise InvalidTimeFormat()


def to_date(value) -> date:
    """Accept a date object or a 'YYYY-MM-DD' string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m-%d").date()
    except (AttributeError, TypeError, ValueError):
        raise InvalidDateFormat()


def minutes_between(start: time, end: time) -> int:
    """Length of [start, end) in whole minutes."""
    return (end.hour * 60 + end.minute) - (start.hour * 60 + start.minute)


def today() -> date:
    """Current date in the salon's configured TIME_ZONE."""
    return timezone.localdate()


def days_between(start: date, end: date) -> int:
    """Whole days from start to end (end - start)."""
    return (end - start).days


def iter_dates(start: date, end: date):
    """Yield every date from start to end inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
