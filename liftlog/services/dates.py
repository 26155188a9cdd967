"""Calendar date helpers.

Every date in the app is a "YYYY-MM-DD" string built from local calendar
components. Conversions never go through a UTC timestamp, so a set logged at
23:30 stays on the day it was logged.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from datetime import date, datetime, timedelta
from typing import NamedTuple

DATE_PARAM_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")

_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


class DateRange(NamedTuple):
    start: str
    end: str


def to_date_string(value: date | datetime) -> str:
    """Format a date (or datetime, in local time) as YYYY-MM-DD."""
    if isinstance(value, datetime) and value.tzinfo is not None:
        value = value.astimezone()
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def from_date_string(date_str: str) -> date:
    """Parse YYYY-MM-DD into a date (no time, no timezone)."""
    year, month, day = (int(part) for part in date_str.split("-"))
    return date(year, month, day)


def get_today() -> str:
    return to_date_string(date.today())


def add_days(date_str: str, days: int) -> str:
    """Shift a date string by whole days (negative to go back)."""
    return to_date_string(from_date_string(date_str) + timedelta(days=days))


def is_today(date_str: str) -> bool:
    return date_str == get_today()


def is_same_date(date_str1: str, date_str2: str) -> bool:
    return date_str1 == date_str2


def format_display_date(date_str: str) -> str:
    """Human label for a date string, e.g. "Wed, Jan 28, 2026"."""
    d = from_date_string(date_str)
    return f"{_WEEKDAYS[d.weekday()]}, {_MONTHS[d.month - 1]} {d.day}, {d.year}"


def _first_of_month(year: int, month_index: int) -> date:
    """month_index is zero-based and may run past 11 or below 0."""
    year += month_index // 12
    return date(year, month_index % 12 + 1, 1)


def get_calendar_date_range(month_date_str: str, buffer_months: int = 1) -> DateRange:
    """
    Range for calendar queries: first day of (month - buffer) through the last day
    of (month + buffer). The day component of month_date_str is ignored.
    """
    d = from_date_string(month_date_str)
    start = _first_of_month(d.year, d.month - 1 - buffer_months)
    end = _first_of_month(d.year, d.month + buffer_months) - timedelta(days=1)
    return DateRange(start=to_date_string(start), end=to_date_string(end))


def parse_date_param(param: str | None, today: str | None = None) -> str:
    """
    Date from a query/path parameter. Returns today (or the given `today`) for
    missing or malformed input, otherwise the parameter unchanged. Never raises.
    """
    fallback = today or get_today()
    if not param or not DATE_PARAM_PATTERN.fullmatch(param):
        return fallback
    try:
        from_date_string(param)
    except ValueError:
        return fallback
    return param


def iter_dates_descending(newest: str, oldest: str) -> Iterator[str]:
    """Every date from newest down to oldest, inclusive. Empty if newest < oldest."""
    current = from_date_string(newest)
    stop = from_date_string(oldest)
    while current >= stop:
        yield to_date_string(current)
        current -= timedelta(days=1)
