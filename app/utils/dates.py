"""
Date Formatting Utilities
Single dates and date ranges as printed on certificates
"""

from datetime import date, datetime
from typing import Optional, Union

DateLike = Union[date, datetime, str]

INVALID_DATE = "Invalid Date"


def _to_date(value: DateLike) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            return None
    return None


def _month_day(d: date) -> str:
    return f"{d.strftime('%B')} {d.day}"


def format_single_date(value: DateLike) -> str:
    """April 10, 2026"""
    d = _to_date(value)
    if d is None:
        return INVALID_DATE
    return f"{_month_day(d)}, {d.year}"


def format_date_range(start: DateLike, end: DateLike) -> str:
    """
    Format an event date range for certificate display

    - Same day: "April 10, 2026"
    - Same month: "April 10-12, 2026"
    - Same year: "April 30 - May 2, 2026"
    - Different years: "December 30, 2025 - January 2, 2026"
    """
    start_d = _to_date(start)
    end_d = _to_date(end)
    if start_d is None or end_d is None:
        return INVALID_DATE

    if start_d == end_d:
        return format_single_date(start_d)

    if start_d.year == end_d.year and start_d.month == end_d.month:
        return f"{start_d.strftime('%B')} {start_d.day}-{end_d.day}, {start_d.year}"

    if start_d.year == end_d.year:
        return f"{_month_day(start_d)} - {_month_day(end_d)}, {start_d.year}"

    return f"{format_single_date(start_d)} - {format_single_date(end_d)}"


def is_single_day_event(start: DateLike, end: DateLike) -> bool:
    start_d = _to_date(start)
    return start_d is not None and start_d == _to_date(end)


def get_event_duration(start: DateLike, end: DateLike) -> int:
    """Number of days covered, counting both ends"""
    start_d = _to_date(start)
    end_d = _to_date(end)
    if start_d is None or end_d is None:
        return 0
    return abs((end_d - start_d).days) + 1
