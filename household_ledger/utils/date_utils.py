"""Calendar month arithmetic"""

from datetime import date, datetime
from typing import Any, Optional, Tuple


def months_between(start_month: int, start_year: int, end_month: int, end_year: int) -> int:
    """Zero-based month offset from (start_month, start_year) to (end_month, end_year)"""
    return (end_year - start_year) * 12 + (end_month - start_month)


def add_months(month: int, year: int, offset: int) -> Tuple[int, int]:
    """Shift a (month, year) pair by offset months, rolling the year at 12 -> 1"""
    index = year * 12 + (month - 1) + offset
    return index % 12 + 1, index // 12


def month_key(month: int, year: int) -> str:
    """Format as YYYY-MM"""
    return f"{year:04d}-{month:02d}"


def parse_calendar_date(value: Any) -> date:
    """
    Read a stored date value.

    Accepts date/datetime objects and ISO strings ("2024-01-15" or
    "2024-01-15T03:00:00.000Z"). Raises ValueError for anything else.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"not a date: {value!r}")

    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    # fromisoformat only accepts a trailing Z from 3.11 on
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text).date()


def resolve_period(month: Optional[int], year: Optional[int], today: Optional[date] = None) -> Tuple[int, int]:
    """Fill a missing month or year with the current one"""
    today = today or date.today()
    return (month or today.month, year or today.year)
