"""
Date and duration helpers shared by the attendance and payroll services
"""
import calendar
import re
from datetime import date, datetime, timedelta
from typing import Optional, Tuple, Union

from staffpay.core.exceptions import ValidationError

_HOURS_MINUTES = re.compile(r"(\d+)h\s*(\d+)m")
_HOURS_ONLY = re.compile(r"(\d+)h")


def parse_work_hours(value: Optional[str]) -> Optional[int]:
    """
    Parse an "8h 30m" / "8h" duration into minutes.

    Returns 0 for empty input and None when the text is not a duration
    (e.g. "Running" or "-"), so callers can tell the two apart.
    """
    if not value or not value.strip():
        return 0

    match = _HOURS_MINUTES.search(value)
    if match:
        return int(match.group(1)) * 60 + int(match.group(2))

    match = _HOURS_ONLY.search(value)
    if match:
        return int(match.group(1)) * 60

    return None


def start_of_day(value: Union[date, datetime, None] = None) -> datetime:
    """Midnight of the given day (today, UTC, when omitted)"""
    if value is None:
        value = datetime.utcnow()
    return datetime(value.year, value.month, value.day)


def month_bounds(month: int, year: int) -> Tuple[datetime, datetime]:
    """First and last midnight of a calendar month (both inclusive)"""
    days = calendar.monthrange(year, month)[1]
    first = datetime(year, month, 1)
    return first, first + timedelta(days=days - 1)


def month_label(month: Union[int, str], year: Optional[int] = None) -> str:
    """
    Normalise a payroll month to its display label.

    Strings are taken as already formatted ("January 2025"); integers are
    zero-based month indexes (0 = January) combined with the year.
    """
    if isinstance(month, str):
        return month
    if not 0 <= month <= 11:
        raise ValidationError(f"Month index must be between 0 and 11, got {month}")
    if year is None:
        raise ValidationError("Year is required when month is given as a number")
    return f"{calendar.month_name[month + 1]} {year}"
