import calendar
from datetime import date, datetime, time, timezone
from typing import Union

DateLike = Union[date, datetime]

# Labels are always English, whatever the process locale
MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def month_name(m: int) -> str:
    """Full name of a month, e.g. 1 -> 'January'."""
    if not 1 <= m <= 12:
        raise ValueError(f"Month must be in 1..12, got {m}")
    return MONTH_NAMES[m - 1]


def month_label(year: int, month: int) -> str:
    return f"{month_name(month)} {year}"


def add_months(start_date: date, months: int) -> date:
    """
    Calculates the date N months from the start_date.
    Handles year rollovers and end-of-month adjustments (e.g., Jan 31 + 1 month -> Feb 28).
    """
    month = start_date.month - 1 + months
    year = start_date.year + month // 12
    month = month % 12 + 1

    # monthrange returns (weekday_of_first_day, number_of_days)
    days_in_new_month = calendar.monthrange(year, month)[1]
    day = min(start_date.day, days_in_new_month)

    return date(year, month, day)


def as_datetime(value: DateLike) -> datetime:
    """Promote a date to midnight; datetimes pass through."""
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def align(a: datetime, b: datetime):
    """Make two datetimes comparable. Naive values are taken to be UTC."""
    if (a.tzinfo is None) == (b.tzinfo is None):
        return a, b
    if a.tzinfo is None:
        a = a.replace(tzinfo=timezone.utc)
    if b.tzinfo is None:
        b = b.replace(tzinfo=timezone.utc)
    return a, b
