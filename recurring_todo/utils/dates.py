"""Date helpers shared by the rule evaluator and the service layer.

All instants are handled as naive UTC datetimes, which is how they are
stored. Aware values are converted on the way in.
"""
import calendar
from datetime import datetime
from typing import Optional

import pytz

WEEKDAY_CODES = ("MO", "TU", "WE", "TH", "FR", "SA", "SU")
WEEKDAY_TO_INT = {code: idx for idx, code in enumerate(WEEKDAY_CODES)}


def utcnow() -> datetime:
    """Current instant as a naive UTC datetime."""
    return datetime.now(pytz.utc).replace(tzinfo=None)


def to_utc_naive(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize a datetime to naive UTC; naive input is assumed to be UTC."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(pytz.utc).replace(tzinfo=None)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def months_between(start: datetime, end: datetime) -> int:
    """Whole calendar months from start's month to end's month."""
    return (end.year - start.year) * 12 + (end.month - start.month)


def add_months(anchor: datetime, months: int, day: int) -> datetime:
    """Return anchor shifted by ``months`` on ``day``, clamped to the month's last day.

    The time of day of ``anchor`` is kept.
    """
    month_index = anchor.month - 1 + months
    year = anchor.year + month_index // 12
    month = month_index % 12 + 1
    return anchor.replace(year=year, month=month, day=min(day, days_in_month(year, month)))


def weekday_numbers(codes) -> list:
    """Map weekday codes to sorted, de-duplicated weekday numbers (Monday = 0)."""
    return sorted({WEEKDAY_TO_INT[code.upper()] for code in codes})
