"""Date and month parsing utilities."""

import re
from datetime import date
from typing import Optional

from dateutil.relativedelta import relativedelta

_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_SLASH_YMD = re.compile(r"^(\d{4})/(\d{1,2})/(\d{1,2})$")
_SLASH_MDY = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_MONTH_KEY = re.compile(r"([0-9]{4})-([0-9]{2})")


def _build_date(year: int, month: int, day: int) -> Optional[date]:
    """Build a calendar date, or None if the components do not form one."""
    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_statement_date(date_str: Optional[str]) -> Optional[date]:
    """Parse a date cell from a bank statement.

    Accepted formats:
    - "2024-01-15" (ISO, two-digit month and day)
    - "2024/1/15"
    - "1/15/2024" (month first; day first is tried when month first is not
      a valid calendar date, e.g. "15/1/2024")

    Args:
        date_str: Raw cell value

    Returns:
        Date object, or None for blank, malformed or impossible dates
    """
    if date_str is None:
        return None
    value = date_str.strip()
    if not value:
        return None

    match = _ISO_DATE.match(value)
    if match:
        return _build_date(int(match.group(1)), int(match.group(2)), int(match.group(3)))

    match = _SLASH_YMD.match(value)
    if match:
        return _build_date(int(match.group(1)), int(match.group(2)), int(match.group(3)))

    match = _SLASH_MDY.match(value)
    if match:
        first, second, year = int(match.group(1)), int(match.group(2)), int(match.group(3))
        month_first = _build_date(year, first, second)
        if month_first is not None:
            return month_first
        return _build_date(year, second, first)

    return None


def month_key(value: date) -> str:
    """Return the YYYY-MM month key for a date."""
    return value.strftime("%Y-%m")


def parse_month(month: str) -> date:
    """Parse a YYYY-MM month key into the first day of that month.

    Raises:
        ValueError: If the key is malformed or the month is out of range
    """
    match = _MONTH_KEY.fullmatch(month) if month else None
    if not match:
        raise ValueError(f"Invalid month: {month}")
    month_number = int(match.group(2))
    if month_number < 1 or month_number > 12:
        raise ValueError(f"Invalid month: {month}")
    return date(int(match.group(1)), month_number, 1)


def resolve_month(period: str, today: Optional[date] = None) -> str:
    """Resolve a month key or a relative period into a month key.

    Args:
        period: "YYYY-MM", "this-month", "last-month" or "next-month"
        today: Reference date (defaults to date.today())

    Returns:
        Month key

    Raises:
        ValueError: If the period is not recognized
    """
    period = period.strip().lower()
    today = today or date.today()

    if period == "this-month":
        return month_key(today)
    elif period == "last-month":
        return month_key(today - relativedelta(months=1))
    elif period == "next-month":
        return month_key(today + relativedelta(months=1))

    return month_key(parse_month(period))
