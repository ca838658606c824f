"""Input validation shared by the domain services."""

from datetime import date

from budgetbook.domain.errors import ValidationError, date_outside_month, invalid_month
from budgetbook.utils.date_parser import month_key, parse_month


def validate_month(month: str) -> str:
    """Check a YYYY-MM month key and return it unchanged.

    Raises:
        ValidationError: If the key is malformed or the month is out of range
    """
    try:
        parse_month(month)
    except ValueError:
        raise ValidationError(invalid_month(month))
    return month


def validate_date_in_month(value: date, month: str) -> None:
    """Raise ValidationError unless ``value`` falls within ``month``."""
    if value is None or month_key(value) != month:
        raise ValidationError(date_outside_month(month))
