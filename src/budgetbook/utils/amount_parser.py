"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional
import re

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
# Largest magnitude a Numeric(12, 2) column holds
MAX_AMOUNT = Decimal("9999999999.99")


def round_currency(value: Decimal | int | str) -> Decimal:
    """Round a value to two decimal places (half away from zero)."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a signed Decimal rounded to cents.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "-123.45"
    - "-$123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)
    - "123.45-" (trailing minus)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount with two decimal places

    Raises:
        ValueError: If amount string cannot be parsed or exceeds MAX_AMOUNT
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    # Remove whitespace
    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Handle trailing minus notation (negative)
    if amount_str.endswith("-"):
        is_negative = True
        amount_str = amount_str[:-1]

    # Remove currency symbols, thousands separators and inner whitespace
    amount_str = re.sub(r"[$€£¥,\s]", "", amount_str)
    if not amount_str:
        raise ValueError("Empty amount string")
    if "_" in amount_str:
        raise ValueError(f"Could not parse amount '{amount_str}'")

    try:
        amount = Decimal(amount_str)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")

    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if abs(amount) > MAX_AMOUNT:
        raise ValueError(f"Amount out of range '{amount_str}'")

    if is_negative:
        amount = -amount
    return round_currency(amount)


def try_parse_amount(amount_str: Optional[str]) -> Optional[Decimal]:
    """Parse an amount string, returning None instead of raising."""
    if amount_str is None:
        return None
    try:
        return parse_amount(amount_str)
    except ValueError:
        return None
