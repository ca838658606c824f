"""Utility functions for budgetbook."""

from budgetbook.utils.date_parser import parse_statement_date, parse_month, resolve_month
from budgetbook.utils.amount_parser import parse_amount, try_parse_amount, round_currency
from budgetbook.utils.fingerprint import build_fingerprint

__all__ = [
    "parse_statement_date",
    "parse_month",
    "resolve_month",
    "parse_amount",
    "try_parse_amount",
    "round_currency",
    "build_fingerprint",
]
