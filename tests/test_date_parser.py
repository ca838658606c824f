"""Tests for date and month parsing utilities."""

from datetime import date, timedelta

import pytest

from budgetbook.utils.date_parser import (
    month_key,
    parse_month,
    parse_statement_date,
    resolve_month,
)


def test_parse_iso_date():
    """ISO dates are accepted."""
    assert parse_statement_date("2024-01-15") == date(2024, 1, 15)
    assert parse_statement_date(" 2024-01-15 ") == date(2024, 1, 15)


def test_parse_slash_year_first():
    """Year-first slash dates allow single-digit parts."""
    assert parse_statement_date("2024/1/5") == date(2024, 1, 5)
    assert parse_statement_date("2024/12/31") == date(2024, 12, 31)


def test_parse_slash_month_first():
    """Slash dates are read month first."""
    assert parse_statement_date("03/04/2024") == date(2024, 3, 4)
    assert parse_statement_date("1/2/2024") == date(2024, 1, 2)


def test_parse_slash_day_first_fallback():
    """Day first is used when month first is not a calendar date."""
    assert parse_statement_date("15/01/2024") == date(2024, 1, 15)
    assert parse_statement_date("31/12/2023") == date(2023, 12, 31)


@pytest.mark.parametrize(
    "raw",
    [None, "", "   ", "2023-02-30", "2024-13-01", "2024-1-5", "Jan 5 2024", "20240105", "32/13/2024"],
)
def test_parse_invalid_dates(raw):
    """Other formats and impossible dates yield None."""
    assert parse_statement_date(raw) is None


def test_iso_round_trip():
    """Formatting a date as ISO and parsing it back returns the same date."""
    day = date(2023, 12, 25)
    for _ in range(400):
        assert parse_statement_date(day.isoformat()) == day
        day += timedelta(days=1)


def test_leap_day():
    """Feb 29 only parses in leap years."""
    assert parse_statement_date("2024-02-29") == date(2024, 2, 29)
    assert parse_statement_date("2023-02-29") is None


def test_month_key():
    """month_key renders YYYY-MM."""
    assert month_key(date(2024, 3, 9)) == "2024-03"


def test_parse_month():
    """Valid month keys parse to the first of the month."""
    assert parse_month("2024-03") == date(2024, 3, 1)


@pytest.mark.parametrize(
    "raw", ["2024-13", "2024-00", "2024-3", "202403", "", "March", " 2024-03", "2024-03\n"]
)
def test_parse_month_invalid(raw):
    """Malformed month keys raise ValueError."""
    with pytest.raises(ValueError, match="Invalid month"):
        parse_month(raw)


def test_resolve_month_relative():
    """Relative periods resolve against the given day."""
    today = date(2024, 1, 31)
    assert resolve_month("this-month", today) == "2024-01"
    assert resolve_month("last-month", today) == "2023-12"
    assert resolve_month("next-month", today) == "2024-02"
    assert resolve_month("2022-07", today) == "2022-07"


def test_resolve_month_invalid():
    """Unknown periods raise ValueError."""
    with pytest.raises(ValueError):
        resolve_month("someday", date(2024, 1, 1))
