"""Tests for CLI month option helper."""

from datetime import date

import click
import pytest

from budgetbook.cli.month_options import resolve_cli_month
from budgetbook.utils.date_parser import month_key


def _ctx() -> click.Context:
    return click.Context(click.Command("test"))


def test_resolve_cli_month_rejects_multiple_periods(capsys):
    period_flags = {"this-month": True, "last-month": True}

    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_month(_ctx(), month=None, period_flags=period_flags)

    assert excinfo.value.exit_code == 1
    err = capsys.readouterr().err
    assert "Only one period option" in err


def test_resolve_cli_month_rejects_period_with_month(capsys):
    period_flags = {"this-month": True}

    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_month(_ctx(), month="2024-03", period_flags=period_flags)

    assert excinfo.value.exit_code == 1
    err = capsys.readouterr().err
    assert "cannot be combined" in err


def test_resolve_cli_month_explicit_month():
    period_flags = {"this-month": False, "last-month": False}

    assert resolve_cli_month(_ctx(), month="2024-03", period_flags=period_flags) == "2024-03"


def test_resolve_cli_month_defaults_to_current_month():
    period_flags = {"this-month": False, "last-month": False}

    assert resolve_cli_month(_ctx(), month=None, period_flags=period_flags) == month_key(
        date.today()
    )


def test_resolve_cli_month_invalid_month(capsys):
    period_flags = {"this-month": False}

    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_month(_ctx(), month="March", period_flags=period_flags)

    assert excinfo.value.exit_code == 1
    assert "Invalid month" in capsys.readouterr().err
