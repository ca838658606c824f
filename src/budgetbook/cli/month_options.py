"""CLI helpers for month resolution."""

import click

from budgetbook.utils.date_parser import resolve_month


def resolve_cli_month(ctx, *, month: str | None, period_flags: dict[str, bool]) -> str:
    """Resolve a month key from --month or a relative period flag.

    Defaults to the current month when nothing is given.
    """
    period_count = sum(1 for is_set in period_flags.values() if is_set)

    if period_count > 1:
        click.echo(
            "Error: Only one period option (--this-month, --last-month) can be specified at a time.",
            err=True,
        )
        ctx.exit(1)

    if period_count > 0 and month:
        click.echo("Error: Period options cannot be combined with --month.", err=True)
        ctx.exit(1)

    period = month or next(
        (name for name, is_set in period_flags.items() if is_set), "this-month"
    )
    try:
        return resolve_month(period)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
