"""Month summary command."""

import click
from budgetbook.domain.summary import SummaryService
from budgetbook.cli.error_handling import handle_domain_error
from budgetbook.cli.month_options import resolve_cli_month


def _display_section(title: str, rows, totals) -> None:
    click.echo(title)
    click.echo("*" * 80)
    for row in rows:
        click.echo(
            f"    {row.category_name:<36} {row.planned:>12,.2f} {row.actual:>12,.2f} {row.diff:>12,.2f}"
        )
    click.echo("-" * 80)
    click.echo(
        f"{title + ' Total':<40} {totals.planned:>12,.2f} {totals.actual:>12,.2f} {totals.diff:>12,.2f}"
    )
    click.echo("=" * 80)


@click.command("summary")
@click.option("--month", help="Month (YYYY-MM); defaults to the current month")
@click.option("--this-month", is_flag=True, help="Summarize the current month")
@click.option("--last-month", is_flag=True, help="Summarize the previous month")
@click.pass_context
def summary(ctx, month: str | None, this_month: bool, last_month: bool):
    """Show planned vs. actual amounts per category for a month."""
    service = SummaryService(ctx.obj["db"], ctx.obj["owner"])
    month_key = resolve_cli_month(
        ctx, month=month, period_flags={"this-month": this_month, "last-month": last_month}
    )

    try:
        result = service.build_month_summary(month_key)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"\nSummary for {result.month}:")
    click.echo("-" * 80)
    click.echo(f"{'Category':<40} {'Planned':>12} {'Actual':>12} {'Diff':>12}")
    click.echo("-" * 80)
    _display_section("Income", result.income_categories, result.income_totals)
    click.echo()
    _display_section("Expense", result.expense_categories, result.expense_totals)
    click.echo()
    click.echo(f"{'Starting balance':<40} {result.starting_balance:>12,.2f}")
    click.echo(f"{result.savings_label:<40} {result.net_change:>12,.2f}")
    click.echo(f"{'Ending balance':<40} {result.ending_balance:>12,.2f}")


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)
