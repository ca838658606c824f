"""Month starting balance commands."""

import click
from budgetbook.domain.summary import SummaryService
from budgetbook.utils.amount_parser import parse_amount
from budgetbook.cli.error_handling import handle_domain_error


@click.group()
def balance_group():
    """Manage month starting balances."""
    pass


@balance_group.command("set")
@click.argument("month")
@click.argument("amount")
@click.pass_context
def set_balance(ctx, month: str, amount: str):
    """Set the starting balance of a month.

    Negative amounts can be written in parentheses or after "--".

    Examples:
        budgetbook balance set 2024-03 2500
        budgetbook balance set 2024-03 "(120.00)"
    """
    service = SummaryService(ctx.obj["db"], ctx.obj["owner"])

    try:
        starting_balance = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        settings = service.set_starting_balance(month, starting_balance)
        click.echo(f"Starting balance for {settings.month_key}: {settings.starting_balance:,.2f}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@balance_group.command("show")
@click.argument("month")
@click.pass_context
def show_balance(ctx, month: str):
    """Show the starting balance of a month."""
    service = SummaryService(ctx.obj["db"], ctx.obj["owner"])

    try:
        settings = service.get_month_settings(month)
        click.echo(f"Starting balance for {settings.month_key}: {settings.starting_balance:,.2f}")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register balance commands with main CLI."""
    cli.add_command(balance_group, name="balance")
