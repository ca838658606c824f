"""Account management commands."""

import click
from budgetbook.domain.account import AccountService
from budgetbook.cli.error_handling import handle_domain_error


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--institution", help="Bank or institution name")
@click.option("--last4", help="Last four digits of the account number")
@click.pass_context
def create_account(ctx, name: str, institution: str | None, last4: str | None):
    """Create a new account.

    Examples:
        budgetbook account create "Checking"
        budgetbook account create "Visa" --institution "Chase" --last4 1234
    """
    service = AccountService(ctx.obj["db"], ctx.obj["owner"])

    try:
        account = service.create_account(name=name, institution_name=institution, last4=last4)
        click.echo(f"Created account '{account.name}' (ID: {account.id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@account_group.command("list")
@click.option("--all", "include_inactive", is_flag=True, help="Include inactive accounts")
@click.pass_context
def list_accounts(ctx, include_inactive: bool):
    """List accounts."""
    service = AccountService(ctx.obj["db"], ctx.obj["owner"])

    accounts = service.list_accounts(include_inactive=include_inactive)
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 60)
    for acc in accounts:
        details = " | ".join(
            part
            for part in (
                acc.institution_name,
                f"****{acc.last4}" if acc.last4 else None,
                None if acc.active else "inactive",
            )
            if part
        )
        line = f"ID: {acc.id:3d} | {acc.name:20s}"
        click.echo(f"{line} | {details}" if details else line)


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
