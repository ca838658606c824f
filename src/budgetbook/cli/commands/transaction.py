"""Transaction management commands."""

import click
from budgetbook.domain.transaction import TransactionService
from budgetbook.domain.entities import TransactionType
from budgetbook.utils.amount_parser import parse_amount
from budgetbook.utils.date_parser import month_key, parse_statement_date
from budgetbook.cli.error_handling import handle_domain_error
from budgetbook.cli.month_options import resolve_cli_month

TYPE_CHOICE = click.Choice(["expense", "income"], case_sensitive=False)


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("add")
@click.option("--date", "date_str", required=True, help="Transaction date (YYYY-MM-DD)")
@click.option("--amount", required=True, help="Transaction amount (e.g., 42.50)")
@click.option("--description", required=True, help="Transaction description")
@click.option("--category", "category_id", type=int, required=True, help="Category ID")
@click.option("--type", "txn_type", type=TYPE_CHOICE, default="expense", help="Transaction type (default: expense)")
@click.option("--account", "account_id", type=int, help="Account ID (defaults to the Primary account)")
@click.pass_context
def add_transaction(
    ctx,
    date_str: str,
    amount: str,
    description: str,
    category_id: int,
    txn_type: str,
    account_id: int | None,
):
    """Add a transaction manually.

    Examples:
        budgetbook transaction add --date 2024-03-05 --amount 42.50 --description "Groceries" --category 4
        budgetbook transaction add --date 2024-03-01 --amount 3000 --description "Salary" --category 9 --type income
    """
    service = TransactionService(ctx.obj["db"], ctx.obj["owner"])

    txn_date = parse_statement_date(date_str)
    if txn_date is None:
        click.echo(f"Error: Invalid date format: {date_str}", err=True)
        ctx.exit(1)

    try:
        txn_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        txn = service.create_transaction(
            month=month_key(txn_date),
            transaction_type=TransactionType(txn_type.upper()),
            txn_date=txn_date,
            amount=txn_amount,
            description=description,
            category_id=category_id,
            account_id=account_id,
        )
        click.echo(f"Created transaction {txn.id}: {txn.date} {txn.amount:,.2f} {txn.description}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@transaction_group.command("list")
@click.option("--month", help="Month (YYYY-MM); defaults to the current month")
@click.option("--this-month", is_flag=True, help="List the current month")
@click.option("--last-month", is_flag=True, help="List the previous month")
@click.option("--type", "txn_type", type=TYPE_CHOICE, help="Only list one type")
@click.option("--account", "account_id", type=int, help="Only list one account")
@click.pass_context
def list_transactions(
    ctx,
    month: str | None,
    this_month: bool,
    last_month: bool,
    txn_type: str | None,
    account_id: int | None,
):
    """List a month's transactions, newest first."""
    service = TransactionService(ctx.obj["db"], ctx.obj["owner"])
    month_value = resolve_cli_month(
        ctx, month=month, period_flags={"this-month": this_month, "last-month": last_month}
    )

    type_filter = TransactionType(txn_type.upper()) if txn_type else None
    try:
        transactions = service.list_transactions(
            month_value, transaction_type=type_filter, account_id=account_id
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\nTransactions for {month_value}:")
    click.echo("-" * 100)
    click.echo(f"{'ID':>5} {'Date':<10} {'Type':<7} {'Amount':>12} {'Cat':>4} {'Acct':>4} Description")
    click.echo("-" * 100)
    for txn in transactions:
        click.echo(
            f"{txn.id:>5} {txn.date.isoformat():<10} {txn.type.value:<7} {txn.amount:>12,.2f} "
            f"{txn.category_id:>4} {txn.account_id:>4} {txn.description}"
        )


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: int, yes: bool):
    """Delete a transaction."""
    service = TransactionService(ctx.obj["db"], ctx.obj["owner"])

    if not yes and not click.confirm(f"Are you sure you want to delete transaction {transaction_id}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_transaction(transaction_id)
        click.echo(f"Deleted transaction {transaction_id}")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
