"""Budget plan commands."""

import click
from budgetbook.domain.plan import PlanService
from budgetbook.domain.entities import TransactionType
from budgetbook.utils.amount_parser import parse_amount
from budgetbook.cli.error_handling import handle_domain_error
from budgetbook.cli.month_options import resolve_cli_month

TYPE_CHOICE = click.Choice(["expense", "income"], case_sensitive=False)


@click.group()
def plan_group():
    """Manage planned amounts per category."""
    pass


@plan_group.command("list")
@click.option("--month", help="Month (YYYY-MM)")
@click.option("--this-month", is_flag=True, help="Use the current month")
@click.option("--last-month", is_flag=True, help="Use the previous month")
@click.option("--type", "category_type", type=TYPE_CHOICE, default="expense", help="Category type")
@click.pass_context
def list_plans(ctx, month: str | None, this_month: bool, last_month: bool, category_type: str):
    """List planned amounts for a month."""
    service = PlanService(ctx.obj["db"], ctx.obj["owner"])
    month_key = resolve_cli_month(
        ctx, month=month, period_flags={"this-month": this_month, "last-month": last_month}
    )

    try:
        items = service.list_plans(month_key, TransactionType(category_type.upper()))
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    if not items:
        click.echo("No categories found.")
        return

    click.echo(f"\nPlan for {month_key} ({category_type.lower()}):")
    click.echo("-" * 60)
    for item in items:
        click.echo(f"ID: {item.category_id:3d} | {item.category_name:30s} {item.planned_amount:>12,.2f}")


@plan_group.command("set")
@click.argument("category_id", type=int)
@click.argument("amount")
@click.option("--month", help="Month (YYYY-MM)")
@click.option("--this-month", is_flag=True, help="Use the current month")
@click.option("--last-month", is_flag=True, help="Use the previous month")
@click.option("--type", "category_type", type=TYPE_CHOICE, default="expense", help="Category type")
@click.pass_context
def set_plan(
    ctx,
    category_id: int,
    amount: str,
    month: str | None,
    this_month: bool,
    last_month: bool,
    category_type: str,
):
    """Set the planned amount of a category.

    Examples:
        budgetbook plan set 4 500 --month 2024-03
        budgetbook plan set 9 3000 --type income
    """
    service = PlanService(ctx.obj["db"], ctx.obj["owner"])
    month_key = resolve_cli_month(
        ctx, month=month, period_flags={"this-month": this_month, "last-month": last_month}
    )

    try:
        planned = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        service.upsert_plans(
            month_key, TransactionType(category_type.upper()), {category_id: planned}
        )
        click.echo(f"Planned {planned:,.2f} for category {category_id} in {month_key}")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register plan commands with main CLI."""
    cli.add_command(plan_group, name="plan")
