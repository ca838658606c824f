"""Category management commands."""

import click
from budgetbook.domain.category import CategoryService
from budgetbook.domain.entities import TransactionType
from budgetbook.cli.error_handling import handle_domain_error

TYPE_CHOICE = click.Choice(["expense", "income"], case_sensitive=False)


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("list")
@click.option("--type", "category_type", type=TYPE_CHOICE, help="Only list one type")
@click.pass_context
def list_categories(ctx, category_type: str | None):
    """List categories by type, in sort order."""
    service = CategoryService(ctx.obj["db"], ctx.obj["owner"])

    type_filter = TransactionType(category_type.upper()) if category_type else None
    categories = service.list_categories(type_filter)
    if not categories:
        click.echo("No categories found.")
        return

    click.echo("\nCategories:")
    click.echo("-" * 60)
    for cat in categories:
        status = "" if cat.active else " (inactive)"
        click.echo(
            f"ID: {cat.id:3d} | {cat.type.value:7s} | {cat.sort_order:3d} | {cat.name}{status}"
        )


@category_group.command("create")
@click.argument("name")
@click.option(
    "--type",
    "category_type",
    type=TYPE_CHOICE,
    default="expense",
    help="Category type (default: expense)",
)
@click.option("--sort-order", type=int, default=0, help="Position within its type")
@click.pass_context
def create_category(ctx, name: str, category_type: str, sort_order: int):
    """Create a new category."""
    service = CategoryService(ctx.obj["db"], ctx.obj["owner"])

    try:
        category = service.create_category(
            name=name,
            category_type=TransactionType(category_type.upper()),
            sort_order=sort_order,
        )
        click.echo(f"Created {category.type.value.lower()} category '{category.name}' (ID: {category.id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@category_group.command("update")
@click.argument("category_id", type=int)
@click.option("--name", help="New name")
@click.option("--sort-order", type=int, help="New sort order")
@click.option("--active/--inactive", default=None, help="Activate or deactivate")
@click.pass_context
def update_category(
    ctx, category_id: int, name: str | None, sort_order: int | None, active: bool | None
):
    """Update a category.

    Examples:
        budgetbook category update 3 --name "Groceries"
        budgetbook category update 3 --inactive
    """
    service = CategoryService(ctx.obj["db"], ctx.obj["owner"])

    try:
        category = service.update_category(
            category_id, name=name, sort_order=sort_order, active=active
        )
        click.echo(f"Updated category '{category.name}' (ID: {category.id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@category_group.command("delete")
@click.argument("category_id", type=int)
@click.pass_context
def delete_category(ctx, category_id: int):
    """Delete a category that no plan or transaction uses."""
    service = CategoryService(ctx.obj["db"], ctx.obj["owner"])

    try:
        service.delete_category(category_id)
        click.echo(f"Deleted category {category_id}")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
