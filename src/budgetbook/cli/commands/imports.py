"""Import ledger commands."""

import click
from budgetbook.domain.csv_import import CSVImportService
from budgetbook.cli.error_handling import handle_domain_error


@click.group()
def imports_group():
    """Inspect past statement imports."""
    pass


@imports_group.command("list")
@click.option("--account", "account_id", type=int, help="Only show imports into this account")
@click.pass_context
def list_imports(ctx, account_id: int | None):
    """List import batches, newest first."""
    service = CSVImportService(ctx.obj["db"], ctx.obj["owner"])

    batches = service.list_batches(account_id)
    if not batches:
        click.echo("No imports found.")
        return

    click.echo("\nImports:")
    click.echo("-" * 100)
    click.echo(
        f"{'ID':>4} {'Created':<19} {'Account':>7} {'Status':<24} {'Ins':>5} {'Dup':>5} {'Err':>5} {'Warn':>5}  Source"
    )
    click.echo("-" * 100)
    for batch in batches:
        created = batch.created_at.strftime("%Y-%m-%d %H:%M:%S") if batch.created_at else ""
        click.echo(
            f"{batch.id:>4} {created:<19} {batch.account_id:>7} {batch.status.value:<24} "
            f"{batch.inserted_count:>5} {batch.skipped_duplicates:>5} "
            f"{batch.parse_error_count:>5} {batch.warning_count:>5}  {batch.source_name}"
        )


@imports_group.command("show")
@click.argument("batch_id", type=int)
@click.pass_context
def show_import(ctx, batch_id: int):
    """Show an import batch and its issues."""
    service = CSVImportService(ctx.obj["db"], ctx.obj["owner"])

    try:
        batch = service.get_batch(batch_id)
        issues = service.get_batch_issues(batch_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"\nImport {batch.id}: {batch.source_name}")
    click.echo(f"  Account: {batch.account_id}")
    click.echo(f"  Status: {batch.status.value}")
    click.echo(f"  Inserted: {batch.inserted_count}")
    click.echo(f"  Skipped duplicates: {batch.skipped_duplicates}")
    click.echo(f"  Parse errors: {batch.parse_error_count}")
    click.echo(f"  Warnings: {batch.warning_count}")

    if issues:
        click.echo("\nIssues:")
        for issue in issues:
            row = f"row {issue.row_number}" if issue.row_number is not None else "file"
            click.echo(f"  {issue.severity.value:<7} {row}: {issue.message}")


def register_commands(cli):
    """Register import ledger commands with main CLI."""
    cli.add_command(imports_group, name="imports")
