"""CSV statement import command."""

import click
from budgetbook.domain.csv_import import CSVImportService
from budgetbook.domain.entities import ColumnMapping, StatementImportStatus
from budgetbook.cli.error_handling import handle_domain_error

# Exit code when the file needs column indexes before it can be imported
MAPPING_REQUIRED_EXIT_CODE = 2


def _echo_issues(title: str, issues) -> None:
    click.echo(f"  {title}: {len(issues)}")
    for issue in issues:
        row = f"Row {issue.row_number}: " if issue.row_number is not None else ""
        click.echo(f"    {row}{issue.message}", err=True)


def _echo_mapping_prompt(prompt) -> None:
    click.echo(prompt.message)
    click.echo(f"\nColumns: {prompt.column_count}")
    for index, value in enumerate(prompt.sample_row):
        click.echo(f"  [{index}] {value if value is not None else ''}")

    suggestions = {
        "--date-column": prompt.suggested_date_column_index,
        "--amount-column": prompt.suggested_amount_column_index,
        "--description-column": prompt.suggested_description_column_index,
        "--category-column": prompt.suggested_category_column_index,
        "--external-id-column": prompt.suggested_external_id_column_index,
    }
    suggested = " ".join(
        f"{option} {index}" for option, index in suggestions.items() if index is not None
    )
    if suggested:
        click.echo(f"\nSuggested: {suggested}")


@click.command("import")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--account", "account_id", type=int, required=True, help="Account ID to import into")
@click.option("--date-column", type=int, help="Date column index (headerless files)")
@click.option("--amount-column", type=int, help="Amount column index (headerless files)")
@click.option("--description-column", type=int, help="Description column index (headerless files)")
@click.option("--category-column", type=int, help="Category column index (optional)")
@click.option("--external-id-column", type=int, help="Bank transaction ID column index (optional)")
@click.option("--save-mapping", is_flag=True, help="Remember the column indexes for this account")
@click.pass_context
def import_csv(
    ctx,
    csv_file: str,
    account_id: int,
    date_column: int | None,
    amount_column: int | None,
    description_column: int | None,
    category_column: int | None,
    external_id_column: int | None,
    save_mapping: bool,
):
    """Import transactions from a bank statement CSV file.

    Files with a header row are mapped automatically. For files without one,
    pass the column indexes (0-based); run without them first to see
    suggestions.

    Examples:
        budgetbook import statement.csv --account 1
        budgetbook import export.csv --account 1 --date-column 0 --amount-column 1 --description-column 2 --save-mapping
    """
    service = CSVImportService(ctx.obj["db"], ctx.obj["owner"])

    required = (date_column, amount_column, description_column)
    optional_given = category_column is not None or external_id_column is not None or save_mapping
    mapping = None
    if any(value is not None for value in required) or optional_given:
        if any(value is None for value in required):
            click.echo(
                "Error: --date-column, --amount-column and --description-column must be given "
                "together (also required by --category-column, --external-id-column and --save-mapping).",
                err=True,
            )
            ctx.exit(1)
        mapping = ColumnMapping(
            date_column_index=date_column,
            amount_column_index=amount_column,
            description_column_index=description_column,
            category_column_index=category_column,
            external_id_column_index=external_id_column,
            save_header_mapping=save_mapping,
        )

    try:
        result = service.import_file(account_id, csv_file, mapping)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    if result.status == StatementImportStatus.HEADER_MAPPING_REQUIRED:
        _echo_mapping_prompt(result.header_mapping_prompt)
        ctx.exit(MAPPING_REQUIRED_EXIT_CODE)

    summary = result.summary
    click.echo("\nImport complete:")
    click.echo(f"  Batch: {summary.import_batch_id}")
    click.echo(f"  Imported: {summary.inserted} transactions")
    click.echo(f"  Skipped: {summary.skipped_duplicates} duplicates")
    if summary.parse_errors:
        _echo_issues("Errors", summary.parse_errors)
    if summary.warnings:
        _echo_issues("Warnings", summary.warnings)


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_csv)
