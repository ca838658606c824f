"""Main CLI entry point."""

import click
from budgetbook.database.factories import create_sqlite_database
from budgetbook.logging_setup import configure_logging

# Import and register all commands at module level
from budgetbook.cli.commands import (
    account,
    balance,
    category,
    import_cmd,
    imports,
    plan,
    summary,
    transaction,
)

DEFAULT_OWNER = "local"


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides BUDGETBOOK_DB_PATH environment variable)",
    envvar="BUDGETBOOK_DB_PATH",
)
@click.option(
    "--owner",
    default=DEFAULT_OWNER,
    show_default=True,
    envvar="BUDGETBOOK_OWNER",
    help="Owner whose data the command works on",
)
@click.option(
    "--log-level",
    envvar="BUDGETBOOK_LOG_LEVEL",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level for diagnostics on stderr (default: WARNING)",
)
@click.pass_context
def cli(ctx, db_path: str | None, owner: str, log_level: str | None):
    """Budgetbook - monthly budget and bank statement tracking.

    Import CSV statements from any bank, skip duplicates across repeated
    imports, and compare planned against actual spending per month.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["owner"] = owner


# Register all commands
account.register_commands(cli)
category.register_commands(cli)
plan.register_commands(cli)
import_cmd.register_commands(cli)
imports.register_commands(cli)
summary.register_commands(cli)
balance.register_commands(cli)
transaction.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
