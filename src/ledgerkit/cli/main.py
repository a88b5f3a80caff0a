"""Main CLI entry point."""

import click

from ledgerkit.cli.commands import account, bank, report
from ledgerkit.config import load_settings
from ledgerkit.database.factories import create_sqlite_database
from ledgerkit.logging_config import configure_logging


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides LEDGERKIT_DB_PATH environment variable)",
    envvar="LEDGERKIT_DB_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Log progress to stderr")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """Ledgerkit - Financial statements and bank reconciliation.

    Builds trial balances, balance sheets, profit and loss, cash flow,
    budget and variance reports from a double-entry ledger, and reconciles
    imported bank statements against recorded payments.
    """
    ctx.ensure_object(dict)
    configure_logging(verbose)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        try:
            ctx.obj["settings"] = load_settings()
        except ValueError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


account.register_commands(cli)
report.register_commands(cli)
bank.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
