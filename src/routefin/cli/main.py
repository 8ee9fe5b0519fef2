"""Main CLI entry point."""

import click
from routefin.database.factories import create_sqlite_database
from routefin.cli.logging_config import LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL, configure_logging

# Import and register all commands at module level
from routefin.cli.commands import (
    route,
    account,
    ledger,
    loan,
    report,
    cache,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides ROUTEFIN_DB_PATH environment variable)",
    envvar="ROUTEFIN_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=DEFAULT_LOG_LEVEL,
    show_default=True,
    help="Logging level (overrides ROUTEFIN_LOG_LEVEL environment variable)",
    envvar=LOG_LEVEL_ENV_VAR,
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str):
    """Routefin - Route microfinance ledger and financial reports.

    Record route expenses, incomes and loans, and build monthly financial
    reports for one route or a combination of routes.
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
        ctx.call_on_close(db.disconnect)


# Register all commands
route.register_commands(cli)
account.register_commands(cli)
ledger.register_commands(cli)
loan.register_commands(cli)
report.register_commands(cli)
cache.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
