"""Main CLI entry point."""

import click
from pettycash.database.factories import create_sqlite_database
from pettycash.domain.session import SessionContext
from pettycash.logging_utils import configure_logging

# Import and register all commands at module level
from pettycash.cli.commands import (
    user,
    session,
    expense,
    funds,
    balance,
    dashboard,
)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides PETTYCASH_DB_PATH environment variable)",
    envvar="PETTYCASH_DB_PATH",
)
@click.option(
    "--session-path",
    type=click.Path(),
    help="Path to the login session file (overrides PETTYCASH_SESSION_PATH)",
    envvar="PETTYCASH_SESSION_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity (overrides PETTYCASH_LOG_LEVEL)",
    envvar="PETTYCASH_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, db_path: str | None, session_path: str | None, log_level: str):
    """Pettycash - Petty cash and expense tracking.

    Track company, personal and salary balances per user, submit expenses
    against the company balance and keep an append-only ledger of every
    balance change.
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
        ctx.obj["db_path"] = db_path
        ctx.obj["session"] = SessionContext(session_path)
        ctx.obj["session"].load()
        ctx.call_on_close(db.disconnect)


# Register all commands
user.register_commands(cli)
session.register_commands(cli)
expense.register_commands(cli)
funds.register_commands(cli)
balance.register_commands(cli)
dashboard.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
