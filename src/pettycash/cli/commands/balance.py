"""Balance commands."""

import click
from pettycash.database.factories import create_sqlite_database
from pettycash.domain.account import AccountService
from pettycash.domain.entities import BalanceSnapshot, Pool
from pettycash.domain.reports import ReportService
from pettycash.domain.session import DEFAULT_REFRESH_INTERVAL, BalanceRefresher
from pettycash.cli.account_resolution import require_login, target_account_or_exit
from pettycash.cli.input_parsing import format_amount


@click.group()
def balance_group():
    """Show balances."""
    pass


def echo_snapshot(snapshot: BalanceSnapshot) -> None:
    click.echo(f"Balances of '{snapshot.name}':")
    for pool in Pool:
        click.echo(f"  {pool.value.capitalize():9s} {format_amount(snapshot.balance(pool)):>14s}")


@balance_group.command("show")
@click.argument("account", metavar="USER", required=False)
@click.pass_context
def show_balance(ctx, account: str | None):
    """Show current balances.

    Without USER this shows your own balances. Other users' balances are
    visible to admins only.
    """
    db = ctx.obj["db"]
    target = target_account_or_exit(ctx, AccountService(db), account)
    echo_snapshot(ReportService(db).balance_snapshot(target.id))


@balance_group.command("watch")
@click.option(
    "--interval",
    type=click.FloatRange(min=0, min_open=True),
    default=DEFAULT_REFRESH_INTERVAL,
    show_default=True,
    help="Seconds between refreshes",
)
@click.option("--count", type=click.IntRange(min=1), help="Stop after this many refreshes")
@click.pass_context
def watch_balance(ctx, interval: float, count: int | None):
    """Keep showing your balances as they change. Stop with Ctrl+C."""
    require_login(ctx, AccountService(ctx.obj["db"]))
    session = ctx.obj["session"]
    db_path = ctx.obj.get("db_path")

    def open_database():
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        return db

    refresher = BalanceRefresher(
        open_database, session, interval=interval, on_refresh=echo_snapshot
    )
    refresher.start()
    try:
        while not refresher.wait(timeout=0.05):
            if count is not None and refresher.refresh_count >= count:
                break
    except KeyboardInterrupt:
        pass
    finally:
        refresher.stop()

    if not session.is_logged_in:
        click.echo("Session ended: the account no longer exists.", err=True)
        ctx.exit(1)


def register_commands(cli):
    """Register balance commands with main CLI."""
    cli.add_command(balance_group, name="balance")
