"""Fund crediting and ledger commands."""

import click
from pettycash.domain.account import AccountService
from pettycash.domain.entities import Pool
from pettycash.domain.ledger import DEFAULT_PAGE_SIZE, LedgerService
from pettycash.domain.mutator import BalanceMutator
from pettycash.cli.account_resolution import (
    require_admin,
    require_login,
    resolve_account_or_exit,
    target_account_or_exit,
)
from pettycash.cli.error_handling import handle_delta_result, handle_domain_error
from pettycash.cli.input_parsing import (
    format_amount,
    parse_amount_or_exit,
    parse_date_or_exit,
    parse_month_or_exit,
)

POOL_CHOICES = [pool.value for pool in Pool]


@click.group()
def funds_group():
    """Credit balances and browse the ledger."""
    pass


@funds_group.command("add")
@click.argument("account", metavar="USER")
@click.option("--amount", required=True, help="Amount to credit")
@click.option(
    "--type",
    "pool",
    required=True,
    type=click.Choice(POOL_CHOICES, case_sensitive=False),
    help="Balance to credit",
)
@click.option("--month", help="Salary month (YYYY-MM), required for --type salary")
@click.option("--description", help="Note stored with the ledger entry")
@click.pass_context
def add_funds(
    ctx, account: str, amount: str, pool: str, month: str | None, description: str | None
):
    """Credit USER's company, personal or salary balance (admin only).

    USER can be a user name or ID.

    Examples:
        pettycash funds add "Asha" --amount 5000 --type company
        pettycash funds add 3 --amount 25000 --type salary --month 2024-03
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    require_admin(ctx, account_service)
    account_id = resolve_account_or_exit(ctx, account_service, account)
    credit = parse_amount_or_exit(ctx, amount)
    period = parse_month_or_exit(ctx, month)

    result = BalanceMutator(db).add_funds(
        account_id, pool, credit, description=description, period=period
    )
    handle_delta_result(ctx, result)

    target = account_service.require_account(account_id)
    click.echo(
        f"Added {format_amount(result.amount)} to {result.pool.value} balance of '{target.name}'"
    )
    click.echo(f"New {result.pool.value} balance: {format_amount(result.new_balance)}")


@funds_group.command("list")
@click.option("--user", "account", help="User name or ID (admins see everyone by default)")
@click.option(
    "--type",
    "pool",
    type=click.Choice(POOL_CHOICES + ["all"], case_sensitive=False),
    default="all",
    show_default=True,
)
@click.option("--date", "on_date", help="Only entries created on this day")
@click.option("--search", help="Text to look for in the description or user name")
@click.option("--page", type=int, default=1, show_default=True)
@click.option("--page-size", type=int, default=DEFAULT_PAGE_SIZE, show_default=True)
@click.pass_context
def list_funds(
    ctx,
    account: str | None,
    pool: str,
    on_date: str | None,
    search: str | None,
    page: int,
    page_size: int,
):
    """List ledger entries, newest first.

    Admins see every user's entries unless --user is given; other users
    only ever see their own.
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    current = require_login(ctx, account_service)
    if account is None and current.is_admin:
        user_id = None
    else:
        user_id = target_account_or_exit(ctx, account_service, account).id
    day = parse_date_or_exit(ctx, on_date)

    try:
        result = LedgerService(db).list_entries(
            user_id=user_id,
            pool=pool,
            on_date=day,
            search=search,
            page=page,
            page_size=page_size,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not result.items:
        click.echo("No ledger entries found.")
        return

    click.echo(f"\nLedger (page {result.page} of {result.total_pages}, {result.total} total):")
    click.echo("-" * 100)
    for entry in result.items:
        stamp = entry.created_at.strftime("%Y-%m-%d %H:%M")
        who = entry.actor_name or f"#{entry.user_id}"
        month = f" [{entry.salary_month:%Y-%m}]" if entry.salary_month else ""
        click.echo(
            f"{entry.id:5d} | {stamp} | {who:15s} | {entry.pool.value:8s} | "
            f"{format_amount(entry.amount):>12s}{month} | {entry.description or ''}"
        )


def register_commands(cli):
    """Register funds commands with main CLI."""
    cli.add_command(funds_group, name="funds")
