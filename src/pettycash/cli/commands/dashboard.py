"""Dashboard command."""

import click
from pettycash.domain.account import AccountService
from pettycash.domain.entities import Account, Pool
from pettycash.domain.reports import ReportService
from pettycash.cli.account_resolution import require_login
from pettycash.cli.commands.balance import echo_snapshot
from pettycash.cli.input_parsing import format_amount


@click.command("dashboard")
@click.option("--recent", type=click.IntRange(min=0), default=5, show_default=True,
              help="Number of recent expenses to show")
@click.pass_context
def dashboard(ctx, recent: int):
    """Show an overview for the logged-in user.

    Admins get totals over every user; other users see their own balances
    and expenses.
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    reports = ReportService(db)
    current = require_login(ctx, account_service)

    if current.is_admin:
        _admin_overview(reports, recent)
    else:
        _user_overview(reports, current, recent)


def _admin_overview(reports: ReportService, recent: int) -> None:
    stats = reports.expense_stats()
    funds = reports.fund_totals()

    click.echo("Admin dashboard")
    click.echo("=" * 60)
    click.echo(f"Company balance: {format_amount(reports.company_total())}")
    click.echo(f"Users:           {reports.user_count()}")
    click.echo(f"Expenses:        {stats.count}")
    click.echo(f"Total expenses:  {format_amount(stats.total)}")
    click.echo("\nFunds credited:")
    for pool in Pool:
        click.echo(f"  {pool.value.capitalize():9s} {format_amount(funds[pool]):>14s}")

    totals = reports.user_totals()
    if totals:
        click.echo("\nExpenses by user:")
        for row in totals:
            name = row.name or f"(deleted #{row.user_id})"
            click.echo(f"  {name:20s} {row.count:5d} {format_amount(row.total):>14s}")

    _recent(reports, recent, user_id=None)


def _user_overview(reports: ReportService, account: Account, recent: int) -> None:
    stats = reports.expense_stats(user_id=account.id)

    click.echo(f"Dashboard for '{account.name}'")
    click.echo("=" * 60)
    echo_snapshot(reports.balance_snapshot(account.id))
    if account.salary is not None:
        click.echo(f"Monthly salary: {format_amount(account.salary)}")
    click.echo(f"\nExpenses: {stats.count} totalling {format_amount(stats.total)}")

    _recent(reports, recent, user_id=account.id)


def _recent(reports: ReportService, limit: int, user_id: int | None) -> None:
    expenses = reports.recent_expenses(limit=limit, user_id=user_id)
    if not expenses:
        return
    click.echo("\nRecent expenses:")
    for expense in expenses:
        click.echo(
            f"  {expense.created_at:%Y-%m-%d} | {expense.category:15s} | "
            f"{format_amount(expense.amount):>12s} | {expense.description}"
        )


def register_commands(cli):
    """Register dashboard command with main CLI."""
    cli.add_command(dashboard)
