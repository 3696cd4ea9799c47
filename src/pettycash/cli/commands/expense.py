"""Expense commands."""

import click
from pettycash.domain.account import AccountService
from pettycash.domain.entities import EXPENSE_CATEGORIES, Expense, Page
from pettycash.domain.mutator import BalanceMutator
from pettycash.domain.reports import DEFAULT_EXPENSE_PAGE_SIZE, ReportService
from pettycash.cli.account_resolution import require_login, target_account_or_exit
from pettycash.cli.error_handling import handle_delta_result, handle_domain_error
from pettycash.cli.input_parsing import (
    format_amount,
    parse_amount_or_exit,
    parse_date_or_exit,
)


@click.group()
def expense_group():
    """Submit and review expenses."""
    pass


@expense_group.command("submit")
@click.option(
    "--category",
    required=True,
    type=click.Choice(EXPENSE_CATEGORIES, case_sensitive=False),
    help="Expense category",
)
@click.option("--description", required=True, help="What the money was spent on")
@click.option("--amount", required=True, help="Expense amount (e.g., 250 or 1,250.50)")
@click.option("--image", help="Receipt reference (file path or URL)")
@click.option("--user", "account", help="Submit for another user (admin only)")
@click.pass_context
def submit_expense(
    ctx, category: str, description: str, amount: str, image: str | None, account: str | None
):
    """Submit an expense against the company balance.

    The company balance is debited by the amount and may go negative.

    Examples:
        pettycash expense submit --category Travel --description "Cab to site" --amount 450
        pettycash expense submit --category Bill --description "Internet" --amount 999 --image bill.jpg
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    target = target_account_or_exit(ctx, account_service, account)
    expense_amount = parse_amount_or_exit(ctx, amount)

    result = BalanceMutator(db).submit_expense(
        target.id, category, description, expense_amount, image=image
    )
    handle_delta_result(ctx, result)

    click.echo(
        f"Recorded expense #{result.expense_id} of {format_amount(-result.amount)} "
        f"for '{target.name}'"
    )
    click.echo(f"Company balance: {format_amount(result.new_balance)}")


@expense_group.command("list")
@click.option("--user", "account", help="User name or ID (admin only for other users)")
@click.option("--all", "all_users", is_flag=True, help="List expenses of every user (admin only)")
@click.option("--search", help="Text to look for in the description")
@click.option("--category", help="Only this category")
@click.option("--date", "on_date", help="Only expenses submitted on this day")
@click.option("--page", type=int, default=1, show_default=True)
@click.option("--page-size", type=int, default=DEFAULT_EXPENSE_PAGE_SIZE, show_default=True)
@click.pass_context
def list_expenses(
    ctx,
    account: str | None,
    all_users: bool,
    search: str | None,
    category: str | None,
    on_date: str | None,
    page: int,
    page_size: int,
):
    """List expenses, newest first.

    Without --user or --all this lists your own expenses.
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    user_id = _expense_scope(ctx, account_service, account, all_users)
    day = parse_date_or_exit(ctx, on_date)

    try:
        result = ReportService(db).list_expenses(
            user_id=user_id,
            search=search,
            category=category,
            on_date=day,
            page=page,
            page_size=page_size,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not result.items:
        click.echo("No expenses found.")
        if result.total:
            click.echo(f"(page {page} is past the last page, {result.total_pages})")
        return

    names = {acc.id: acc.name for acc in account_service.list_accounts()}
    _print_expense_page(result, names)


@expense_group.command("stats")
@click.option("--user", "account", help="User name or ID (admin only for other users)")
@click.option("--all", "all_users", is_flag=True, help="Statistics over every user (admin only)")
@click.pass_context
def expense_stats(ctx, account: str | None, all_users: bool):
    """Show the total and number of expenses."""
    db = ctx.obj["db"]
    user_id = _expense_scope(ctx, AccountService(db), account, all_users)
    stats = ReportService(db).expense_stats(user_id=user_id)
    click.echo(f"Expenses: {stats.count}")
    click.echo(f"Total:    {format_amount(stats.total)}")


@expense_group.command("categories")
def list_categories():
    """List the expense categories."""
    for category in EXPENSE_CATEGORIES:
        click.echo(category)


def _expense_scope(
    ctx: click.Context, account_service: AccountService, account: str | None, all_users: bool
) -> int | None:
    """Return the user ID to filter on, or None for every user."""
    if all_users:
        if account is not None:
            click.echo("Error: --all cannot be combined with --user.", err=True)
            ctx.exit(1)
        current = require_login(ctx, account_service)
        if not current.is_admin:
            click.echo("Error: Only admins can view every user's expenses.", err=True)
            ctx.exit(1)
        return None
    return target_account_or_exit(ctx, account_service, account).id


def _print_expense_page(result: Page[Expense], names: dict[int, str]) -> None:
    click.echo(f"\nExpenses (page {result.page} of {result.total_pages}, {result.total} total):")
    click.echo("-" * 100)
    for expense in result.items:
        name = names.get(expense.user_id, f"#{expense.user_id}")
        stamp = expense.created_at.strftime("%Y-%m-%d %H:%M")
        line = (
            f"{expense.id:5d} | {stamp} | {name:15s} | {expense.category:15s} | "
            f"{format_amount(expense.amount):>12s} | {expense.description}"
        )
        if expense.image:
            line += f" [receipt: {expense.image}]"
        click.echo(line)


def register_commands(cli):
    """Register expense commands with main CLI."""
    cli.add_command(expense_group, name="expense")
