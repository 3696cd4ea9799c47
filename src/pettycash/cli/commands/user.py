"""User management commands."""

import click
from pettycash.domain.account import AccountService
from pettycash.cli.account_resolution import require_admin, resolve_account_or_exit
from pettycash.cli.error_handling import handle_domain_error
from pettycash.cli.input_parsing import format_amount, parse_amount_or_exit

ROLES = ["admin", "user"]


@click.group()
def user_group():
    """Manage users (admin only)."""
    pass


@user_group.command("create")
@click.argument("name", metavar="NAME")
@click.option("--pin", required=True, help="Four digit PIN")
@click.option("--role", type=click.Choice(ROLES, case_sensitive=False), default="user", show_default=True)
@click.option("--salary", help="Fixed monthly salary")
@click.pass_context
def create_user(ctx, name: str, pin: str, role: str, salary: str | None):
    """Create a new user with zero balances.

    The very first user can be created without logging in; after that an
    admin session is required.

    Examples:
        pettycash user create "Admin" --pin 0000 --role admin
        pettycash user create "Asha" --pin 1234 --salary 25000
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    if service.count_accounts() > 0:
        require_admin(ctx, service)

    salary_amount = parse_amount_or_exit(ctx, salary) if salary is not None else None

    try:
        account_id = service.create_account(name=name, pin=pin, role=role, salary=salary_amount)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created {role.lower()} '{name.strip()}' (ID: {account_id})")


@user_group.command("list")
@click.pass_context
def list_users(ctx):
    """List all users with their balances."""
    db = ctx.obj["db"]
    service = AccountService(db)
    require_admin(ctx, service)

    accounts = service.list_accounts()
    if not accounts:
        click.echo("No users found.")
        return

    click.echo("\nUsers:")
    click.echo("-" * 96)
    click.echo(
        f"{'ID':>4} | {'Name':20s} | {'Role':5s} | {'Salary':>12s} | "
        f"{'Company':>12s} | {'Personal':>12s} | {'Salary bal.':>12s}"
    )
    click.echo("-" * 96)
    for acc in accounts:
        salary = format_amount(acc.salary) if acc.salary is not None else "-"
        click.echo(
            f"{acc.id:4d} | {acc.name:20s} | {acc.role.value:5s} | {salary:>12s} | "
            f"{format_amount(acc.company_balance):>12s} | "
            f"{format_amount(acc.personal_balance):>12s} | "
            f"{format_amount(acc.salary_balance):>12s}"
        )


@user_group.command("edit")
@click.argument("account", metavar="USER")
@click.option("--name", help="New display name")
@click.option("--pin", help="New four digit PIN")
@click.option("--role", type=click.Choice(ROLES, case_sensitive=False))
@click.option("--salary", help="New monthly salary")
@click.option("--clear-salary", is_flag=True, help="Remove the monthly salary")
@click.pass_context
def edit_user(
    ctx,
    account: str,
    name: str | None,
    pin: str | None,
    role: str | None,
    salary: str | None,
    clear_salary: bool,
):
    """Edit a user's profile.

    USER can be a user name or ID. Balances cannot be edited; use
    'funds add' to credit them.

    Examples:
        pettycash user edit "Asha" --pin 4321
        pettycash user edit 3 --role admin --salary 30000
    """
    db = ctx.obj["db"]
    service = AccountService(db)
    require_admin(ctx, service)
    account_id = resolve_account_or_exit(ctx, service, account)

    if name is None and pin is None and role is None and salary is None and not clear_salary:
        click.echo("Error: Nothing to update. Pass at least one option.", err=True)
        ctx.exit(1)

    salary_amount = parse_amount_or_exit(ctx, salary) if salary is not None else None

    try:
        service.update_account(
            account_id=account_id,
            name=name,
            pin=pin,
            role=role,
            salary=salary_amount,
            clear_salary=clear_salary,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    updated = service.require_account(account_id)
    click.echo(f"Updated user '{updated.name}' (ID: {account_id})")


@user_group.command("delete")
@click.argument("account", metavar="USER")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_user(ctx, account: str, yes: bool):
    """Delete a user.

    USER can be a user name or ID. The user's ledger entries and expenses
    are kept.
    """
    db = ctx.obj["db"]
    service = AccountService(db)
    current = require_admin(ctx, service)
    account_id = resolve_account_or_exit(ctx, service, account)

    if account_id == current.id:
        click.echo("Error: You cannot delete the account you are logged in with.", err=True)
        ctx.exit(1)

    account_obj = service.require_account(account_id)
    if not yes and not click.confirm(
        f"Are you sure you want to delete user '{account_obj.name}' (ID: {account_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(account_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Deleted user '{account_obj.name}'")


def register_commands(cli):
    """Register user commands with main CLI."""
    cli.add_command(user_group, name="user")
