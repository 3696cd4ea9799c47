"""Login, logout and whoami commands."""

import click
from pettycash.domain.account import AccountService
from pettycash.domain.errors import AuthenticationError
from pettycash.cli.account_resolution import require_login
from pettycash.cli.error_handling import handle_domain_error


@click.command("login")
@click.argument("name", metavar="NAME")
@click.option("--pin", prompt=True, hide_input=True, help="Four digit PIN")
@click.pass_context
def login(ctx, name: str, pin: str):
    """Log in as NAME.

    The session is remembered until 'logout'.

    Examples:
        pettycash login "Asha" --pin 1234
    """
    db = ctx.obj["db"]
    session = ctx.obj["session"]

    try:
        account = session.login(AccountService(db), name, pin)
    except AuthenticationError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Logged in as '{account.name}' ({account.role.value})")


@click.command("logout")
@click.pass_context
def logout(ctx):
    """Forget the logged-in account."""
    session = ctx.obj["session"]
    if not session.is_logged_in:
        click.echo("Not logged in.")
        return
    name = session.current.name
    session.logout()
    click.echo(f"Logged out '{name}'")


@click.command("whoami")
@click.pass_context
def whoami(ctx):
    """Show the logged-in account."""
    account = require_login(ctx, AccountService(ctx.obj["db"]))
    click.echo(f"{account.name} (ID: {account.id}, role: {account.role.value})")


def register_commands(cli):
    """Register session commands with main CLI."""
    cli.add_command(login)
    cli.add_command(logout)
    cli.add_command(whoami)
