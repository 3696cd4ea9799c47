"""CLI helpers for account resolution and session checks."""

from __future__ import annotations

import click
from pettycash.domain.account import AccountService
from pettycash.domain.entities import Account
from pettycash.domain.errors import NotFoundError
from pettycash.utils.account_resolver import resolve_account


def resolve_account_or_exit(
    ctx: click.Context, account_service: AccountService, account: str | int
) -> int:
    """Resolve account name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_account(account_service, account)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)


def require_login(ctx: click.Context, account_service: AccountService) -> Account:
    """Return the logged-in account, or exit asking the user to log in."""
    session = ctx.obj["session"]
    try:
        return session.require(account_service)
    except NotFoundError as exc:
        click.echo(f"Error: {exc}. Log in with 'pettycash login NAME'.", err=True)
        ctx.exit(1)


def require_admin(ctx: click.Context, account_service: AccountService) -> Account:
    """Return the logged-in admin account, or exit."""
    account = require_login(ctx, account_service)
    if not account.is_admin:
        click.echo("Error: This command requires an admin account.", err=True)
        ctx.exit(1)
    return account


def target_account_or_exit(
    ctx: click.Context, account_service: AccountService, account: str | None
) -> Account:
    """Resolve the account a command acts on.

    Without ``account`` this is the logged-in account. Acting on anybody
    else requires an admin session.
    """
    current = require_login(ctx, account_service)
    if account is None:
        return current

    account_id = resolve_account_or_exit(ctx, account_service, account)
    if account_id != current.id and not current.is_admin:
        click.echo("Error: Only admins can act on other accounts.", err=True)
        ctx.exit(1)
    return account_service.require_account(account_id)
