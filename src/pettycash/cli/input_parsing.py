"""CLI helpers for parsing dates, months and amounts."""

from datetime import date
from decimal import Decimal

import click

from pettycash.utils.amount_parser import parse_amount
from pettycash.utils.date_parser import parse_date, parse_month


def parse_date_or_exit(ctx: click.Context, value: str | None) -> date | None:
    """Parse an optional --date option, exiting on bad input."""
    if not value:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid date: {e}", err=True)
        ctx.exit(1)


def parse_month_or_exit(ctx: click.Context, value: str | None) -> date | None:
    """Parse an optional --month option (YYYY-MM), exiting on bad input."""
    if not value:
        return None
    try:
        return parse_month(value)
    except ValueError as e:
        click.echo(f"Error: Invalid month: {e}", err=True)
        ctx.exit(1)


def parse_amount_or_exit(ctx: click.Context, value: str) -> Decimal:
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)


def format_amount(amount: Decimal) -> str:
    return f"{amount:,.2f}"
