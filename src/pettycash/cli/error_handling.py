"""CLI error handling helpers."""

import click

from pettycash.domain.entities import DeltaResult
from pettycash.domain.errors import DomainError, LedgerAppendFailed

# Exit code when a balance moved but its ledger entry is missing
EXIT_LEDGER_OUT_OF_SYNC = 2


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def handle_delta_result(ctx: click.Context, result: DeltaResult) -> DeltaResult:
    """Return a successful mutation result or render its error and exit."""
    if result.ok:
        return result

    if isinstance(result.error, LedgerAppendFailed):
        click.echo(f"Error: {result.error}", err=True)
        click.echo(
            f"Warning: {result.pool.value} balance is now {result.new_balance:,.2f} "
            "but the ledger has no matching entry.",
            err=True,
        )
        ctx.exit(EXIT_LEDGER_OUT_OF_SYNC)

    handle_domain_error(ctx, result.error)
