"""CLI error handling helpers."""

import click

from capitrack.domain.errors import DomainError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def warn_fallback_rates(using_fallback: bool) -> None:
    """Tell the user figures were converted with approximate rates."""
    if using_fallback:
        click.echo(
            "Warning: live exchange rates unavailable, using approximate fallback rates.",
            err=True,
        )
