"""Exchange rate commands."""

import click
from capitrack.cli.error_handling import warn_fallback_rates


@click.group()
def rates_group():
    """Inspect exchange rates."""
    pass


@rates_group.command("show")
@click.argument("currencies", nargs=-1, metavar="[CURRENCY]...")
@click.pass_context
def show_rates(ctx, currencies: tuple[str, ...]):
    """Show conversion rates into the base currency.

    Without arguments, every currency in the rate table is listed.

    Examples:
        capitrack rates show
        capitrack --base-currency EUR rates show USD GBP
    """
    provider = ctx.obj["rate_provider"]
    base = ctx.obj["base_currency"]

    check = provider.check_configuration()
    if not check.success:
        click.echo(f"Note: {check.error}", err=True)

    table = provider.get_rates()
    warn_fallback_rates(table.using_fallback)

    codes = [c.upper() for c in currencies] or sorted(table.rates)
    click.echo(f"1 unit in {base}:")
    for code in codes:
        click.echo(f"  {code:<5} {table.rate(code, base):>14,.6f}")


def register_commands(cli):
    """Register rates commands with main CLI."""
    cli.add_command(rates_group, name="rates")
