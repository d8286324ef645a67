"""Main CLI entry point."""

import logging

import click
from capitrack.config import Settings
from capitrack.database.factories import create_sqlite_database

# Import and register all commands at module level
from capitrack.cli.commands import (
    account,
    add,
    category,
    investment,
    project,
    rates,
    recurring,
    report,
)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides CAPITRACK_DB_PATH environment variable)",
    envvar="CAPITRACK_DB_PATH",
)
@click.option(
    "--base-currency",
    help="Currency reports are converted into (overrides CAPITRACK_BASE_CURRENCY)",
    envvar="CAPITRACK_BASE_CURRENCY",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity",
)
@click.pass_context
def cli(ctx, db_path: str | None, base_currency: str | None, log_level: str):
    """Capitrack - multi-currency ledger and financial metrics.

    Track accounts in any currency, fixed assets with depreciation and
    projects, then report net worth, daily burn, cash runway and monthly
    profit and loss in one base currency.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    settings = Settings.from_env()
    ctx.obj["settings"] = settings
    ctx.obj["base_currency"] = (base_currency or settings.base_currency).upper()

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj.setdefault("rate_provider", settings.build_rate_provider())


# Register all commands
account.register_commands(cli)
category.register_commands(cli)
add.register_commands(cli)
investment.register_commands(cli)
project.register_commands(cli)
recurring.register_commands(cli)
report.register_commands(cli)
rates.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
