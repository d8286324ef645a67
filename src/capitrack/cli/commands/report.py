"""Reporting commands: net worth, daily metrics and monthly profit and loss."""

import json
from dataclasses import asdict
from datetime import date, timedelta

import click
from capitrack.cli.date_filters import resolve_cli_date_range
from capitrack.cli.error_handling import handle_domain_error, warn_fallback_rates
from capitrack.domain.capital import NetWorthService
from capitrack.domain.metrics import MetricsService, monthly_profit_loss
from capitrack.utils.date_parser import PERIODS

DEFAULT_METRICS_DAYS = 30


def _default_range() -> tuple[date, date]:
    today = date.today()
    return today - timedelta(days=DEFAULT_METRICS_DAYS - 1), today


def _echo_json(data) -> None:
    click.echo(json.dumps(data, indent=2, default=str))


def _range_options(func):
    func = click.option(
        "--period",
        type=click.Choice(PERIODS, case_sensitive=False),
        help="Named period instead of explicit dates",
    )(func)
    func = click.option("--end-date", help="End date (YYYY-MM-DD or relative, default today)")(func)
    func = click.option("--start-date", help="Start date (YYYY-MM-DD or relative)")(func)
    return func


@click.group()
def report_group():
    """Financial reports in the base currency."""
    pass


@report_group.command("networth")
@click.option(
    "--recompute", is_flag=True, help="Rebuild cash balances from transactions first"
)
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_context
def networth(ctx, recompute: bool, as_json: bool):
    """Show cash, investments, fixed assets and total net worth."""
    base = ctx.obj["base_currency"]
    service = NetWorthService(ctx.obj["db"], ctx.obj["rate_provider"])

    summary = service.get_summary(base_currency=base, recompute_balances=recompute)
    if as_json:
        _echo_json(asdict(summary))
        return

    warn_fallback_rates(summary.using_fallback_rates)
    click.echo(f"\nNet worth ({base}):")
    click.echo("-" * 50)
    click.echo(f"{'Cash':<30} {summary.total_cash:>18,.2f}")
    click.echo(f"{'Financial investments':<30} {summary.total_financial_invested:>18,.2f}")
    click.echo(f"{'Fixed assets':<30} {summary.total_fixed_assets:>18,.2f}")
    click.echo("-" * 50)
    click.echo(f"{'Total':<30} {summary.total_net_worth:>18,.2f}")

    if summary.asset_details:
        click.echo("\nLargest fixed assets:")
        for asset in summary.asset_details:
            click.echo(
                f"  {asset.name:26s} {asset.current_value:>14,.2f} "
                f"(-{asset.daily_depreciation:,.2f}/day, {asset.original_currency})"
            )


@report_group.command("metrics")
@_range_options
@click.option("--daily", is_flag=True, help="Print one line per day")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_context
def metrics(
    ctx,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
    daily: bool,
    as_json: bool,
):
    """Show daily burn, cash runway and capital over a date range.

    Defaults to the last 30 days.

    Examples:
        capitrack report metrics
        capitrack report metrics --period this-year --daily
        capitrack report metrics --start-date 2024-01-01 --end-date 2024-03-31
    """
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period=period,
        default_range=_default_range(),
    )
    base = ctx.obj["base_currency"]
    service = MetricsService(ctx.obj["db"], ctx.obj["rate_provider"])

    try:
        report = service.get_metrics(start, end, base)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if as_json:
        _echo_json(asdict(report))
        return

    warn_fallback_rates(report.using_fallback_rates)
    if daily:
        click.echo(
            f"{'Date':<12}{'Income':>12}{'Burn':>12}{'Deprec.':>10}{'Net':>12}{'Cash':>14}{'Capital':>14}"
        )
        for p in report.points:
            click.echo(
                f"{p.date.isoformat():<12}{p.income:>12,.2f}{p.total_daily_cost:>12,.2f}"
                f"{p.depreciation_cost:>10,.2f}{p.net_profit:>12,.2f}"
                f"{p.cash_level:>14,.2f}{p.capital_level:>14,.2f}"
            )
        click.echo()

    click.echo(f"Metrics {start} to {end} ({base}):")
    click.echo(f"  Cash:              {report.cash_only:,.2f}")
    click.echo(f"  Avg daily burn:    {report.avg_daily_burn:,.2f}")
    if report.avg_daily_burn > 0:
        click.echo(f"  Runway:            {report.runway_months:,.1f} months")
    else:
        click.echo("  Runway:            no burn in range")


@report_group.command("pnl")
@_range_options
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_context
def pnl(ctx, start_date: str | None, end_date: str | None, period: str | None, as_json: bool):
    """Show monthly profit and loss, depreciation included.

    Defaults to the current year.
    """
    today = date.today()
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period=period,
        default_range=(today.replace(month=1, day=1), today),
    )
    base = ctx.obj["base_currency"]
    service = MetricsService(ctx.obj["db"], ctx.obj["rate_provider"])

    try:
        report = service.get_metrics(start, end, base)
    except ValueError as e:
        handle_domain_error(ctx, e)
    months = monthly_profit_loss(report.points)

    if as_json:
        _echo_json([asdict(m) for m in months])
        return

    warn_fallback_rates(report.using_fallback_rates)
    click.echo(f"\nProfit and loss ({base}):")
    click.echo(f"{'Month':<10}{'Income':>16}{'Amortized cost':>18}{'Net profit':>16}")
    click.echo("-" * 60)
    for m in months:
        click.echo(f"{m.month:<10}{m.income:>16,.2f}{m.amortized_cost:>18,.2f}{m.net_profit:>16,.2f}")


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
