"""Investment and fixed asset commands."""

import click
from capitrack.cli.account_resolution import resolve_optional_account_or_exit
from capitrack.cli.date_filters import parse_date_or_exit
from capitrack.cli.error_handling import handle_domain_error
from capitrack.domain.account import AccountService
from capitrack.domain.capital import investment_value
from capitrack.domain.entities import (
    DepreciationMethod,
    InvestmentStatus,
    InvestmentType,
)
from capitrack.domain.investment import InvestmentService
from capitrack.utils.amount_parser import parse_amount


def _optional_amount(value: str | None):
    return parse_amount(value) if value is not None else None


@click.group()
def investment_group():
    """Manage investments and fixed assets."""
    pass


@investment_group.command("add")
@click.argument("name", metavar="NAME")
@click.option(
    "--type",
    "investment_type",
    type=click.Choice([t.value for t in InvestmentType], case_sensitive=False),
    required=True,
    help="Investment type",
)
@click.option("--amount", required=True, help="Initial amount")
@click.option("--currency", required=True, help="ISO currency code")
@click.option("--start-date", default="today", show_default=True, help="Start or purchase date")
@click.option("--end-date", help="Maturity or disposal date")
@click.option("--current-amount", help="Latest known value")
@click.option("--purchase-price", help="Purchase price of a fixed asset")
@click.option("--salvage-value", help="Residual value at end of useful life")
@click.option("--useful-life", type=int, help="Useful life in years")
@click.option(
    "--method",
    type=click.Choice([m.value for m in DepreciationMethod], case_sensitive=False),
    help="Depreciation method (defaults to STRAIGHT_LINE)",
)
@click.option("--interest-rate", help="Annual interest rate in percent (deposits)")
@click.option("--project", "project_id", type=int, help="Linked project ID")
@click.option("--account", help="Account name or ID paying for the investment")
@click.pass_context
def add_investment(
    ctx,
    name: str,
    investment_type: str,
    amount: str,
    currency: str,
    start_date: str,
    end_date: str | None,
    current_amount: str | None,
    purchase_price: str | None,
    salvage_value: str | None,
    useful_life: int | None,
    method: str | None,
    interest_rate: str | None,
    project_id: int | None,
    account: str | None,
):
    """Add an investment or fixed asset.

    Examples:
        capitrack investment add "Laptop" --type ASSET --amount 1200 --currency USD \\
            --purchase-price 1200 --useful-life 3
        capitrack investment add "Term deposit" --type DEPOSIT --amount 10000 \\
            --currency CNY --interest-rate 2.5 --end-date 2026-01-01
        capitrack investment add "Index fund" --type FUND --amount 500 \\
            --currency USD --account Checking
    """
    db = ctx.obj["db"]
    service = InvestmentService(db)
    account_id = resolve_optional_account_or_exit(ctx, AccountService(db), account)
    start = parse_date_or_exit(ctx, start_date, "start date")
    end = parse_date_or_exit(ctx, end_date, "end date") if end_date else None

    try:
        investment_id = service.create_investment(
            name=name,
            investment_type=investment_type,
            initial_amount=parse_amount(amount),
            currency_code=currency,
            start_date=start,
            end_date=end,
            current_amount=_optional_amount(current_amount),
            purchase_price=_optional_amount(purchase_price),
            salvage_value=_optional_amount(salvage_value),
            useful_life=useful_life,
            depreciation_type=method,
            interest_rate=_optional_amount(interest_rate),
            project_id=project_id,
            account_id=account_id,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created investment '{name}' (ID: {investment_id})")


@investment_group.command("close")
@click.argument("investment_id", type=int, metavar="INVESTMENT_ID")
@click.argument("final_amount", metavar="FINAL_AMOUNT")
@click.option("--date", "close_date", default="today", show_default=True, help="Closing date")
@click.option("--account", help="Account name or ID receiving the return")
@click.pass_context
def close_investment(
    ctx, investment_id: int, final_amount: str, close_date: str, account: str | None
):
    """Close an investment and record what it returned.

    Examples:
        capitrack investment close 3 540 --account Checking --date 2024-12-31
    """
    db = ctx.obj["db"]
    account_id = resolve_optional_account_or_exit(ctx, AccountService(db), account)
    end = parse_date_or_exit(ctx, close_date, "date")

    try:
        amount = parse_amount(final_amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        InvestmentService(db).close_investment(
            investment_id, final_amount=amount, end_date=end, account_id=account_id
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Closed investment {investment_id} at {amount:,.2f} on {end}")


@investment_group.command("list")
@click.option(
    "--status",
    type=click.Choice([s.value for s in InvestmentStatus], case_sensitive=False),
    help="Only show investments with this status",
)
@click.pass_context
def list_investments(ctx, status: str | None):
    """List investments with their present value."""
    service = InvestmentService(ctx.obj["db"])

    investments = service.list_investments(status=status)
    if not investments:
        click.echo("No investments found.")
        return

    for inv in investments:
        value = investment_value(inv)
        click.echo(
            f"ID: {inv.id:3d} | {inv.name:20s} | {inv.type:8s} | {inv.status:11s} | "
            f"{value:>14,.2f} {inv.currency_code}"
        )


@investment_group.command("depreciation")
@click.argument("investment_id", type=int, metavar="INVESTMENT_ID")
@click.option("--as-of", default="today", show_default=True, help="Valuation date")
@click.pass_context
def show_depreciation(ctx, investment_id: int, as_of: str):
    """Show the depreciation schedule of a fixed asset at a date."""
    service = InvestmentService(ctx.obj["db"])
    as_of_date = parse_date_or_exit(ctx, as_of, "as-of date")

    try:
        investment = service.get_investment(investment_id)
        result = service.get_depreciation(investment_id, as_of=as_of_date)
    except ValueError as e:
        handle_domain_error(ctx, e)

    currency = investment.currency_code
    click.echo(f"{investment.name} as of {as_of_date}")
    click.echo(f"  Book value:           {result.book_value:,.2f} {currency}")
    click.echo(f"  Accumulated:          {result.accumulated_depreciation:,.2f} {currency}")
    click.echo(f"  Annual depreciation:  {result.annual_depreciation:,.2f} {currency}")
    click.echo(f"  Daily depreciation:   {result.daily_depreciation:,.4f} {currency}")
    click.echo(f"  Remaining life:       {result.remaining_life:.2f} years")


def register_commands(cli):
    """Register investment commands with main CLI."""
    cli.add_command(investment_group, name="investment")
