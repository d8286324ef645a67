"""Recurring charge commands."""

import click
from capitrack.cli.account_resolution import resolve_optional_account_or_exit
from capitrack.cli.date_filters import parse_date_or_exit
from capitrack.cli.error_handling import handle_domain_error
from capitrack.domain.account import AccountService
from capitrack.domain.category import CategoryService
from capitrack.domain.entities import RecurringFrequency
from capitrack.domain.recurring import RecurringService
from capitrack.utils.amount_parser import parse_money


@click.group()
def recurring_group():
    """Manage recurring charges such as rent and subscriptions."""
    pass


@recurring_group.command("add")
@click.argument("name", metavar="NAME")
@click.argument("amount", metavar="AMOUNT")
@click.option(
    "--frequency",
    type=click.Choice([f.value for f in RecurringFrequency], case_sensitive=False),
    default=RecurringFrequency.MONTHLY.value,
    show_default=True,
)
@click.option("--interval", type=int, default=1, show_default=True, help="Every N periods")
@click.option("--currency", help="ISO currency code (defaults to the account's)")
@click.option("--start-date", default="today", show_default=True, help="First charge date")
@click.option("--end-date", help="Last possible charge date")
@click.option("--account", help="Account name or ID charged")
@click.option("--category", help="Category name")
@click.option("--project", "project_id", type=int, help="Project ID")
@click.pass_context
def add_rule(
    ctx,
    name: str,
    amount: str,
    frequency: str,
    interval: int,
    currency: str | None,
    start_date: str,
    end_date: str | None,
    account: str | None,
    category: str | None,
    project_id: int | None,
):
    """Add a recurring charge.

    Examples:
        capitrack recurring add Rent 1500 --currency USD --start-date 2024-01-01
        capitrack recurring add "Gym" 30 --account Checking --frequency MONTHLY
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    account_id = resolve_optional_account_or_exit(ctx, account_service, account)
    start = parse_date_or_exit(ctx, start_date, "start date")
    end = parse_date_or_exit(ctx, end_date, "end date") if end_date else None

    try:
        rule_amount, amount_currency = parse_money(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    currency = currency or amount_currency
    if currency is None and account_id is not None:
        currency = account_service.get_account(account_id).currency_code
    if currency is None:
        click.echo("Error: --currency is required when no account is given", err=True)
        ctx.exit(1)

    category_id = None
    if category:
        category_obj = CategoryService(db).get_category_by_name(category)
        if category_obj is None:
            click.echo(f"Error: Category '{category}' not found", err=True)
            ctx.exit(1)
        category_id = category_obj.id

    try:
        rule_id = RecurringService(db).create_rule(
            name=name,
            amount=rule_amount,
            currency_code=currency,
            frequency=frequency,
            start_date=start,
            interval=interval,
            end_date=end,
            category_id=category_id,
            account_id=account_id,
            project_id=project_id,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created recurring rule '{name}' (ID: {rule_id})")


@recurring_group.command("list")
@click.option("--active", "active_only", is_flag=True, help="Only show active rules")
@click.pass_context
def list_rules(ctx, active_only: bool):
    """List recurring rules."""
    rules = RecurringService(ctx.obj["db"]).list_rules(active_only=active_only)
    if not rules:
        click.echo("No recurring rules found.")
        return

    for rule in rules:
        every = rule.frequency if rule.interval == 1 else f"{rule.frequency} x{rule.interval}"
        state = "" if rule.is_active else " [inactive]"
        click.echo(
            f"ID: {rule.id:3d} | {rule.name:20s} | {rule.amount:>10,.2f} {rule.currency_code} | "
            f"{every} from {rule.start_date}{state}"
        )


def register_commands(cli):
    """Register recurring commands with main CLI."""
    cli.add_command(recurring_group, name="recurring")
