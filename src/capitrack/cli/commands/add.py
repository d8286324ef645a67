"""Add transaction command."""

import click
from capitrack.cli.account_resolution import (
    resolve_account_or_exit,
    resolve_optional_account_or_exit,
)
from capitrack.cli.date_filters import parse_date_or_exit
from capitrack.cli.error_handling import handle_domain_error
from capitrack.domain.account import AccountService
from capitrack.domain.category import CategoryService
from capitrack.domain.entities import TransactionType
from capitrack.domain.transaction import TransactionService
from capitrack.utils.amount_parser import parse_amount, parse_money


@click.command("add")
@click.argument(
    "transaction_type",
    metavar="TYPE",
    type=click.Choice([t.value for t in TransactionType], case_sensitive=False),
)
@click.argument("amount", metavar="AMOUNT")
@click.option("--account", required=True, help="Account name or ID (source for transfers)")
@click.option("--to-account", help="Destination account name or ID for transfers")
@click.option("--target-amount", help="Amount received by the destination account")
@click.option(
    "--date",
    "txn_date",
    default="today",
    show_default=True,
    help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option("--category", help="Category name")
@click.option("--project", "project_id", type=int, help="Project ID")
@click.option("--investment", "investment_id", type=int, help="Investment ID")
@click.option("--note", help="Note")
@click.option("--merchant", help="Merchant")
@click.pass_context
def add_transaction(
    ctx,
    transaction_type: str,
    amount: str,
    account: str,
    to_account: str | None,
    target_amount: str | None,
    txn_date: str,
    category: str | None,
    project_id: int | None,
    investment_id: int | None,
    note: str | None,
    merchant: str | None,
):
    """Record an expense, income or transfer.

    AMOUNT may carry a currency ("12.50 EUR"); it defaults to the account's.

    Examples:
        capitrack add expense 42.10 --account Wallet --category Groceries
        capitrack add income 3000 --account Checking --date 2024-01-31
        capitrack add transfer 100 --account Checking --to-account "CNY Savings" --target-amount 720
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)
    account_service = AccountService(db)
    category_service = CategoryService(db)

    account_id = resolve_account_or_exit(ctx, account_service, account)
    to_account_id = resolve_optional_account_or_exit(ctx, account_service, to_account)
    parsed_date = parse_date_or_exit(ctx, txn_date)

    try:
        txn_amount, currency = parse_money(amount)
        txn_target = parse_amount(target_amount) if target_amount else None
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    category_id = None
    if category:
        category_obj = category_service.get_category_by_name(category)
        if category_obj is None:
            click.echo(f"Error: Category '{category}' not found", err=True)
            ctx.exit(1)
        category_id = category_obj.id

    try:
        transaction_id = transaction_service.create_transaction(
            amount=txn_amount,
            transaction_type=transaction_type,
            date=parsed_date,
            account_id=account_id,
            currency_code=currency,
            transfer_to_account_id=to_account_id,
            target_amount=txn_target,
            category_id=category_id,
            investment_id=investment_id,
            project_id=project_id,
            note=note,
            merchant=merchant,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    txn = transaction_service.get_transaction(transaction_id)
    click.echo(f"Created transaction {transaction_id}")
    click.echo(f"  Type: {txn.type}")
    click.echo(f"  Date: {txn.date}")
    click.echo(f"  Amount: {txn.amount:,.2f} {txn.currency_code}")
    if category:
        click.echo(f"  Category: {category}")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
