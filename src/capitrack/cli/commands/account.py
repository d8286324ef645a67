"""Account management commands."""

import click
from capitrack.cli.account_resolution import resolve_account_or_exit
from capitrack.cli.error_handling import handle_domain_error
from capitrack.domain.account import AccountService
from capitrack.domain.entities import AccountType
from capitrack.utils.amount_parser import parse_amount


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option(
    "--type",
    "account_type",
    type=click.Choice([t.value for t in AccountType], case_sensitive=False),
    default=AccountType.BANK.value,
    show_default=True,
    help="Account type",
)
@click.option("--currency", required=True, help="ISO currency code (e.g., USD, CNY)")
@click.option("--initial-balance", default="0", show_default=True, help="Opening balance")
@click.pass_context
def create_account(ctx, name: str, account_type: str, currency: str, initial_balance: str):
    """Create a new account.

    Examples:
        capitrack account create "Checking" --currency USD --initial-balance 1000
        capitrack account create "Wallet" --type CASH --currency CNY
    """
    service = AccountService(ctx.obj["db"])

    try:
        balance = parse_amount(initial_balance)
        account_id = service.create_account(
            name=name,
            account_type=account_type,
            currency_code=currency,
            initial_balance=balance,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created account '{name}' (ID: {account_id})")


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts with their stored balances."""
    service = AccountService(ctx.obj["db"])

    accounts = service.list_accounts()
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 70)
    for acc in accounts:
        click.echo(
            f"ID: {acc.id:3d} | {acc.name:20s} | {acc.type:10s} | "
            f"{acc.current_balance:>14,.2f} {acc.currency_code}"
        )


@account_group.command("balance")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def account_balance(ctx, account: str):
    """Show an account's balance rebuilt from its transactions.

    ACCOUNT can be an account name or ID.
    """
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, account)
    acc = service.get_account(account_id)

    try:
        computed = service.compute_balance(account_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"{acc.name}: {computed:,.2f} {acc.currency_code}")
    stored = float(acc.current_balance)
    if abs(stored - computed) > 0.01:
        click.echo(
            f"Stored balance {stored:,.2f} is out of sync; run 'capitrack account reconcile'.",
            err=True,
        )


@account_group.command("reconcile")
@click.option(
    "--tolerance",
    type=float,
    default=0.01,
    show_default=True,
    help="Largest difference treated as in sync",
)
@click.pass_context
def reconcile_accounts(ctx, tolerance: float):
    """Recompute every stored balance from transaction history."""
    service = AccountService(ctx.obj["db"])

    result = service.reconcile_balances(tolerance=tolerance)
    if not result.success:
        click.echo(f"Error: {result.error}", err=True)
        ctx.exit(1)

    report = result.data
    for item in report.results:
        if item.updated:
            click.echo(
                f"  {item.name} ({item.type}): {item.old_balance:,.2f} -> {item.new_balance:,.2f}"
            )
    click.echo(
        f"Reconciled {report.total} accounts: {report.updated} updated, {report.skipped} unchanged"
    )


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
