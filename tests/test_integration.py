"""Integration tests for end-to-end workflows."""

import json
from datetime import date
from decimal import Decimal

import pytest

from capitrack.cli.main import cli
from capitrack.domain.currency import RateFetchError


def _invoke(cli_runner, temp_db, rate_provider, *args):
    return cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "--base-currency", "USD", *args],
        obj={"rate_provider": rate_provider},
    )


def _created_id(output: str) -> int:
    # "Created ... (ID: 3)"
    return int(output.split("ID:")[1].strip().split(")")[0])


def test_full_workflow(cli_runner, temp_db, rate_provider):
    """Accounts, transactions, an asset and the net worth report."""
    result = _invoke(cli_runner, temp_db, rate_provider, "category", "init")
    assert result.exit_code == 0

    result = _invoke(
        cli_runner, temp_db, rate_provider,
        "account", "create", "Checking", "--type", "BANK", "--currency", "USD",
        "--initial-balance", "100",
    )
    assert result.exit_code == 0

    result = _invoke(
        cli_runner, temp_db, rate_provider,
        "account", "create", "Yuan", "--type", "BANK", "--currency", "CNY",
    )
    assert result.exit_code == 0

    result = _invoke(
        cli_runner, temp_db, rate_provider,
        "add", "expense", "40", "--account", "Checking", "--date", "2024-01-05",
        "--merchant", "Grocer",
    )
    assert result.exit_code == 0
    assert "Amount: 40.00 USD" in result.output

    result = _invoke(
        cli_runner, temp_db, rate_provider,
        "add", "transfer", "10", "--account", "Checking", "--to-account", "Yuan",
        "--target-amount", "72", "--date", "2024-01-06",
    )
    assert result.exit_code == 0

    result = _invoke(
        cli_runner, temp_db, rate_provider,
        "investment", "add", "Laptop", "--type", "ASSET", "--amount", "1200",
        "--currency", "USD", "--purchase-price", "1200", "--salvage-value", "0",
        "--useful-life", "3",
    )
    assert result.exit_code == 0
    assert "Created investment 'Laptop'" in result.output

    result = _invoke(cli_runner, temp_db, rate_provider, "report", "networth", "--json")
    assert result.exit_code == 0
    summary = json.loads(result.output)
    # 50 USD left in Checking plus 72 CNY
    assert summary["total_cash"] == pytest.approx(50 + 72 / 7.2)
    assert summary["total_fixed_assets"] == pytest.approx(1200)
    assert summary["total_net_worth"] == pytest.approx(1260)
    assert summary["asset_details"][0]["name"] == "Laptop"
    assert summary["using_fallback_rates"] is False

    result = _invoke(cli_runner, temp_db, rate_provider, "report", "networth")
    assert result.exit_code == 0
    assert "Net worth (USD)" in result.output
    assert "Laptop" in result.output


def test_add_rejects_unknown_account(cli_runner, temp_db, rate_provider):
    result = _invoke(cli_runner, temp_db, rate_provider, "add", "expense", "5", "--account", "Ghost")

    assert result.exit_code == 1
    assert "not found" in result.output


def test_add_rejects_transfer_to_same_account(cli_runner, temp_db, rate_provider, usd_account):
    result = _invoke(
        cli_runner, temp_db, rate_provider,
        "add", "transfer", "5", "--account", "Checking", "--to-account", "Checking",
    )

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_add_rejects_negative_amount(cli_runner, temp_db, rate_provider, usd_account):
    result = _invoke(
        cli_runner, temp_db, rate_provider, "add", "expense", "--account", "Checking", "--", "-5"
    )

    assert result.exit_code == 1
    assert "Invalid amount" in result.output


def test_investment_list_and_depreciation(cli_runner, temp_db, rate_provider, investment_service):
    investment_id = investment_service.create_investment(
        "Van",
        "ASSET",
        Decimal("1000"),
        "EUR",
        date(2023, 1, 1),
        purchase_price=Decimal("1000"),
        salvage_value=Decimal("100"),
        useful_life=5,
        depreciation_type="DECLINING_BALANCE",
    )
    investment_service.create_investment("Shares", "STOCK", Decimal("50"), "USD", date(2023, 1, 1))

    result = _invoke(cli_runner, temp_db, rate_provider, "investment", "list")
    assert result.exit_code == 0
    assert "Van" in result.output
    assert "Shares" in result.output

    result = _invoke(
        cli_runner, temp_db, rate_provider,
        "investment", "depreciation", str(investment_id), "--as-of", "2024-01-01",
    )
    assert result.exit_code == 0
    assert "Book value:           600.00 EUR" in result.output

    result = _invoke(cli_runner, temp_db, rate_provider, "investment", "depreciation", "2")
    assert result.exit_code == 1
    assert "not a fixed asset" in result.output


def test_investment_funding_and_close(cli_runner, temp_db, rate_provider, usd_account):
    result = _invoke(
        cli_runner, temp_db, rate_provider,
        "investment", "add", "Index fund", "--type", "FUND", "--amount", "60",
        "--currency", "USD", "--start-date", "2024-01-01", "--account", "Checking",
    )
    assert result.exit_code == 0
    investment_id = _created_id(result.output)

    result = _invoke(cli_runner, temp_db, rate_provider, "report", "networth", "--json")
    summary = json.loads(result.output)
    assert summary["total_cash"] == pytest.approx(40)
    assert summary["total_financial_invested"] == pytest.approx(60)
    assert summary["total_net_worth"] == pytest.approx(100)

    result = _invoke(
        cli_runner, temp_db, rate_provider,
        "investment", "close", str(investment_id), "75", "--date", "2024-06-01",
        "--account", "Checking",
    )
    assert result.exit_code == 0
    assert "Closed investment" in result.output

    result = _invoke(cli_runner, temp_db, rate_provider, "report", "networth", "--json")
    summary = json.loads(result.output)
    assert summary["total_cash"] == pytest.approx(115)
    assert summary["total_financial_invested"] == 0

    result = _invoke(
        cli_runner, temp_db, rate_provider, "investment", "close", str(investment_id), "75"
    )
    assert result.exit_code == 1
    assert "already closed" in result.output


def test_project_create_and_stats(cli_runner, temp_db, rate_provider, transaction_service, usd_account):
    result = _invoke(
        cli_runner, temp_db, rate_provider,
        "project", "create", "Lisbon", "--type", "TRIP", "--start-date", "2024-03-01",
        "--end-date", "2024-03-10", "--budget", "1000", "--currency", "USD", "--owner", "alex",
    )
    assert result.exit_code == 0
    project_id = _created_id(result.output)

    transaction_service.create_transaction(
        amount=Decimal("300"),
        transaction_type="EXPENSE",
        date=date(2024, 3, 2),
        account_id=usd_account.id,
        project_id=project_id,
    )

    result = _invoke(
        cli_runner, temp_db, rate_provider, "project", "stats", str(project_id), "--owner", "alex"
    )
    assert result.exit_code == 0
    assert "Expenses:      300.00" in result.output
    assert "used 30.0%" in result.output
    assert "Daily cost:    30.00 over 10 days" in result.output

    result = _invoke(
        cli_runner, temp_db, rate_provider, "project", "stats", str(project_id), "--owner", "sam"
    )
    assert result.exit_code == 1
    assert "unauthorized" in result.output

    result = _invoke(cli_runner, temp_db, rate_provider, "project", "list", "--owner", "alex")
    assert "Lisbon" in result.output


def test_recurring_add_and_list(cli_runner, temp_db, rate_provider, usd_account):
    result = _invoke(
        cli_runner, temp_db, rate_provider,
        "recurring", "add", "Rent", "900", "--account", "Checking", "--start-date", "2024-01-01",
    )
    assert result.exit_code == 0
    assert "Created recurring rule 'Rent'" in result.output

    result = _invoke(cli_runner, temp_db, rate_provider, "recurring", "list", "--active")
    assert result.exit_code == 0
    assert "Rent" in result.output
    assert "900.00 USD" in result.output
    assert "MONTHLY from 2024-01-01" in result.output


def test_recurring_add_requires_currency(cli_runner, temp_db, rate_provider):
    result = _invoke(cli_runner, temp_db, rate_provider, "recurring", "add", "Gym", "30")

    assert result.exit_code == 1
    assert "--currency is required" in result.output


def test_report_metrics_and_pnl(cli_runner, temp_db, rate_provider, transaction_service, usd_account):
    transaction_service.create_transaction(
        amount=Decimal("200"), transaction_type="INCOME", date=date(2024, 1, 2), account_id=usd_account.id
    )
    transaction_service.create_transaction(
        amount=Decimal("50"), transaction_type="EXPENSE", date=date(2024, 1, 5), account_id=usd_account.id
    )

    result = _invoke(
        cli_runner, temp_db, rate_provider,
        "report", "metrics", "--start-date", "2024-01-01", "--end-date", "2024-01-10", "--json",
    )
    assert result.exit_code == 0
    report = json.loads(result.output)
    assert len(report["points"]) == 10
    assert report["cash_only"] == pytest.approx(250)
    assert report["avg_daily_burn"] == pytest.approx(5)
    assert report["runway_months"] == pytest.approx(250 / 5 / 30)

    result = _invoke(
        cli_runner, temp_db, rate_provider,
        "report", "metrics", "--start-date", "2024-01-01", "--end-date", "2024-01-10", "--daily",
    )
    assert result.exit_code == 0
    assert "2024-01-05" in result.output
    assert "Runway:" in result.output

    result = _invoke(
        cli_runner, temp_db, rate_provider,
        "report", "pnl", "--start-date", "2024-01-01", "--end-date", "2024-02-29", "--json",
    )
    assert result.exit_code == 0
    months = json.loads(result.output)
    assert [m["month"] for m in months] == ["2024-01", "2024-02"]
    assert months[0]["net_profit"] == pytest.approx(150)
    assert months[1]["income"] == 0


def test_report_metrics_rejects_reversed_range(cli_runner, temp_db, rate_provider):
    result = _invoke(
        cli_runner, temp_db, rate_provider,
        "report", "metrics", "--start-date", "2024-02-01", "--end-date", "2024-01-01",
    )

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_rates_show(cli_runner, temp_db, rate_provider):
    result = _invoke(cli_runner, temp_db, rate_provider, "rates", "show", "eur", "CNY")

    assert result.exit_code == 0
    assert "1 unit in USD:" in result.output
    assert "1.111111" in result.output
    assert "0.138889" in result.output
    assert "Warning" not in result.output


def test_rates_show_warns_on_fallback(cli_runner, temp_db, rate_provider, fake_fetcher):
    fake_fetcher.error = RateFetchError("offline")

    result = _invoke(cli_runner, temp_db, rate_provider, "rates", "show", "EUR")

    assert result.exit_code == 0
    assert "fallback rates" in result.output
