"""Tests for database mappers."""

from datetime import date, datetime, UTC
from decimal import Decimal

from capitrack.database.models import (
    Account as ORMAccount,
    Investment as ORMInvestment,
    Project as ORMProject,
    RecurringRule as ORMRecurringRule,
    Transaction as ORMTransaction,
)
from capitrack.database.mappers import (
    account_to_domain,
    investment_to_domain,
    project_to_domain,
    recurring_rule_to_domain,
    transaction_to_domain,
)
from capitrack.domain.entities import Account, Investment, Project, RecurringRule, Transaction


def test_account_to_domain():
    orm_account = ORMAccount(
        id=1,
        name="Wallet",
        type="CASH",
        currency_code="CNY",
        initial_balance=Decimal("10"),
        current_balance=Decimal("25"),
        created_at=datetime.now(UTC),
    )

    account = account_to_domain(orm_account)

    assert isinstance(account, Account)
    assert account.current_balance == Decimal("25")
    assert account.type == "CASH"


def test_transaction_to_domain():
    orm_txn = ORMTransaction(
        id=3,
        amount=Decimal("100"),
        currency_code="USD",
        type="TRANSFER",
        date=date(2024, 1, 1),
        account_id=1,
        transfer_to_account_id=2,
        target_amount=Decimal("720"),
        project_id=4,
        merchant="Bank",
        source="MANUAL",
    )

    txn = transaction_to_domain(orm_txn)

    assert isinstance(txn, Transaction)
    assert (txn.account_id, txn.transfer_to_account_id) == (1, 2)
    assert txn.target_amount == Decimal("720")
    assert txn.project_id == 4
    assert txn.merchant == "Bank"


def test_investment_to_domain():
    orm_inv = ORMInvestment(
        id=5,
        name="Van",
        type="ASSET",
        status="ACTIVE",
        initial_amount=Decimal("20000"),
        currency_code="EUR",
        purchase_price=Decimal("20000"),
        salvage_value=Decimal("2000"),
        useful_life=8,
        depreciation_type="DECLINING_BALANCE",
        start_date=date(2022, 6, 1),
    )

    inv = investment_to_domain(orm_inv)

    assert isinstance(inv, Investment)
    assert inv.depreciation_type == "DECLINING_BALANCE"
    assert inv.is_depreciable is True


def test_project_and_rule_to_domain():
    project = project_to_domain(
        ORMProject(id=1, name="Trip", type="TRIP", status="PLANNING", start_date=date(2024, 5, 1), owner="sam")
    )
    rule = recurring_rule_to_domain(
        ORMRecurringRule(
            id=2,
            name="Rent",
            amount=Decimal("900"),
            currency_code="GBP",
            frequency="MONTHLY",
            interval=1,
            start_date=date(2024, 1, 1),
            is_active=True,
        )
    )

    assert isinstance(project, Project)
    assert project.owner == "sam"
    assert isinstance(rule, RecurringRule)
    assert rule.frequency == "MONTHLY"
