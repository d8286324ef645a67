"""Tests for the transaction service."""

from datetime import date
from decimal import Decimal

import pytest

from capitrack.domain.errors import NotFoundError, ValidationError

DAY = date(2024, 2, 10)


def test_create_defaults_currency_to_account(transaction_service, usd_account):
    txn_id = transaction_service.create_transaction(
        Decimal("12.50"), "expense", DAY, account_id=usd_account.id, merchant="Cafe"
    )

    txn = transaction_service.get_transaction(txn_id)
    assert txn.type == "EXPENSE"
    assert txn.currency_code == "USD"
    assert txn.source == "MANUAL"
    assert txn.merchant == "Cafe"


def test_negative_amount_is_rejected(transaction_service, usd_account):
    with pytest.raises(ValidationError, match="negative"):
        transaction_service.create_transaction(Decimal("-1"), "EXPENSE", DAY, account_id=usd_account.id)


def test_transfer_needs_destination(transaction_service, usd_account):
    with pytest.raises(ValidationError):
        transaction_service.create_transaction(Decimal("5"), "TRANSFER", DAY, account_id=usd_account.id)


def test_transfer_to_same_account_is_rejected(transaction_service, usd_account):
    with pytest.raises(ValidationError):
        transaction_service.create_transaction(
            Decimal("5"),
            "TRANSFER",
            DAY,
            account_id=usd_account.id,
            transfer_to_account_id=usd_account.id,
        )


def test_destination_only_for_transfers(transaction_service, usd_account, cny_account):
    with pytest.raises(ValidationError):
        transaction_service.create_transaction(
            Decimal("5"), "EXPENSE", DAY, account_id=usd_account.id, transfer_to_account_id=cny_account.id
        )


@pytest.mark.parametrize(
    "field", ["account_id", "category_id", "investment_id", "project_id"]
)
def test_missing_references_are_rejected(transaction_service, usd_account, field):
    kwargs = {"account_id": usd_account.id, field: 404}

    with pytest.raises(NotFoundError):
        transaction_service.create_transaction(Decimal("5"), "EXPENSE", DAY, **kwargs)


def test_invalid_type_and_source(transaction_service, usd_account):
    with pytest.raises(ValidationError):
        transaction_service.create_transaction(Decimal("5"), "REFUND", DAY, account_id=usd_account.id)
    with pytest.raises(ValidationError):
        transaction_service.create_transaction(
            Decimal("5"), "EXPENSE", DAY, account_id=usd_account.id, source="IMPORT"
        )


def test_delete_restores_balance(transaction_service, account_service, usd_account):
    txn_id = transaction_service.create_transaction(
        Decimal("40"), "EXPENSE", DAY, account_id=usd_account.id
    )
    assert account_service.get_account(usd_account.id).current_balance == Decimal("60")

    transaction_service.delete_transaction(txn_id)

    assert transaction_service.get_transaction(txn_id) is None
    assert account_service.get_account(usd_account.id).current_balance == Decimal("100")
    with pytest.raises(NotFoundError):
        transaction_service.delete_transaction(txn_id)


def test_list_filters_include_transfer_destination(transaction_service, usd_account, cny_account):
    transaction_service.create_transaction(Decimal("5"), "EXPENSE", DAY, account_id=usd_account.id)
    transaction_service.create_transaction(
        Decimal("10"),
        "TRANSFER",
        date(2024, 3, 1),
        account_id=usd_account.id,
        transfer_to_account_id=cny_account.id,
        target_amount=Decimal("72"),
    )

    assert len(transaction_service.list_transactions(account_id=cny_account.id)) == 1
    assert len(transaction_service.list_transactions(account_id=usd_account.id)) == 2
    assert len(transaction_service.list_transactions(start_date=date(2024, 2, 15))) == 1
