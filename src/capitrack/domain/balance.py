"""Account balance reconstruction from transaction history."""

from collections.abc import Iterable
from datetime import date
from typing import Optional

from capitrack.domain.entities import Account, Transaction, TransactionType
from capitrack.utils.decimal_normalizer import to_number


def transaction_effect(account_id: int, txn: Transaction) -> float:
    """Return the signed change a transaction applies to an account.

    Amounts are in the account's own currency: the source side of a transfer
    leaves with amount, the destination side receives target_amount when it
    is set and non-zero, otherwise amount.
    """
    effect = 0.0
    if txn.account_id == account_id:
        amount = to_number(txn.amount)
        if txn.type == TransactionType.INCOME.value:
            effect += amount
        elif txn.type in (TransactionType.EXPENSE.value, TransactionType.TRANSFER.value):
            effect -= amount
    if txn.transfer_to_account_id == account_id and txn.type == TransactionType.TRANSFER.value:
        effect += to_number(txn.target_amount) or to_number(txn.amount)
    return effect


def calculate_account_balance(
    account: Account,
    transactions: Iterable[Transaction],
    as_of: Optional[date] = None,
) -> float:
    """Replay transactions against the account's initial balance.

    The result is a plain sum, so it does not depend on transaction order
    and can be recomputed from scratch at any time.

    Args:
        account: Account to reconstruct
        transactions: Any transactions; unrelated ones contribute zero
        as_of: If set, ignore transactions dated after this day

    Returns:
        Balance in the account's currency
    """
    balance = to_number(account.initial_balance)
    for txn in transactions:
        if as_of is not None and txn.date > as_of:
            continue
        balance += transaction_effect(account.id, txn)
    return balance


def balances_differ(stored: float, computed: float, tolerance: float = 0.01) -> bool:
    """True when a stored balance is out of sync with its recomputed value."""
    return abs(stored - computed) > tolerance
