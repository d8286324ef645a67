"""Transaction domain service."""

from datetime import date
from decimal import Decimal
from typing import Optional

from capitrack.database.base import Database
from capitrack.domain.account import AccountService
from capitrack.domain.entities import (
    Transaction as TransactionEntity,
    TransactionSource,
    TransactionType,
)
from capitrack.domain.errors import (
    NotFoundError,
    ValidationError,
    account_not_found,
    category_not_found,
    investment_not_found,
    project_not_found,
)


class TransactionService:
    """Service for recording transactions.

    Every write recomputes the stored balance of the accounts it touches.
    """

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db
        self.accounts = AccountService(db)

    def create_transaction(
        self,
        amount: Decimal,
        transaction_type: str,
        date: date,
        account_id: Optional[int] = None,
        currency_code: Optional[str] = None,
        transfer_to_account_id: Optional[int] = None,
        target_amount: Optional[Decimal] = None,
        category_id: Optional[int] = None,
        investment_id: Optional[int] = None,
        project_id: Optional[int] = None,
        note: Optional[str] = None,
        merchant: Optional[str] = None,
        source: str = TransactionSource.MANUAL.value,
    ) -> int:
        """Create a transaction.

        Args:
            amount: Non-negative amount in the source currency
            transaction_type: EXPENSE, INCOME or TRANSFER
            date: Transaction date
            account_id: Source account ID
            currency_code: Currency of amount, defaults to the account's
            transfer_to_account_id: Destination account for transfers
            target_amount: Amount received in the destination currency
            category_id: Optional category ID
            investment_id: Optional linked investment
            project_id: Optional linked project
            note: Optional note
            merchant: Optional merchant name
            source: MANUAL, AI_SCAN or RECURRING

        Returns:
            Transaction ID

        Raises:
            ValidationError: If amount, type or transfer fields are invalid
            NotFoundError: If a referenced entity doesn't exist
        """
        transaction_type = transaction_type.upper()
        if transaction_type not in {t.value for t in TransactionType}:
            raise ValidationError(f"Invalid transaction type: {transaction_type}")
        if amount < 0:
            raise ValidationError("Amount cannot be negative")
        if target_amount is not None and target_amount < 0:
            raise ValidationError("Target amount cannot be negative")
        source = source.upper()
        if source not in {s.value for s in TransactionSource}:
            raise ValidationError(f"Invalid transaction source: {source}")

        if transaction_type == TransactionType.TRANSFER.value:
            if account_id is None or transfer_to_account_id is None:
                raise ValidationError("Transfers need both a source and a destination account")
            if account_id == transfer_to_account_id:
                raise ValidationError("Cannot transfer to the same account")
        elif transfer_to_account_id is not None or target_amount is not None:
            raise ValidationError("Only transfers can have a destination account")

        account = None
        if account_id is not None:
            account = self.db.get_account(account_id)
            if account is None:
                raise NotFoundError(account_not_found(account_id))
        if transfer_to_account_id is not None and self.db.get_account(transfer_to_account_id) is None:
            raise NotFoundError(account_not_found(transfer_to_account_id))
        if category_id is not None and self.db.get_category(category_id) is None:
            raise NotFoundError(category_not_found(category_id))
        if investment_id is not None and self.db.get_investment(investment_id) is None:
            raise NotFoundError(investment_not_found(investment_id))
        if project_id is not None and self.db.get_project(project_id) is None:
            raise NotFoundError(project_not_found(project_id))

        if currency_code is None:
            if account is None:
                raise ValidationError("Currency is required when no account is given")
            currency_code = account.currency_code

        transaction_id = self.db.create_transaction(
            amount=amount,
            currency_code=currency_code.upper(),
            transaction_type=transaction_type,
            date=date,
            account_id=account_id,
            transfer_to_account_id=transfer_to_account_id,
            target_amount=target_amount,
            category_id=category_id,
            investment_id=investment_id,
            project_id=project_id,
            note=note,
            merchant=merchant,
            source=source,
        )
        self._refresh_balances(account_id, transfer_to_account_id)
        return transaction_id

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction and refresh the balances it touched.

        Raises:
            NotFoundError: If transaction doesn't exist
        """
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(f"Transaction {transaction_id} not found")
        self.db.delete_transaction(transaction_id)
        self._refresh_balances(txn.account_id, txn.transfer_to_account_id)

    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[int] = None,
        project_id: Optional[int] = None,
    ) -> list[TransactionEntity]:
        """List transactions with optional filters, newest first."""
        return self.db.list_transactions(
            start_date=start_date,
            end_date=end_date,
            account_id=account_id,
            project_id=project_id,
        )

    def _refresh_balances(self, *account_ids: Optional[int]) -> None:
        for account_id in {a for a in account_ids if a is not None}:
            self.accounts.recalculate_balance(account_id)
