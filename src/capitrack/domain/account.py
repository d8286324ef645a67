"""Account domain service."""

import logging
from decimal import Decimal
from typing import Optional

from capitrack.database.base import Database
from capitrack.domain.balance import balances_differ, calculate_account_balance
from capitrack.domain.entities import (
    Account as AccountEntity,
    AccountType,
    BalanceReconciliation,
    OperationResult,
    ReconciliationReport,
)
from capitrack.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_not_found,
    duplicate_account_name,
)
from capitrack.utils.decimal_normalizer import to_number

logger = logging.getLogger(__name__)

BALANCE_TOLERANCE = 0.01


def normalize_currency_code(currency_code: str) -> str:
    """Upper-case and validate a three-letter ISO currency code.

    Raises:
        ValidationError: If the code is not three letters
    """
    code = (currency_code or "").strip().upper()
    if len(code) != 3 or not code.isalpha():
        raise ValidationError(f"Invalid currency code: {currency_code!r}")
    return code


class AccountService:
    """Service for managing accounts and their derived balances."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self,
        name: str,
        account_type: str,
        currency_code: str,
        initial_balance: Decimal = Decimal("0"),
    ) -> int:
        """Create a new account.

        Args:
            name: Account name
            account_type: One of AccountType
            currency_code: ISO currency code
            initial_balance: Opening balance in the account's currency

        Returns:
            Account ID

        Raises:
            ValidationError: If type or currency is invalid
            ConflictError: If account name already exists
        """
        account_type = account_type.upper()
        if account_type not in {t.value for t in AccountType}:
            raise ValidationError(f"Invalid account type: {account_type}")
        currency_code = normalize_currency_code(currency_code)

        for acc in self.db.list_accounts():
            if acc.name == name:
                raise ConflictError(duplicate_account_name(name))

        return self.db.create_account(
            name=name,
            account_type=account_type,
            currency_code=currency_code,
            initial_balance=initial_balance,
        )

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def list_accounts(self) -> list[AccountEntity]:
        """List all accounts."""
        return self.db.list_accounts()

    def compute_balance(self, account_id: int) -> float:
        """Rebuild an account's balance from its transaction history.

        Raises:
            NotFoundError: If account not found
        """
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        transactions = self.db.list_transactions(account_id=account_id)
        return calculate_account_balance(account, transactions)

    def recalculate_balance(self, account_id: int) -> float:
        """Recompute an account's balance and write it back.

        A missing account is skipped and reported as zero.

        Returns:
            The recomputed balance
        """
        account = self.db.get_account(account_id)
        if account is None:
            logger.warning("Skipping balance update: %s", account_not_found(account_id))
            return 0.0
        transactions = self.db.list_transactions(account_id=account_id)
        balance = calculate_account_balance(account, transactions)
        self.db.update_account_balance(account_id, _to_decimal(balance))
        return balance

    def reconcile_balances(self, tolerance: float = BALANCE_TOLERANCE) -> OperationResult:
        """Recompute every account balance and fix the ones out of sync.

        Only accounts whose stored balance differs from the recomputed value
        by more than tolerance are written. Transactions written while this
        runs may leave a stale balance; running it again corrects that.

        Args:
            tolerance: Largest difference treated as in sync

        Returns:
            OperationResult whose data is a ReconciliationReport
        """
        accounts = self.db.list_accounts()
        transactions = self.db.list_transactions()

        results = []
        for account in accounts:
            stored = to_number(account.current_balance)
            computed = calculate_account_balance(account, transactions)
            updated = balances_differ(stored, computed, tolerance)
            if updated:
                self.db.update_account_balance(account.id, _to_decimal(computed))
                logger.info(
                    "Updated balance of %s (%s): %.2f -> %.2f",
                    account.name,
                    account.type,
                    stored,
                    computed,
                )
            results.append(
                BalanceReconciliation(
                    account_id=account.id,
                    name=account.name,
                    type=account.type,
                    old_balance=stored,
                    new_balance=computed,
                    updated=updated,
                )
            )

        updated_count = sum(1 for r in results if r.updated)
        report = ReconciliationReport(
            total=len(results),
            updated=updated_count,
            skipped=len(results) - updated_count,
            results=tuple(results),
        )
        logger.info(
            "Reconciled %d accounts: %d updated, %d unchanged",
            report.total,
            report.updated,
            report.skipped,
        )
        return OperationResult(
            success=True,
            data=report,
            details={"total": report.total, "updated": report.updated, "skipped": report.skipped},
        )


def _to_decimal(value: float) -> Decimal:
    return Decimal(str(round(value, 2)))
