"""Investment domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from capitrack.database.base import Database
from capitrack.domain.account import normalize_currency_code
from capitrack.domain.capital import investment_value
from capitrack.domain.category import CategoryService
from capitrack.domain.depreciation import depreciate_investment
from capitrack.domain.entities import (
    DepreciationMethod,
    DepreciationResult,
    Investment,
    InvestmentStatus,
    InvestmentType,
    TransactionType,
)
from capitrack.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_not_found,
    investment_not_found,
    invalid_useful_life,
    project_not_found,
)
from capitrack.domain.transaction import TransactionService

logger = logging.getLogger(__name__)

FUNDING_CATEGORY = "Investment"
RETURN_CATEGORY = "Investment Return"
PORTFOLIO_MERCHANT = "Investment Portfolio"


class InvestmentService:
    """Service for managing investments and fixed assets."""

    def __init__(self, db: Database):
        """Initialize investment service.

        Args:
            db: Database instance
        """
        self.db = db
        self.transactions = TransactionService(db)
        self.categories = CategoryService(db)

    def create_investment(
        self,
        name: str,
        investment_type: str,
        initial_amount: Decimal,
        currency_code: str,
        start_date: date,
        status: str = InvestmentStatus.ACTIVE.value,
        current_amount: Optional[Decimal] = None,
        purchase_price: Optional[Decimal] = None,
        salvage_value: Optional[Decimal] = None,
        useful_life: Optional[int] = None,
        depreciation_type: Optional[str] = None,
        end_date: Optional[date] = None,
        interest_rate: Optional[Decimal] = None,
        project_id: Optional[int] = None,
        account_id: Optional[int] = None,
    ) -> int:
        """Create an investment.

        With account_id, the initial amount is booked as an EXPENSE from that
        account in the "Investment" category, linked to the new investment.

        Args:
            name: Investment name
            investment_type: ASSET, DEPOSIT, STOCK, FUND or OTHER
            initial_amount: Amount put in
            currency_code: ISO currency code
            start_date: Purchase or deposit date
            status: ACTIVE, CLOSED or WRITTEN_OFF
            current_amount: Latest known value
            purchase_price: Purchase price of a fixed asset
            salvage_value: Residual value at the end of the useful life
            useful_life: Useful life in years
            depreciation_type: STRAIGHT_LINE or DECLINING_BALANCE
            end_date: Maturity or disposal date
            interest_rate: Annual interest rate in percent
            project_id: Optional linked project
            account_id: Optional account funding the purchase

        Returns:
            Investment ID

        Raises:
            ValidationError: If any field is invalid
            NotFoundError: If the linked project or funding account doesn't exist
        """
        investment_type = investment_type.upper()
        if investment_type not in {t.value for t in InvestmentType}:
            raise ValidationError(f"Invalid investment type: {investment_type}")
        status = status.upper()
        if status not in {s.value for s in InvestmentStatus}:
            raise ValidationError(f"Invalid investment status: {status}")
        if initial_amount < 0:
            raise ValidationError("Initial amount cannot be negative")
        if useful_life is not None and useful_life <= 0:
            raise ValidationError(invalid_useful_life(useful_life))
        if depreciation_type is not None:
            depreciation_type = depreciation_type.upper()
            if depreciation_type not in {m.value for m in DepreciationMethod}:
                raise ValidationError(f"Invalid depreciation method: {depreciation_type}")
        if (
            purchase_price is not None
            and salvage_value is not None
            and salvage_value > purchase_price
        ):
            raise ValidationError("Salvage value cannot exceed purchase price")
        if end_date is not None and end_date < start_date:
            raise ValidationError("End date is before start date")
        if project_id is not None and self.db.get_project(project_id) is None:
            raise NotFoundError(project_not_found(project_id))
        currency_code = normalize_currency_code(currency_code)
        if account_id is not None:
            self._require_account(account_id, currency_code)

        investment_id = self.db.create_investment(
            name=name,
            investment_type=investment_type,
            initial_amount=initial_amount,
            currency_code=currency_code,
            start_date=start_date,
            status=status,
            current_amount=current_amount,
            purchase_price=purchase_price,
            salvage_value=salvage_value,
            useful_life=useful_life,
            depreciation_type=depreciation_type,
            end_date=end_date,
            interest_rate=interest_rate,
            project_id=project_id,
        )

        if account_id is not None:
            self.transactions.create_transaction(
                amount=initial_amount,
                transaction_type=TransactionType.EXPENSE.value,
                date=start_date,
                account_id=account_id,
                currency_code=currency_code,
                category_id=self._system_category_id(FUNDING_CATEGORY),
                investment_id=investment_id,
                note=f"Investment: {name}",
                merchant=PORTFOLIO_MERCHANT,
            )
            logger.info("Booked funding of investment %s from account %s", investment_id, account_id)
        return investment_id

    def close_investment(
        self,
        investment_id: int,
        final_amount: Decimal,
        end_date: date,
        account_id: Optional[int] = None,
    ) -> None:
        """Close an investment and book what it returned.

        The investment becomes CLOSED with final_amount as its current amount,
        and an INCOME in the "Investment Return" category is booked on
        end_date, into account_id when given.

        Args:
            investment_id: Investment ID
            final_amount: Amount received back
            end_date: Closing date
            account_id: Optional account receiving the return

        Raises:
            NotFoundError: If the investment or account doesn't exist
            ConflictError: If the investment is already closed
            ValidationError: If the amount or date is invalid
        """
        investment = self._require(investment_id)
        if investment.status == InvestmentStatus.CLOSED.value:
            raise ConflictError(f"Investment {investment_id} is already closed")
        if final_amount < 0:
            raise ValidationError("Final amount cannot be negative")
        if end_date < investment.start_date:
            raise ValidationError("End date is before start date")
        if account_id is not None:
            self._require_account(account_id, investment.currency_code)

        self.db.update_investment(
            investment_id,
            status=InvestmentStatus.CLOSED.value,
            current_amount=final_amount,
            end_date=end_date,
        )
        self.transactions.create_transaction(
            amount=final_amount,
            transaction_type=TransactionType.INCOME.value,
            date=end_date,
            account_id=account_id,
            currency_code=investment.currency_code,
            category_id=self._system_category_id(RETURN_CATEGORY),
            investment_id=investment_id,
            note=f"Investment Return: {investment.name}",
            merchant=PORTFOLIO_MERCHANT,
        )
        logger.info("Closed investment %s at %s", investment_id, final_amount)

    def get_investment(self, investment_id: int) -> Optional[Investment]:
        return self.db.get_investment(investment_id)

    def list_investments(
        self, status: Optional[str] = None, project_id: Optional[int] = None
    ) -> list[Investment]:
        """List investments, optionally filtered by status or project."""
        return self.db.list_investments(
            status=status.upper() if status else None, project_id=project_id
        )

    def get_value(self, investment_id: int, as_of: Optional[date] = None) -> float:
        """Present value of an investment in its own currency.

        Raises:
            NotFoundError: If investment doesn't exist
        """
        return investment_value(self._require(investment_id), as_of)

    def get_depreciation(
        self, investment_id: int, as_of: Optional[date] = None
    ) -> DepreciationResult:
        """Run the depreciation schedule of a fixed asset.

        Args:
            investment_id: Investment ID
            as_of: Valuation date, defaults to today

        Returns:
            DepreciationResult at as_of

        Raises:
            NotFoundError: If investment doesn't exist
            ValidationError: If it has no depreciation schedule
        """
        investment = self._require(investment_id)
        if not investment.is_depreciable:
            raise ValidationError(
                f"Investment {investment_id} is not a fixed asset with purchase price and useful life"
            )
        return depreciate_investment(investment, as_of)

    def _require_account(self, account_id: int, currency_code: str) -> None:
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        if account.currency_code != currency_code:
            raise ValidationError(
                f"Account {account_id} holds {account.currency_code}, investment is in {currency_code}"
            )

    def _system_category_id(self, name: str) -> int:
        self.categories.ensure_system_categories()
        return self.categories.get_category_by_name(name).id

    def _require(self, investment_id: int) -> Investment:
        investment = self.db.get_investment(investment_id)
        if investment is None:
            raise NotFoundError(investment_not_found(investment_id))
        return investment
