"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Any
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from capitrack.domain.entities import (
    Account,
    Category,
    Investment,
    Project,
    RecurringRule,
    Transaction,
)


class Database(ABC):
    """Abstract database interface for capitrack."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        name: str,
        account_type: str,
        currency_code: str,
        initial_balance: Decimal = Decimal("0"),
    ) -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        """List all accounts."""
        pass

    @abstractmethod
    def update_account_balance(self, account_id: int, current_balance: Decimal) -> None:
        """Write back a recomputed current balance."""
        pass

    # Category operations
    @abstractmethod
    def create_category(
        self, name: str, kind: str, is_system_generated: bool = False
    ) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def get_category_by_name(self, name: str) -> Optional[Category]:
        """Get category by name."""
        pass

    @abstractmethod
    def list_categories(self) -> list[Category]:
        """List all categories."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        amount: Decimal,
        currency_code: str,
        transaction_type: str,
        date: date,
        account_id: Optional[int] = None,
        transfer_to_account_id: Optional[int] = None,
        target_amount: Optional[Decimal] = None,
        category_id: Optional[int] = None,
        investment_id: Optional[int] = None,
        project_id: Optional[int] = None,
        note: Optional[str] = None,
        merchant: Optional[str] = None,
        source: str = "MANUAL",
    ) -> int:
        """Create a transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[int] = None,
        project_id: Optional[int] = None,
    ) -> list[Transaction]:
        """List transactions with optional filters.

        Args:
            start_date: Optional start date filter
            end_date: Optional end date filter
            account_id: Optional account filter, matching either the source
                or the transfer destination
            project_id: Optional project filter
        """
        pass

    # Investment operations
    @abstractmethod
    def create_investment(
        self,
        name: str,
        investment_type: str,
        initial_amount: Decimal,
        currency_code: str,
        start_date: date,
        status: str = "ACTIVE",
        current_amount: Optional[Decimal] = None,
        purchase_price: Optional[Decimal] = None,
        salvage_value: Optional[Decimal] = None,
        useful_life: Optional[int] = None,
        depreciation_type: Optional[str] = None,
        end_date: Optional[date] = None,
        interest_rate: Optional[Decimal] = None,
        project_id: Optional[int] = None,
    ) -> int:
        """Create an investment. Returns investment ID."""
        pass

    @abstractmethod
    def get_investment(self, investment_id: int) -> Optional[Investment]:
        """Get investment by ID."""
        pass

    @abstractmethod
    def list_investments(
        self, status: Optional[str] = None, project_id: Optional[int] = None
    ) -> list[Investment]:
        """List investments, optionally filtered by status or project."""
        pass

    @abstractmethod
    def update_investment(self, investment_id: int, **fields: Any) -> None:
        """Update investment fields."""
        pass

    # Project operations
    @abstractmethod
    def create_project(
        self,
        name: str,
        project_type: str,
        start_date: date,
        status: str = "ACTIVE",
        end_date: Optional[date] = None,
        total_budget: Optional[Decimal] = None,
        currency_code: Optional[str] = None,
        owner: Optional[str] = None,
        description: Optional[str] = None,
    ) -> int:
        """Create a project. Returns project ID."""
        pass

    @abstractmethod
    def get_project(self, project_id: int) -> Optional[Project]:
        """Get project by ID."""
        pass

    @abstractmethod
    def list_projects(self, owner: Optional[str] = None) -> list[Project]:
        """List projects, optionally filtered by owner."""
        pass

    @abstractmethod
    def update_project(self, project_id: int, **fields: Any) -> None:
        """Update project fields."""
        pass

    # Recurring rule operations
    @abstractmethod
    def create_recurring_rule(
        self,
        name: str,
        amount: Decimal,
        currency_code: str,
        frequency: str,
        start_date: date,
        interval: int = 1,
        end_date: Optional[date] = None,
        is_active: bool = True,
        category_id: Optional[int] = None,
        account_id: Optional[int] = None,
        project_id: Optional[int] = None,
    ) -> int:
        """Create a recurring rule. Returns rule ID."""
        pass

    @abstractmethod
    def list_recurring_rules(self, active_only: bool = False) -> list[RecurringRule]:
        """List recurring rules."""
        pass
