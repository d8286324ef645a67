"""Domain model entities for capitrack.

These are pure data classes representing business concepts, independent of
database schema. Stored entities carry Decimal amounts; computed results
carry floats (see capitrack.utils.decimal_normalizer).
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional


class TransactionType(str, Enum):
    """Kind of money movement."""

    EXPENSE = "EXPENSE"
    INCOME = "INCOME"
    TRANSFER = "TRANSFER"


class TransactionSource(str, Enum):
    """Where a transaction came from."""

    MANUAL = "MANUAL"
    AI_SCAN = "AI_SCAN"
    RECURRING = "RECURRING"


class AccountType(str, Enum):
    """Account classification."""

    CASH = "CASH"
    BANK = "BANK"
    CREDIT = "CREDIT"
    INVESTMENT = "INVESTMENT"
    ASSET = "ASSET"
    OTHER = "OTHER"


# Balances of these accounts mirror the investments table.
NON_CASH_ACCOUNT_TYPES = frozenset({AccountType.INVESTMENT.value, AccountType.ASSET.value})


class CategoryKind(str, Enum):
    """Category direction."""

    EXPENSE = "EXPENSE"
    INCOME = "INCOME"


class InvestmentType(str, Enum):
    """Investment classification."""

    ASSET = "ASSET"
    DEPOSIT = "DEPOSIT"
    STOCK = "STOCK"
    FUND = "FUND"
    OTHER = "OTHER"


class InvestmentStatus(str, Enum):
    """Investment lifecycle status."""

    ACTIVE = "ACTIVE"
    CLOSED = "CLOSED"
    WRITTEN_OFF = "WRITTEN_OFF"


class DepreciationMethod(str, Enum):
    """Supported depreciation schedules."""

    STRAIGHT_LINE = "STRAIGHT_LINE"
    DECLINING_BALANCE = "DECLINING_BALANCE"


class ProjectType(str, Enum):
    """Project classification."""

    TRIP = "TRIP"
    JOB = "JOB"
    SIDE_HUSTLE = "SIDE_HUSTLE"
    EVENT = "EVENT"
    OTHER = "OTHER"


class ProjectStatus(str, Enum):
    """Project lifecycle status."""

    PLANNING = "PLANNING"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class RecurringFrequency(str, Enum):
    """Recurring rule cadence."""

    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


@dataclass(frozen=True)
class Account:
    """Account domain entity.

    current_balance is a denormalized cache of initial_balance plus the net
    effect of every transaction touching the account. It can be recomputed
    at any time with capitrack.domain.balance.calculate_account_balance.
    """

    id: int
    name: str
    type: str
    currency_code: str
    initial_balance: Decimal
    current_balance: Decimal
    created_at: Optional[datetime] = None

    @property
    def is_cash(self) -> bool:
        """True for accounts that count towards liquid cash."""
        return self.type not in NON_CASH_ACCOUNT_TYPES


@dataclass(frozen=True)
class Category:
    """Category domain entity."""

    id: int
    name: str
    kind: str
    is_system_generated: bool = False
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity.

    For transfers, account_id is the source and transfer_to_account_id the
    destination. amount is in the source currency, target_amount in the
    destination currency.
    """

    id: int
    amount: Decimal
    currency_code: str
    type: str
    date: date
    account_id: Optional[int] = None
    transfer_to_account_id: Optional[int] = None
    target_amount: Optional[Decimal] = None
    category_id: Optional[int] = None
    investment_id: Optional[int] = None
    project_id: Optional[int] = None
    note: Optional[str] = None
    merchant: Optional[str] = None
    source: str = TransactionSource.MANUAL.value
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Investment:
    """Investment or fixed asset domain entity."""

    id: int
    name: str
    type: str
    status: str
    initial_amount: Decimal
    currency_code: str
    start_date: date
    current_amount: Optional[Decimal] = None
    purchase_price: Optional[Decimal] = None
    salvage_value: Optional[Decimal] = None
    useful_life: Optional[int] = None
    depreciation_type: Optional[str] = None
    end_date: Optional[date] = None
    interest_rate: Optional[Decimal] = None
    project_id: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == InvestmentStatus.ACTIVE.value

    @property
    def is_depreciable(self) -> bool:
        """True for fixed assets carrying a depreciation schedule."""
        return (
            self.type == InvestmentType.ASSET.value
            and self.purchase_price is not None
            and bool(self.useful_life)
        )


@dataclass(frozen=True)
class Project:
    """Project domain entity."""

    id: int
    name: str
    type: str
    status: str
    start_date: date
    end_date: Optional[date] = None
    total_budget: Optional[Decimal] = None
    currency_code: Optional[str] = None
    owner: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class RecurringRule:
    """Recurring charge domain entity."""

    id: int
    name: str
    amount: Decimal
    currency_code: str
    frequency: str
    start_date: date
    interval: int = 1
    end_date: Optional[date] = None
    is_active: bool = True
    category_id: Optional[int] = None
    account_id: Optional[int] = None
    project_id: Optional[int] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class DepreciationResult:
    """Depreciation state of an asset at a point in time."""

    book_value: float
    accumulated_depreciation: float
    remaining_life: float
    daily_depreciation: float
    annual_depreciation: float


@dataclass(frozen=True)
class DailyMetricPoint:
    """Derived financial figures for one calendar day, in base currency."""

    date: date
    income: float
    ordinary_cost: float
    recurring_cost: float
    depreciation_cost: float
    project_cost: float
    total_daily_cost: float
    net_profit: float
    cash_level: float
    capital_level: float


@dataclass(frozen=True)
class MonthlyProfitLoss:
    """Profit and loss for one calendar month, depreciation included."""

    month: str
    income: float
    amortized_cost: float
    net_profit: float


@dataclass(frozen=True)
class MetricsReport:
    """Daily series plus runway KPIs.

    runway_months is 0 when there is no cash burn in the range.
    """

    base_currency: str
    start_date: date
    end_date: date
    points: tuple[DailyMetricPoint, ...]
    cash_only: float
    avg_daily_burn: float
    runway_months: float
    using_fallback_rates: bool = False


@dataclass(frozen=True)
class AssetDetail:
    """Fixed asset line for net worth reporting."""

    id: int
    name: str
    start_date: date
    current_value: float
    daily_depreciation: float
    original_currency: str


@dataclass(frozen=True)
class NetWorthSummary:
    """Summary of net worth figures in base currency."""

    base_currency: str
    total_cash: float
    total_financial_invested: float
    total_fixed_assets: float
    total_net_worth: float
    asset_details: tuple[AssetDetail, ...] = ()
    using_fallback_rates: bool = False


@dataclass(frozen=True)
class ProjectStats:
    """Profit and loss figures for a single project, in base currency."""

    project_id: int
    project_type: str
    base_currency: str
    total_expenses: float
    total_income: float
    total_transfers: float
    total_depreciation: float
    net_result: float
    transaction_count: int
    asset_count: int
    budget: Optional[float]
    budget_utilization: Optional[float]
    budget_remaining: Optional[float]
    project_days: Optional[int]
    amortized_daily_cost: Optional[float]
    roi: Optional[float]
    using_fallback_rates: bool = False


@dataclass(frozen=True)
class BalanceReconciliation:
    """Outcome of reconciling one account's stored balance."""

    account_id: int
    name: str
    type: str
    old_balance: float
    new_balance: float
    updated: bool


@dataclass(frozen=True)
class ReconciliationReport:
    """Counts and per-account results of a balance reconciliation run."""

    total: int
    updated: int
    skipped: int
    results: tuple[BalanceReconciliation, ...] = ()


@dataclass(frozen=True)
class OperationResult:
    """Structured outcome for operations that report failure without raising."""

    success: bool
    error: Optional[str] = None
    data: Any = None
    details: dict[str, Any] = field(default_factory=dict)
