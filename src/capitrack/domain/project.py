"""Project domain service and profit and loss figures."""

import math
from collections.abc import Iterable
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from capitrack.database.base import Database
from capitrack.domain.account import normalize_currency_code
from capitrack.domain.currency import ExchangeRateProvider, RateTable
from capitrack.domain.entities import (
    Investment,
    InvestmentType,
    Project,
    ProjectStats,
    ProjectStatus,
    ProjectType,
    Transaction,
    TransactionType,
)
from capitrack.domain.errors import (
    AuthorizationError,
    NotFoundError,
    ValidationError,
    project_not_found,
    project_unauthorized,
)
from capitrack.utils.decimal_normalizer import to_number

AMORTIZED_PROJECT_TYPES = frozenset({ProjectType.TRIP.value, ProjectType.EVENT.value})
ROI_PROJECT_TYPES = frozenset({ProjectType.SIDE_HUSTLE.value, ProjectType.JOB.value})


def compute_project_stats(
    project: Project,
    transactions: Iterable[Transaction],
    investments: Iterable[Investment],
    rates: RateTable,
    base_currency: str,
) -> ProjectStats:
    """Sum a project's transactions and asset write-downs in base currency.

    Asset depreciation here is the point-in-time drop purchase_price -
    current_amount, not the daily schedule used elsewhere.

    Args:
        project: Project to report on
        transactions: Transactions; only those linked to the project count
        investments: Investments; only ASSET ones linked to the project count
        rates: Rate table used for every conversion
        base_currency: Target currency

    Returns:
        ProjectStats in base currency
    """
    totals = {t.value: 0.0 for t in TransactionType}
    count = 0
    for txn in transactions:
        if txn.project_id != project.id:
            continue
        count += 1
        totals[txn.type] = totals.get(txn.type, 0.0) + rates.convert(
            to_number(txn.amount), txn.currency_code, base_currency
        )

    depreciation = 0.0
    asset_count = 0
    for inv in investments:
        if inv.project_id != project.id or inv.type != InvestmentType.ASSET.value:
            continue
        asset_count += 1
        if inv.purchase_price is None or inv.current_amount is None:
            continue
        drop = to_number(inv.purchase_price) - to_number(inv.current_amount)
        depreciation += rates.convert(drop, inv.currency_code, base_currency)

    expenses = totals[TransactionType.EXPENSE.value]
    income = totals[TransactionType.INCOME.value]

    project_days = None
    amortized_daily_cost = None
    if project.type in AMORTIZED_PROJECT_TYPES and project.end_date is not None:
        project_days = max(1, math.ceil((project.end_date - project.start_date).days) + 1)
        amortized_daily_cost = expenses / project_days

    roi = None
    if project.type in ROI_PROJECT_TYPES:
        cost = expenses + depreciation
        if cost > 0:
            roi = (income - cost) / cost * 100

    budget = None
    budget_utilization = None
    budget_remaining = None
    if project.total_budget is not None:
        budget = rates.convert(
            to_number(project.total_budget),
            project.currency_code or base_currency,
            base_currency,
        )
        budget_remaining = budget - expenses
        if budget > 0:
            budget_utilization = expenses / budget * 100

    return ProjectStats(
        project_id=project.id,
        project_type=project.type,
        base_currency=base_currency,
        total_expenses=expenses,
        total_income=income,
        total_transfers=totals[TransactionType.TRANSFER.value],
        total_depreciation=depreciation,
        net_result=income - expenses - depreciation,
        transaction_count=count,
        asset_count=asset_count,
        budget=budget,
        budget_utilization=budget_utilization,
        budget_remaining=budget_remaining,
        project_days=project_days,
        amortized_daily_cost=amortized_daily_cost,
        roi=roi,
        using_fallback_rates=rates.using_fallback,
    )


class ProjectService:
    """Service for managing projects."""

    def __init__(self, db: Database, rate_provider: Optional[ExchangeRateProvider] = None):
        """Initialize project service.

        Args:
            db: Database instance
            rate_provider: Exchange rate provider, needed for stats
        """
        self.db = db
        self.rate_provider = rate_provider or ExchangeRateProvider()

    def create_project(
        self,
        name: str,
        project_type: str,
        start_date: date,
        status: str = ProjectStatus.ACTIVE.value,
        end_date: Optional[date] = None,
        total_budget: Optional[Decimal] = None,
        currency_code: Optional[str] = None,
        owner: Optional[str] = None,
        description: Optional[str] = None,
    ) -> int:
        """Create a project.

        Returns:
            Project ID

        Raises:
            ValidationError: If type, status, dates or budget are invalid
        """
        project_type = project_type.upper()
        if project_type not in {t.value for t in ProjectType}:
            raise ValidationError(f"Invalid project type: {project_type}")
        status = status.upper()
        if status not in {s.value for s in ProjectStatus}:
            raise ValidationError(f"Invalid project status: {status}")
        if end_date is not None and end_date < start_date:
            raise ValidationError("Project end date is before its start date")
        if total_budget is not None and total_budget < 0:
            raise ValidationError("Budget cannot be negative")

        return self.db.create_project(
            name=name,
            project_type=project_type,
            start_date=start_date,
            status=status,
            end_date=end_date,
            total_budget=total_budget,
            currency_code=normalize_currency_code(currency_code) if currency_code else None,
            owner=owner,
            description=description,
        )

    def list_projects(self, owner: Optional[str] = None) -> list[Project]:
        return self.db.list_projects(owner=owner)

    def get_project(self, project_id: int, owner: Optional[str] = None) -> Project:
        """Get a project, checking ownership when owner is given.

        Raises:
            NotFoundError: If project doesn't exist
            AuthorizationError: If owner differs from the project's owner
        """
        project = self.db.get_project(project_id)
        if project is None:
            raise NotFoundError(project_not_found(project_id))
        if owner is not None and project.owner != owner:
            raise AuthorizationError(project_unauthorized(project_id))
        return project

    def update_project(self, project_id: int, owner: Optional[str] = None, **fields: Any) -> None:
        """Update project fields after an ownership check.

        Raises:
            NotFoundError: If project doesn't exist
            AuthorizationError: If owner differs from the project's owner
            ValidationError: If type or status is invalid
        """
        self.get_project(project_id, owner=owner)
        if "type" in fields:
            fields["type"] = fields["type"].upper()
            if fields["type"] not in {t.value for t in ProjectType}:
                raise ValidationError(f"Invalid project type: {fields['type']}")
        if "status" in fields:
            fields["status"] = fields["status"].upper()
            if fields["status"] not in {s.value for s in ProjectStatus}:
                raise ValidationError(f"Invalid project status: {fields['status']}")
        self.db.update_project(project_id, **fields)

    def get_project_stats(
        self, project_id: int, base_currency: str, owner: Optional[str] = None
    ) -> ProjectStats:
        """Profit and loss figures of one project.

        Args:
            project_id: Project ID
            base_currency: Target currency
            owner: If given, must match the project's owner

        Returns:
            ProjectStats in base currency

        Raises:
            NotFoundError: If project doesn't exist
            AuthorizationError: If owner differs from the project's owner
        """
        project = self.get_project(project_id, owner=owner)
        return compute_project_stats(
            project=project,
            transactions=self.db.list_transactions(project_id=project_id),
            investments=self.db.list_investments(project_id=project_id),
            rates=self.rate_provider.get_rates(),
            base_currency=base_currency.upper(),
        )
