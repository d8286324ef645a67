"""Daily metrics series, runway KPIs and monthly profit and loss.

Every figure is in the report's base currency. Daily cash burn leaves
depreciation out; monthly amortized cost puts it back in. Both go through
point_cost so the two rules stay side by side.
"""

import logging
from collections import defaultdict
from collections.abc import Iterable
from datetime import date, timedelta
from typing import Optional

from capitrack.database.base import Database
from capitrack.domain.balance import transaction_effect
from capitrack.domain.capital import investment_value
from capitrack.domain.currency import ExchangeRateProvider, RateTable
from capitrack.domain.depreciation import DAYS_PER_YEAR, depreciate_investment
from capitrack.domain.entities import (
    Account,
    Category,
    DailyMetricPoint,
    Investment,
    InvestmentType,
    MetricsReport,
    MonthlyProfitLoss,
    RecurringRule,
    Transaction,
    TransactionSource,
    TransactionType,
)
from capitrack.domain.errors import ValidationError, invalid_date_range
from capitrack.domain.recurring import occurrences_between
from capitrack.utils.decimal_normalizer import to_number

logger = logging.getLogger(__name__)

DAYS_PER_MONTH = 30


def daterange(start_date: date, end_date: date) -> Iterable[date]:
    """Yield every day from start_date to end_date inclusive."""
    day = start_date
    while day <= end_date:
        yield day
        day += timedelta(days=1)


def combine_costs(
    ordinary: float,
    recurring: float,
    project: float,
    depreciation: float,
    include_depreciation: bool = False,
) -> float:
    """Add up cost components, with or without non-cash depreciation."""
    total = ordinary + recurring + project
    if include_depreciation:
        total += depreciation
    return total


def point_cost(point: DailyMetricPoint, include_depreciation: bool = False) -> float:
    """Cash burn of a point, or its amortized cost with include_depreciation."""
    return combine_costs(
        point.ordinary_cost,
        point.recurring_cost,
        point.project_cost,
        point.depreciation_cost,
        include_depreciation=include_depreciation,
    )


def is_ordinary_expense(txn: Transaction, system_category_ids: set[int]) -> bool:
    """True for everyday spending not already counted elsewhere.

    Project and investment expenses, system-booked categories and
    materialized recurring charges all have their own cost line.
    """
    return (
        txn.type == TransactionType.EXPENSE.value
        and txn.project_id is None
        and txn.investment_id is None
        and txn.category_id not in system_category_ids
        and txn.source != TransactionSource.RECURRING.value
    )


def depreciation_spans(investment: Investment, day: date) -> bool:
    """True when day falls within the asset's useful life."""
    end = investment.start_date + timedelta(days=investment.useful_life * DAYS_PER_YEAR)
    return investment.start_date <= day < end


def _daily_depreciation(
    investments: list[Investment], day: date, rates: RateTable, base_currency: str
) -> float:
    total = 0.0
    for inv in investments:
        if not depreciation_spans(inv, day):
            continue
        daily = depreciate_investment(inv, day).daily_depreciation
        total += rates.convert(daily, inv.currency_code, base_currency)
    return total


def _recurring_by_day(
    rules: Iterable[RecurringRule],
    start_date: date,
    end_date: date,
    rates: RateTable,
    base_currency: str,
) -> dict[date, float]:
    by_day: dict[date, float] = defaultdict(float)
    for rule in rules:
        amount = rates.convert(to_number(rule.amount), rule.currency_code, base_currency)
        for day in occurrences_between(rule, start_date, end_date):
            by_day[day] += amount
    return by_day


def build_metrics(
    start_date: date,
    end_date: date,
    transactions: list[Transaction],
    recurring_rules: list[RecurringRule],
    investments: list[Investment],
    accounts: list[Account],
    rates: RateTable,
    base_currency: str,
    categories: Optional[list[Category]] = None,
) -> MetricsReport:
    """Build one DailyMetricPoint per day plus runway KPIs.

    Args:
        start_date: First day of the series
        end_date: Last day of the series, inclusive
        transactions: Transaction history; entries before start_date feed
            the opening cash level
        recurring_rules: Recurring rules; inactive ones are ignored
        investments: Investments of any status
        accounts: All accounts; INVESTMENT and ASSET ones are not cash
        rates: Rate table used for every conversion
        base_currency: Target currency
        categories: Categories, used to recognize system-generated ones

    Returns:
        MetricsReport with the series and runway figures

    Raises:
        ValidationError: If start_date is after end_date
    """
    if start_date > end_date:
        raise ValidationError(invalid_date_range(start_date, end_date))

    system_category_ids = {c.id for c in categories or () if c.is_system_generated}
    cash_accounts = [a for a in accounts if a.is_cash]
    active_investments = [inv for inv in investments if inv.is_active]
    depreciable = [
        inv
        for inv in active_investments
        if inv.type == InvestmentType.ASSET.value and inv.is_depreciable
    ]

    by_day: dict[date, list[Transaction]] = defaultdict(list)
    for txn in transactions:
        by_day[txn.date].append(txn)
    recurring = _recurring_by_day(recurring_rules, start_date, end_date, rates, base_currency)

    def convert_txn(txn: Transaction) -> float:
        return rates.convert(to_number(txn.amount), txn.currency_code, base_currency)

    def cash_delta(txns: Iterable[Transaction]) -> float:
        delta = 0.0
        for txn in txns:
            for account in cash_accounts:
                effect = transaction_effect(account.id, txn)
                if effect:
                    delta += rates.convert(effect, account.currency_code, base_currency)
        return delta

    cash_level = sum(
        rates.convert(to_number(a.initial_balance), a.currency_code, base_currency)
        for a in cash_accounts
    )
    cash_level += cash_delta(txn for txn in transactions if txn.date < start_date)

    points = []
    for day in daterange(start_date, end_date):
        day_txns = by_day.get(day, [])

        income = sum(convert_txn(t) for t in day_txns if t.type == TransactionType.INCOME.value)
        ordinary = sum(
            convert_txn(t) for t in day_txns if is_ordinary_expense(t, system_category_ids)
        )
        project = sum(
            convert_txn(t)
            for t in day_txns
            if t.type == TransactionType.EXPENSE.value and t.project_id is not None
        )
        recurring_cost = recurring.get(day, 0.0)
        depreciation = _daily_depreciation(depreciable, day, rates, base_currency)

        total = combine_costs(ordinary, recurring_cost, project, depreciation)
        cash_level += cash_delta(day_txns)
        invested = sum(
            rates.convert(investment_value(inv, day), inv.currency_code, base_currency)
            for inv in active_investments
            if inv.start_date <= day
        )

        points.append(
            DailyMetricPoint(
                date=day,
                income=income,
                ordinary_cost=ordinary,
                recurring_cost=recurring_cost,
                depreciation_cost=depreciation,
                project_cost=project,
                total_daily_cost=total,
                net_profit=income - total - depreciation,
                cash_level=cash_level,
                capital_level=cash_level + invested,
            )
        )

    cash_only = points[-1].cash_level if points else 0.0
    avg_daily_burn = sum(p.total_daily_cost for p in points) / len(points) if points else 0.0
    runway_months = calculate_runway_months(cash_only, avg_daily_burn)

    return MetricsReport(
        base_currency=base_currency,
        start_date=start_date,
        end_date=end_date,
        points=tuple(points),
        cash_only=cash_only,
        avg_daily_burn=avg_daily_burn,
        runway_months=runway_months,
        using_fallback_rates=rates.using_fallback,
    )


def calculate_runway_months(cash_only: float, avg_daily_burn: float) -> float:
    """Months of cash left at the current burn, 0 when nothing burns."""
    if avg_daily_burn <= 0:
        return 0.0
    return cash_only / avg_daily_burn / DAYS_PER_MONTH


def monthly_profit_loss(points: Iterable[DailyMetricPoint]) -> list[MonthlyProfitLoss]:
    """Group a daily series by calendar month, depreciation included."""
    income: dict[str, float] = defaultdict(float)
    cost: dict[str, float] = defaultdict(float)
    for point in points:
        month = point.date.strftime("%Y-%m")
        income[month] += point.income
        cost[month] += point_cost(point, include_depreciation=True)

    return [
        MonthlyProfitLoss(
            month=month,
            income=income[month],
            amortized_cost=cost[month],
            net_profit=income[month] - cost[month],
        )
        for month in sorted(income)
    ]


class MetricsService:
    """Service for building metrics reports from stored snapshots."""

    def __init__(self, db: Database, rate_provider: ExchangeRateProvider):
        """Initialize metrics service.

        Args:
            db: Database instance
            rate_provider: Exchange rate provider
        """
        self.db = db
        self.rate_provider = rate_provider

    def get_metrics(self, start_date: date, end_date: date, base_currency: str) -> MetricsReport:
        """Build the daily series for a date range.

        Args:
            start_date: First day, inclusive
            end_date: Last day, inclusive
            base_currency: Target currency

        Returns:
            MetricsReport in base currency

        Raises:
            ValidationError: If start_date is after end_date
        """
        if start_date > end_date:
            raise ValidationError(invalid_date_range(start_date, end_date))

        rates = self.rate_provider.get_rates()
        if rates.using_fallback:
            logger.warning("Building metrics with fallback exchange rates")
        report = build_metrics(
            start_date=start_date,
            end_date=end_date,
            transactions=self.db.list_transactions(end_date=end_date),
            recurring_rules=self.db.list_recurring_rules(active_only=True),
            investments=self.db.list_investments(),
            accounts=self.db.list_accounts(),
            rates=rates,
            base_currency=base_currency.upper(),
            categories=self.db.list_categories(),
        )
        logger.info(
            "Built %d metric points, runway %.1f months",
            len(report.points),
            report.runway_months,
        )
        return report

    def get_monthly_profit_loss(
        self, start_date: date, end_date: date, base_currency: str
    ) -> list[MonthlyProfitLoss]:
        """Monthly profit and loss over a date range."""
        report = self.get_metrics(start_date, end_date, base_currency)
        return monthly_profit_loss(report.points)
