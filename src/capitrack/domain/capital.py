"""Capital and net worth aggregation."""

import logging
from collections.abc import Iterable
from datetime import date
from typing import Optional

from capitrack.database.base import Database
from capitrack.domain.balance import calculate_account_balance
from capitrack.domain.currency import ExchangeRateProvider, RateTable
from capitrack.domain.depreciation import DAYS_PER_YEAR, depreciate_investment
from capitrack.domain.entities import (
    Account,
    AssetDetail,
    Investment,
    InvestmentStatus,
    InvestmentType,
    NetWorthSummary,
    Transaction,
)
from capitrack.utils.decimal_normalizer import to_number

logger = logging.getLogger(__name__)

TOP_ASSET_DETAILS = 5


def deposit_value(investment: Investment, as_of: Optional[date] = None) -> float:
    """Principal plus simple interest accrued up to end_date or as_of.

    Interest stops at the valuation date, so a deposit with a future
    end_date is valued at what it has earned so far.
    """
    as_of = as_of or date.today()
    principal = to_number(investment.initial_amount)
    rate = to_number(investment.interest_rate) / 100
    end = investment.end_date or as_of
    end = min(end, as_of)
    years = (end - investment.start_date).days / DAYS_PER_YEAR
    return principal + principal * rate * max(0.0, years)


def investment_value(investment: Investment, as_of: Optional[date] = None) -> float:
    """Return an investment's present value in its own currency.

    Fixed assets with a schedule are worth their book value; deposits with
    an interest rate accrue simple interest; anything else is worth its
    current amount, falling back to the initial amount.
    """
    if investment.is_depreciable:
        return depreciate_investment(investment, as_of).book_value
    if investment.type == InvestmentType.DEPOSIT.value and investment.interest_rate is not None:
        return deposit_value(investment, as_of)
    if investment.current_amount is not None:
        return to_number(investment.current_amount)
    return to_number(investment.initial_amount)


def asset_daily_depreciation(investment: Investment, as_of: Optional[date] = None) -> float:
    """Current daily depreciation of a fixed asset, 0 without a schedule."""
    if not investment.is_depreciable:
        return 0.0
    return depreciate_investment(investment, as_of).daily_depreciation


def account_balance(
    account: Account,
    transactions: Optional[Iterable[Transaction]] = None,
    as_of: Optional[date] = None,
) -> float:
    """Balance from history when transactions are given, else the stored cache."""
    if transactions is None:
        return to_number(account.current_balance)
    return calculate_account_balance(account, transactions, as_of=as_of)


def compute_net_worth(
    accounts: Iterable[Account],
    investments: Iterable[Investment],
    rates: RateTable,
    base_currency: str,
    as_of: Optional[date] = None,
    transactions: Optional[list[Transaction]] = None,
) -> NetWorthSummary:
    """Sum cash, financial investments and fixed assets in base currency.

    Accounts of type INVESTMENT or ASSET are left out of cash because the
    investments table already carries their value. Only ACTIVE investments
    count.

    Args:
        accounts: Account snapshots
        investments: Investment snapshots
        rates: Rate table used for every conversion
        base_currency: Target currency
        as_of: Valuation date, defaults to today
        transactions: If given, balances are rebuilt from history instead of
            trusting the stored current_balance

    Returns:
        NetWorthSummary in base currency
    """
    as_of = as_of or date.today()

    total_cash = 0.0
    for account in accounts:
        if not account.is_cash:
            continue
        balance = account_balance(account, transactions, as_of=as_of)
        total_cash += rates.convert(balance, account.currency_code, base_currency)

    total_financial = 0.0
    total_fixed = 0.0
    details = []
    for investment in investments:
        if investment.status != InvestmentStatus.ACTIVE.value:
            continue
        value = rates.convert(
            investment_value(investment, as_of), investment.currency_code, base_currency
        )
        if investment.type != InvestmentType.ASSET.value:
            total_financial += value
            continue

        total_fixed += value
        daily_dep = rates.convert(
            asset_daily_depreciation(investment, as_of), investment.currency_code, base_currency
        )
        details.append(
            AssetDetail(
                id=investment.id,
                name=investment.name,
                start_date=investment.start_date,
                current_value=value,
                daily_depreciation=daily_dep,
                original_currency=investment.currency_code,
            )
        )

    details.sort(key=lambda d: d.current_value, reverse=True)
    return NetWorthSummary(
        base_currency=base_currency,
        total_cash=total_cash,
        total_financial_invested=total_financial,
        total_fixed_assets=total_fixed,
        total_net_worth=total_cash + total_financial + total_fixed,
        asset_details=tuple(details[:TOP_ASSET_DETAILS]),
        using_fallback_rates=rates.using_fallback,
    )


class NetWorthService:
    """Service for building net worth summaries from stored snapshots."""

    def __init__(self, db: Database, rate_provider: ExchangeRateProvider):
        """Initialize net worth service.

        Args:
            db: Database instance
            rate_provider: Exchange rate provider
        """
        self.db = db
        self.rate_provider = rate_provider

    def get_summary(
        self,
        base_currency: str,
        as_of: Optional[date] = None,
        recompute_balances: bool = False,
    ) -> NetWorthSummary:
        """Build the net worth summary.

        Args:
            base_currency: Target currency
            as_of: Valuation date, defaults to today
            recompute_balances: Rebuild cash balances from history instead of
                using stored balances

        Returns:
            NetWorthSummary in base currency
        """
        rates = self.rate_provider.get_rates()
        transactions = self.db.list_transactions() if recompute_balances else None
        summary = compute_net_worth(
            accounts=self.db.list_accounts(),
            investments=self.db.list_investments(status=InvestmentStatus.ACTIVE.value),
            rates=rates,
            base_currency=base_currency.upper(),
            as_of=as_of,
            transactions=transactions,
        )
        logger.info(
            "Net worth computed: cash=%.2f, financial=%.2f, fixed=%.2f %s",
            summary.total_cash,
            summary.total_financial_invested,
            summary.total_fixed_assets,
            summary.base_currency,
        )
        return summary
