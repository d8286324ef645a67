"""Depreciation schedules for fixed assets.

Supports straight-line and double-declining-balance methods with daily
precision. A year is always 365 days.
"""

import math
from datetime import date
from typing import Optional

from capitrack.domain.entities import DepreciationMethod, DepreciationResult, Investment
from capitrack.domain.errors import ValidationError, invalid_useful_life
from capitrack.utils.decimal_normalizer import to_number

DAYS_PER_YEAR = 365


def days_between(start_date: date, end_date: date) -> int:
    """Return the absolute number of whole days between two dates."""
    return abs((end_date - start_date).days)


def _check_useful_life(useful_life_years: float) -> None:
    if useful_life_years is None or useful_life_years <= 0:
        raise ValidationError(invalid_useful_life(useful_life_years))


def calculate_straight_line_depreciation(
    purchase_price: float,
    salvage_value: float,
    useful_life_years: float,
    start_date: date,
    as_of: Optional[date] = None,
) -> DepreciationResult:
    """Spread (purchase price - salvage value) evenly over the useful life."""
    _check_useful_life(useful_life_years)
    as_of = as_of or date.today()

    depreciable_amount = purchase_price - salvage_value
    annual_depreciation = depreciable_amount / useful_life_years
    daily_depreciation = annual_depreciation / DAYS_PER_YEAR

    days_elapsed = days_between(start_date, as_of)
    total_days = useful_life_years * DAYS_PER_YEAR

    accumulated = min(days_elapsed * daily_depreciation, depreciable_amount)
    book_value = max(purchase_price - accumulated, salvage_value)
    remaining_life = max(0, total_days - days_elapsed) / DAYS_PER_YEAR

    return DepreciationResult(
        book_value=book_value,
        accumulated_depreciation=accumulated,
        remaining_life=remaining_life,
        daily_depreciation=daily_depreciation,
        annual_depreciation=annual_depreciation,
    )


def calculate_declining_balance_depreciation(
    purchase_price: float,
    salvage_value: float,
    useful_life_years: float,
    start_date: date,
    as_of: Optional[date] = None,
) -> DepreciationResult:
    """Double-declining-balance depreciation.

    Whole elapsed years are applied one by one at rate 2 / useful life, each
    capped so the book value never drops below salvage value; the remaining
    fraction of a year is then prorated. The loop is kept instead of a
    closed-form power because the two diverge once the salvage floor is hit.
    """
    _check_useful_life(useful_life_years)
    as_of = as_of or date.today()

    rate = 2 / useful_life_years
    days_elapsed = days_between(start_date, as_of)
    years_elapsed = days_elapsed / DAYS_PER_YEAR
    whole_years = math.floor(years_elapsed)

    book_value = purchase_price
    accumulated = 0.0

    for _ in range(whole_years):
        year_depreciation = min(book_value * rate, book_value - salvage_value)
        accumulated += year_depreciation
        book_value -= year_depreciation
        if book_value <= salvage_value:
            book_value = salvage_value
            break

    partial_year = years_elapsed - whole_years
    if partial_year > 0 and book_value > salvage_value:
        partial_depreciation = min(
            book_value * rate * partial_year,
            book_value - salvage_value,
        )
        accumulated += partial_depreciation
        book_value -= partial_depreciation

    book_value = min(max(book_value, salvage_value), purchase_price)
    accumulated = min(max(accumulated, 0.0), purchase_price - salvage_value)

    remaining_life = max(0.0, useful_life_years - years_elapsed)
    if remaining_life > 0:
        annual_depreciation = min(book_value * rate, book_value - salvage_value)
    else:
        annual_depreciation = 0.0

    return DepreciationResult(
        book_value=book_value,
        accumulated_depreciation=accumulated,
        remaining_life=remaining_life,
        daily_depreciation=annual_depreciation / DAYS_PER_YEAR,
        annual_depreciation=annual_depreciation,
    )


def calculate_depreciation(
    purchase_price: float,
    salvage_value: float,
    useful_life_years: float,
    method: str,
    start_date: date,
    as_of: Optional[date] = None,
) -> DepreciationResult:
    """Dispatch to the schedule named by method.

    Raises:
        ValidationError: If useful life is not positive or method is unknown
    """
    method_value = method.value if isinstance(method, DepreciationMethod) else method
    if method_value == DepreciationMethod.STRAIGHT_LINE.value:
        return calculate_straight_line_depreciation(
            purchase_price, salvage_value, useful_life_years, start_date, as_of
        )
    if method_value == DepreciationMethod.DECLINING_BALANCE.value:
        return calculate_declining_balance_depreciation(
            purchase_price, salvage_value, useful_life_years, start_date, as_of
        )
    raise ValidationError(f"Unknown depreciation method: {method!r}")


def depreciate_investment(investment: Investment, as_of: Optional[date] = None) -> DepreciationResult:
    """Run the investment's own schedule (straight-line when none is set)."""
    return calculate_depreciation(
        purchase_price=to_number(investment.purchase_price),
        salvage_value=to_number(investment.salvage_value),
        useful_life_years=investment.useful_life,
        method=investment.depreciation_type or DepreciationMethod.STRAIGHT_LINE.value,
        start_date=investment.start_date,
        as_of=as_of,
    )
