"""Recurring rule schedule and service."""

from datetime import date
from decimal import Decimal
from typing import Optional

from dateutil.relativedelta import relativedelta

from capitrack.database.base import Database
from capitrack.domain.entities import RecurringFrequency, RecurringRule
from capitrack.domain.errors import (
    NotFoundError,
    ValidationError,
    account_not_found,
    category_not_found,
)


def _step(frequency: str, count: int) -> relativedelta:
    if frequency == RecurringFrequency.DAILY.value:
        return relativedelta(days=count)
    if frequency == RecurringFrequency.WEEKLY.value:
        return relativedelta(weeks=count)
    if frequency == RecurringFrequency.MONTHLY.value:
        return relativedelta(months=count)
    if frequency == RecurringFrequency.YEARLY.value:
        return relativedelta(years=count)
    raise ValidationError(f"Unknown recurring frequency: {frequency!r}")


def _first_index(frequency: str, first: date, start: date, interval: int) -> int:
    """First k worth checking; every smaller k falls before start."""
    if start <= first:
        return 0
    if frequency == RecurringFrequency.DAILY.value:
        return (start - first).days // interval
    if frequency == RecurringFrequency.WEEKLY.value:
        return (start - first).days // (7 * interval)
    months = (start.year - first.year) * 12 + start.month - first.month
    if frequency == RecurringFrequency.YEARLY.value:
        return months // (12 * interval)
    return months // interval


def occurrences_between(rule: RecurringRule, start: date, end: date) -> list[date]:
    """Return the dates in [start, end] on which the rule charges.

    Occurrences are start_date + k * interval periods, each computed from
    start_date so month-end dates clamp without drifting (Jan 31 -> Feb 28
    -> Mar 31).
    """
    if not rule.is_active or end < start:
        return []
    last = end if rule.end_date is None else min(end, rule.end_date)
    interval = max(1, rule.interval or 1)

    dates = []
    k = _first_index(rule.frequency, rule.start_date, start, interval)
    while True:
        occurrence = rule.start_date + _step(rule.frequency, k * interval)
        if occurrence > last:
            break
        if occurrence >= start:
            dates.append(occurrence)
        k += 1
    return dates


def occurs_on(rule: RecurringRule, day: date) -> bool:
    """True when the rule charges on the given day."""
    return bool(occurrences_between(rule, day, day))


class RecurringService:
    """Service for managing recurring rules."""

    def __init__(self, db: Database):
        """Initialize recurring service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_rule(
        self,
        name: str,
        amount: Decimal,
        currency_code: str,
        frequency: str,
        start_date: date,
        interval: int = 1,
        end_date: Optional[date] = None,
        category_id: Optional[int] = None,
        account_id: Optional[int] = None,
        project_id: Optional[int] = None,
    ) -> int:
        """Create a recurring rule.

        Raises:
            ValidationError: If amount, interval, frequency or dates are invalid
            NotFoundError: If a referenced account or category is missing
        """
        if amount <= 0:
            raise ValidationError("Recurring amount must be positive")
        if interval < 1:
            raise ValidationError("Recurring interval must be at least 1")
        frequency = frequency.upper()
        _step(frequency, 0)
        if end_date is not None and end_date < start_date:
            raise ValidationError("Recurring end date is before its start date")
        if account_id is not None and self.db.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))
        if category_id is not None and self.db.get_category(category_id) is None:
            raise NotFoundError(category_not_found(category_id))

        return self.db.create_recurring_rule(
            name=name,
            amount=amount,
            currency_code=currency_code.upper(),
            frequency=frequency,
            start_date=start_date,
            interval=interval,
            end_date=end_date,
            category_id=category_id,
            account_id=account_id,
            project_id=project_id,
        )

    def list_rules(self, active_only: bool = False) -> list[RecurringRule]:
        """List recurring rules."""
        return self.db.list_recurring_rules(active_only=active_only)
