"""Tests for recurring rule schedules and service."""

from datetime import date
from decimal import Decimal

import pytest

from capitrack.domain.entities import RecurringRule
from capitrack.domain.errors import NotFoundError, ValidationError
from capitrack.domain import recurring
from capitrack.domain.recurring import occurrences_between, occurs_on


def _rule(frequency="MONTHLY", start=date(2024, 1, 31), interval=1, end=None, active=True):
    return RecurringRule(
        id=1,
        name="Rent",
        amount=Decimal("1500"),
        currency_code="USD",
        frequency=frequency,
        start_date=start,
        interval=interval,
        end_date=end,
        is_active=active,
    )


def test_monthly_clamps_to_month_end_without_drift():
    dates = occurrences_between(_rule(), date(2024, 1, 1), date(2024, 4, 30))

    assert dates == [date(2024, 1, 31), date(2024, 2, 29), date(2024, 3, 31), date(2024, 4, 30)]


@pytest.mark.parametrize(
    "frequency,start,interval,window,expected",
    [
        (
            "DAILY", date(2000, 1, 1), 3, (date(2024, 1, 1), date(2024, 1, 7)),
            [date(2024, 1, 1), date(2024, 1, 4), date(2024, 1, 7)],
        ),
        (
            "WEEKLY", date(2024, 1, 1), 2, (date(2024, 3, 1), date(2024, 3, 31)),
            [date(2024, 3, 11), date(2024, 3, 25)],
        ),
        (
            "MONTHLY", date(2020, 1, 31), 1, (date(2024, 2, 1), date(2024, 3, 31)),
            [date(2024, 2, 29), date(2024, 3, 31)],
        ),
        (
            "YEARLY", date(2000, 2, 29), 1, (date(2023, 1, 1), date(2024, 12, 31)),
            [date(2023, 2, 28), date(2024, 2, 29)],
        ),
    ],
)
def test_window_long_after_rule_start(frequency, start, interval, window, expected):
    rule = _rule(frequency=frequency, start=start, interval=interval)

    assert occurrences_between(rule, *window) == expected


def test_old_daily_rule_does_not_replay_history(monkeypatch):
    calls = []
    real_step = recurring._step

    def counting_step(frequency, count):
        calls.append(count)
        return real_step(frequency, count)

    monkeypatch.setattr(recurring, "_step", counting_step)

    rule = _rule("DAILY", start=date(1990, 1, 1))

    dates = occurrences_between(rule, date(2024, 5, 1), date(2024, 5, 3))

    assert dates == [date(2024, 5, 1), date(2024, 5, 2), date(2024, 5, 3)]
    assert len(calls) <= 5


def test_weekly_with_interval():
    rule = _rule("WEEKLY", start=date(2024, 1, 1), interval=2)

    dates = occurrences_between(rule, date(2024, 1, 1), date(2024, 1, 31))

    assert dates == [date(2024, 1, 1), date(2024, 1, 15), date(2024, 1, 29)]


def test_daily_and_yearly():
    assert len(occurrences_between(_rule("DAILY", start=date(2024, 1, 1)), date(2024, 1, 5), date(2024, 1, 9))) == 5
    yearly = _rule("YEARLY", start=date(2020, 2, 29))
    assert occurrences_between(yearly, date(2021, 1, 1), date(2021, 12, 31)) == [date(2021, 2, 28)]


def test_end_date_and_inactive_rules():
    ended = _rule(start=date(2024, 1, 1), end=date(2024, 2, 15))
    assert occurrences_between(ended, date(2024, 1, 1), date(2024, 12, 31)) == [
        date(2024, 1, 1),
        date(2024, 2, 1),
    ]
    assert occurrences_between(_rule(active=False), date(2024, 1, 1), date(2024, 12, 31)) == []


def test_occurs_on():
    rule = _rule(start=date(2024, 1, 15))

    assert occurs_on(rule, date(2024, 3, 15)) is True
    assert occurs_on(rule, date(2024, 3, 16)) is False
    assert occurs_on(rule, date(2023, 12, 15)) is False


class TestRecurringService:
    def test_create_and_list(self, recurring_service, usd_account):
        rule_id = recurring_service.create_rule(
            "Gym", Decimal("30"), "usd", "monthly", date(2024, 1, 1), account_id=usd_account.id
        )

        rules = recurring_service.list_rules(active_only=True)

        assert [r.id for r in rules] == [rule_id]
        assert rules[0].currency_code == "USD"
        assert rules[0].frequency == "MONTHLY"

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"amount": Decimal("0")},
            {"interval": 0},
            {"frequency": "HOURLY"},
            {"end_date": date(2023, 1, 1)},
        ],
    )
    def test_invalid_rules_are_rejected(self, recurring_service, kwargs):
        fields = dict(
            name="Bad",
            amount=Decimal("10"),
            currency_code="USD",
            frequency="MONTHLY",
            start_date=date(2024, 1, 1),
        )
        fields.update(kwargs)

        with pytest.raises(ValidationError):
            recurring_service.create_rule(**fields)

    def test_unknown_account(self, recurring_service):
        with pytest.raises(NotFoundError):
            recurring_service.create_rule(
                "Gym", Decimal("30"), "USD", "MONTHLY", date(2024, 1, 1), account_id=99
            )
