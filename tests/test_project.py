"""Tests for project profit and loss and the project service."""

from datetime import date
from decimal import Decimal

import pytest

from capitrack.domain.entities import Investment, Project, Transaction
from capitrack.domain.errors import AuthorizationError, NotFoundError, ValidationError
from capitrack.domain.project import compute_project_stats

START = date(2024, 4, 1)


def _project(project_type="TRIP", **fields):
    return Project(id=1, name="Project", type=project_type, status="ACTIVE", start_date=START, **fields)


def _txn(txn_id, txn_type, amount, currency="USD", project_id=1):
    return Transaction(
        id=txn_id,
        amount=Decimal(amount),
        currency_code=currency,
        type=txn_type,
        date=START,
        account_id=1,
        project_id=project_id,
    )


def _asset(purchase_price="1000", current_amount="800", project_id=1):
    return Investment(
        id=1,
        name="Camera",
        type="ASSET",
        status="ACTIVE",
        initial_amount=Decimal(purchase_price),
        currency_code="USD",
        start_date=START,
        purchase_price=Decimal(purchase_price) if purchase_price else None,
        current_amount=Decimal(current_amount) if current_amount else None,
        project_id=project_id,
    )


def test_sums_by_type_in_base_currency(rates):
    txns = [
        _txn(1, "EXPENSE", "100"),
        _txn(2, "EXPENSE", "720", currency="CNY"),
        _txn(3, "INCOME", "50"),
        _txn(4, "TRANSFER", "30"),
        _txn(5, "EXPENSE", "999", project_id=2),
    ]

    stats = compute_project_stats(_project("OTHER"), txns, [], rates, "USD")

    assert stats.total_expenses == pytest.approx(200)
    assert stats.total_income == pytest.approx(50)
    assert stats.total_transfers == pytest.approx(30)
    assert stats.transaction_count == 4
    assert stats.net_result == pytest.approx(-150)
    assert stats.roi is None
    assert stats.project_days is None


def test_asset_depreciation_is_price_minus_current_amount(rates):
    investments = [_asset(), _asset(current_amount=None), _asset(project_id=2)]

    stats = compute_project_stats(_project("OTHER"), [_txn(1, "INCOME", "500")], investments, rates, "USD")

    assert stats.total_depreciation == pytest.approx(200)
    assert stats.asset_count == 2
    assert stats.net_result == pytest.approx(300)


def test_trip_amortizes_expenses_per_day(rates):
    trip = _project("TRIP", end_date=date(2024, 4, 10))

    stats = compute_project_stats(trip, [_txn(1, "EXPENSE", "1000")], [], rates, "USD")

    assert stats.project_days == 10
    assert stats.amortized_daily_cost == pytest.approx(100)


def test_single_day_event(rates):
    event = _project("EVENT", end_date=START)

    stats = compute_project_stats(event, [_txn(1, "EXPENSE", "80")], [], rates, "USD")

    assert stats.project_days == 1
    assert stats.amortized_daily_cost == pytest.approx(80)


def test_side_hustle_roi_counts_depreciation_as_cost(rates):
    stats = compute_project_stats(
        _project("SIDE_HUSTLE"),
        [_txn(1, "EXPENSE", "300"), _txn(2, "INCOME", "750")],
        [_asset()],
        rates,
        "USD",
    )

    assert stats.roi == pytest.approx((750 - 500) / 500 * 100)


def test_job_without_cost_has_no_roi(rates):
    stats = compute_project_stats(_project("JOB"), [_txn(1, "INCOME", "100")], [], rates, "USD")

    assert stats.roi is None


def test_budget_utilization_and_remaining(rates):
    project = _project("TRIP", total_budget=Decimal("2000"), currency_code="USD")

    stats = compute_project_stats(project, [_txn(1, "EXPENSE", "500")], [], rates, "USD")

    assert stats.budget == pytest.approx(2000)
    assert stats.budget_utilization == pytest.approx(25)
    assert stats.budget_remaining == pytest.approx(1500)


def test_no_budget(rates):
    stats = compute_project_stats(_project(), [], [], rates, "USD")

    assert stats.budget is None
    assert stats.budget_utilization is None
    assert stats.budget_remaining is None


class TestProjectService:
    def test_create_and_stats(self, project_service, transaction_service, usd_account):
        project_id = project_service.create_project(
            "Lisbon", "trip", START, end_date=date(2024, 4, 4), total_budget=Decimal("400"),
            currency_code="usd", owner="sam",
        )
        transaction_service.create_transaction(
            Decimal("90"), "EXPENSE", START, account_id=usd_account.id, project_id=project_id
        )

        stats = project_service.get_project_stats(project_id, "usd", owner="sam")

        assert stats.project_type == "TRIP"
        assert stats.total_expenses == pytest.approx(90)
        assert stats.project_days == 4
        assert stats.budget_remaining == pytest.approx(310)

    def test_missing_project(self, project_service):
        with pytest.raises(NotFoundError):
            project_service.get_project_stats(42, "USD")

    def test_other_owner_is_rejected(self, project_service):
        project_id = project_service.create_project("Shop", "SIDE_HUSTLE", START, owner="sam")

        with pytest.raises(AuthorizationError):
            project_service.get_project_stats(project_id, "USD", owner="alex")
        with pytest.raises(AuthorizationError):
            project_service.update_project(project_id, owner="alex", status="COMPLETED")

    def test_owner_can_update(self, project_service):
        project_id = project_service.create_project("Shop", "SIDE_HUSTLE", START, owner="sam")

        project_service.update_project(project_id, owner="sam", status="completed")

        assert project_service.get_project(project_id).status == "COMPLETED"

    def test_invalid_values_are_rejected(self, project_service):
        with pytest.raises(ValidationError):
            project_service.create_project("X", "VACATION", START)
        with pytest.raises(ValidationError):
            project_service.create_project("X", "TRIP", START, end_date=date(2024, 3, 1))
