"""Shared pytest fixtures for capitrack tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from capitrack.database.factories import create_sqlite_database
from capitrack.domain.account import AccountService
from capitrack.domain.category import CategoryService
from capitrack.domain.currency import ExchangeRateCache, ExchangeRateProvider, RateTable
from capitrack.domain.investment import InvestmentService
from capitrack.domain.project import ProjectService
from capitrack.domain.recurring import RecurringService
from capitrack.domain.transaction import TransactionService

from fakes import FakeClock, FakeFetcher, TEST_RATES


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def fake_fetcher():
    return FakeFetcher()


@pytest.fixture
def rate_provider(fake_fetcher, fake_clock):
    """Rate provider serving TEST_RATES without network access."""
    return ExchangeRateProvider(
        api_key="test-key",
        cache=ExchangeRateCache(),
        fetcher=fake_fetcher,
        clock=fake_clock,
    )


@pytest.fixture
def rates():
    """Rate table snapshot with TEST_RATES."""
    return RateTable(rates=dict(TEST_RATES))


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def investment_service(temp_db):
    return InvestmentService(temp_db)


@pytest.fixture
def project_service(temp_db, rate_provider):
    return ProjectService(temp_db, rate_provider)


@pytest.fixture
def recurring_service(temp_db):
    return RecurringService(temp_db)


@pytest.fixture
def usd_account(account_service):
    """USD bank account opened with 100."""
    account_id = account_service.create_account(
        name="Checking", account_type="BANK", currency_code="USD", initial_balance=Decimal("100")
    )
    return account_service.get_account(account_id)


@pytest.fixture
def cny_account(account_service):
    """CNY bank account opened with 0."""
    account_id = account_service.create_account(
        name="CNY Savings", account_type="BANK", currency_code="CNY"
    )
    return account_service.get_account(account_id)


@pytest.fixture
def system_categories(category_service):
    """Create the system categories and return them by name."""
    category_service.ensure_system_categories()
    return {c.name: c for c in category_service.list_categories() if c.is_system_generated}


@pytest.fixture
def sample_date():
    return date(2024, 1, 1)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
