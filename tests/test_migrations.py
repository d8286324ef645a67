"""Tests for the standalone migration scripts."""

import importlib.util
from datetime import date
from decimal import Decimal
from pathlib import Path

from sqlalchemy import create_engine, text

MIGRATIONS_DIR = Path(__file__).parent.parent / "migrations"


def load_migration(name: str):
    spec = importlib.util.spec_from_file_location(name, MIGRATIONS_DIR / f"{name}.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_reconcile_balances(temp_db, account_service, transaction_service, usd_account, capsys):
    transaction_service.create_transaction(
        Decimal("25"), "EXPENSE", date(2024, 2, 1), account_id=usd_account.id
    )
    temp_db.update_account_balance(usd_account.id, Decimal("1"))

    migration = load_migration("migrate_reconcile_balances")
    updated = migration.migrate_database(temp_db.database_path)

    assert updated == 1
    assert account_service.get_account(usd_account.id).current_balance == Decimal("75")
    assert "1.00 -> 75.00 [updated]" in capsys.readouterr().out

    assert migration.migrate_database(temp_db.database_path) == 0


def test_flag_system_categories_on_old_schema(tmp_path):
    db_path = tmp_path / "old.db"
    engine = create_engine(f"sqlite:///{db_path}")
    with engine.begin() as conn:
        conn.execute(
            text(
                "CREATE TABLE categories (id INTEGER PRIMARY KEY, name VARCHAR NOT NULL UNIQUE, "
                "kind VARCHAR NOT NULL, created_at DATETIME NOT NULL)"
            )
        )
        conn.execute(
            text(
                "INSERT INTO categories (name, kind, created_at) VALUES "
                "('Depreciation', 'EXPENSE', '2024-01-01 00:00:00'), "
                "('Groceries', 'EXPENSE', '2024-01-01 00:00:00')"
            )
        )

    load_migration("migrate_flag_system_categories").migrate_database(str(db_path))

    with engine.connect() as conn:
        rows = dict(conn.execute(text("SELECT name, is_system_generated FROM categories")).all())
    engine.dispose()

    assert rows == {"Depreciation": 1, "Groceries": 0}
