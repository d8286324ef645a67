#!/usr/bin/env python3
"""Migration script to add the is_system_generated flag to categories.

Older databases recognized system categories by name. This migration adds
an is_system_generated column (BOOLEAN, default false) and sets it for the
categories the application books on its own:
- Investment
- Depreciation
- Investment Return
- Investment Loss

Usage:
    python migrations/migrate_flag_system_categories.py [--db-path PATH]
"""

import sys
from pathlib import Path

# Add src to path so we can import capitrack modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sqlalchemy import text, inspect
from capitrack.database.factories import create_sqlite_database
from capitrack.database.models import Category
from capitrack.domain.category import SYSTEM_CATEGORY_NAMES


def column_exists(engine, table_name: str, column_name: str) -> bool:
    """Check if a column exists in a table."""
    inspector = inspect(engine)
    columns = [col["name"] for col in inspector.get_columns(table_name)]
    return column_name in columns


def migrate_database(database_path: str | None = None) -> None:
    """Add the is_system_generated column and flag system categories.

    Args:
        database_path: Path to database file. If None, uses default location.

    Raises:
        Exception: If migration fails
    """
    db = create_sqlite_database(database_path=database_path)
    db.connect()

    try:
        session = db.session_factory()
        try:
            engine = session.bind
            if engine is None:
                raise Exception("Could not get database engine from session")
        finally:
            session.close()

        inspector = inspect(engine)
        if "categories" not in inspector.get_table_names():
            raise Exception("Table 'categories' does not exist. Please initialize the database schema first.")

        if not column_exists(engine, "categories", "is_system_generated"):
            print("Adding column: is_system_generated")
            with engine.begin() as conn:
                conn.execute(
                    text("ALTER TABLE categories ADD COLUMN is_system_generated BOOLEAN NOT NULL DEFAULT 0")
                )
        else:
            print("Column is_system_generated already exists")

        session = db.session_factory()
        try:
            flagged = (
                session.query(Category)
                .filter(Category.name.in_(SYSTEM_CATEGORY_NAMES))
                .update({"is_system_generated": True}, synchronize_session=False)
            )
            session.commit()
            print(f"  Flagged {flagged} system category/categories")
        finally:
            session.close()

        print("Migration completed successfully!")

    except Exception as e:
        print(f"Migration failed: {e}")
        raise
    finally:
        db.disconnect()


def main():
    """Main entry point for migration script."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Migrate database to flag system categories"
    )
    parser.add_argument(
        "--db-path",
        type=str,
        help="Path to database file (overrides CAPITRACK_DB_PATH environment variable)",
    )
    args = parser.parse_args()

    try:
        migrate_database(database_path=args.db_path)
        return 0
    except Exception as e:
        print(f"\nMigration failed: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
