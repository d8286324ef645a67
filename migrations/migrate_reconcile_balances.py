#!/usr/bin/env python3
"""Migration script to rebuild stored account balances.

Every account's current_balance is recomputed from its initial balance and
transaction history. Accounts whose stored value differs from the
recomputed one by more than the tolerance are rewritten; the rest are left
untouched.

Transactions written while this runs can leave a balance stale. Running the
script again corrects it.

Usage:
    python migrations/migrate_reconcile_balances.py [--db-path PATH] [--tolerance 0.01]
"""

import logging
import sys
from pathlib import Path

# Add src to path so we can import capitrack modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from capitrack.database.factories import create_sqlite_database
from capitrack.domain.account import BALANCE_TOLERANCE, AccountService


def migrate_database(database_path: str | None = None, tolerance: float = BALANCE_TOLERANCE) -> int:
    """Reconcile all stored balances.

    Args:
        database_path: Path to database file. If None, uses default location.
        tolerance: Largest difference treated as in sync

    Returns:
        Number of accounts updated

    Raises:
        Exception: If reconciliation fails
    """
    db = create_sqlite_database(database_path=database_path)
    db.connect()
    db.initialize_schema()

    try:
        print("Starting balance reconciliation...")
        result = AccountService(db).reconcile_balances(tolerance=tolerance)
        if not result.success:
            raise Exception(result.error)

        report = result.data
        for item in report.results:
            status = "updated" if item.updated else "ok"
            print(
                f"  {item.name} ({item.type}): {item.old_balance:.2f} -> {item.new_balance:.2f} [{status}]"
            )
        print(f"Total: {report.total}, updated: {report.updated}, skipped: {report.skipped}")
        print("Migration completed successfully!")
        return report.updated

    except Exception as e:
        print(f"Migration failed: {e}")
        raise
    finally:
        db.disconnect()


def main():
    """Main entry point for migration script."""
    import argparse

    parser = argparse.ArgumentParser(description="Recompute stored account balances")
    parser.add_argument(
        "--db-path",
        type=str,
        help="Path to database file (overrides CAPITRACK_DB_PATH environment variable)",
    )
    parser.add_argument(
        "--tolerance",
        type=float,
        default=BALANCE_TOLERANCE,
        help="Largest difference treated as in sync (default: %(default)s)",
    )
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    try:
        migrate_database(database_path=args.db_path, tolerance=args.tolerance)
        return 0
    except Exception as e:
        print(f"\nMigration failed: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
