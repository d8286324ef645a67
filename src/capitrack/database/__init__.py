"""Database layer for capitrack application."""

from capitrack.database.base import Database
from capitrack.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
