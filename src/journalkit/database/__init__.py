"""Database layer for journalkit application."""

from journalkit.database.base import Database
from journalkit.database.factories import create_sqlite_database, create_memory_database

__all__ = ["Database", "create_sqlite_database", "create_memory_database"]
