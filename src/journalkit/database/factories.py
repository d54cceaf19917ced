"""Database factory functions for creating database instances."""

import logging
import os
from pathlib import Path
from typing import Optional

from journalkit.database.sqlalchemy_db import SQLAlchemyDatabase

logger = logging.getLogger(__name__)

DB_PATH_ENV = "JOURNALKIT_DB_PATH"
DEFAULT_DB_PATH = Path("~/.journalkit/journalkit.db")
MEMORY_URL = "sqlite://"


def resolve_database_path(database_path: Optional[str] = None) -> Path:
    """Pick the SQLite file: explicit path, then JOURNALKIT_DB_PATH, then the default.

    The parent directory is created when missing.
    """
    chosen = database_path or os.environ.get(DB_PATH_ENV) or DEFAULT_DB_PATH
    path = Path(chosen).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks JOURNALKIT_DB_PATH
            environment variable, then defaults to ~/.journalkit/journalkit.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    path = resolve_database_path(database_path)
    logger.debug("Using database %s", path)
    return SQLAlchemyDatabase(f"sqlite:///{path}")


def create_memory_database() -> SQLAlchemyDatabase:
    """Create a throwaway in-memory SQLite database."""
    return SQLAlchemyDatabase(MEMORY_URL)
