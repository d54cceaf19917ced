"""Shared pytest fixtures for journalkit tests."""

import tempfile
import os
from pathlib import Path
import pytest

from journalkit.database.factories import create_sqlite_database
from journalkit.domain.parser import parse_journal
from journalkit.domain.persistence import JournalPersistenceService


MINIMAL_JOURNAL = """\
; title: T
; Currency: CHF
commodity CHF 1000.00
account 1 Assets
  ; type:Asset
account 2 Equity
  ; type:Equity
2025-01-01 * Open
    1 Assets    CHF 1000.00
    2 Equity    CHF -1000.00
"""


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def persistence_service(temp_db):
    """Create a JournalPersistenceService with a temporary database."""
    return JournalPersistenceService(temp_db)


@pytest.fixture
def minimal_text():
    """Return the smallest complete journal."""
    return MINIMAL_JOURNAL


@pytest.fixture
def minimal_journal():
    """Parse the smallest complete journal."""
    return parse_journal(MINIMAL_JOURNAL)


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_journal_path(fixtures_dir):
    """Return the path to a realistic sample journal."""
    return fixtures_dir / "sample.journal"


@pytest.fixture
def sample_journal(sample_journal_path):
    """Parse the realistic sample journal."""
    return parse_journal(sample_journal_path.read_text(encoding="utf-8"))


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
