"""Tests for JournalPersistenceService."""

import pytest
from datetime import date
from decimal import Decimal

from journalkit.database.factories import create_memory_database
from journalkit.domain.entities import Journal, TransactionStatus
from journalkit.domain.errors import InvalidArgumentError, NotFoundError
from journalkit.domain.parser import parse_journal
from journalkit.domain.persistence import JournalPersistenceService, journal_metadata


class TestPersistJournal:
    """Tests for storing journals."""

    def test_persist_returns_id(self, persistence_service, minimal_journal):
        journal_id = persistence_service.persist_journal(minimal_journal)
        assert isinstance(journal_id, int)

        journals = persistence_service.list_journals()
        assert [j.id for j in journals] == [journal_id]
        assert journals[0].title == "T"
        assert journals[0].currency == "CHF"

    def test_accounts_saved_parents_first(self, persistence_service, temp_db, sample_journal):
        """Test that every account is stored after its parent."""
        journal_id = persistence_service.persist_journal(sample_journal)
        records = temp_db.list_accounts(journal_id)

        depths = [r.full_path.count(":") for r in records]
        assert depths == sorted(depths)
        assert len(records) == 10

        by_id = {r.id: r for r in records}
        for record in records:
            if record.parent_account_id is not None:
                parent = by_id[record.parent_account_id]
                assert record.full_path.startswith(parent.full_path + ":")

    def test_posting_only_accounts_saved(self, persistence_service, temp_db):
        """Test that accounts missing from the chart are stored with their ancestors."""
        journal = parse_journal(
            "; Currency: CHF\n"
            "2025-01-01 * Deposit\n"
            "    1 Assets:10 Cash    CHF 5\n"
            "    3 Equity    CHF -5\n"
        )
        stripped = Journal(currency="CHF", transactions=journal.transactions)

        journal_id = persistence_service.persist_journal(stripped)

        paths = [r.full_path for r in temp_db.list_accounts(journal_id)]
        assert paths == ["1 Assets", "3 Equity", "1 Assets:10 Cash"]

    def test_none_rejected(self, persistence_service):
        with pytest.raises(InvalidArgumentError):
            persistence_service.persist_journal(None)

    def test_failed_import_leaves_nothing(self, persistence_service, temp_db, monkeypatch):
        """Test that a save failing midway rolls back the whole journal."""
        journal = parse_journal(
            "; Currency: CHF\n"
            "2025-01-01 * First\n"
            "    1 Assets    CHF 1\n"
            "    2 Equity    CHF -1\n"
            "2025-01-02 * Second\n"
            "    1 Assets    CHF 2\n"
            "    2 Equity    CHF -2\n"
        )
        save_transaction = temp_db.save_transaction
        calls = []

        def failing_save(transaction, journal_id):
            calls.append(transaction.description)
            if len(calls) == 2:
                raise RuntimeError("disk full")
            return save_transaction(transaction, journal_id)

        monkeypatch.setattr(temp_db, "save_transaction", failing_save)

        with pytest.raises(RuntimeError):
            persistence_service.persist_journal(journal)

        assert calls == ["First", "Second"]
        assert persistence_service.list_journals() == []

        monkeypatch.undo()
        journal_id = persistence_service.persist_journal(journal)
        assert [j.id for j in persistence_service.list_journals()] == [journal_id]
        assert len(temp_db.list_transactions(journal_id)) == 2

    def test_metadata(self, sample_journal):
        metadata = journal_metadata(sample_journal)
        assert metadata.commodities == {"CHF": "1000.00", "EUR": "1000.00"}
        assert metadata.logo == "logo.png"


class TestLoadJournal:
    """Tests for reading stored journals back."""

    def test_load_round_trip(self, persistence_service, sample_journal):
        journal_id = persistence_service.persist_journal(sample_journal)
        loaded = persistence_service.load_journal(journal_id)

        assert loaded.title == sample_journal.title
        assert loaded.subtitle == sample_journal.subtitle
        assert loaded.currency == sample_journal.currency
        assert loaded.commodities == sample_journal.commodities
        assert {a.full_path for a in loaded.accounts} == {
            a.full_path for a in sample_journal.accounts
        }
        assert loaded.transactions == sample_journal.transactions

    def test_load_keeps_quantity_scale(self, persistence_service, minimal_journal):
        journal_id = persistence_service.persist_journal(minimal_journal)
        loaded = persistence_service.load_journal(journal_id)

        quantity = loaded.transactions[0].postings[0].amount.quantity
        assert str(quantity) == "1000.00"

    def test_load_account_details(self, persistence_service, sample_journal):
        journal_id = persistence_service.persist_journal(sample_journal)
        loaded = persistence_service.load_journal(journal_id)

        cash = loaded.find_account("1 Assets:10 Cash")
        assert cash == sample_journal.find_account("1 Assets:10 Cash")
        assert cash.note == "Petty cash box"

    def test_load_missing_journal(self, persistence_service):
        with pytest.raises(NotFoundError):
            persistence_service.load_journal(999)


class TestQueryEntries:
    """Tests for stored entry queries."""

    def test_end_date_is_exclusive(self, persistence_service, sample_journal):
        """Test that postings on the end date are not returned."""
        journal_id = persistence_service.persist_journal(sample_journal)

        rows = persistence_service.query_entries(
            journal_id, start_date=date(2025, 1, 1), end_date=date(2025, 1, 20)
        )

        assert {r.date for r in rows} == {date(2025, 1, 1), date(2025, 1, 15)}
        assert len(rows) == 4

    def test_start_date_is_inclusive(self, persistence_service, sample_journal):
        journal_id = persistence_service.persist_journal(sample_journal)
        rows = persistence_service.query_entries(journal_id, start_date=date(2025, 2, 3))
        assert [r.account_path for r in rows] == [
            "1 Assets:10 Cash:100 Bank",
            "2 Liabilities:220 Other:2210.001 Person",
        ]

    def test_newest_first(self, persistence_service, sample_journal):
        journal_id = persistence_service.persist_journal(sample_journal)
        rows = persistence_service.query_entries(journal_id)

        dates = [r.date for r in rows]
        assert dates == sorted(dates, reverse=True)
        assert len(rows) == 8

    def test_partner_and_status(self, persistence_service, sample_journal):
        journal_id = persistence_service.persist_journal(sample_journal)

        by_partner = persistence_service.query_entries(journal_id, partner_id="P00000002")
        assert {r.external_id for r in by_partner} == {"TX-0002"}

        pending = persistence_service.query_entries(journal_id, status=TransactionStatus.PENDING)
        assert [r.amount for r in pending] == [Decimal("150.00"), Decimal("-150.00")]

    def test_account_ids(self, persistence_service, temp_db, sample_journal):
        journal_id = persistence_service.persist_journal(sample_journal)
        cash_id = next(
            r.id for r in temp_db.list_accounts(journal_id) if r.full_path == "1 Assets:10 Cash"
        )

        rows = persistence_service.query_entries(journal_id, account_ids=[cash_id])

        assert len(rows) == 3
        assert sum(r.amount for r in rows) == Decimal("1350.00")

    def test_start_after_end_rejected(self, persistence_service, minimal_journal):
        journal_id = persistence_service.persist_journal(minimal_journal)
        with pytest.raises(InvalidArgumentError):
            persistence_service.query_entries(
                journal_id, start_date=date(2025, 2, 1), end_date=date(2025, 1, 1)
            )

    def test_missing_journal(self, persistence_service):
        with pytest.raises(NotFoundError):
            persistence_service.query_entries(42)


class TestDeleteJournal:
    """Tests for deleting stored journals."""

    def test_delete_removes_everything(self, persistence_service, temp_db, sample_journal):
        keep_id = persistence_service.persist_journal(parse_journal(
            "; Currency: CHF\n"
            "2025-01-01 * Keep\n"
            "    1 Assets    CHF 1\n"
            "    2 Equity    CHF -1\n"
        ))
        journal_id = persistence_service.persist_journal(sample_journal)

        persistence_service.delete_journal(journal_id)

        assert [j.id for j in persistence_service.list_journals()] == [keep_id]
        assert temp_db.list_accounts(journal_id) == []
        assert temp_db.list_transactions(journal_id) == []
        assert len(persistence_service.query_entries(keep_id)) == 2

    def test_delete_missing(self, persistence_service):
        with pytest.raises(NotFoundError):
            persistence_service.delete_journal(7)


def test_memory_database_round_trip(minimal_journal):
    """Test that the in-memory database supports a full store and load."""
    db = create_memory_database()
    db.connect()
    db.initialize_schema()
    try:
        service = JournalPersistenceService(db)
        journal_id = service.persist_journal(minimal_journal)
        loaded = service.load_journal(journal_id)
        assert loaded.transactions == minimal_journal.transactions
    finally:
        db.disconnect()
