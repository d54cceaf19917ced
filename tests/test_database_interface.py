"""Tests for Database interface returning stored records."""

import pytest
from datetime import date, datetime
from decimal import Decimal

from journalkit.domain import records
from journalkit.domain.entities import (
    Account,
    AccountType,
    Amount,
    Posting,
    Tag,
    Transaction,
    TransactionStatus,
)
from journalkit.domain.errors import NotFoundError


def _metadata(title="Books", commodities=None) -> records.JournalMetadata:
    return records.JournalMetadata(
        logo=None,
        title=title,
        subtitle=None,
        currency="CHF",
        commodities=commodities if commodities is not None else {"CHF": "1000.00"},
    )


@pytest.fixture
def journal_id(temp_db):
    return temp_db.save_journal_metadata(_metadata())


@pytest.fixture
def assets():
    return Account(id="1", name="Assets", type=AccountType.ASSET)


@pytest.fixture
def cash(assets):
    return Account(id="10", name="Cash", type=AccountType.CASH, note="Box", parent=assets)


class TestDatabaseInterface:
    """Tests to verify Database interface returns record types."""

    def test_get_journal_returns_record(self, temp_db, journal_id):
        record = temp_db.get_journal(journal_id)

        assert isinstance(record, records.JournalRecord)
        assert record.title == "Books"
        assert record.commodities == {"CHF": "1000.00"}
        assert isinstance(record.imported_at, datetime)

    def test_get_missing_journal(self, temp_db):
        assert temp_db.get_journal(123) is None

    def test_update_metadata_replaces_commodities(self, temp_db, journal_id):
        temp_db.save_journal_metadata(
            _metadata(title="Renamed", commodities={"EUR": "100.0", "CHF": "1.00"}),
            journal_id=journal_id,
        )

        record = temp_db.get_journal(journal_id)
        assert record.title == "Renamed"
        assert list(record.commodities.items()) == [("EUR", "100.0"), ("CHF", "1.00")]
        assert len(temp_db.list_journals()) == 1

    def test_update_missing_journal(self, temp_db):
        with pytest.raises(NotFoundError):
            temp_db.save_journal_metadata(_metadata(), journal_id=99)

    def test_save_account_links_parent(self, temp_db, journal_id, assets, cash):
        assets_id = temp_db.save_account(assets, journal_id)
        cash_id = temp_db.save_account(cash, journal_id)

        stored = {r.id: r for r in temp_db.list_accounts(journal_id)}
        assert isinstance(stored[cash_id], records.AccountRecord)
        assert stored[cash_id].parent_account_id == assets_id
        assert stored[cash_id].full_path == "1 Assets:10 Cash"
        assert stored[cash_id].account_number == "10"
        assert stored[cash_id].type is AccountType.CASH
        assert stored[cash_id].note == "Box"

    def test_save_account_is_idempotent(self, temp_db, journal_id, assets):
        first = temp_db.save_account(assets, journal_id)
        second = temp_db.save_account(assets, journal_id)

        assert first == second
        assert len(temp_db.list_accounts(journal_id)) == 1

    def test_save_account_without_stored_parent(self, temp_db, journal_id, cash):
        cash_id = temp_db.save_account(cash, journal_id)

        record = temp_db.list_accounts(journal_id)[0]
        assert record.id == cash_id
        assert record.parent_account_id is None

    def test_save_account_missing_journal(self, temp_db, assets):
        with pytest.raises(NotFoundError):
            temp_db.save_account(assets, 5)

    def test_save_transaction(self, temp_db, journal_id, assets, cash):
        temp_db.save_account(assets, journal_id)
        temp_db.save_account(cash, journal_id)
        txn = Transaction(
            date=date(2025, 3, 1),
            status=TransactionStatus.PENDING,
            description="Move",
            postings=[
                Posting(cash, Amount.of("CHF", "12.50"), note="in"),
                Posting(assets, Amount.of("CHF", "-12.50")),
            ],
            tags=[Tag("Transfer"), Tag("ref", "A1")],
            partner_id="P1",
            external_id="X-1",
        )

        txn_id = temp_db.save_transaction(txn, journal_id)

        stored = temp_db.list_transactions(journal_id)
        assert len(stored) == 1
        record = stored[0]
        assert isinstance(record, records.TransactionRecord)
        assert record.id == txn_id
        assert record.status is TransactionStatus.PENDING
        assert record.partner_id == "P1"
        assert record.external_id == "X-1"
        assert [p.amount for p in record.postings] == [Decimal("12.50"), Decimal("-12.50")]
        assert str(record.postings[0].amount) == "12.50"
        assert record.postings[0].note == "in"
        assert record.tags == (Tag("Transfer"), Tag("ref", "A1"))

    def test_save_transaction_unknown_account(self, temp_db, journal_id, assets, cash):
        temp_db.save_account(assets, journal_id)
        txn = Transaction(
            date=date(2025, 3, 1),
            status=TransactionStatus.CLEARED,
            description="Orphan",
            postings=[
                Posting(cash, Amount.of("CHF", "1")),
                Posting(assets, Amount.of("CHF", "-1")),
            ],
        )

        with pytest.raises(NotFoundError):
            temp_db.save_transaction(txn, journal_id)

    def test_query_entries_returns_rows(self, temp_db, journal_id, assets):
        temp_db.save_account(assets, journal_id)
        for day in (1, 2):
            temp_db.save_transaction(
                Transaction(
                    date=date(2025, 4, day),
                    status=TransactionStatus.CLEARED,
                    description=f"Day {day}",
                    postings=[
                        Posting(assets, Amount.of("CHF", "1")),
                        Posting(assets, Amount.of("CHF", "-1")),
                    ],
                ),
                journal_id,
            )

        rows = temp_db.query_entries_with_filters(journal_id, end_date=date(2025, 4, 2))

        assert all(isinstance(r, records.EntryRow) for r in rows)
        assert [r.description for r in rows] == ["Day 1", "Day 1"]
        assert [r.order_index for r in rows] == [0, 1]
        assert rows[0].account_number == "1"

    def test_unit_of_work_commits_once(self, temp_db, assets):
        with temp_db.unit_of_work():
            new_id = temp_db.save_journal_metadata(_metadata(title="Batch"))
            account_id = temp_db.save_account(assets, new_id)
            assert isinstance(account_id, int)

        assert temp_db.get_journal(new_id).title == "Batch"
        assert [a.full_path for a in temp_db.list_accounts(new_id)] == ["1 Assets"]

    def test_unit_of_work_rolls_back_on_error(self, temp_db, assets):
        with pytest.raises(NotFoundError):
            with temp_db.unit_of_work():
                new_id = temp_db.save_journal_metadata(_metadata(title="Broken"))
                temp_db.save_account(assets, new_id)
                temp_db.save_account(assets, new_id + 1)

        assert temp_db.list_journals() == []

        # The session is usable again after the rollback
        kept_id = temp_db.save_journal_metadata(_metadata(title="After"))
        assert [j.title for j in temp_db.list_journals()] == ["After"]
        assert temp_db.get_journal(kept_id) is not None
