"""Journal persistence domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from journalkit.database.base import Database
from journalkit.domain.account_tree import order_by_depth
from journalkit.domain.entities import (
    Account,
    Amount,
    Commodity,
    Journal,
    Posting,
    Transaction,
    TransactionStatus,
)
from journalkit.domain.errors import (
    InvalidArgumentError,
    NotFoundError,
    journal_not_found,
    must_not_be_none,
)
from journalkit.domain.records import EntryRow, JournalMetadata, JournalRecord
from journalkit.utils.amount_parser import format_quantity

logger = logging.getLogger(__name__)


def journal_metadata(journal: Journal) -> JournalMetadata:
    """Extract the metadata saved ahead of accounts and transactions."""
    return JournalMetadata(
        logo=journal.logo,
        title=journal.title,
        subtitle=journal.subtitle,
        currency=journal.currency,
        commodities={c.code: format_quantity(c.display_precision) for c in journal.commodities},
    )


class JournalPersistenceService:
    """Service for storing parsed journals and reading them back."""

    def __init__(self, db: Database):
        """Initialize persistence service.

        Args:
            db: Database instance
        """
        self.db = db

    def persist_journal(self, journal: Journal) -> int:
        """Store a whole journal: metadata, accounts, then transactions.

        Accounts are de-duplicated by full path and saved parents first, so
        every parent reference resolves. The import is a single unit of work:
        if any save fails, nothing of the journal is kept.

        Args:
            journal: Journal to store

        Returns:
            Journal ID

        Raises:
            InvalidArgumentError: If journal is None
        """
        if journal is None:
            raise InvalidArgumentError(must_not_be_none("Journal"))

        accounts = {}
        for account in journal.accounts:
            accounts.setdefault(account.full_path, account)
        # Postings may reference accounts missing from the chart after de-duplication
        for transaction in journal.transactions:
            for posting in transaction.postings:
                for account in posting.account.ancestors() + [posting.account]:
                    accounts.setdefault(account.full_path, account)
        ordered = order_by_depth(accounts.values())

        logger.info("Persisting journal: %s", journal.title)
        with self.db.unit_of_work():
            journal_id = self.db.save_journal_metadata(journal_metadata(journal))

            logger.info("Saving %d accounts (%d declared)", len(ordered), len(journal.accounts))
            for account in ordered:
                self.db.save_account(account, journal_id)

            for transaction in journal.transactions:
                self.db.save_transaction(transaction, journal_id)
        logger.info("Saved %d transactions to journal %d", len(journal.transactions), journal_id)

        return journal_id

    def load_journal(self, journal_id: int) -> Journal:
        """Rebuild a stored journal.

        Args:
            journal_id: Journal ID

        Returns:
            Journal equal in content to the one that was persisted

        Raises:
            NotFoundError: If the journal does not exist
        """
        record = self._require_journal(journal_id)

        by_id: dict[int, Account] = {}
        chart = []
        # Accounts were saved parents first, so every parent is already built
        for account_record in self.db.list_accounts(journal_id):
            parent = None
            if account_record.parent_account_id is not None:
                parent = by_id.get(account_record.parent_account_id)
            account = Account(
                id=account_record.account_number,
                name=account_record.name,
                type=account_record.type,
                note=account_record.note,
                parent=parent,
            )
            by_id[account_record.id] = account
            chart.append(account)

        transactions = []
        for txn in self.db.list_transactions(journal_id):
            postings = tuple(
                Posting(by_id[p.account_id], Amount(p.commodity, p.amount), p.note)
                for p in txn.postings
            )
            transactions.append(
                Transaction(
                    date=txn.date,
                    status=txn.status,
                    description=txn.description,
                    postings=postings,
                    tags=txn.tags,
                    partner_id=txn.partner_id,
                    external_id=txn.external_id,
                )
            )

        return Journal(
            logo=record.logo,
            title=record.title,
            subtitle=record.subtitle,
            currency=record.currency,
            commodities=tuple(
                Commodity(code, Decimal(precision)) for code, precision in record.commodities.items()
            ),
            accounts=tuple(chart),
            transactions=tuple(transactions),
        )

    def list_journals(self) -> list[JournalRecord]:
        return self.db.list_journals()

    def query_entries(
        self,
        journal_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        partner_id: Optional[str] = None,
        status: Optional[TransactionStatus] = None,
        account_ids: Optional[Sequence[int]] = None,
    ) -> list[EntryRow]:
        """Query stored postings of a journal.

        ``start_date`` is inclusive and ``end_date`` is exclusive.

        Raises:
            NotFoundError: If the journal does not exist
        """
        self._require_journal(journal_id)
        if start_date is not None and end_date is not None and start_date > end_date:
            raise InvalidArgumentError("Start date must not be after end date")
        return self.db.query_entries_with_filters(
            journal_id,
            start_date=start_date,
            end_date=end_date,
            partner_id=partner_id,
            status=status,
            account_ids=account_ids,
        )

    def delete_journal(self, journal_id: int) -> None:
        """Delete a stored journal and everything in it.

        Raises:
            NotFoundError: If the journal does not exist
        """
        self._require_journal(journal_id)
        self.db.delete_journal(journal_id)
        logger.info("Deleted journal %d", journal_id)

    def _require_journal(self, journal_id: int) -> JournalRecord:
        record = self.db.get_journal(journal_id)
        if record is None:
            raise NotFoundError(journal_not_found(journal_id))
        return record
