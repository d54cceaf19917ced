"""Abstract database interface."""

from abc import ABC, abstractmethod
from datetime import date
from typing import ContextManager, Optional, Sequence

# Import submodules directly; the persistence service depends on this module
from journalkit.domain.entities import Account, Transaction, TransactionStatus
from journalkit.domain.records import (
    AccountRecord,
    EntryRow,
    JournalMetadata,
    JournalRecord,
    TransactionRecord,
)


class Database(ABC):
    """Abstract database interface for journalkit."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def unit_of_work(self) -> ContextManager[None]:
        """Group saves into one commit, rolled back if the block raises.

        Saves made inside the block are visible to later saves in the same
        block but are only committed when the block exits normally.
        """
        pass

    # Journal operations
    @abstractmethod
    def save_journal_metadata(
        self, metadata: JournalMetadata, journal_id: Optional[int] = None
    ) -> int:
        """Insert journal metadata, or update it when journal_id is given. Returns journal ID."""
        pass

    @abstractmethod
    def get_journal(self, journal_id: int) -> Optional[JournalRecord]:
        """Get journal metadata by ID."""
        pass

    @abstractmethod
    def list_journals(self) -> list[JournalRecord]:
        """List all stored journals."""
        pass

    @abstractmethod
    def delete_journal(self, journal_id: int) -> None:
        """Delete a journal with its accounts, transactions, postings and tags."""
        pass

    # Account operations
    @abstractmethod
    def save_account(self, account: Account, journal_id: int) -> int:
        """Store an account. Returns account ID.

        The parent is resolved by its full path within the same journal, so
        callers must save accounts in non-decreasing depth order.
        """
        pass

    @abstractmethod
    def list_accounts(self, journal_id: int) -> list[AccountRecord]:
        """List a journal's accounts in the order they were saved."""
        pass

    # Transaction operations
    @abstractmethod
    def save_transaction(self, transaction: Transaction, journal_id: int) -> int:
        """Store a transaction with its postings and tags. Returns transaction ID."""
        pass

    @abstractmethod
    def list_transactions(self, journal_id: int) -> list[TransactionRecord]:
        """List a journal's transactions in the order they were saved."""
        pass

    @abstractmethod
    def query_entries_with_filters(
        self,
        journal_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        partner_id: Optional[str] = None,
        status: Optional[TransactionStatus] = None,
        account_ids: Optional[Sequence[int]] = None,
    ) -> list[EntryRow]:
        """Query postings joined to their transactions.

        Rows are ordered by date descending, then transaction ID, then
        posting order.

        Args:
            journal_id: Journal to query
            start_date: Optional start date, inclusive
            end_date: Optional end date, exclusive (unlike the inclusive
                in-memory ``filters.between``)
            partner_id: Optional partner ID filter
            status: Optional transaction status filter
            account_ids: Optional account IDs; only postings to these accounts
        """
        pass
