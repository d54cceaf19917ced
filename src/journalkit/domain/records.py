"""Stored journal records returned by the Database interface.

These mirror what the persistence layer keeps: database ids, the plain
decimal strings of commodity precisions, and posting rows joined to their
transactions. They are kept apart from the journal model so the model
stays free of storage concerns.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from journalkit.domain.entities import AccountType, Tag, TransactionStatus


@dataclass(frozen=True)
class JournalMetadata:
    """Journal-level data saved ahead of accounts and transactions."""

    logo: Optional[str]
    title: Optional[str]
    subtitle: Optional[str]
    currency: str
    commodities: dict[str, str]


@dataclass(frozen=True)
class JournalRecord:
    """Stored journal metadata."""

    id: int
    logo: Optional[str]
    title: Optional[str]
    subtitle: Optional[str]
    currency: str
    commodities: dict[str, str]
    imported_at: datetime


@dataclass(frozen=True)
class AccountRecord:
    """Stored account."""

    id: int
    journal_id: int
    account_number: str
    name: str
    full_path: str
    type: AccountType
    note: Optional[str]
    parent_account_id: Optional[int]


@dataclass(frozen=True)
class PostingRecord:
    """Stored posting."""

    id: int
    account_id: int
    commodity: str
    amount: Decimal
    note: Optional[str]
    order_index: int


@dataclass(frozen=True)
class TransactionRecord:
    """Stored transaction with its ordered postings and tags."""

    id: int
    journal_id: int
    date: date
    status: TransactionStatus
    description: str
    partner_id: Optional[str]
    external_id: Optional[str]
    postings: tuple[PostingRecord, ...]
    tags: tuple[Tag, ...]


@dataclass(frozen=True)
class EntryRow:
    """A posting joined to its transaction, as returned by entry queries."""

    transaction_id: int
    date: date
    status: TransactionStatus
    description: str
    partner_id: Optional[str]
    external_id: Optional[str]
    account_id: int
    account_number: str
    account_path: str
    commodity: str
    amount: Decimal
    note: Optional[str]
    order_index: int
