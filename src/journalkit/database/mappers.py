"""Mapper functions to convert between stored records and SQLAlchemy models.

This layer isolates the conversion logic so the schema can change without
touching the journal model or the persistence service.
"""

from journalkit.domain import records
from journalkit.domain.entities import Tag
from journalkit.database.models import (
    Account as ORMAccount,
    Journal as ORMJournal,
    Posting as ORMPosting,
    Tag as ORMTag,
    Transaction as ORMTransaction,
)


def journal_to_record(orm_journal: ORMJournal) -> records.JournalRecord:
    """Convert SQLAlchemy Journal model to a JournalRecord."""
    return records.JournalRecord(
        id=orm_journal.id,
        logo=orm_journal.logo,
        title=orm_journal.title,
        subtitle=orm_journal.subtitle,
        currency=orm_journal.currency,
        commodities={c.code: c.display_precision for c in orm_journal.commodities},
        imported_at=orm_journal.imported_at,
    )


def account_to_record(orm_account: ORMAccount) -> records.AccountRecord:
    """Convert SQLAlchemy Account model to an AccountRecord."""
    return records.AccountRecord(
        id=orm_account.id,
        journal_id=orm_account.journal_id,
        account_number=orm_account.account_number,
        name=orm_account.name,
        full_path=orm_account.full_path,
        type=orm_account.type,
        note=orm_account.note,
        parent_account_id=orm_account.parent_account_id,
    )


def posting_to_record(orm_posting: ORMPosting) -> records.PostingRecord:
    """Convert SQLAlchemy Posting model to a PostingRecord."""
    return records.PostingRecord(
        id=orm_posting.id,
        account_id=orm_posting.account_id,
        commodity=orm_posting.commodity,
        amount=orm_posting.amount,
        note=orm_posting.note,
        order_index=orm_posting.order_index,
    )


def tag_to_domain(orm_tag: ORMTag) -> Tag:
    """Convert SQLAlchemy Tag model to a domain Tag."""
    return Tag(key=orm_tag.tag_key, value=orm_tag.tag_value)


def transaction_to_record(orm_transaction: ORMTransaction) -> records.TransactionRecord:
    """Convert SQLAlchemy Transaction model, with postings and tags, to a TransactionRecord."""
    return records.TransactionRecord(
        id=orm_transaction.id,
        journal_id=orm_transaction.journal_id,
        date=orm_transaction.date,
        status=orm_transaction.status,
        description=orm_transaction.description,
        partner_id=orm_transaction.partner_id,
        external_id=orm_transaction.external_id,
        postings=tuple(posting_to_record(p) for p in orm_transaction.postings),
        tags=tuple(tag_to_domain(t) for t in orm_transaction.tags),
    )


def posting_to_entry_row(orm_posting: ORMPosting) -> records.EntryRow:
    """Convert a SQLAlchemy Posting, joined to its transaction and account, to an EntryRow."""
    transaction = orm_posting.transaction
    account = orm_posting.account
    return records.EntryRow(
        transaction_id=transaction.id,
        date=transaction.date,
        status=transaction.status,
        description=transaction.description,
        partner_id=transaction.partner_id,
        external_id=transaction.external_id,
        account_id=account.id,
        account_number=account.account_number,
        account_path=account.full_path,
        commodity=orm_posting.commodity,
        amount=orm_posting.amount,
        note=orm_posting.note,
        order_index=orm_posting.order_index,
    )
