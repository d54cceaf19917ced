"""Composable transaction filters.

A ``TransactionFilter`` wraps a pure predicate over a Transaction and can be
combined with ``and_``/``or_``/``negate`` or the ``&``, ``|`` and ``~``
operators. Filters hold no mutable state and can be shared across threads.

Date filters are inclusive: ``between(start, end)`` matches both endpoints.
Note that ``Database.query_entries_with_filters`` treats its end date as
exclusive, the way SQL range predicates usually are.
"""

from dataclasses import dataclass
from datetime import date
from typing import Callable

from journalkit.domain.entities import Account, Transaction, TransactionStatus


@dataclass(frozen=True)
class TransactionFilter:
    """Predicate over transactions with a human-readable label."""

    predicate: Callable[[Transaction], bool]
    label: str = "filter"

    def matches(self, transaction: Transaction) -> bool:
        return bool(self.predicate(transaction))

    def __call__(self, transaction: Transaction) -> bool:
        return self.matches(transaction)

    def and_(self, other: "TransactionFilter") -> "TransactionFilter":
        return TransactionFilter(
            lambda t: self.matches(t) and other.matches(t),
            f"({self.label} and {other.label})",
        )

    def or_(self, other: "TransactionFilter") -> "TransactionFilter":
        return TransactionFilter(
            lambda t: self.matches(t) or other.matches(t),
            f"({self.label} or {other.label})",
        )

    def negate(self) -> "TransactionFilter":
        return TransactionFilter(lambda t: not self.matches(t), f"not {self.label}")

    __and__ = and_
    __or__ = or_
    __invert__ = negate

    def __repr__(self) -> str:
        return f"TransactionFilter({self.label})"


def match_all() -> TransactionFilter:
    return TransactionFilter(lambda t: True, "all")


def match_none() -> TransactionFilter:
    return TransactionFilter(lambda t: False, "none")


def on_date(day: date) -> TransactionFilter:
    return TransactionFilter(lambda t: t.date == day, f"date == {day}")


def on_or_before(day: date) -> TransactionFilter:
    return TransactionFilter(lambda t: t.date <= day, f"date <= {day}")


def on_or_after(day: date) -> TransactionFilter:
    return TransactionFilter(lambda t: t.date >= day, f"date >= {day}")


def between(start: date, end: date) -> TransactionFilter:
    """Transactions dated from start to end, both inclusive."""
    return on_or_after(start).and_(on_or_before(end))


def with_status(status: TransactionStatus) -> TransactionFilter:
    return TransactionFilter(lambda t: t.status is status, f"status == {status.name}")


def affecting_account(account: Account) -> TransactionFilter:
    """Transactions with a posting to an account with the same id."""
    return affecting_account_by_id(account.id)


def affecting_account_by_id(account_id: str) -> TransactionFilter:
    return TransactionFilter(lambda t: t.affects(account_id), f"account id == {account_id}")


def affecting_account_path(full_path: str) -> TransactionFilter:
    """Transactions with a posting to the account with this full path."""
    return TransactionFilter(
        lambda t: any(p.account.full_path == full_path for p in t.postings),
        f"account == '{full_path}'",
    )


def with_tag(key: str) -> TransactionFilter:
    return TransactionFilter(lambda t: t.has_tag(key), f"tag {key}")


def with_tag_value(key: str, value: str) -> TransactionFilter:
    return TransactionFilter(lambda t: t.tag_value(key) == value, f"tag {key} == {value}")


def with_partner(partner_id: str) -> TransactionFilter:
    return TransactionFilter(lambda t: t.partner_id == partner_id, f"partner == {partner_id}")


def description_contains(text: str) -> TransactionFilter:
    """Case-insensitive substring match on the description."""
    needle = text.casefold()
    return TransactionFilter(
        lambda t: needle in t.description.casefold(), f"description contains '{text}'"
    )
