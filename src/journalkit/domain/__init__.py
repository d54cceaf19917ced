"""Domain layer for journalkit application.

The parser and serializer live in ``journalkit.domain.parser`` and
``journalkit.domain.serializer``; they are not imported here to keep
``journalkit.utils`` free of import cycles.
"""

from journalkit.domain.entities import (
    Account,
    AccountType,
    Amount,
    Commodity,
    Journal,
    Posting,
    Tag,
    Transaction,
    TransactionStatus,
)
from journalkit.domain.filters import TransactionFilter
from journalkit.domain.balance import BalanceService

__all__ = [
    "Account",
    "AccountType",
    "Amount",
    "Commodity",
    "Journal",
    "Posting",
    "Tag",
    "Transaction",
    "TransactionStatus",
    "TransactionFilter",
    "BalanceService",
]
