"""Serializer for the plain-text accounting journal format.

Produces text that ``JournalParser`` reads back into an equivalent Journal:
same metadata, commodities, account paths and transactions, with every
quantity written at its original scale.
"""

from journalkit.domain.entities import Account, Journal, Transaction
from journalkit.domain.errors import InvalidArgumentError, must_not_be_none
from journalkit.utils.amount_parser import format_quantity

SEPARATOR = "; " + "=" * 76
ACCOUNTS_HEADER = "; ACCOUNT DECLARATIONS WITH TYPE ANNOTATIONS"
TRANSACTIONS_HEADER = "; TRANSACTIONS"

POSTING_INDENT = "    "
TAG_INDENT = "    "
ACCOUNT_META_INDENT = "  "
AMOUNT_COLUMN = 80
MIN_PADDING = 4
STATUS_MARKS = ("*", "!")


def transaction_header(transaction: Transaction) -> str:
    """Render the ``YYYY-MM-DD <mark> <description>`` header line.

    A partner id is written in front of the description, separated by a
    pipe. A description that contains a pipe or starts with a status mark
    gets an empty partner segment so it re-parses unchanged.
    """
    description = transaction.description
    if transaction.partner_id:
        description = f"{transaction.partner_id} | {description}"
    elif "|" in description or description.startswith(STATUS_MARKS):
        description = f"| {description}"
    return f"{transaction.date.isoformat()} {transaction.status.mark} {description}"


def posting_line(path: str, commodity: str, quantity: str) -> str:
    """Render a posting with the amount right-aligned at column 80."""
    padding = max(MIN_PADDING, AMOUNT_COLUMN - len(path) - len(commodity) - len(quantity))
    return f"{POSTING_INDENT}{path}{' ' * padding}{commodity} {quantity}"


class JournalSerializer:
    """Converts a Journal into journal text."""

    def serialize(self, journal: Journal) -> str:
        """Serialize a journal.

        Args:
            journal: Journal to write

        Returns:
            Journal text, newline-terminated

        Raises:
            InvalidArgumentError: If journal is None
        """
        if journal is None:
            raise InvalidArgumentError(must_not_be_none("Journal"))

        lines: list[str] = []
        self._write_metadata(journal, lines)
        self._write_commodities(journal, lines)
        self._write_accounts(journal, lines)
        self._write_transactions(journal, lines)
        return "".join(line + "\n" for line in lines)

    def _write_metadata(self, journal: Journal, lines: list[str]) -> None:
        metadata = [
            ("logo", journal.logo),
            ("title", journal.title),
            ("subtitle", journal.subtitle),
            ("Currency", journal.currency),
        ]
        written = [f"; {key}: {value}" for key, value in metadata if value is not None]
        if written:
            lines.extend(written)
            lines.append("")

    def _write_commodities(self, journal: Journal, lines: list[str]) -> None:
        if not journal.commodities:
            return
        for commodity in journal.commodities:
            lines.append(
                f"commodity {commodity.code} {format_quantity(commodity.display_precision)}"
            )
        lines.append("")

    def _write_accounts(self, journal: Journal, lines: list[str]) -> None:
        if not journal.accounts:
            return
        lines.extend([SEPARATOR, ACCOUNTS_HEADER, SEPARATOR, ""])
        for account in journal.accounts:
            lines.extend(self._account_block(account))
            lines.append("")

    def _account_block(self, account: Account) -> list[str]:
        block = [
            f"account {account.full_path}",
            f"{ACCOUNT_META_INDENT}; type:{account.type.label}",
        ]
        if account.note is not None:
            block.append(f"{ACCOUNT_META_INDENT}; note:{account.note}")
        return block

    def _write_transactions(self, journal: Journal, lines: list[str]) -> None:
        if not journal.transactions:
            return
        lines.extend([SEPARATOR, TRANSACTIONS_HEADER, SEPARATOR, ""])
        for transaction in journal.transactions:
            lines.extend(self._transaction_block(transaction))
            lines.append("")

    def _transaction_block(self, transaction: Transaction) -> list[str]:
        block = [transaction_header(transaction)]

        if transaction.external_id is not None:
            block.append(f"{TAG_INDENT}; id:{transaction.external_id}")
        for tag in transaction.tags:
            if tag.is_simple:
                block.append(f"{TAG_INDENT}; :{tag.key}:")
            else:
                block.append(f"{TAG_INDENT}; {tag.key}:{tag.value}")

        for posting in transaction.postings:
            block.append(
                posting_line(
                    posting.account.full_path,
                    posting.amount.commodity,
                    format_quantity(posting.amount.quantity),
                )
            )
        return block


def serialize_journal(journal: Journal) -> str:
    """Serialize a journal with a one-off JournalSerializer."""
    return JournalSerializer().serialize(journal)
