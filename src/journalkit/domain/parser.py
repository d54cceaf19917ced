"""Parser for the plain-text accounting journal format.

The parser is single-pass and line-oriented. It reads lines through a
``LineCursor`` with one line of look-ahead, which is how comment lines
following an ``account`` declaration or a transaction header get attached
to it. It is deliberately permissive: unknown lines are ignored, accounts
referenced by postings are created on demand and transactions with fewer
than two postings are dropped. Only blank input and malformed decimals
abort a parse.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional

from journalkit.domain.account_tree import AccountTree, is_valid_path
from journalkit.domain.entities import (
    DEFAULT_CURRENCY,
    AccountType,
    Amount,
    Commodity,
    Journal,
    Posting,
    Tag,
    Transaction,
    TransactionStatus,
)
from journalkit.domain.errors import EmptyInputError, empty_input
from journalkit.utils.amount_parser import parse_quantity

logger = logging.getLogger(__name__)

METADATA_PATTERN = re.compile(r"^;\s*([^:]+):\s*(.*)$")
COMMODITY_PATTERN = re.compile(r"^commodity\s+(\S+)\s+(\S+)$")
ACCOUNT_PATTERN = re.compile(r"^account\s+(.+)$")
TRANSACTION_PATTERN = re.compile(r"^(\d{4}-\d{2}-\d{2})\s+([*!]?)\s*(.+)$")
POSTING_PATTERN = re.compile(r"^\s{4}(.+?)\s{2,}(\S+)\s+(-?\S+)$")
ELLIPSIS_PATTERN = re.compile(r"^\s{4}\.\.\.$")
LINE_BREAK = re.compile(r"\r?\n")

SEPARATOR_PREFIX = "; ===="
JOURNAL_METADATA_KEYS = ("logo", "title", "subtitle", "currency")
EXTERNAL_ID_TAG = "id"


class ParserState(Enum):
    """What the parser is currently reading."""

    TOP_LEVEL = "top_level"
    IN_ACCOUNT = "in_account"
    IN_TRANSACTION = "in_transaction"


class LineCursor:
    """Forward-only cursor over the lines of a journal with one-line look-ahead."""

    def __init__(self, text: str):
        self._lines = LINE_BREAK.split(text)
        self._index = 0

    @property
    def line_number(self) -> int:
        """1-based number of the line most recently returned by ``next``."""
        return self._index

    def has_next(self) -> bool:
        return self._index < len(self._lines)

    def peek(self) -> Optional[str]:
        if not self.has_next():
            return None
        return self._lines[self._index]

    def next(self) -> Optional[str]:
        line = self.peek()
        if line is not None:
            self._index += 1
        return line

    def next_if_comment(self) -> Optional[str]:
        """Consume and return the next line only if it is a ``;`` comment."""
        line = self.peek()
        if line is not None and line.strip().startswith(";"):
            return self.next()
        return None


@dataclass
class _TransactionHeader:
    date: date
    status: TransactionStatus
    description: str
    partner_id: Optional[str]
    line_number: int


@dataclass
class _ParseContext:
    tree: AccountTree = field(default_factory=AccountTree)
    metadata: dict[str, str] = field(default_factory=dict)
    commodities: list[Commodity] = field(default_factory=list)
    transactions: list[Transaction] = field(default_factory=list)
    pending_account: Optional[str] = None
    pending_transaction: Optional[_TransactionHeader] = None


def split_description(text: str) -> tuple[Optional[str], str]:
    """Split a header description into (partner_id, description).

    ``P00000002 IFJ AG | Pre-payment`` yields ``("P00000002", "Pre-payment")``.
    Without a pipe, or with nothing after it, the whole text is the
    description and there is no partner.
    """
    if "|" not in text:
        return None, text

    partner_part, description = (part.strip() for part in text.split("|", 1))
    if not description:
        return None, text

    partner_tokens = partner_part.split()
    partner_id = partner_tokens[0] if partner_tokens else None
    return partner_id, description


def parse_tag_line(line: str) -> tuple[list[Tag], Optional[str]]:
    """Parse one transaction comment line into tags.

    A line may hold several comma-separated tags, each either ``:Name:`` or
    ``key:value``. An ``id`` tag is returned separately as the external id.

    Args:
        line: Comment line, with or without indentation

    Returns:
        Tuple of (tags, external_id or None)
    """
    body = line.strip()[1:].strip()
    tags = []
    external_id = None

    for part in body.split(","):
        part = part.strip()
        if not part:
            continue

        if len(part) > 2 and part.startswith(":") and part.endswith(":"):
            key = part[1:-1].strip()
            if key:
                tags.append(Tag(key))
            continue

        match = METADATA_PATTERN.match(";" + part)
        if match is None:
            continue
        key = match.group(1).strip()
        value = match.group(2).strip()
        if not key:
            continue
        if key.lower() == EXTERNAL_ID_TAG:
            external_id = value or None
        else:
            tags.append(Tag(key, value or None))

    return tags, external_id


class JournalParser:
    """Converts journal text into a Journal."""

    def __init__(self, default_currency: str = DEFAULT_CURRENCY):
        """Initialize parser.

        Args:
            default_currency: Currency used when the journal has no
                ``; Currency:`` metadata line
        """
        self.default_currency = default_currency

    def parse(self, content: Optional[str]) -> Journal:
        """Parse journal text.

        Args:
            content: Journal text

        Returns:
            Parsed Journal

        Raises:
            EmptyInputError: If content is None or blank
            MalformedAmountError: If a commodity precision or posting quantity
                is not a valid decimal
        """
        if content is None or not content.strip():
            raise EmptyInputError(empty_input())

        cursor = LineCursor(content)
        ctx = _ParseContext()
        state = ParserState.TOP_LEVEL

        while True:
            if state is ParserState.IN_ACCOUNT:
                self._read_account(cursor, ctx)
                state = ParserState.TOP_LEVEL
            elif state is ParserState.IN_TRANSACTION:
                self._read_transaction(cursor, ctx)
                state = ParserState.TOP_LEVEL
            elif cursor.has_next():
                state = self._dispatch(cursor.next(), cursor.line_number, ctx)
            else:
                break

        currency = ctx.metadata.get("currency")
        if currency is None:
            logger.warning(
                "Journal declares no currency, defaulting to %s", self.default_currency
            )
            currency = self.default_currency

        journal = Journal(
            logo=ctx.metadata.get("logo"),
            title=ctx.metadata.get("title"),
            subtitle=ctx.metadata.get("subtitle"),
            currency=currency,
            commodities=ctx.commodities,
            accounts=ctx.tree.accounts,
            transactions=ctx.transactions,
        )
        logger.info(
            "Parsed journal: %d commodities, %d accounts, %d transactions",
            len(journal.commodities),
            len(journal.accounts),
            len(journal.transactions),
        )
        return journal

    def _dispatch(self, line: str, line_number: int, ctx: _ParseContext) -> ParserState:
        """Handle one top-level line and return the state to continue in."""
        stripped = line.strip()

        if not stripped or stripped.startswith(SEPARATOR_PREFIX):
            return ParserState.TOP_LEVEL

        if stripped.startswith(";"):
            match = METADATA_PATTERN.match(stripped)
            if match:
                key = match.group(1).strip().lower()
                if key in JOURNAL_METADATA_KEYS:
                    ctx.metadata[key] = match.group(2).strip()
            return ParserState.TOP_LEVEL

        match = COMMODITY_PATTERN.match(stripped)
        if match:
            ctx.commodities.append(Commodity(match.group(1), parse_quantity(match.group(2))))
            return ParserState.TOP_LEVEL

        match = ACCOUNT_PATTERN.match(stripped)
        if match:
            ctx.pending_account = match.group(1).strip()
            return ParserState.IN_ACCOUNT

        match = TRANSACTION_PATTERN.match(stripped)
        if match:
            try:
                txn_date = date.fromisoformat(match.group(1))
            except ValueError:
                logger.warning("Line %d: invalid date '%s', line ignored", line_number, match.group(1))
                return ParserState.TOP_LEVEL
            partner_id, description = split_description(match.group(3).strip())
            ctx.pending_transaction = _TransactionHeader(
                date=txn_date,
                status=TransactionStatus.from_mark(match.group(2)),
                description=description,
                partner_id=partner_id,
                line_number=line_number,
            )
            return ParserState.IN_TRANSACTION

        return ParserState.TOP_LEVEL

    def _read_account(self, cursor: LineCursor, ctx: _ParseContext) -> None:
        path = ctx.pending_account
        ctx.pending_account = None
        account_type = AccountType.ASSET
        note = None

        while True:
            line = cursor.next_if_comment()
            if line is None:
                break
            match = METADATA_PATTERN.match(line.strip())
            if match is None:
                continue
            key = match.group(1).strip().lower()
            value = match.group(2).strip()
            if key == "type":
                account_type = AccountType.parse(value)
            elif key == "note":
                note = value

        if not is_valid_path(path):
            logger.warning("Invalid account path '%s', declaration ignored", path)
            return
        ctx.tree.declare(path, account_type, note)

    def _read_transaction(self, cursor: LineCursor, ctx: _ParseContext) -> None:
        header = ctx.pending_transaction
        ctx.pending_transaction = None
        tags: list[Tag] = []
        external_id = None

        while True:
            line = cursor.next_if_comment()
            if line is None:
                break
            line_tags, line_id = parse_tag_line(line)
            tags.extend(line_tags)
            if line_id is not None:
                external_id = line_id

        postings = []
        while cursor.has_next():
            line = cursor.peek().rstrip()
            if ELLIPSIS_PATTERN.match(line):
                cursor.next()
                continue

            match = POSTING_PATTERN.match(line)
            if match is None or not is_valid_path(match.group(1)):
                break

            quantity = parse_quantity(match.group(3))
            account = ctx.tree.resolve(match.group(1).strip())
            postings.append(Posting(account, Amount(match.group(2), quantity)))
            cursor.next()

        if len(postings) < 2:
            logger.warning(
                "Line %d: transaction '%s' has %d posting(s), dropped",
                header.line_number,
                header.description,
                len(postings),
            )
            return

        ctx.transactions.append(
            Transaction(
                date=header.date,
                status=header.status,
                description=header.description,
                postings=tuple(postings),
                tags=tuple(tags),
                partner_id=header.partner_id,
                external_id=external_id,
            )
        )


def parse_journal(content: Optional[str], default_currency: str = DEFAULT_CURRENCY) -> Journal:
    """Parse journal text with a one-off JournalParser."""
    return JournalParser(default_currency=default_currency).parse(content)
