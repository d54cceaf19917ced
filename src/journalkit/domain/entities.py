"""Domain model entities for journalkit.

These are immutable values describing a plain-text accounting journal,
independent of both the text format and the database schema. Collections are
stored as tuples so a value, once built, can be shared freely between
threads.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Context, Decimal, InvalidOperation, MAX_EMAX, MAX_PREC, MIN_EMIN
from enum import Enum
from typing import Optional

from journalkit.domain.errors import (
    CommodityMismatchError,
    InvariantViolationError,
    MalformedAmountError,
    commodity_mismatch,
    malformed_amount,
    must_not_be_blank,
    must_not_be_none,
    too_few_postings,
)

DEFAULT_CURRENCY = "CHF"

# Context wide enough that addition never rounds
_EXACT = Context(prec=MAX_PREC, Emax=MAX_EMAX, Emin=MIN_EMIN)


def _require_text(value: Optional[str], field_name: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise InvariantViolationError(must_not_be_blank(field_name))


def _require_decimal(value: object, field_name: str) -> None:
    if value is None:
        raise InvariantViolationError(must_not_be_none(field_name))
    if not isinstance(value, Decimal):
        raise InvariantViolationError(
            f"{field_name} must be a Decimal, got {type(value).__name__}"
        )


class AccountType(Enum):
    """Account classification used in the chart of accounts."""

    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    REVENUE = "REVENUE"
    EXPENSE = "EXPENSE"
    CASH = "CASH"

    @classmethod
    def parse(cls, token: Optional[str]) -> "AccountType":
        """Map a journal type token to an AccountType.

        Matching is case-insensitive; unknown or missing tokens fall back to
        ASSET.
        """
        if token is None:
            return cls.ASSET
        try:
            return cls(token.strip().upper())
        except ValueError:
            return cls.ASSET

    @property
    def label(self) -> str:
        """Titlecased name as written in journal text (e.g. "Asset")."""
        return self.value.capitalize()


class TransactionStatus(Enum):
    """Reconciliation state of a transaction."""

    CLEARED = "CLEARED"
    PENDING = "PENDING"
    UNCLEARED = "UNCLEARED"

    @classmethod
    def from_mark(cls, mark: Optional[str]) -> "TransactionStatus":
        """Map a header status mark to a status."""
        if mark == "*":
            return cls.CLEARED
        if mark == "!":
            return cls.PENDING
        return cls.UNCLEARED

    @property
    def mark(self) -> str:
        """Header status mark: "*", "!" or empty."""
        return _STATUS_MARKS[self]


_STATUS_MARKS = {
    TransactionStatus.CLEARED: "*",
    TransactionStatus.PENDING: "!",
    TransactionStatus.UNCLEARED: "",
}


@dataclass(frozen=True)
class Commodity:
    """Currency or unit declaration.

    The display precision is a Decimal whose scale is the number of decimal
    places to show, e.g. ``commodity CHF 1000.00`` declares two places.
    """

    code: str
    display_precision: Decimal

    def __post_init__(self):
        _require_text(self.code, "Commodity code")
        _require_decimal(self.display_precision, "Display precision")

    @property
    def decimal_places(self) -> int:
        return max(0, -self.display_precision.as_tuple().exponent)


@dataclass(frozen=True)
class Amount:
    """Signed exact quantity of one commodity."""

    commodity: str
    quantity: Decimal

    def __post_init__(self):
        _require_text(self.commodity, "Commodity")
        _require_decimal(self.quantity, "Quantity")

    @classmethod
    def of(cls, commodity: str, quantity: Decimal | str) -> "Amount":
        """Create an amount, parsing string quantities exactly."""
        if isinstance(quantity, str):
            try:
                quantity = Decimal(quantity.strip())
            except InvalidOperation as e:
                raise MalformedAmountError(malformed_amount(quantity)) from e
        return cls(commodity, quantity)

    def negate(self) -> "Amount":
        return Amount(self.commodity, self.quantity.copy_negate())

    def add(self, other: "Amount") -> "Amount":
        """Add another amount of the same commodity.

        The result keeps the larger scale of the two operands.

        Raises:
            CommodityMismatchError: If the commodities differ
        """
        if self.commodity != other.commodity:
            raise CommodityMismatchError(commodity_mismatch(self.commodity, other.commodity))
        return Amount(self.commodity, _EXACT.add(self.quantity, other.quantity))

    def is_zero(self) -> bool:
        return self.quantity.is_zero()


@dataclass(frozen=True)
class Account:
    """Account in the chart of accounts.

    ``id`` is the leading number of the account's own path segment and
    ``name`` is the rest of that segment. The parent chain makes up the full
    path, e.g. ``1 Assets:10 Cash:100 Bank``.
    """

    id: str
    name: str
    type: AccountType
    note: Optional[str] = None
    parent: Optional["Account"] = field(default=None, repr=False)

    def __post_init__(self):
        _require_text(self.id, "Account id")
        _require_text(self.name, "Account name")
        if not isinstance(self.type, AccountType):
            raise InvariantViolationError(f"Unknown account type: {self.type!r}")
        if self.parent is not None and not isinstance(self.parent, Account):
            raise InvariantViolationError("Account parent must be an Account")

    @property
    def segment(self) -> str:
        """This account's own path segment, ``"<id> <name>"``."""
        return f"{self.id} {self.name}"

    @property
    def is_root(self) -> bool:
        return self.parent is None

    def ancestors(self) -> list["Account"]:
        """Return ancestors from the root down to the direct parent."""
        chain = []
        current = self.parent
        while current is not None:
            chain.append(current)
            current = current.parent
        chain.reverse()
        return chain

    @property
    def depth(self) -> int:
        """Number of edges to the root; root accounts have depth 0."""
        return len(self.ancestors())

    @property
    def full_path(self) -> str:
        return ":".join([a.segment for a in self.ancestors()] + [self.segment])


@dataclass(frozen=True)
class Tag:
    """Transaction annotation: simple (``:Name:``) or key-value (``key:value``)."""

    key: str
    value: Optional[str] = None

    def __post_init__(self):
        _require_text(self.key, "Tag key")

    @property
    def is_simple(self) -> bool:
        return not self.value


@dataclass(frozen=True)
class Posting:
    """One leg of a transaction."""

    account: Account
    amount: Amount
    note: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.account, Account):
            raise InvariantViolationError(must_not_be_none("Posting account"))
        if not isinstance(self.amount, Amount):
            raise InvariantViolationError(must_not_be_none("Posting amount"))


@dataclass(frozen=True)
class Transaction:
    """Dated, described bundle of at least two postings."""

    date: date
    status: TransactionStatus
    description: str
    postings: tuple[Posting, ...]
    tags: tuple[Tag, ...] = ()
    partner_id: Optional[str] = None
    external_id: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.date, date):
            raise InvariantViolationError(must_not_be_none("Transaction date"))
        if not isinstance(self.status, TransactionStatus):
            raise InvariantViolationError(must_not_be_none("Transaction status"))
        _require_text(self.description, "Transaction description")
        if self.postings is None:
            raise InvariantViolationError(too_few_postings(0))
        object.__setattr__(self, "postings", tuple(self.postings))
        object.__setattr__(self, "tags", tuple(self.tags or ()))
        if len(self.postings) < 2:
            raise InvariantViolationError(too_few_postings(len(self.postings)))

    def commodity_totals(self) -> dict[str, Decimal]:
        """Signed sum of posting quantities per commodity, in first-seen order."""
        totals: dict[str, Amount] = {}
        for posting in self.postings:
            commodity = posting.amount.commodity
            if commodity in totals:
                totals[commodity] = totals[commodity].add(posting.amount)
            else:
                totals[commodity] = posting.amount
        return {code: amount.quantity for code, amount in totals.items()}

    def is_balanced(self) -> bool:
        return all(total.is_zero() for total in self.commodity_totals().values())

    def tag_value(self, key: str) -> Optional[str]:
        """Return the value of the first tag with this key, or None."""
        for tag in self.tags:
            if tag.key == key:
                return tag.value
        return None

    def has_tag(self, key: str) -> bool:
        return any(tag.key == key for tag in self.tags)

    def affects(self, account_id: str) -> bool:
        return any(p.account.id == account_id for p in self.postings)


@dataclass(frozen=True)
class Journal:
    """Root aggregate: metadata, commodities, chart of accounts and transactions.

    Accounts are de-duplicated by full path on construction; the first
    occurrence wins.
    """

    logo: Optional[str] = None
    title: Optional[str] = None
    subtitle: Optional[str] = None
    currency: str = DEFAULT_CURRENCY
    commodities: tuple[Commodity, ...] = ()
    accounts: tuple[Account, ...] = ()
    transactions: tuple[Transaction, ...] = ()

    def __post_init__(self):
        if self.currency is None:
            object.__setattr__(self, "currency", DEFAULT_CURRENCY)
        object.__setattr__(self, "commodities", tuple(self.commodities or ()))
        object.__setattr__(self, "transactions", tuple(self.transactions or ()))

        unique: dict[str, Account] = {}
        for account in self.accounts or ():
            unique.setdefault(account.full_path, account)
        object.__setattr__(self, "accounts", tuple(unique.values()))

    def find_commodity(self, code: str) -> Optional[Commodity]:
        for commodity in self.commodities:
            if commodity.code == code:
                return commodity
        return None

    def find_account(self, full_path: str) -> Optional[Account]:
        """Find an account by its full path."""
        for account in self.accounts:
            if account.full_path == full_path:
                return account
        return None

    def find_accounts_by_id(self, account_id: str) -> list[Account]:
        return [a for a in self.accounts if a.id == account_id]

    def find_transaction(self, external_id: str) -> Optional[Transaction]:
        for transaction in self.transactions:
            if transaction.external_id == external_id:
                return transaction
        return None

    def transactions_with_tag(self, key: str) -> list[Transaction]:
        return [t for t in self.transactions if t.has_tag(key)]
