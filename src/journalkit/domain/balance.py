"""Balance and filtering service over a parsed journal."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from journalkit.domain import filters
from journalkit.domain.entities import (
    Account,
    Amount,
    Journal,
    Transaction,
    TransactionStatus,
)
from journalkit.domain.errors import (
    AccountNotFoundError,
    InvalidArgumentError,
    account_not_found,
    must_not_be_blank,
    must_not_be_none,
)
from journalkit.domain.filters import TransactionFilter


@dataclass(frozen=True)
class RegisterLine:
    """One posting of an account register with its running balance."""

    date: date
    status: TransactionStatus
    description: str
    external_id: Optional[str]
    commodity: str
    quantity: Decimal
    running_balance: Decimal


def _require(value: object, field_name: str) -> None:
    if value is None:
        raise InvalidArgumentError(must_not_be_none(field_name))


def _newest_first(transactions: list[Transaction]) -> list[Transaction]:
    # sorted() is stable, so same-day transactions keep journal order
    return sorted(transactions, key=lambda t: t.date, reverse=True)


class BalanceService:
    """Service computing filtered views and as-of balances for one journal.

    All operations are pure functions of the journal and their arguments.
    """

    def __init__(self, journal: Journal):
        """Initialize balance service.

        Args:
            journal: Parsed journal

        Raises:
            InvalidArgumentError: If journal is None
        """
        _require(journal, "Journal")
        self.journal = journal

    def filter_transactions(self, transaction_filter: TransactionFilter) -> list[Transaction]:
        """Return matching transactions, newest first.

        Args:
            transaction_filter: Filter to apply

        Returns:
            Matching transactions sorted by date descending; transactions on
            the same date keep their journal order

        Raises:
            InvalidArgumentError: If the filter is None
        """
        _require(transaction_filter, "Filter")
        return _newest_first([t for t in self.journal.transactions if transaction_filter.matches(t)])

    def account_balance(self, account: Account, as_of: date) -> dict[str, Decimal]:
        """Calculate an account's balance per commodity as of a date (inclusive).

        Args:
            account: Account to total
            as_of: Last date to include

        Returns:
            Mapping of commodity code to balance; commodities the account never
            saw are absent rather than zero

        Raises:
            InvalidArgumentError: If account or date is None
        """
        _require(account, "Account")
        _require(as_of, "Date")

        relevant = self.filter_transactions(
            filters.on_or_before(as_of).and_(filters.affecting_account(account))
        )
        return self._sum_postings(relevant, account)

    def account_balance_by_name(self, full_path: str, as_of: date) -> dict[str, Decimal]:
        """Calculate a balance for the account with the given full path.

        Raises:
            InvalidArgumentError: If the path is blank or the date is None
            AccountNotFoundError: If no account has this full path
        """
        if full_path is None or not full_path.strip():
            raise InvalidArgumentError(must_not_be_blank("Account name"))

        account = self.journal.find_account(full_path.strip())
        if account is None:
            raise AccountNotFoundError(account_not_found(full_path))
        return self.account_balance(account, as_of)

    def current_account_balance(self, account: Account) -> dict[str, Decimal]:
        """Calculate an account's balance as of today."""
        return self.account_balance(account, date.today())

    def all_account_balances(self, as_of: date) -> dict[str, dict[str, Decimal]]:
        """Calculate balances for every account with activity up to a date.

        Args:
            as_of: Last date to include

        Returns:
            Mapping of account full path to its commodity balances, in chart
            of accounts order; accounts without postings are omitted
        """
        _require(as_of, "Date")

        balances = {}
        for account in self.journal.accounts:
            balance = self.account_balance(account, as_of)
            if balance:
                balances[account.full_path] = balance
        return balances

    def unbalanced_transactions(self) -> list[Transaction]:
        """Return transactions whose postings do not sum to zero, newest first."""
        return _newest_first([t for t in self.journal.transactions if not t.is_balanced()])

    def transactions_for_account(self, account: Account) -> list[Transaction]:
        _require(account, "Account")
        return self.filter_transactions(filters.affecting_account(account))

    def transactions_in_date_range(self, start: date, end: date) -> list[Transaction]:
        """Return transactions dated from start to end, both inclusive."""
        _require(start, "Start date")
        _require(end, "End date")
        return self.filter_transactions(filters.between(start, end))

    def account_register(
        self, account: Account, transaction_filter: Optional[TransactionFilter] = None
    ) -> list[RegisterLine]:
        """List an account's postings with a running balance per commodity.

        Lines follow the order of ``filter_transactions`` (newest first) and
        the running balance accumulates in that order.

        Args:
            account: Account to list
            transaction_filter: Optional extra filter

        Returns:
            Register lines for postings to this account
        """
        _require(account, "Account")
        combined = filters.affecting_account(account)
        if transaction_filter is not None:
            combined = combined.and_(transaction_filter)

        running: dict[str, Amount] = {}
        lines = []
        for transaction in self.filter_transactions(combined):
            for posting in transaction.postings:
                if posting.account.full_path != account.full_path:
                    continue
                commodity = posting.amount.commodity
                total = running[commodity].add(posting.amount) if commodity in running else posting.amount
                running[commodity] = total
                lines.append(
                    RegisterLine(
                        date=transaction.date,
                        status=transaction.status,
                        description=transaction.description,
                        external_id=transaction.external_id,
                        commodity=commodity,
                        quantity=posting.amount.quantity,
                        running_balance=total.quantity,
                    )
                )
        return lines

    def _sum_postings(self, transactions: list[Transaction], account: Account) -> dict[str, Decimal]:
        totals: dict[str, Amount] = {}
        for transaction in transactions:
            for posting in transaction.postings:
                if posting.account.full_path != account.full_path:
                    continue
                commodity = posting.amount.commodity
                if commodity in totals:
                    totals[commodity] = totals[commodity].add(posting.amount)
                else:
                    totals[commodity] = posting.amount
        return {code: amount.quantity for code, amount in totals.items()}
