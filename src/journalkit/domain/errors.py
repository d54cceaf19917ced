"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for callers that only care that input was rejected.
    """


class EmptyInputError(DomainError):
    """Journal text is missing or blank."""


class MalformedAmountError(DomainError):
    """A decimal token could not be parsed into an exact, finite quantity."""


class CommodityMismatchError(DomainError):
    """Arithmetic attempted between amounts of different commodities."""


class InvariantViolationError(DomainError):
    """A value was constructed with a forbidden argument."""


class InvalidArgumentError(DomainError):
    """An engine operation received a missing or unusable argument."""


class NotFoundError(DomainError):
    """Requested domain entity or path does not exist."""


class AccountNotFoundError(NotFoundError, InvalidArgumentError):
    """Account lookup by full path failed."""


def empty_input() -> str:
    """Return message for missing journal text."""
    return "Journal content cannot be empty"


def malformed_amount(token: str) -> str:
    """Return message for an unparseable decimal token."""
    return f"Malformed amount '{token}'"


def commodity_mismatch(left: str, right: str) -> str:
    """Return message for mixed-commodity arithmetic."""
    return f"Cannot add amounts with different commodities: {left} and {right}"


def must_not_be_blank(field: str) -> str:
    """Return message for a blank required field."""
    return f"{field} cannot be empty"


def must_not_be_none(field: str) -> str:
    """Return message for a missing required argument."""
    return f"{field} cannot be None"


def too_few_postings(count: int) -> str:
    """Return message when a transaction has fewer than two postings."""
    return f"Transaction must have at least 2 postings, got {count}"


def account_not_found(path: str) -> str:
    """Return message for missing account by full path."""
    return f"Account '{path}' not found"


def journal_not_found(journal_id: int) -> str:
    """Return message for missing stored journal."""
    return f"Journal {journal_id} not found"
