"""Quantity parsing utilities."""

from decimal import Decimal, InvalidOperation

from journalkit.domain.errors import MalformedAmountError, malformed_amount


def parse_quantity(token: str) -> Decimal:
    """Parse a journal quantity token into an exact Decimal.

    The scale written in the source is preserved, so "1000.00" stays at two
    decimal places and can be written back unchanged:
    - "1000.00"
    - "-150.5"
    - "0.001"

    Args:
        token: Quantity token as written in the journal

    Returns:
        Decimal quantity

    Raises:
        MalformedAmountError: If the token is empty, unparseable or not finite
    """
    if token is None or not token.strip():
        raise MalformedAmountError(malformed_amount(token or ""))

    token = token.strip()

    try:
        quantity = Decimal(token)
    except InvalidOperation as e:
        raise MalformedAmountError(malformed_amount(token)) from e

    # NaN and Infinity are valid Decimals but never valid money
    if not quantity.is_finite():
        raise MalformedAmountError(malformed_amount(token))

    return quantity


def format_quantity(quantity: Decimal) -> str:
    """Render a quantity in plain (non-scientific) notation, keeping its scale."""
    return format(quantity, "f")
