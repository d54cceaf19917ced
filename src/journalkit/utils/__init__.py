"""Utility functions for journalkit."""

from journalkit.utils.date_parser import parse_date
from journalkit.utils.amount_parser import parse_quantity, format_quantity

__all__ = ["parse_date", "parse_quantity", "format_quantity"]
