"""Utility functions for finstate."""

from finstate.utils.date_parser import parse_date, get_date_range
from finstate.utils.amount_parser import parse_amount, parse_signed_amount

__all__ = ["parse_date", "get_date_range", "parse_amount", "parse_signed_amount"]
