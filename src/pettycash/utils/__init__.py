"""Utility functions for pettycash."""

from pettycash.utils.date_parser import parse_date, parse_month
from pettycash.utils.amount_parser import parse_amount, quantize_amount

__all__ = ["parse_date", "parse_month", "parse_amount", "quantize_amount"]
