"""Parsing helpers shared by the CLI and statement import."""

from ledgerkit.utils.amount_parser import parse_amount
from ledgerkit.utils.date_parser import get_date_range, parse_date

__all__ = ["parse_date", "parse_amount", "get_date_range"]
