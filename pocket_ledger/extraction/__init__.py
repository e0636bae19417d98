"""Bill text extraction package."""

from pocket_ledger.extraction.bill_text import extract, join_pages, parse_line

__all__ = ["extract", "join_pages", "parse_line"]
