"""
Bill Text Extractor

Turns raw recognized text from a scanned bill into (item name, price)
candidates.

A line yields a candidate when it has a price token (a whole number with
at most two decimals, preceded by whitespace) and some letters before it:

    "Apple 45.00"         -> ("Apple", 45.00)
    "Bread - 30.5"        -> ("Bread", 30.5)
    "Coke 2 x 30"         -> ("Coke", 30)      the LAST number is the price
    "garbled###line"      -> dropped

OCR output has no reliable structure, so lines that don't fit are
dropped silently. Extraction never raises.
"""

import re
from decimal import Decimal
from typing import Iterable, Optional

from pocket_ledger.models.stats import BillLine


# Whitespace before, and not part of a longer number after
PRICE_PATTERN = re.compile(r"(?<=\s)\d+(?:\.\d{1,2})?(?![\d.]?\d)")

# Words made of letters, joined by spaces or tabs
NAME_PATTERN = re.compile(r"[^\W\d_]+(?:[ \t]+[^\W\d_]+)*")


def join_pages(pages: Iterable[str]) -> str:
    """Concatenate the text of scanned pages, keeping page order."""
    return "\n".join(pages)


def parse_line(line: str) -> Optional[BillLine]:
    """Read one line, or return None when it holds no item + price."""
    prices = list(PRICE_PATTERN.finditer(line))
    if not prices:
        return None

    last = prices[-1]
    names = NAME_PATTERN.findall(line[:last.start()])
    if not names:
        return None

    # max() keeps the first of equally long runs
    return BillLine(item_name=max(names, key=len).strip(), price=Decimal(last.group()))


def extract(raw_text: Optional[str]) -> list[BillLine]:
    """
    All item/price candidates in `raw_text`, top to bottom.

    Empty or unreadable input gives an empty list.
    """
    if not raw_text:
        return []

    lines = []
    for line in raw_text.splitlines():
        parsed = parse_line(line)
        if parsed is not None:
            lines.append(parsed)
    return lines
