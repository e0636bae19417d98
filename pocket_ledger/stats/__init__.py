"""Statistics package."""

from pocket_ledger.models.ledger import format_amount
from pocket_ledger.stats.engine import (
    category_breakdown,
    category_share,
    comparison,
    daily_series,
    month_totals,
    overall_totals,
    totals,
    with_shares,
)

__all__ = [
    "category_breakdown",
    "category_share",
    "comparison",
    "daily_series",
    "format_amount",
    "month_totals",
    "overall_totals",
    "totals",
    "with_shares",
]
