"""Ledger aggregation package."""

from pocket_ledger.ledger.aggregator import (
    delete,
    filter_by_period,
    ledger_view,
    merge,
    search,
)
from pocket_ledger.ledger.periods import (
    is_in_period,
    period_start,
    recent_months,
    shift_month,
    start_of_day,
    start_of_month,
    start_of_week,
    to_local,
)

__all__ = [
    "delete",
    "filter_by_period",
    "is_in_period",
    "ledger_view",
    "merge",
    "period_start",
    "recent_months",
    "search",
    "shift_month",
    "start_of_day",
    "start_of_month",
    "start_of_week",
    "to_local",
]
