"""
Ledger Aggregator

Merges expenses and incomes into one time-ordered ledger and derives the
views the ledger screen shows:

    ledger_view = search(filter_by_period(merge(expenses, incomes)), query)

Every function here is pure: inputs are never mutated, and deleting a
row only returns what to remove. Removing it from the record store is
the caller's job.
"""

from typing import Iterable, Optional, Union

from pocket_ledger.ledger.periods import Moment, is_in_period, to_local
from pocket_ledger.models.ledger import Period, TransactionItem
from pocket_ledger.models.records import Expense, Income


def merge(
    expenses: Iterable[Expense],
    incomes: Iterable[Income],
) -> list[TransactionItem]:
    """
    All records as ledger rows, newest first.

    sorted() is stable (also with reverse=True), so rows with identical
    timestamps keep their merge order: expenses before incomes, each in
    the order given. Rows without a date lead the ledger.
    """
    items = [TransactionItem.of(e) for e in expenses]
    items.extend(TransactionItem.of(i) for i in incomes)

    undated = [item for item in items if item.date is None]
    dated = [item for item in items if item.date is not None]
    dated = sorted(dated, key=lambda item: to_local(item.date), reverse=True)
    return undated + dated


def filter_by_period(
    items: Iterable[TransactionItem],
    period: Period,
    reference: Moment,
    first_weekday: Optional[int] = None,
) -> list[TransactionItem]:
    """Rows in the same local day / week / month as `reference`."""
    return [
        item
        for item in items
        if is_in_period(item.date, period, reference, first_weekday)
    ]


def search(items: Iterable[TransactionItem], query: Optional[str]) -> list[TransactionItem]:
    """
    Case-insensitive substring match on title or note.

    An empty query returns the rows unchanged.
    """
    items = list(items)
    if not query:
        return items

    needle = query.casefold()
    return [
        item
        for item in items
        if needle in item.title.casefold() or needle in item.note.casefold()
    ]


def ledger_view(
    expenses: Iterable[Expense],
    incomes: Iterable[Income],
    period: Period,
    reference: Moment,
    query: Optional[str] = None,
    first_weekday: Optional[int] = None,
) -> list[TransactionItem]:
    """The ledger screen: merge, then period filter, then search."""
    return search(
        filter_by_period(merge(expenses, incomes), period, reference, first_weekday),
        query,
    )


def delete(
    items: list[TransactionItem],
    index: int,
) -> tuple[Union[Expense, Income], list[TransactionItem]]:
    """
    Remove the row at `index` of the ledger as currently shown.

    Returns the removed row's record and the remaining rows, in their
    original order. Raises IndexError for a position outside the ledger.
    """
    if not 0 <= index < len(items):
        raise IndexError(f"Ledger position {index} out of range (size {len(items)})")

    removed = items[index]
    remaining = items[:index] + items[index + 1:]
    return removed.record, remaining
