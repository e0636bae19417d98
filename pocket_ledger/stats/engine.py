"""
Statistics Engine

Period totals, per-category breakdown and the daily spending series.

DESIGN DECISION: Category grouping keys on the name stored on each
expense, compared exactly. "Food" and "food" are two categories, and the
emoji shown for a category is the one on the first expense seen with
that name. Both are kept as-is because stored expenses carry only text;
changing the key would regroup history the user has already seen.

Amounts are summed as Decimal. Zero and negative amounts are summed like
any other; nothing here divides by a total without checking it first.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from pocket_ledger.ledger.periods import Moment, is_in_period, start_of_day
from pocket_ledger.models.ledger import Period, TransactionColor
from pocket_ledger.models.records import Expense, Income
from pocket_ledger.models.stats import (
    CategoryTotal,
    ComparisonBar,
    DailyPoint,
    PeriodTotals,
)


ZERO = Decimal("0")


def totals(
    expenses: Iterable[Expense],
    incomes: Iterable[Income],
    period: Period,
    reference: Moment,
    first_weekday: Optional[int] = None,
) -> PeriodTotals:
    """Income and expense sums for the period containing `reference`."""
    return PeriodTotals(
        income=sum(
            (i.amount for i in incomes if is_in_period(i.date, period, reference, first_weekday)),
            ZERO,
        ),
        expense=sum(
            (e.amount for e in expenses if is_in_period(e.date, period, reference, first_weekday)),
            ZERO,
        ),
    )


def month_totals(
    expenses: Iterable[Expense],
    incomes: Iterable[Income],
    month: Moment,
) -> PeriodTotals:
    """Totals for the calendar month containing `month`."""
    return totals(expenses, incomes, Period.MONTH, month)


def overall_totals(
    expenses: Iterable[Expense],
    incomes: Iterable[Income],
) -> PeriodTotals:
    """All-time sums, as shown on the home summary."""
    return PeriodTotals(
        income=sum((i.amount for i in incomes), ZERO),
        expense=sum((e.amount for e in expenses), ZERO),
    )


def category_share(amount: Decimal, grand_total: Decimal) -> float:
    """
    amount / grand_total, clamped to [0, 1].

    0.0 when the grand total is zero.
    """
    if grand_total == 0:
        return 0.0
    share = float(amount / grand_total)
    return min(1.0, max(0.0, share))


def with_shares(entries: list[CategoryTotal]) -> list[CategoryTotal]:
    """Copies of `entries` with `share` set against their combined total."""
    grand_total = sum((entry.total_amount for entry in entries), ZERO)
    return [
        entry.model_copy(update={"share": category_share(entry.total_amount, grand_total)})
        for entry in entries
    ]


def category_breakdown(expenses: Iterable[Expense]) -> list[CategoryTotal]:
    """
    Spend per stored category name, largest first.

    Ties keep the order in which the categories were first seen.
    """
    sums: dict[str, Decimal] = {}
    emojis: dict[str, str] = {}

    for expense in expenses:
        sums[expense.name] = sums.get(expense.name, ZERO) + expense.amount
        emojis.setdefault(expense.name, expense.emoji)

    entries = [
        CategoryTotal(
            category_name=name,
            total_amount=amount,
            representative_emoji=emojis[name],
        )
        for name, amount in sums.items()
    ]
    return sorted(with_shares(entries), key=lambda entry: entry.total_amount, reverse=True)


def daily_series(expenses: Iterable[Expense]) -> list[DailyPoint]:
    """
    Spend per local calendar day, oldest day first.

    Days without expenses are left out (the series is sparse). Expenses
    without a date are skipped.
    """
    per_day: dict[date, Decimal] = {}
    for expense in expenses:
        if expense.date is None:
            continue
        day = start_of_day(expense.date)
        per_day[day] = per_day.get(day, ZERO) + expense.amount

    return [
        DailyPoint(calendar_day=day, total_amount=amount)
        for day, amount in sorted(per_day.items())
    ]


def comparison(period_totals: PeriodTotals) -> list[ComparisonBar]:
    """Income vs. expense bars for the comparison chart."""
    return [
        ComparisonBar(
            label="Income",
            amount=period_totals.income,
            color=TransactionColor.CREDIT,
        ),
        ComparisonBar(
            label="Expense",
            amount=period_totals.expense,
            color=TransactionColor.DEBIT,
        ),
    ]
