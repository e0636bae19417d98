"""
Statistics and Extraction Result Models

These are derived values. None of them is persisted.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from pocket_ledger.models.ledger import TransactionColor, format_amount
from pocket_ledger.models.records import Expense


class PeriodTotals(BaseModel):
    """Income and expense sums over one period."""

    income: Decimal = Field(default=Decimal("0"))
    expense: Decimal = Field(default=Decimal("0"))

    @property
    def balance(self) -> Decimal:
        return self.income - self.expense


class CategoryTotal(BaseModel):
    """
    Aggregate spend for one category name.

    `share` is filled in by the statistics engine relative to the
    breakdown it belongs to.
    """

    category_name: str
    total_amount: Decimal
    representative_emoji: str
    share: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="Fraction of the breakdown's grand total"
    )


class DailyPoint(BaseModel):
    """Total spend on one local calendar day."""

    calendar_day: date
    total_amount: Decimal


class ComparisonBar(BaseModel):
    """One bar of the income vs. expense comparison."""

    label: str
    amount: Decimal
    color: TransactionColor


class BillLine(BaseModel):
    """
    A candidate expense read from bill text.

    Turned into an Expense by the caller, never by the extractor.
    """

    item_name: str = Field(..., min_length=1)
    price: Decimal


class MonthReport(BaseModel):
    """Everything the monthly statistics screen shows."""

    month: date = Field(..., description="First day of the reported month")
    totals: PeriodTotals
    comparison: list[ComparisonBar] = Field(default_factory=list)
    breakdown: list[CategoryTotal] = Field(default_factory=list)
    daily: list[DailyPoint] = Field(default_factory=list)
    generated_at: datetime = Field(default_factory=datetime.now)

    @property
    def is_empty(self) -> bool:
        return not self.breakdown and self.totals.income == 0


class ScanResult(BaseModel):
    """Outcome of turning one scanned bill into expenses."""

    expenses: list[Expense] = Field(default_factory=list)
    pages_read: int = Field(default=0, ge=0)
    pages_failed: int = Field(default=0, ge=0)

    @property
    def message(self) -> str:
        return f"Added {len(self.expenses)} expenses from your bill!"

    def summary_lines(self, currency: str = "") -> list[str]:
        """One "item: price" line per created expense."""
        return [f"{e.name}: {format_amount(e.amount, currency)}" for e in self.expenses]
