"""
Ledger Models

TransactionItem is the unified row of the ledger. It wraps exactly one
Expense or one Income and derives every display field from it; nothing
on the item is stored separately.
"""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict

from pocket_ledger.models.records import Expense, Income, RecordKind


INCOME_TITLE = "Income"
INCOME_EMOJI = "💰"

_CENTS = Decimal("0.01")


class Period(str, Enum):
    """Calendar periods the ledger can be restricted to."""
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class TransactionColor(str, Enum):
    """Semantic color tag of a ledger row."""
    CREDIT = "credit"  # money in
    DEBIT = "debit"    # money out


def format_amount(value: Decimal, currency: str = "") -> str:
    """
    Format an amount with two decimal places.

    Halves round away from zero (Decimal's ROUND_HALF_UP).
    """
    quantized = Decimal(value).quantize(_CENTS, rounding=ROUND_HALF_UP)
    return f"{currency}{quantized}"


class TransactionItem(BaseModel):
    """
    A ledger row over {Expense, Income}.

    Every derived field dispatches on the wrapped record type. The
    record is held by reference, so deleting an item always resolves
    to the one record it was built from.
    """
    model_config = ConfigDict(frozen=True)

    record: Union[Expense, Income]

    @classmethod
    def of(cls, record: Union[Expense, Income]) -> "TransactionItem":
        return cls(record=record)

    @property
    def kind(self) -> RecordKind:
        if isinstance(self.record, Expense):
            return RecordKind.EXPENSE
        if isinstance(self.record, Income):
            return RecordKind.INCOME
        raise TypeError(f"Unsupported ledger record: {type(self.record).__name__}")

    @property
    def is_expense(self) -> bool:
        return self.kind == RecordKind.EXPENSE

    @property
    def id(self) -> str:
        return self.record.id

    @property
    def date(self) -> Optional[datetime]:
        return self.record.date

    @property
    def title(self) -> str:
        if self.kind == RecordKind.EXPENSE:
            return self.record.name
        return INCOME_TITLE

    @property
    def emoji(self) -> str:
        if self.kind == RecordKind.EXPENSE:
            return self.record.emoji
        return INCOME_EMOJI

    @property
    def amount(self) -> Decimal:
        return self.record.amount

    @property
    def amount_text(self) -> str:
        return format_amount(self.record.amount)

    @property
    def note(self) -> str:
        return self.record.note

    @property
    def color(self) -> TransactionColor:
        if self.kind == RecordKind.EXPENSE:
            return TransactionColor.DEBIT
        return TransactionColor.CREDIT
