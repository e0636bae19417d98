"""
Record Models for Pocket Ledger

These are the three entity kinds the record store persists:
expenses, incomes and user-defined categories.

DESIGN DECISION: An Expense stores its category as plain emoji + name
text. Whether the category came from the built-in list or from the
user's catalog is NOT kept. Statistics group on the stored name, so
the record must stay readable even after the catalog changes.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


def new_record_id() -> str:
    """Generate a stable, unique record identifier."""
    return str(uuid4())


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class RecordKind(str, Enum):
    """Entity kinds understood by the record store."""
    EXPENSE = "expense"
    INCOME = "income"
    CATEGORY = "category"


class BuiltInCategory(str, Enum):
    """
    The fixed categories always offered when logging an expense.

    Each value is an "emoji space name" pair.
    """
    FOOD = "🍔 Food"
    MOVIE = "🎬 Movie"
    OTT = "📺 OTT"
    GROCERIES = "🛒 Groceries"
    HOME = "🏠 Home"
    TRANSPORT = "🚌 Transport"
    ENTERTAINMENT = "🎉 Entertainment"
    DRINKS = "🍹 Drinks"
    SHOPPING = "🛍️ Shopping"
    POWER_BILL = "💡 Power Bill"
    PHONE = "📱 Phone"
    INTERNET = "🌐 Internet"
    FUEL = "⛽ Fuel"
    OTHERS = "🔖 Others"

    @property
    def emoji(self) -> str:
        return self.value.split(" ", 1)[0]

    @property
    def label(self) -> str:
        return self.value.split(" ", 1)[1]


# =============================================================================
# RECORDS
# =============================================================================

class Expense(BaseModel):
    """
    A single expense.

    Mutable in place: an edit rewrites emoji, name, amount, date and note
    together. Amounts are not range-checked here; entry flows reject
    negative input, but records already stored are accepted as they are.
    """
    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(
        default_factory=new_record_id,
        description="Stable unique identifier"
    )
    emoji: str = Field(
        default="💰",
        description="Category emoji as stored"
    )
    name: str = Field(
        default="",
        description="Category name as stored"
    )
    amount: Decimal = Field(
        default=Decimal("0"),
        description="Amount spent"
    )
    date: Optional[datetime] = Field(
        default_factory=datetime.now,
        description="When the expense happened (None if unreadable)"
    )
    note: str = Field(
        default="",
        description="Free-text note"
    )


class Income(BaseModel):
    """A single income entry. Incomes carry no category."""
    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(
        default_factory=new_record_id,
        description="Stable unique identifier"
    )
    amount: Decimal = Field(
        default=Decimal("0"),
        description="Amount received"
    )
    date: Optional[datetime] = Field(
        default_factory=datetime.now,
        description="When the income was received (None if unreadable)"
    )
    note: str = Field(
        default="",
        description="Free-text note"
    )


class UserCategory(BaseModel):
    """
    A category created by the user at runtime.

    Duplicate (name, emoji) pairs are allowed.
    """

    id: str = Field(
        default_factory=new_record_id,
        description="Stable unique identifier"
    )
    name: str = Field(
        ...,
        description="Display name"
    )
    emoji: str = Field(
        default="🔖",
        description="Display emoji"
    )
