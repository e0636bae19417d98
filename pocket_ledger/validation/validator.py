"""
Input Validation

DESIGN DECISION: User-typed input is checked BEFORE anything touches a
record. A failed check raises ValidationError and nothing is mutated;
the caller re-prompts.

Validation NEVER silently fixes input. "12,50" is rejected, not
guessed into 12.50 or 1250.
"""

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional


class ValidationReason(str, Enum):
    """Why a piece of input was rejected."""
    EMPTY_FIELD = "empty_field"
    INVALID_AMOUNT = "invalid_amount"
    NEGATIVE_AMOUNT = "negative_amount"


class ValidationError(Exception):
    """User-supplied input failed a precondition."""

    def __init__(
        self,
        reason: ValidationReason,
        field: str,
        message: Optional[str] = None,
    ):
        self.reason = reason
        self.field = field
        super().__init__(message or f"{field}: {reason.value}")

    @property
    def message(self) -> str:
        return str(self)


def require_text(value: Optional[str], field: str) -> str:
    """
    Return the trimmed value, or raise EMPTY_FIELD when nothing is left.
    """
    trimmed = (value or "").strip()
    if not trimmed:
        raise ValidationError(
            ValidationReason.EMPTY_FIELD,
            field,
            f"{field.capitalize()} is required",
        )
    return trimmed


def parse_amount(text: Optional[str], field: str = "amount") -> Decimal:
    """
    Parse an amount typed by the user.

    Accepts plain decimal text ("45", "45.5", " 30.25 ").
    Rejects empty, non-numeric, non-finite and negative input.
    """
    raw = require_text(text, field)

    try:
        value = Decimal(raw)
    except InvalidOperation:
        raise ValidationError(
            ValidationReason.INVALID_AMOUNT,
            field,
            f"'{raw}' is not a valid amount",
        )

    if not value.is_finite():
        raise ValidationError(
            ValidationReason.INVALID_AMOUNT,
            field,
            f"'{raw}' is not a valid amount",
        )

    if value < 0:
        raise ValidationError(
            ValidationReason.NEGATIVE_AMOUNT,
            field,
            "Amount cannot be negative",
        )

    return value
