"""Input validation package."""

from pocket_ledger.validation.validator import (
    ValidationError,
    ValidationReason,
    parse_amount,
    require_text,
)

__all__ = [
    "ValidationError",
    "ValidationReason",
    "parse_amount",
    "require_text",
]
