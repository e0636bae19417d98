"""Tests for user input validation."""

import pytest
from decimal import Decimal

from pocket_ledger.validation import (
    ValidationError,
    ValidationReason,
    parse_amount,
    require_text,
)


class TestParseAmount:
    """Tests for amount parsing."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("45", Decimal("45")),
            ("45.5", Decimal("45.5")),
            (" 30.25 ", Decimal("30.25")),
            ("0", Decimal("0")),
        ],
    )
    def test_accepts_plain_decimals(self, text, expected):
        assert parse_amount(text) == expected

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_empty(self, text):
        with pytest.raises(ValidationError) as exc_info:
            parse_amount(text)
        assert exc_info.value.reason == ValidationReason.EMPTY_FIELD
        assert exc_info.value.field == "amount"

    @pytest.mark.parametrize("text", ["abc", "12,50", "45 rupees", "NaN", "Infinity"])
    def test_not_a_number(self, text):
        """Test input is rejected, never guessed into a number."""
        with pytest.raises(ValidationError) as exc_info:
            parse_amount(text)
        assert exc_info.value.reason == ValidationReason.INVALID_AMOUNT

    def test_negative(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_amount("-10")
        assert exc_info.value.reason == ValidationReason.NEGATIVE_AMOUNT
        assert exc_info.value.message == "Amount cannot be negative"

    def test_field_name_carried(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_amount("", field="price")
        assert exc_info.value.field == "price"


class TestRequireText:
    """Tests for required text fields."""

    def test_trims(self):
        assert require_text("  Pizza  ", "name") == "Pizza"

    @pytest.mark.parametrize("value", ["", "  \t ", None])
    def test_empty(self, value):
        with pytest.raises(ValidationError) as exc_info:
            require_text(value, "name")
        assert exc_info.value.reason == ValidationReason.EMPTY_FIELD
        assert exc_info.value.message == "Name is required"
