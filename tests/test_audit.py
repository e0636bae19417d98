"""Tests for the audit logger."""

import pytest
from decimal import Decimal

from pocket_ledger.audit import AuditLogger, create_correlation_id
from pocket_ledger.models import AuditEventBuilder, AuditEventType, AuditSeverity, Expense, Income, RecordKind
from pocket_ledger.services.storage import InMemoryAuditStorage, StoreError
from pocket_ledger.validation import ValidationError, ValidationReason


class BrokenAuditStorage(InMemoryAuditStorage):
    async def append_event(self, event):
        raise StoreError("sheet unavailable")


class TestAuditLogger:
    """Tests for AuditLogger persistence."""

    @pytest.mark.asyncio
    async def test_record_added_persisted(self):
        storage = InMemoryAuditStorage()
        audit_logger = AuditLogger(storage)
        correlation_id = create_correlation_id()
        expense = Expense(emoji="🍔", name="Food", amount=Decimal("45"))

        await audit_logger.log_record_added(expense, correlation_id)

        event = storage.events[0]
        assert event.event_type == AuditEventType.EXPENSE_ADDED
        assert event.entity_id == expense.id
        assert event.details["summary"] == "🍔 Food 45.00"
        assert event.correlation_id == correlation_id

    @pytest.mark.asyncio
    async def test_income_events(self):
        storage = InMemoryAuditStorage()
        audit_logger = AuditLogger(storage)
        income = Income(amount=Decimal("100"))
        correlation_id = create_correlation_id()

        await audit_logger.log_record_updated(income, correlation_id)
        await audit_logger.log_record_deleted(income, correlation_id)

        assert [e.event_type for e in storage.events] == [
            AuditEventType.INCOME_UPDATED,
            AuditEventType.INCOME_DELETED,
        ]

    @pytest.mark.asyncio
    async def test_validation_failed(self):
        storage = InMemoryAuditStorage()
        error = ValidationError(ValidationReason.NEGATIVE_AMOUNT, "amount", "Amount cannot be negative")

        await AuditLogger(storage).log_validation_failed(error, create_correlation_id())

        event = storage.events[0]
        assert event.event_type == AuditEventType.VALIDATION_FAILED
        assert event.severity == AuditSeverity.WARNING
        assert event.details == {"field": "amount", "reason": "negative_amount"}

    @pytest.mark.asyncio
    async def test_store_failed(self):
        storage = InMemoryAuditStorage()

        await AuditLogger(storage).log_store_failed("fetch", RecordKind.EXPENSE, "timeout")

        assert storage.events[0].event_type == AuditEventType.FETCH_FAILED

    @pytest.mark.asyncio
    async def test_storage_failure_not_raised(self):
        """Test a failing audit store does not break the caller."""
        audit_logger = AuditLogger(BrokenAuditStorage())
        expense = Expense(amount=Decimal("1"))

        await audit_logger.log_record_added(expense, create_correlation_id())

    @pytest.mark.asyncio
    async def test_log_returns_storage_result(self):
        event = AuditEventBuilder.system_error("Boom", "bad thing")

        assert await AuditLogger(InMemoryAuditStorage()).log(event) is True
        assert await AuditLogger(BrokenAuditStorage()).log(event) is False
        assert await AuditLogger().log(event) is True
