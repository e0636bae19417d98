"""
Audit Logger

DESIGN DECISION: Every change to the ledger is logged.
This provides:
1. Traceability of adds, edits and deletes
2. Debugging capability when a store or OCR call fails
3. A history the user can look back on

The audit logger:
- Is async so it fits the store calls it sits next to
- Gracefully handles failures (doesn't crash the app if logging fails)
- Supports correlation IDs to trace related events
"""

import logging
from typing import Optional, Union
from uuid import UUID, uuid4

import structlog

from pocket_ledger.models.audit import AuditEvent, AuditEventBuilder
from pocket_ledger.models.ledger import format_amount
from pocket_ledger.models.records import Expense, Income, RecordKind, UserCategory
from pocket_ledger.services.storage import AuditStorageInterface, StoreError
from pocket_ledger.validation import ValidationError


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route structlog output through stdlib logging at `level`."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper()))


def _summary(record: Union[Expense, Income]) -> str:
    if isinstance(record, Expense):
        return f"{record.emoji} {record.name} {format_amount(record.amount)}"
    return format_amount(record.amount)


def _kind(record: Union[Expense, Income]) -> RecordKind:
    return RecordKind.EXPENSE if isinstance(record, Expense) else RecordKind.INCOME


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An audit store, when one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger()

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except StoreError as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_record_added(
        self,
        record: Union[Expense, Income],
        correlation_id: UUID,
    ) -> None:
        """Log a new expense or income."""
        event = AuditEventBuilder.record_added(
            kind=_kind(record),
            record_id=record.id,
            summary=_summary(record),
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_record_updated(
        self,
        record: Union[Expense, Income],
        correlation_id: UUID,
    ) -> None:
        """Log an edit of an expense or income."""
        event = AuditEventBuilder.record_updated(
            kind=_kind(record),
            record_id=record.id,
            summary=_summary(record),
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_record_deleted(
        self,
        record: Union[Expense, Income],
        correlation_id: UUID,
    ) -> None:
        """Log a deleted expense or income."""
        event = AuditEventBuilder.record_deleted(
            kind=_kind(record),
            record_id=record.id,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_category_added(
        self,
        category: UserCategory,
        correlation_id: UUID,
    ) -> None:
        """Log a new user category."""
        event = AuditEventBuilder.record_added(
            kind=RecordKind.CATEGORY,
            record_id=category.id,
            summary=f"{category.emoji} {category.name}",
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_validation_failed(
        self,
        error: ValidationError,
        correlation_id: UUID,
    ) -> None:
        """Log rejected user input."""
        event = AuditEventBuilder.validation_failed(
            field=error.field,
            reason=error.reason.value,
            message=error.message,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_scan_completed(
        self,
        page_count: int,
        lines_found: int,
        correlation_id: UUID,
    ) -> None:
        """Log the outcome of one bill scan."""
        event = AuditEventBuilder.scan_completed(
            page_count=page_count,
            lines_found=lines_found,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_ocr_page_failed(
        self,
        page_index: int,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        """Log a page that text recognition could not read."""
        event = AuditEventBuilder.ocr_page_failed(
            page_index=page_index,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_store_failed(
        self,
        operation: str,
        kind: RecordKind,
        error_message: str,
        correlation_id: Optional[UUID] = None,
        record_id: Optional[str] = None,
    ) -> None:
        """Log a failed save / fetch / delete."""
        event = AuditEventBuilder.store_failed(
            operation=operation,
            kind=kind,
            error_message=error_message,
            correlation_id=correlation_id,
            record_id=record_id,
        )
        await self.log(event)

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_external_service_error(
        self,
        service: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        """Log external service error."""
        event = AuditEventBuilder.external_service_error(
            service=service,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., a bill scan).
    Pass it through all subsequent operations.
    """
    return uuid4()
