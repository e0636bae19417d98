"""
Audit Models for Pocket Ledger

Every change to the user's ledger is logged for audit purposes.
This provides:
1. Traceability of adds, edits and deletes
2. Debugging information when a store or OCR call fails
3. A history the user can look back on

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

import json
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from pocket_ledger.models.records import RecordKind


class AuditEventType(str, Enum):
    """
    Types of events we audit.
    """
    # Record changes
    EXPENSE_ADDED = "expense_added"
    EXPENSE_UPDATED = "expense_updated"
    EXPENSE_DELETED = "expense_deleted"
    INCOME_ADDED = "income_added"
    INCOME_UPDATED = "income_updated"
    INCOME_DELETED = "income_deleted"
    CATEGORY_ADDED = "category_added"

    # Input validation
    VALIDATION_FAILED = "validation_failed"

    # Bill scanning
    SCAN_COMPLETED = "scan_completed"
    OCR_PAGE_FAILED = "ocr_page_failed"

    # Record store failures
    SAVE_FAILED = "save_failed"
    FETCH_FAILED = "fetch_failed"
    DELETE_FAILED = "delete_failed"

    # System events
    SYSTEM_ERROR = "system_error"
    EXTERNAL_SERVICE_ERROR = "external_service_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


_ADDED = {
    RecordKind.EXPENSE: AuditEventType.EXPENSE_ADDED,
    RecordKind.INCOME: AuditEventType.INCOME_ADDED,
    RecordKind.CATEGORY: AuditEventType.CATEGORY_ADDED,
}
_UPDATED = {
    RecordKind.EXPENSE: AuditEventType.EXPENSE_UPDATED,
    RecordKind.INCOME: AuditEventType.INCOME_UPDATED,
}
_DELETED = {
    RecordKind.EXPENSE: AuditEventType.EXPENSE_DELETED,
    RecordKind.INCOME: AuditEventType.INCOME_DELETED,
}
_STORE_FAILURES = {
    "save": AuditEventType.SAVE_FAILED,
    "fetch": AuditEventType.FETCH_FAILED,
    "delete": AuditEventType.DELETE_FAILED,
}


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.now,
        description="When the event occurred (local time)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'expense', 'income', 'category')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the record this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., all saves from one scan)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }

    def to_sheets_row(self) -> list:
        """
        Convert to a row suitable for Google Sheets storage.

        Returns columns in order:
        [event_id, timestamp, event_type, severity, entity_type, entity_id,
         correlation_id, description, details_json, error_message, is_user_action]
        """
        return [
            str(self.event_id),
            self.timestamp.isoformat(),
            self.event_type.value,
            self.severity.value,
            self.entity_type or "",
            self.entity_id or "",
            str(self.correlation_id) if self.correlation_id else "",
            self.description,
            json.dumps(self.details) if self.details else "",
            self.error_message or "",
            str(self.is_user_action),
        ]


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.record_added(RecordKind.EXPENSE, expense.id, "45.00", cid)
        event = AuditEventBuilder.store_failed("save", RecordKind.INCOME, str(e), cid)
    """

    @staticmethod
    def record_added(
        kind: RecordKind,
        record_id: str,
        summary: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=_ADDED[kind],
            entity_type=kind.value,
            entity_id=record_id,
            correlation_id=correlation_id,
            description=f"{kind.value.capitalize()} added: {summary}",
            details={"summary": summary},
            is_user_action=True,
        )

    @staticmethod
    def record_updated(
        kind: RecordKind,
        record_id: str,
        summary: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=_UPDATED[kind],
            entity_type=kind.value,
            entity_id=record_id,
            correlation_id=correlation_id,
            description=f"{kind.value.capitalize()} updated: {summary}",
            details={"summary": summary},
            is_user_action=True,
        )

    @staticmethod
    def record_deleted(
        kind: RecordKind,
        record_id: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=_DELETED[kind],
            entity_type=kind.value,
            entity_id=record_id,
            correlation_id=correlation_id,
            description=f"{kind.value.capitalize()} deleted",
            is_user_action=True,
        )

    @staticmethod
    def validation_failed(
        field: str,
        reason: str,
        message: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description=f"Input rejected: {field}",
            details={
                "field": field,
                "reason": reason,
            },
            error_message=message,
            is_user_action=True,
        )

    @staticmethod
    def scan_completed(
        page_count: int,
        lines_found: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SCAN_COMPLETED,
            entity_type="scan",
            correlation_id=correlation_id,
            description=f"Bill scan read {lines_found} items from {page_count} pages",
            details={
                "page_count": page_count,
                "lines_found": lines_found,
            },
            is_user_action=True,
        )

    @staticmethod
    def ocr_page_failed(
        page_index: int,
        error_message: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.OCR_PAGE_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="scan",
            correlation_id=correlation_id,
            description=f"Text recognition failed on page {page_index + 1}",
            details={"page_index": page_index},
            error_message=error_message,
        )

    @staticmethod
    def store_failed(
        operation: str,
        kind: RecordKind,
        error_message: str,
        correlation_id: Optional[UUID] = None,
        record_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=_STORE_FAILURES[operation],
            severity=AuditSeverity.ERROR,
            entity_type=kind.value,
            entity_id=record_id,
            correlation_id=correlation_id,
            description=f"{operation.capitalize()} failed for {kind.value}",
            details={"operation": operation},
            error_message=error_message,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )

    @staticmethod
    def external_service_error(
        service: str,
        error_message: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXTERNAL_SERVICE_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"External service error: {service}",
            error_message=error_message,
            details={
                "service": service,
            },
            correlation_id=correlation_id,
        )
