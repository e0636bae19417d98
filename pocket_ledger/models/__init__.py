"""
Data Models Package

This package contains all Pydantic models used in Pocket Ledger.
Records, derived ledger rows, statistics results and audit events.
"""

from pocket_ledger.models.records import (
    BuiltInCategory,
    Expense,
    Income,
    RecordKind,
    UserCategory,
    new_record_id,
)
from pocket_ledger.models.ledger import (
    INCOME_EMOJI,
    INCOME_TITLE,
    Period,
    TransactionColor,
    TransactionItem,
    format_amount,
)
from pocket_ledger.models.stats import (
    BillLine,
    CategoryTotal,
    ComparisonBar,
    DailyPoint,
    MonthReport,
    PeriodTotals,
    ScanResult,
)
from pocket_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Records
    "BuiltInCategory",
    "Expense",
    "Income",
    "RecordKind",
    "UserCategory",
    "new_record_id",
    # Ledger
    "INCOME_EMOJI",
    "INCOME_TITLE",
    "Period",
    "TransactionColor",
    "TransactionItem",
    "format_amount",
    # Statistics
    "BillLine",
    "CategoryTotal",
    "ComparisonBar",
    "DailyPoint",
    "MonthReport",
    "PeriodTotals",
    "ScanResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
