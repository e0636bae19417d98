"""
Storage Services Package

Provides abstract interfaces and concrete implementations for record storage.
The in-memory backend is the default; Google Sheets is optional.
"""

from pocket_ledger.services.storage.interface import (
    AuditStorageInterface,
    CategoryStoreInterface,
    DuplicateError,
    LedgerRecord,
    NotFoundError,
    RecordStoreInterface,
    StoreConnectionError,
    StoreError,
)
from pocket_ledger.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryCategoryStore,
    InMemoryRecordStore,
)
from pocket_ledger.services.storage.google_sheets import (
    GoogleSheetsAuditStorage,
    GoogleSheetsCategoryStore,
    GoogleSheetsClient,
    GoogleSheetsRecordStore,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "CategoryStoreInterface",
    "LedgerRecord",
    "RecordStoreInterface",
    # Exceptions
    "DuplicateError",
    "NotFoundError",
    "StoreConnectionError",
    "StoreError",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryCategoryStore",
    "InMemoryRecordStore",
    # Google Sheets implementation
    "GoogleSheetsAuditStorage",
    "GoogleSheetsCategoryStore",
    "GoogleSheetsClient",
    "GoogleSheetsRecordStore",
]
