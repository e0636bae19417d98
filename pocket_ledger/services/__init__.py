"""Services package."""

from pocket_ledger.services.ocr import (
    OCRError,
    TesseractTextRecognizer,
    TextRecognitionFailedError,
    TextRecognizerInterface,
)
from pocket_ledger.services.storage import (
    AuditStorageInterface,
    CategoryStoreInterface,
    DuplicateError,
    GoogleSheetsAuditStorage,
    GoogleSheetsCategoryStore,
    GoogleSheetsClient,
    GoogleSheetsRecordStore,
    InMemoryAuditStorage,
    InMemoryCategoryStore,
    InMemoryRecordStore,
    LedgerRecord,
    NotFoundError,
    RecordStoreInterface,
    StoreConnectionError,
    StoreError,
)

__all__ = [
    # OCR services
    "OCRError",
    "TesseractTextRecognizer",
    "TextRecognitionFailedError",
    "TextRecognizerInterface",
    # Storage services
    "AuditStorageInterface",
    "CategoryStoreInterface",
    "DuplicateError",
    "GoogleSheetsAuditStorage",
    "GoogleSheetsCategoryStore",
    "GoogleSheetsClient",
    "GoogleSheetsRecordStore",
    "InMemoryAuditStorage",
    "InMemoryCategoryStore",
    "InMemoryRecordStore",
    "LedgerRecord",
    "NotFoundError",
    "RecordStoreInterface",
    "StoreConnectionError",
    "StoreError",
]
