"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets can back the record store because:
1. Users can view and export their ledger directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)

TRADEOFFS:
- Not suitable for high-volume data (we're fine for personal use)
- No transactions (an update rewrites the whole row in one call)
- No query capabilities (the ledger engine filters in Python anyway)

The implementation follows the abstract interfaces, so the engine never
knows which backend it is talking to.
"""

import json
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional
from uuid import UUID

import gspread
import structlog
from google.oauth2.service_account import Credentials
from tenacity import (
    retry,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from pocket_ledger.config import get_settings
from pocket_ledger.models.audit import AuditEvent, AuditEventType, AuditSeverity
from pocket_ledger.models.records import Expense, Income, RecordKind, UserCategory
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


logger = structlog.get_logger(__name__)

EXPENSE_COLUMNS = ["id", "emoji", "name", "amount", "date", "note"]
INCOME_COLUMNS = ["id", "amount", "date", "note"]
CATEGORY_COLUMNS = ["id", "name", "emoji"]
AUDIT_COLUMNS = [
    "event_id",
    "timestamp",
    "event_type",
    "severity",
    "entity_type",
    "entity_id",
    "correlation_id",
    "description",
    "details_json",
    "error_message",
    "is_user_action",
]

# Transport errors are retried; a missing or duplicate row is not.
store_retry = retry(
    retry=retry_if_not_exception_type((NotFoundError, DuplicateError)),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    reraise=True,
)


def _safe_get(row: list, index: int, default: str = "") -> str:
    try:
        return row[index] if row[index] else default
    except IndexError:
        return default


def _parse_date(value: str) -> Optional[datetime]:
    """Unreadable dates become None; the ledger keeps such rows unfiltered."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise StoreConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise StoreConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise StoreConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def _get_or_create(self, title: str, columns: list[str], rows: int) -> gspread.Worksheet:
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=title,
                rows=rows,
                cols=len(columns),
            )
            sheet.append_row(columns)
        return sheet

    def get_records_sheet(self, kind: RecordKind) -> gspread.Worksheet:
        """Get or create the worksheet for expenses or incomes."""
        if kind == RecordKind.EXPENSE:
            return self._get_or_create(
                self._settings.expenses_sheet_name, EXPENSE_COLUMNS, 1000
            )
        if kind == RecordKind.INCOME:
            return self._get_or_create(
                self._settings.incomes_sheet_name, INCOME_COLUMNS, 1000
            )
        raise StoreError(f"Record store does not hold kind: {kind.value}")

    def get_categories_sheet(self) -> gspread.Worksheet:
        """Get or create the Categories worksheet."""
        return self._get_or_create(
            self._settings.categories_sheet_name, CATEGORY_COLUMNS, 200
        )

    def get_audit_sheet(self) -> gspread.Worksheet:
        """Get or create the Audit worksheet."""
        return self._get_or_create(
            self._settings.audit_sheet_name, AUDIT_COLUMNS, 5000
        )


class GoogleSheetsRecordStore(RecordStoreInterface):
    """
    Google Sheets implementation of the record store.

    Expenses and incomes live on separate worksheets, one record per row.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    @staticmethod
    def _kind_of(record: LedgerRecord) -> RecordKind:
        return RecordKind.EXPENSE if isinstance(record, Expense) else RecordKind.INCOME

    @staticmethod
    def _record_to_row(record: LedgerRecord) -> list:
        """Convert a record to a spreadsheet row."""
        date_text = record.date.isoformat() if record.date else ""
        if isinstance(record, Expense):
            return [
                record.id,
                record.emoji,
                record.name,
                str(record.amount),
                date_text,
                record.note,
            ]
        return [
            record.id,
            str(record.amount),
            date_text,
            record.note,
        ]

    @staticmethod
    def _row_to_record(kind: RecordKind, row: list) -> LedgerRecord:
        """Convert a spreadsheet row to a record."""
        if kind == RecordKind.EXPENSE:
            return Expense(
                id=_safe_get(row, 0),
                emoji=_safe_get(row, 1),
                name=_safe_get(row, 2),
                amount=Decimal(_safe_get(row, 3, "0")),
                date=_parse_date(_safe_get(row, 4)),
                note=_safe_get(row, 5),
            )
        return Income(
            id=_safe_get(row, 0),
            amount=Decimal(_safe_get(row, 1, "0")),
            date=_parse_date(_safe_get(row, 2)),
            note=_safe_get(row, 3),
        )

    def _find_row(self, sheet: gspread.Worksheet, identifier: str) -> Optional[int]:
        all_rows = sheet.get_all_values()
        # Row 1 is the header
        for idx, row in enumerate(all_rows[1:], start=2):
            if row and row[0] == identifier:
                return idx
        return None

    @store_retry
    async def fetch_all(self, kind: RecordKind) -> list[LedgerRecord]:
        """Fetch every record of one kind."""
        try:
            sheet = self._client.get_records_sheet(kind)
            all_rows = sheet.get_all_values()[1:]  # Skip header
        except StoreError:
            raise
        except Exception as e:
            raise StoreError(f"Failed to fetch {kind.value} records: {e}")

        records = []
        for row in all_rows:
            if not row or not row[0]:  # Skip empty rows
                continue
            try:
                records.append(self._row_to_record(kind, row))
            except (InvalidOperation, ValueError) as e:
                logger.warning(
                    "malformed_row_skipped",
                    kind=kind.value,
                    record_id=row[0],
                    error=str(e),
                )
        return records

    @store_retry
    async def insert(self, record: LedgerRecord) -> None:
        """Append a record as a new row."""
        try:
            sheet = self._client.get_records_sheet(self._kind_of(record))
            if self._find_row(sheet, record.id) is not None:
                raise DuplicateError(f"Record already exists: {record.id}")
            sheet.append_row(self._record_to_row(record), value_input_option="RAW")
        except StoreError:
            raise
        except Exception as e:
            raise StoreError(f"Failed to save record: {e}")

    @store_retry
    async def update(self, record: LedgerRecord) -> None:
        """Rewrite the record's row in a single range update."""
        try:
            sheet = self._client.get_records_sheet(self._kind_of(record))
            idx = self._find_row(sheet, record.id)
            if idx is None:
                raise NotFoundError(f"Record not found: {record.id}")
            sheet.update(
                range_name=f"A{idx}",
                values=[self._record_to_row(record)],
                value_input_option="RAW",
            )
        except StoreError:
            raise
        except Exception as e:
            raise StoreError(f"Failed to update record: {e}")

    @store_retry
    async def delete(self, identifier: str) -> None:
        """Delete a record's row, looking in both worksheets."""
        try:
            for kind in (RecordKind.EXPENSE, RecordKind.INCOME):
                sheet = self._client.get_records_sheet(kind)
                idx = self._find_row(sheet, identifier)
                if idx is not None:
                    sheet.delete_rows(idx)
                    return
        except StoreError:
            raise
        except Exception as e:
            raise StoreError(f"Failed to delete record: {e}")

        raise NotFoundError(f"Record not found: {identifier}")


class GoogleSheetsCategoryStore(CategoryStoreInterface):
    """Google Sheets implementation of the user category catalog."""

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    @store_retry
    async def fetch_all(self) -> list[UserCategory]:
        try:
            sheet = self._client.get_categories_sheet()
            all_rows = sheet.get_all_values()[1:]
        except StoreError:
            raise
        except Exception as e:
            raise StoreError(f"Failed to fetch categories: {e}")

        return [
            UserCategory(
                id=_safe_get(row, 0),
                name=_safe_get(row, 1),
                emoji=_safe_get(row, 2, "🔖"),
            )
            for row in all_rows
            if row and row[0]
        ]

    @store_retry
    async def insert(self, category: UserCategory) -> None:
        try:
            sheet = self._client.get_categories_sheet()
            sheet.append_row(
                [category.id, category.name, category.emoji],
                value_input_option="RAW",
            )
        except StoreError:
            raise
        except Exception as e:
            raise StoreError(f"Failed to save category: {e}")


class GoogleSheetsAuditStorage(AuditStorageInterface):
    """
    Google Sheets implementation of audit log storage.

    Audit events are append-only.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _row_to_event(self, row: list) -> AuditEvent:
        """Convert a spreadsheet row to an AuditEvent."""
        return AuditEvent(
            event_id=UUID(_safe_get(row, 0)),
            timestamp=datetime.fromisoformat(_safe_get(row, 1)),
            event_type=AuditEventType(_safe_get(row, 2)),
            severity=AuditSeverity(_safe_get(row, 3)),
            entity_type=_safe_get(row, 4) or None,
            entity_id=_safe_get(row, 5) or None,
            correlation_id=UUID(_safe_get(row, 6)) if _safe_get(row, 6) else None,
            description=_safe_get(row, 7),
            details=json.loads(_safe_get(row, 8)) if _safe_get(row, 8) else {},
            error_message=_safe_get(row, 9) or None,
            is_user_action=_safe_get(row, 10).lower() == "true",
        )

    def _all_events(self) -> list[AuditEvent]:
        try:
            sheet = self._client.get_audit_sheet()
            all_rows = sheet.get_all_values()[1:]
        except Exception as e:
            raise StoreError(f"Failed to get audit events: {e}")

        events = []
        for row in all_rows:
            if not row or not row[0]:
                continue
            try:
                events.append(self._row_to_event(row))
            except ValueError:
                continue
        return events

    async def append_event(self, event: AuditEvent) -> bool:
        """Append an audit event."""
        try:
            sheet = self._client.get_audit_sheet()
            sheet.append_row(event.to_sheets_row(), value_input_option="RAW")
            return True
        except Exception as e:
            # Audit logging must not break the main flow
            logger.warning("audit_event_write_failed", error=str(e))
            return False

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """Get events by correlation ID."""
        events = [e for e in self._all_events() if e.correlation_id == correlation_id]
        events.sort(key=lambda e: e.timestamp)
        return events

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """Get recent events."""
        events = self._all_events()
        events.sort(key=lambda e: e.timestamp, reverse=True)
        return events[:limit]
