"""
Main Orchestrator for Pocket Ledger

This module ties together all the components and defines the
end-to-end flows for:
1. Entry (amount text -> validate -> record -> store)
2. Ledger (load -> merge -> period filter -> search, delete by position)
3. Statistics (month report, recent month selector)
4. Bill scan (page images -> OCR -> extract -> expenses -> store)

DESIGN DECISION: The engine functions stay pure. Everything that talks
to a store, the recognizer or the audit log lives here:
- Input is validated before anything is written
- An edited record changes only after the store accepted the change
- Every step is audited
"""

from datetime import datetime
from typing import Awaitable, NamedTuple, Optional, Union
from uuid import UUID

import structlog
from pydantic import ValidationError as SettingsError

from pocket_ledger.audit import AuditLogger, configure_logging, create_correlation_id
from pocket_ledger.catalog import CategoryCatalog, CategorySelection
from pocket_ledger.config import get_settings
from pocket_ledger.extraction import extract, join_pages
from pocket_ledger.ledger import delete, is_in_period, ledger_view, merge, recent_months, start_of_month
from pocket_ledger.models import (
    Expense,
    Income,
    MonthReport,
    Period,
    PeriodTotals,
    RecordKind,
    ScanResult,
    TransactionItem,
)
from pocket_ledger.services.ocr import OCRError, TesseractTextRecognizer, TextRecognizerInterface
from pocket_ledger.services.storage import (
    CategoryStoreInterface,
    GoogleSheetsAuditStorage,
    GoogleSheetsCategoryStore,
    GoogleSheetsClient,
    GoogleSheetsRecordStore,
    InMemoryAuditStorage,
    InMemoryCategoryStore,
    InMemoryRecordStore,
    RecordStoreInterface,
    StoreError,
)
from pocket_ledger.stats import (
    category_breakdown,
    comparison,
    daily_series,
    month_totals,
    overall_totals,
    totals,
)
from pocket_ledger.validation import ValidationError, parse_amount


logger = structlog.get_logger(__name__)


class _AuditedFlow:
    """Shared audit plumbing for the flows below."""

    def __init__(self, audit_logger: Optional[AuditLogger] = None):
        self._audit_logger = audit_logger

    async def _parse_amount(self, amount_text: str, correlation_id: UUID):
        try:
            return parse_amount(amount_text)
        except ValidationError as e:
            if self._audit_logger:
                await self._audit_logger.log_validation_failed(e, correlation_id)
            raise

    async def _store_call(
        self,
        call: Awaitable,
        operation: str,
        kind: RecordKind,
        correlation_id: UUID,
        record_id: Optional[str] = None,
    ):
        try:
            return await call
        except StoreError as e:
            if self._audit_logger:
                await self._audit_logger.log_store_failed(
                    operation=operation,
                    kind=kind,
                    error_message=str(e),
                    correlation_id=correlation_id,
                    record_id=record_id,
                )
            raise


class EntryFlow(_AuditedFlow):
    """
    Orchestrates adding and editing expenses and incomes.

    Amounts arrive as text from the entry form. Bad input raises
    ValidationError before any record is built or stored.
    """

    def __init__(
        self,
        record_store: RecordStoreInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        super().__init__(audit_logger)
        self._record_store = record_store

    async def add_expense(
        self,
        amount_text: str,
        category: CategorySelection,
        date: Optional[datetime] = None,
        note: str = "",
        correlation_id: Optional[UUID] = None,
    ) -> Expense:
        """
        Create and store an expense.

        The category's emoji and name are copied onto the expense, so
        later changes to the catalog never touch it.
        """
        correlation_id = correlation_id or create_correlation_id()

        amount = await self._parse_amount(amount_text, correlation_id)
        chosen = CategoryCatalog.select(category)

        expense = Expense(
            emoji=chosen.emoji,
            name=chosen.name,
            amount=amount,
            date=date or datetime.now(),
            note=note or "",
        )
        await self._store_call(
            self._record_store.insert(expense),
            "save",
            RecordKind.EXPENSE,
            correlation_id,
            expense.id,
        )

        if self._audit_logger:
            await self._audit_logger.log_record_added(expense, correlation_id)
        return expense

    async def add_income(
        self,
        amount_text: str,
        date: Optional[datetime] = None,
        note: str = "",
        correlation_id: Optional[UUID] = None,
    ) -> Income:
        """Create and store an income."""
        correlation_id = correlation_id or create_correlation_id()

        amount = await self._parse_amount(amount_text, correlation_id)
        income = Income(amount=amount, date=date or datetime.now(), note=note or "")
        await self._store_call(
            self._record_store.insert(income),
            "save",
            RecordKind.INCOME,
            correlation_id,
            income.id,
        )

        if self._audit_logger:
            await self._audit_logger.log_record_added(income, correlation_id)
        return income

    async def update_expense(
        self,
        expense: Expense,
        amount_text: str,
        category: CategorySelection,
        date: datetime,
        note: str,
        correlation_id: Optional[UUID] = None,
    ) -> Expense:
        """
        Edit an expense in place.

        Every mutable field is rewritten at once. `expense` is only
        modified once the store has accepted the new version; on any
        error it is left exactly as it was.
        """
        correlation_id = correlation_id or create_correlation_id()

        amount = await self._parse_amount(amount_text, correlation_id)
        chosen = CategoryCatalog.select(category)
        changes = {
            "emoji": chosen.emoji,
            "name": chosen.name,
            "amount": amount,
            "date": date,
            "note": note or "",
        }

        return await self._apply_update(expense, changes, RecordKind.EXPENSE, correlation_id)

    async def update_income(
        self,
        income: Income,
        amount_text: str,
        date: datetime,
        note: str,
        correlation_id: Optional[UUID] = None,
    ) -> Income:
        """Edit an income in place. Same rules as update_expense()."""
        correlation_id = correlation_id or create_correlation_id()

        amount = await self._parse_amount(amount_text, correlation_id)
        changes = {"amount": amount, "date": date, "note": note or ""}

        return await self._apply_update(income, changes, RecordKind.INCOME, correlation_id)

    async def _apply_update(
        self,
        record: Union[Expense, Income],
        changes: dict,
        kind: RecordKind,
        correlation_id: UUID,
    ) -> Union[Expense, Income]:
        updated = type(record).model_validate({**record.model_dump(), **changes})
        await self._store_call(
            self._record_store.update(updated),
            "save",
            kind,
            correlation_id,
            record.id,
        )

        for field, value in changes.items():
            setattr(record, field, value)

        if self._audit_logger:
            await self._audit_logger.log_record_updated(record, correlation_id)
        return record


class LedgerFlow(_AuditedFlow):
    """
    Orchestrates the ledger screen.

    Holds the records from the last load(). Call load() again after
    entries or scans to pick up their records.
    """

    def __init__(
        self,
        record_store: RecordStoreInterface,
        audit_logger: Optional[AuditLogger] = None,
        first_weekday: Optional[int] = None,
    ):
        super().__init__(audit_logger)
        self._record_store = record_store
        self._first_weekday = first_weekday
        self._expenses: list[Expense] = []
        self._incomes: list[Income] = []

    @property
    def expenses(self) -> list[Expense]:
        return list(self._expenses)

    @property
    def incomes(self) -> list[Income]:
        return list(self._incomes)

    async def load(self, correlation_id: Optional[UUID] = None) -> list[TransactionItem]:
        """Fetch every expense and income and return the full ledger."""
        correlation_id = correlation_id or create_correlation_id()

        self._expenses = await self._store_call(
            self._record_store.fetch_all(RecordKind.EXPENSE),
            "fetch",
            RecordKind.EXPENSE,
            correlation_id,
        )
        self._incomes = await self._store_call(
            self._record_store.fetch_all(RecordKind.INCOME),
            "fetch",
            RecordKind.INCOME,
            correlation_id,
        )

        logger.debug(
            "ledger_loaded",
            expenses=len(self._expenses),
            incomes=len(self._incomes),
        )
        return merge(self._expenses, self._incomes)

    def view(
        self,
        period: Period,
        reference: Optional[datetime] = None,
        query: Optional[str] = None,
    ) -> list[TransactionItem]:
        """Rows for the selected day / week / month, narrowed by `query`."""
        return ledger_view(
            self._expenses,
            self._incomes,
            period,
            reference or datetime.now(),
            query,
            self._first_weekday,
        )

    async def delete_at(
        self,
        items: list[TransactionItem],
        index: int,
        correlation_id: Optional[UUID] = None,
    ) -> list[TransactionItem]:
        """
        Delete the row at `index` of `items` (the ledger as shown).

        Returns the remaining rows. Raises IndexError for a bad position,
        in which case nothing is deleted.
        """
        correlation_id = correlation_id or create_correlation_id()

        record, remaining = delete(items, index)
        kind = RecordKind.EXPENSE if isinstance(record, Expense) else RecordKind.INCOME
        await self._store_call(
            self._record_store.delete(record.id),
            "delete",
            kind,
            correlation_id,
            record.id,
        )

        self._expenses = [e for e in self._expenses if e.id != record.id]
        self._incomes = [i for i in self._incomes if i.id != record.id]

        if self._audit_logger:
            await self._audit_logger.log_record_deleted(record, correlation_id)
        return remaining

    def overview(self) -> PeriodTotals:
        """All-time income, expense and balance."""
        return overall_totals(self._expenses, self._incomes)


class StatsFlow:
    """Builds the statistics screen from the records a LedgerFlow holds."""

    def __init__(self, ledger: LedgerFlow, first_weekday: Optional[int] = None):
        self._ledger = ledger
        self._first_weekday = first_weekday

    def period_totals(
        self,
        period: Period,
        reference: Optional[datetime] = None,
    ) -> PeriodTotals:
        return totals(
            self._ledger.expenses,
            self._ledger.incomes,
            period,
            reference or datetime.now(),
            self._first_weekday,
        )

    def month_report(self, month: Optional[datetime] = None) -> MonthReport:
        """
        Totals, comparison bars, category breakdown and daily series for
        one calendar month.

        Breakdown and daily series only count that month's expenses.
        """
        first_day = start_of_month(month or datetime.now())
        month_expenses = [
            e for e in self._ledger.expenses
            if is_in_period(e.date, Period.MONTH, first_day)
        ]
        month_sums = month_totals(self._ledger.expenses, self._ledger.incomes, first_day)

        return MonthReport(
            month=first_day,
            totals=month_sums,
            comparison=comparison(month_sums),
            breakdown=category_breakdown(month_expenses),
            daily=daily_series(month_expenses),
        )

    def recent_months(self, reference: Optional[datetime] = None, count: Optional[int] = None):
        """Months offered by the month selector, oldest first."""
        return recent_months(reference or datetime.now(), count)


class ScanFlow(_AuditedFlow):
    """
    Orchestrates the bill scan.

    Flow:
    1. Recognize text on each page (unreadable pages are skipped)
    2. Join the pages and extract item/price lines
    3. Store one expense per line, dated now
    """

    def __init__(
        self,
        record_store: RecordStoreInterface,
        recognizer: Optional[TextRecognizerInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        super().__init__(audit_logger)
        self._record_store = record_store
        self._recognizer = recognizer
        self._settings = get_settings().scan

    async def scan_pages(
        self,
        images: list[bytes],
        correlation_id: Optional[UUID] = None,
    ) -> ScanResult:
        """OCR each page image, then add its lines as expenses."""
        correlation_id = correlation_id or create_correlation_id()
        recognizer = self._recognizer or TesseractTextRecognizer()

        texts = []
        failed = 0
        for index, image in enumerate(images):
            try:
                texts.append(await recognizer.recognize(image))
            except OCRError as e:
                failed += 1
                logger.warning("scan_page_skipped", page=index, error=str(e))
                if self._audit_logger:
                    await self._audit_logger.log_ocr_page_failed(index, str(e), correlation_id)

        return await self._add_lines(
            join_pages(texts),
            correlation_id,
            pages_read=len(texts),
            pages_failed=failed,
        )

    async def add_from_text(
        self,
        text: str,
        correlation_id: Optional[UUID] = None,
    ) -> ScanResult:
        """Add expenses from already recognized bill text."""
        correlation_id = correlation_id or create_correlation_id()
        return await self._add_lines(text, correlation_id, pages_read=1 if text else 0)

    async def _add_lines(
        self,
        text: str,
        correlation_id: UUID,
        pages_read: int,
        pages_failed: int = 0,
    ) -> ScanResult:
        lines = extract(text)
        scanned_at = datetime.now()

        created = []
        # A failed insert stops the batch; expenses stored before it stay
        for line in lines:
            expense = Expense(
                emoji=self._settings.receipt_emoji,
                name=line.item_name,
                amount=line.price,
                date=scanned_at,
                note=self._settings.scan_note,
            )
            await self._store_call(
                self._record_store.insert(expense),
                "save",
                RecordKind.EXPENSE,
                correlation_id,
                expense.id,
            )
            created.append(expense)
            if self._audit_logger:
                await self._audit_logger.log_record_added(expense, correlation_id)

        if self._audit_logger:
            await self._audit_logger.log_scan_completed(
                page_count=pages_read + pages_failed,
                lines_found=len(lines),
                correlation_id=correlation_id,
            )

        return ScanResult(expenses=created, pages_read=pages_read, pages_failed=pages_failed)


class AppComponents(NamedTuple):
    entry: EntryFlow
    ledger: LedgerFlow
    stats: StatsFlow
    scan: ScanFlow
    catalog: CategoryCatalog


def _create_stores() -> tuple[RecordStoreInterface, CategoryStoreInterface, AuditLogger]:
    if get_settings().app.storage_backend == "google_sheets":
        try:
            sheets_client = GoogleSheetsClient()
            sheets_client.connect()
            return (
                GoogleSheetsRecordStore(sheets_client),
                GoogleSheetsCategoryStore(sheets_client),
                AuditLogger(GoogleSheetsAuditStorage(sheets_client)),
            )
        except (StoreError, SettingsError) as e:
            # Storage not configured - continue in memory
            logger.warning("sheets_storage_unavailable", error=str(e))

    return InMemoryRecordStore(), InMemoryCategoryStore(), AuditLogger(InMemoryAuditStorage())


def create_app_components(
    recognizer: Optional[TextRecognizerInterface] = None,
) -> AppComponents:
    """
    Factory function to create all application components.

    The record store follows APP storage_backend. Google Sheets falls back
    to in-memory stores when it cannot be reached.
    """
    settings = get_settings()
    configure_logging(settings.app.log_level)

    record_store, category_store, audit_logger = _create_stores()
    first_weekday = settings.ledger.first_weekday

    ledger = LedgerFlow(record_store, audit_logger, first_weekday)
    return AppComponents(
        entry=EntryFlow(record_store, audit_logger),
        ledger=ledger,
        stats=StatsFlow(ledger, first_weekday),
        scan=ScanFlow(record_store, recognizer, audit_logger),
        catalog=CategoryCatalog(category_store, audit_logger=audit_logger),
    )
