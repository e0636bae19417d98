"""
In-Memory Storage Implementation

The default backend for local use and the one every test runs against.
Records live in insertion-ordered lists, one per kind.

Stored objects are copies: callers can mutate their own instance freely
and nothing changes in the store until update() succeeds.
"""

from typing import Optional
from uuid import UUID

from pocket_ledger.models.audit import AuditEvent
from pocket_ledger.models.records import Expense, Income, RecordKind, UserCategory
from pocket_ledger.services.storage.interface import (
    AuditStorageInterface,
    CategoryStoreInterface,
    DuplicateError,
    LedgerRecord,
    NotFoundError,
    RecordStoreInterface,
    StoreError,
)


def _kind_of(record: LedgerRecord) -> RecordKind:
    if isinstance(record, Expense):
        return RecordKind.EXPENSE
    if isinstance(record, Income):
        return RecordKind.INCOME
    raise StoreError(f"Unsupported record type: {type(record).__name__}")


class InMemoryRecordStore(RecordStoreInterface):
    """Expense and income storage held in process memory."""

    def __init__(
        self,
        expenses: Optional[list[Expense]] = None,
        incomes: Optional[list[Income]] = None,
    ):
        self._records: dict[RecordKind, list[LedgerRecord]] = {
            RecordKind.EXPENSE: [e.model_copy() for e in expenses or []],
            RecordKind.INCOME: [i.model_copy() for i in incomes or []],
        }

    def _table(self, kind: RecordKind) -> list[LedgerRecord]:
        try:
            return self._records[kind]
        except KeyError:
            raise StoreError(f"Record store does not hold kind: {kind.value}")

    def _find(self, identifier: str) -> tuple[list[LedgerRecord], int]:
        for table in self._records.values():
            for idx, stored in enumerate(table):
                if stored.id == identifier:
                    return table, idx
        raise NotFoundError(f"Record not found: {identifier}")

    async def fetch_all(self, kind: RecordKind) -> list[LedgerRecord]:
        return [record.model_copy() for record in self._table(kind)]

    async def insert(self, record: LedgerRecord) -> None:
        table = self._table(_kind_of(record))
        if any(stored.id == record.id for stored in table):
            raise DuplicateError(f"Record already exists: {record.id}")
        table.append(record.model_copy())

    async def update(self, record: LedgerRecord) -> None:
        table, idx = self._find(record.id)
        if _kind_of(table[idx]) != _kind_of(record):
            raise StoreError(f"Cannot change the kind of record {record.id}")
        table[idx] = record.model_copy()

    async def delete(self, identifier: str) -> None:
        table, idx = self._find(identifier)
        del table[idx]


class InMemoryCategoryStore(CategoryStoreInterface):
    """User categories held in process memory."""

    def __init__(self, categories: Optional[list[UserCategory]] = None):
        self._categories = [c.model_copy() for c in categories or []]

    async def fetch_all(self) -> list[UserCategory]:
        return [category.model_copy() for category in self._categories]

    async def insert(self, category: UserCategory) -> None:
        self._categories.append(category.model_copy())


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only audit log held in process memory."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    @property
    def events(self) -> list[AuditEvent]:
        return list(self._events)

    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        events = [e for e in self._events if e.correlation_id == correlation_id]
        events.sort(key=lambda e: e.timestamp)
        return events

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        events = sorted(self._events, key=lambda e: e.timestamp, reverse=True)
        return events[:limit]
