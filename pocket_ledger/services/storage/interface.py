"""
Abstract Storage Interface

DESIGN DECISION: The ledger engine never talks to a database directly.
It goes through these narrow interfaces, which allows us to:
1. Swap Google Sheets for an on-device store or a real database
2. Use in-memory storage for testing
3. Keep ledger and statistics logic free of persistence concerns

The record store contract is fetch-all / insert / update / delete.
The category catalog's contract is a strict subset (fetch-all / insert).
"""

from abc import ABC, abstractmethod
from typing import Union
from uuid import UUID

from pocket_ledger.models.audit import AuditEvent
from pocket_ledger.models.records import Expense, Income, RecordKind, UserCategory


LedgerRecord = Union[Expense, Income]


class RecordStoreInterface(ABC):
    """
    Abstract interface for expense and income storage.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    async def fetch_all(self, kind: RecordKind) -> list[LedgerRecord]:
        """
        Fetch every record of one kind.

        Args:
            kind: RecordKind.EXPENSE or RecordKind.INCOME

        Returns:
            All stored records of that kind, in storage order

        Raises:
            StoreError: If the fetch fails
        """
        pass

    @abstractmethod
    async def insert(self, record: LedgerRecord) -> None:
        """
        Insert a new record.

        Raises:
            DuplicateError: If a record with the same id exists
            StoreError: If the write fails
        """
        pass

    @abstractmethod
    async def update(self, record: LedgerRecord) -> None:
        """
        Rewrite every field of an existing record.

        Either all fields are written or none are.

        Raises:
            NotFoundError: If the record doesn't exist
            StoreError: If the write fails
        """
        pass

    @abstractmethod
    async def delete(self, identifier: str) -> None:
        """
        Delete a record by id.

        Raises:
            NotFoundError: If no record has this id
            StoreError: If the delete fails
        """
        pass


class CategoryStoreInterface(ABC):
    """
    Abstract interface for the user category catalog.

    Append-only: categories are never edited or deleted.
    """

    @abstractmethod
    async def fetch_all(self) -> list[UserCategory]:
        """Fetch every user category, in insertion order."""
        pass

    @abstractmethod
    async def insert(self, category: UserCategory) -> None:
        """
        Append a category. No uniqueness check on (name, emoji).

        Raises:
            StoreError: If the write fails
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID (e.g., one bill scan).

        Returns:
            List of related events in chronological order
        """
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StoreError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StoreError):
    """Entity not found in storage."""
    pass


class DuplicateError(StoreError):
    """Attempted to insert a duplicate entity."""
    pass


class StoreConnectionError(StoreError):
    """Could not connect to storage backend."""
    pass
