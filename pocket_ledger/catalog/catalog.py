"""
Category Catalog

Merges the fixed built-in categories with the categories the user added
into one selectable set.

DESIGN DECISION: The catalog is an ordinary object, constructed once at
startup and handed to whoever needs it. There is no module-level
instance.

The catalog only matters when an expense is CREATED or EDITED. Existing
expenses keep the emoji + name text they were saved with; the catalog
never rewrites them, even if the matching category is gone.
"""

from typing import Optional, Union
from uuid import UUID

import structlog
from pydantic import BaseModel

from pocket_ledger.audit import AuditLogger, create_correlation_id
from pocket_ledger.models.records import BuiltInCategory, RecordKind, UserCategory
from pocket_ledger.services.storage import CategoryStoreInterface, StoreError
from pocket_ledger.validation import require_text


logger = structlog.get_logger(__name__)

CategorySelection = Union[BuiltInCategory, UserCategory]


class DisplayCategory(BaseModel):
    """Emoji + name as shown next to an expense."""

    emoji: str
    name: str

    @property
    def label(self) -> str:
        return f"{self.emoji} {self.name}"


class CategoryCatalog:
    """
    Built-in categories plus the user's own, in that order.

    User categories are append-only: there is no edit or delete.
    """

    def __init__(
        self,
        store: CategoryStoreInterface,
        categories: Optional[list[UserCategory]] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._audit_logger = audit_logger
        self._user_categories: list[UserCategory] = list(categories or [])

    @property
    def user_categories(self) -> list[UserCategory]:
        return list(self._user_categories)

    async def load(self) -> list[UserCategory]:
        """Reload user categories from the store."""
        self._user_categories = await self._store.fetch_all()
        logger.debug("categories_loaded", count=len(self._user_categories))
        return self.user_categories

    def all_choices(self) -> list[CategorySelection]:
        return [*BuiltInCategory, *self._user_categories]

    @staticmethod
    def resolve(stored_emoji: str, stored_name: str) -> DisplayCategory:
        """Display category of an existing expense: exactly what was stored."""
        return DisplayCategory(emoji=stored_emoji, name=stored_name)

    @staticmethod
    def select(choice: CategorySelection) -> DisplayCategory:
        """Emoji + name to store on a new or edited expense."""
        if isinstance(choice, BuiltInCategory):
            return DisplayCategory(emoji=choice.emoji, name=choice.label)
        if isinstance(choice, UserCategory):
            return DisplayCategory(emoji=choice.emoji, name=choice.name)
        raise TypeError(f"Not a category: {choice!r}")

    @staticmethod
    def match_builtin(emoji: str, name: str) -> Optional[BuiltInCategory]:
        """The built-in category an expense was saved with, if any."""
        label = f"{emoji} {name}"
        for category in BuiltInCategory:
            if category.value == label:
                return category
        return None

    async def add_category(
        self,
        name: str,
        emoji: str,
        correlation_id: Optional[UUID] = None,
    ) -> UserCategory:
        """
        Add a user category.

        Both fields are trimmed and must be non-empty; otherwise
        ValidationError(EMPTY_FIELD) is raised and the catalog is unchanged.
        Duplicates of an existing (name, emoji) pair are allowed.
        """
        trimmed_name = require_text(name, "name")
        trimmed_emoji = require_text(emoji, "emoji")

        category = UserCategory(name=trimmed_name, emoji=trimmed_emoji)
        correlation_id = correlation_id or create_correlation_id()
        try:
            await self._store.insert(category)
        except StoreError as e:
            if self._audit_logger:
                await self._audit_logger.log_store_failed(
                    operation="save",
                    kind=RecordKind.CATEGORY,
                    error_message=str(e),
                    correlation_id=correlation_id,
                    record_id=category.id,
                )
            raise
        self._user_categories.append(category)

        logger.info(
            "category_added",
            category_id=category.id,
            total=len(self._user_categories),
        )
        if self._audit_logger:
            await self._audit_logger.log_category_added(category, correlation_id)
        return category
