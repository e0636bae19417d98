"""Tests for the category catalog."""

import pytest

from pocket_ledger.audit import AuditLogger
from pocket_ledger.catalog import CategoryCatalog, DisplayCategory
from pocket_ledger.models import AuditEventType, BuiltInCategory, UserCategory
from pocket_ledger.services.storage import InMemoryAuditStorage, InMemoryCategoryStore, StoreError
from pocket_ledger.validation import ValidationError, ValidationReason


class FailingCategoryStore(InMemoryCategoryStore):
    async def insert(self, category):
        raise StoreError("sheet unavailable")


@pytest.fixture
def store():
    return InMemoryCategoryStore([UserCategory(name="Gym", emoji="🏋️")])


class TestCatalogChoices:
    """Tests for listing and resolving categories."""

    @pytest.mark.asyncio
    async def test_load(self, store):
        catalog = CategoryCatalog(store)
        assert catalog.user_categories == []

        loaded = await catalog.load()

        assert [c.name for c in loaded] == ["Gym"]

    @pytest.mark.asyncio
    async def test_builtins_come_first(self, store):
        catalog = CategoryCatalog(store)
        await catalog.load()

        choices = catalog.all_choices()

        assert choices[:len(BuiltInCategory)] == list(BuiltInCategory)
        assert choices[-1].name == "Gym"

    def test_resolve_is_pass_through(self):
        assert CategoryCatalog.resolve("🍔", "Food") == DisplayCategory(emoji="🍔", name="Food")

    def test_select_builtin(self):
        chosen = CategoryCatalog.select(BuiltInCategory.FUEL)
        assert chosen.emoji == "⛽"
        assert chosen.name == "Fuel"
        assert chosen.label == "⛽ Fuel"

    def test_select_user_category(self):
        chosen = CategoryCatalog.select(UserCategory(name="Pets", emoji="🐶"))
        assert chosen == DisplayCategory(emoji="🐶", name="Pets")

    def test_select_rejects_other_values(self):
        with pytest.raises(TypeError):
            CategoryCatalog.select("🍔 Food")

    def test_match_builtin(self):
        assert CategoryCatalog.match_builtin("🛒", "Groceries") == BuiltInCategory.GROCERIES

    def test_match_builtin_needs_exact_pair(self):
        assert CategoryCatalog.match_builtin("🛒", "groceries") is None
        assert CategoryCatalog.match_builtin("🍔", "Groceries") is None
        assert CategoryCatalog.match_builtin("🏋️", "Gym") is None


class TestAddCategory:
    """Tests for user-created categories."""

    @pytest.mark.asyncio
    async def test_add_is_selectable_and_stored(self, store):
        catalog = CategoryCatalog(store)

        category = await catalog.add_category("  Pizza ", " 🍕 ")

        assert category.name == "Pizza"
        assert category.emoji == "🍕"
        assert catalog.all_choices()[-1] == category
        assert [c.name for c in await store.fetch_all()] == ["Gym", "Pizza"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name,emoji", [("", "🍕"), ("   ", "🍕"), ("Pizza", ""), ("Pizza", "  ")])
    async def test_empty_fields_rejected(self, store, name, emoji):
        """Test nothing is added when a field is empty."""
        catalog = CategoryCatalog(store)
        await catalog.load()

        with pytest.raises(ValidationError) as exc_info:
            await catalog.add_category(name, emoji)

        assert exc_info.value.reason == ValidationReason.EMPTY_FIELD
        assert [c.name for c in catalog.user_categories] == ["Gym"]
        assert len(await store.fetch_all()) == 1

    @pytest.mark.asyncio
    async def test_duplicates_allowed(self, store):
        catalog = CategoryCatalog(store)
        await catalog.load()

        await catalog.add_category("Gym", "🏋️")

        assert [c.name for c in catalog.user_categories] == ["Gym", "Gym"]


class TestCategoryAudit:
    """Tests for audit events around category inserts."""

    @pytest.mark.asyncio
    async def test_added_category_is_audited(self, store):
        audit_storage = InMemoryAuditStorage()
        catalog = CategoryCatalog(store, audit_logger=AuditLogger(audit_storage))

        category = await catalog.add_category("Pizza", "🍕")

        event = audit_storage.events[0]
        assert [e.event_type for e in audit_storage.events] == [AuditEventType.CATEGORY_ADDED]
        assert event.entity_id == category.id
        assert event.details["summary"] == "🍕 Pizza"

    @pytest.mark.asyncio
    async def test_failed_insert_is_audited(self):
        """Test a store failure is logged and nothing is added."""
        audit_storage = InMemoryAuditStorage()
        catalog = CategoryCatalog(FailingCategoryStore(), audit_logger=AuditLogger(audit_storage))

        with pytest.raises(StoreError):
            await catalog.add_category("Pizza", "🍕")

        assert catalog.user_categories == []
        assert [e.event_type for e in audit_storage.events] == [AuditEventType.SAVE_FAILED]

    @pytest.mark.asyncio
    async def test_rejected_input_is_not_audited_as_added(self, store):
        audit_storage = InMemoryAuditStorage()
        catalog = CategoryCatalog(store, audit_logger=AuditLogger(audit_storage))

        with pytest.raises(ValidationError):
            await catalog.add_category("", "🍕")

        assert audit_storage.events == []
