"""Category catalog package."""

from pocket_ledger.catalog.catalog import (
    CategoryCatalog,
    CategorySelection,
    DisplayCategory,
)

__all__ = ["CategoryCatalog", "CategorySelection", "DisplayCategory"]
