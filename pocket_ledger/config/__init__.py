"""Configuration package."""

from pocket_ledger.config.settings import (
    AppSettings,
    GoogleSheetsSettings,
    LedgerSettings,
    OCRSettings,
    ScanSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "GoogleSheetsSettings",
    "LedgerSettings",
    "OCRSettings",
    "ScanSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
