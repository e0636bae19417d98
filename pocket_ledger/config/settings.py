"""
Configuration Management for Pocket Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see which collaborators (record store, OCR engine)
are wired in, and ensures the values are validated at startup.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerSettings(BaseSettings):
    """Calendar and presentation settings for ledger views."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        extra="ignore"
    )

    first_weekday: int = Field(
        default=0,
        ge=0,
        le=6,
        description="First day of the week (0=Monday ... 6=Sunday)"
    )
    currency_symbol: str = Field(
        default="₹",
        description="Symbol prefixed to formatted amounts"
    )
    recent_months: int = Field(
        default=12,
        ge=1,
        le=120,
        description="How many months the month selector offers"
    )


class ScanSettings(BaseSettings):
    """Settings for expenses created from scanned bills."""

    model_config = SettingsConfigDict(
        env_prefix="SCAN_",
        extra="ignore"
    )

    receipt_emoji: str = Field(
        default="🧾",
        min_length=1,
        description="Emoji stored on every scanned expense"
    )
    scan_note: str = Field(
        default="Scanned from bill",
        description="Note stored on every scanned expense"
    )


class OCRSettings(BaseSettings):
    """Tesseract OCR configuration."""

    model_config = SettingsConfigDict(
        env_prefix="OCR_",
        extra="ignore"
    )

    tesseract_cmd: Optional[str] = Field(
        default=None,
        description="Path to the tesseract binary (uses PATH when unset)"
    )
    language: str = Field(
        default="eng",
        description="Tesseract language code(s)"
    )


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        extra="ignore"
    )

    credentials_path: str = Field(
        ...,
        description="Path to Google service account credentials JSON"
    )
    spreadsheet_id: str = Field(
        ...,
        description="ID of the Google Sheets spreadsheet to use"
    )

    # Sheet names within the spreadsheet
    expenses_sheet_name: str = Field(
        default="Expenses",
        description="Name of the sheet for expenses"
    )
    incomes_sheet_name: str = Field(
        default="Incomes",
        description="Name of the sheet for incomes"
    )
    categories_sheet_name: str = Field(
        default="Categories",
        description="Name of the sheet for user categories"
    )
    audit_sheet_name: str = Field(
        default="AuditLog",
        description="Name of the sheet for audit logs"
    )

    @field_validator('credentials_path')
    @classmethod
    def validate_credentials_path(cls, v: str) -> str:
        """Warn if credentials file doesn't exist (but don't fail - might be mounted later)."""
        if not Path(v).exists():
            import warnings
            warnings.warn(
                f"Google credentials file not found at {v}. "
                "Make sure it exists before running the application."
            )
        return v


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level for local structured logs"
    )

    # Which record store backs the ledger
    storage_backend: str = Field(
        default="memory",
        pattern="^(memory|google_sheets)$",
        description="Record store backend"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Sub-settings are loaded lazily so a missing Google Sheets
    # configuration does not break the in-memory setup.

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def scan(self) -> ScanSettings:
        return ScanSettings()

    @property
    def ocr(self) -> OCRSettings:
        return OCRSettings()

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus a
    {setting_name}_error entry for every section that failed.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    sections = {
        "ledger": lambda: settings.ledger,
        "scan": lambda: settings.scan,
        "ocr": lambda: settings.ocr,
        "google_sheets": lambda: settings.google_sheets,
        "app": lambda: settings.app,
    }

    for name, load in sections.items():
        try:
            load()
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
