"""
Stampcard configuration.

Usage in settings.py:
    STAMPCARD = {
        "REWARD_THRESHOLD": 8,
        "STORAGE_BACKEND": "stampcard.adapters.file_storage.FileLedgerStorage",
        "LEDGER_PATH": BASE_DIR / "stampcard_ledger.json",
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass
class StampcardSettings:
    """Stampcard configuration settings."""

    # Stamps required per free item
    REWARD_THRESHOLD: int = 8

    # Program display
    BRAND: str = "MINIPAN COFFEE"
    SLOGAN: str = "Bite • Sip • Joy"
    CITY: str = "Riyadh"

    # Ledger storage backend (dotted path to a LedgerStorage)
    STORAGE_BACKEND: str = "stampcard.adapters.file_storage.FileLedgerStorage"
    LEDGER_PATH: str = "stampcard_ledger.json"
    CACHE_ALIAS: str = "default"
    CACHE_KEY: str = "loyalty_demo_users"

    # Insert a demo account when the ledger loads empty
    SEED_DEMO_ACCOUNT: bool = True


def get_stampcard_settings() -> StampcardSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "STAMPCARD", {})
    return StampcardSettings(**user_settings)


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_stampcard_settings(), name)


stampcard_settings = _LazySettings()
