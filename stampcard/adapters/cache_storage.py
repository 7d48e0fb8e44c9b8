"""Django cache LedgerStorage adapter."""

from django.core.cache import caches

from stampcard.conf import stampcard_settings


class CacheLedgerStorage:
    """
    Adapter that implements LedgerStorage with one Django cache entry.

    The entry never expires. Durability is whatever the cache backend
    gives, so use a persistent backend (database, file, redis) outside demos.

    Configuration in settings.py:
        STAMPCARD = {
            "STORAGE_BACKEND": "stampcard.adapters.cache_storage.CacheLedgerStorage",
            "CACHE_ALIAS": "default",
            "CACHE_KEY": "loyalty_demo_users",
        }
    """

    def __init__(self, alias: str | None = None, key: str | None = None) -> None:
        self.alias = alias or stampcard_settings.CACHE_ALIAS
        self.key = key or stampcard_settings.CACHE_KEY

    @property
    def cache(self):
        return caches[self.alias]

    def read(self) -> bytes | None:
        return self.cache.get(self.key)

    def write(self, data: bytes) -> None:
        self.cache.set(self.key, data, timeout=None)

    def delete(self) -> None:
        self.cache.delete(self.key)

    def __repr__(self):
        return f"<CacheLedgerStorage {self.alias}:{self.key}>"
