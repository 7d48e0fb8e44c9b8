"""Pytest fixtures for Stampcard tests."""

import pytest
from django.apps import apps
from django.core.cache import caches

from stampcard.adapters.cache_storage import CacheLedgerStorage
from stampcard.adapters.file_storage import FileLedgerStorage
from stampcard.ledger import StampLedger
from stampcard.service import StampcardService


@pytest.fixture(autouse=True)
def _clear_cache():
    """Every test starts with an empty locmem cache."""
    caches["default"].clear()
    yield
    caches["default"].clear()


@pytest.fixture
def ledger():
    """Empty ledger with the default threshold (8)."""
    return StampLedger()


@pytest.fixture
def sara_id(ledger):
    """Account for Sara in the ledger fixture."""
    return ledger.create_account("Sara", "+966512345678")


@pytest.fixture
def file_storage(tmp_path):
    return FileLedgerStorage(tmp_path / "ledger.json")


@pytest.fixture
def cache_storage():
    return CacheLedgerStorage()


@pytest.fixture
def service(file_storage):
    """Service over a temp file, no demo seeding."""
    return StampcardService(file_storage, reward_threshold=8, seed_demo=False)


@pytest.fixture
def app_service(service):
    """Bind the service fixture to the stampcard app config."""
    config = apps.get_app_config("stampcard")
    previous = config._service
    config.service = service
    yield service
    config.service = previous
