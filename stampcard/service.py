"""
Stampcard service — a ledger bound to its storage.

StampcardService is the single writer for one stored ledger: it loads the
ledger once, runs every mutation under its lock, saves after each
successful mutation and emits signals. Views and management commands call
it; nothing else touches the stored document.

Usage:
    from stampcard.service import StampcardService

    service = StampcardService.from_settings()
    account_id = service.create_account("Sara", "+9665...")
    service.add_stamps(account_id, 2)
    result = service.redeem(account_id)
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Callable, TypeVar

from django.utils.module_loading import import_string

from stampcard import codec
from stampcard.conf import stampcard_settings
from stampcard.ledger import Account, Progress, RedeemResult, StampLedger
from stampcard.protocols.storage import LedgerStorage
from stampcard.scan import ScanEvent, apply_scan
from stampcard.signals import account_created, ledger_cleared, reward_redeemed, stamps_added

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEMO_ACCOUNT = {
    "name": "Guest",
    "phone": "+9665xxxxxxx",
    "stamp_count": 5,
    "redeemed_count": 1,
}


def get_storage() -> LedgerStorage:
    """Instantiate the configured STORAGE_BACKEND."""
    backend_class = import_string(stampcard_settings.STORAGE_BACKEND)
    return backend_class()


def seed_demo_account(ledger: StampLedger) -> Account:
    """Insert the demo account into a ledger."""
    account_id = ledger.create_account(DEMO_ACCOUNT["name"], DEMO_ACCOUNT["phone"])
    account = replace(
        ledger.get_account(account_id),
        stamp_count=DEMO_ACCOUNT["stamp_count"],
        redeemed_count=DEMO_ACCOUNT["redeemed_count"],
    )
    ledger.restore(account)
    return account


class StampcardService:
    """
    Ledger operations with persistence and signals.

    Args:
        storage: Where the encoded ledger lives
        reward_threshold: Stamps per reward (defaults to REWARD_THRESHOLD)
        seed_demo: Seed the demo account into an empty ledger on first load
            (defaults to SEED_DEMO_ACCOUNT)
    """

    def __init__(
        self,
        storage: LedgerStorage,
        reward_threshold: int | None = None,
        seed_demo: bool | None = None,
    ) -> None:
        self.storage = storage
        self.reward_threshold = (
            reward_threshold if reward_threshold is not None else stampcard_settings.REWARD_THRESHOLD
        )
        self.seed_demo = seed_demo if seed_demo is not None else stampcard_settings.SEED_DEMO_ACCOUNT
        self._ledger: StampLedger | None = None
        self._lock = threading.RLock()

    @classmethod
    def from_settings(cls) -> "StampcardService":
        """Service over the configured storage backend."""
        return cls(get_storage())

    # ------------------------------------------------------------------
    # Ledger lifecycle
    # ------------------------------------------------------------------

    @property
    def ledger(self) -> StampLedger:
        """The loaded ledger (loaded from storage on first access)."""
        with self._lock:
            if self._ledger is None:
                self._ledger = self._load()
            return self._ledger

    def reload(self) -> StampLedger:
        """Drop the in-memory ledger and read storage again."""
        with self._lock:
            self._ledger = None
            return self.ledger

    def _load(self) -> StampLedger:
        ledger = codec.load(self.storage.read(), reward_threshold=self.reward_threshold)
        logger.info("Loaded ledger with %d accounts from %r", len(ledger), self.storage)

        if not len(ledger) and self.seed_demo:
            account = seed_demo_account(ledger)
            self.storage.write(codec.save(ledger))
            logger.info("Seeded demo account %s", account.id)
        return ledger

    def _mutate(
        self,
        operation: Callable[[StampLedger], T],
        save_if: Callable[[T], bool] | None = None,
    ) -> T:
        """
        Run operation against the ledger and save.

        If the operation raises, the ledger is untouched. If saving raises,
        the ledger is rolled back to its previous state before re-raising.
        """
        with self._lock:
            ledger = self.ledger
            snapshot = ledger.copy()
            result = operation(ledger)
            if save_if is not None and not save_if(result):
                return result
            try:
                self.storage.write(codec.save(ledger))
            except Exception:
                logger.exception("Failed to save ledger to %r; rolling back", self.storage)
                self._ledger = snapshot
                raise
            return result

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create_account(self, name: str, phone: str = "") -> str:
        """
        Open an account and save.

        Raises:
            ValidationError: If name is empty
        """
        account = self._mutate(lambda ledger: ledger.get_account(ledger.create_account(name, phone)))
        account_created.send(sender=self.__class__, account=account)
        return account.id

    def add_stamps(self, account_id: str, count: int = 1) -> Account:
        """
        Credit stamps and save.

        Raises:
            ValidationError: If count is not a positive integer
            NotFoundError: If the account does not exist
        """
        account = self._mutate(lambda ledger: ledger.add_stamps(account_id, count))
        stamps_added.send(sender=self.__class__, account=account, count=count)
        return account

    def redeem(self, account_id: str) -> RedeemResult:
        """
        Redeem one reward. Denied results are returned, not raised, and
        nothing is saved for them.

        Raises:
            NotFoundError: If the account does not exist
        """
        result = self._mutate(
            lambda ledger: ledger.redeem(account_id),
            save_if=lambda result: result.approved,
        )
        if result.approved:
            reward_redeemed.send(sender=self.__class__, result=result)
        return result

    def apply_scan(self, payload: dict | str | bytes | ScanEvent, count: int = 1) -> Account:
        """
        Credit stamps for a scanner payload and save.

        Raises:
            ValidationError: Bad payload or count
            NotFoundError: Scanned account does not exist
        """
        account = self._mutate(lambda ledger: apply_scan(ledger, payload, count))
        stamps_added.send(sender=self.__class__, account=account, count=count)
        return account

    def clear_all(self) -> int:
        """Remove every account and the stored document. Irreversible."""
        with self._lock:
            ledger = self.ledger
            self.storage.delete()
            removed = ledger.clear_all()

        ledger_cleared.send(sender=self.__class__, removed=removed)
        return removed

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_account(self, account_id: str) -> Account | None:
        return self.ledger.get_account(account_id)

    def list_accounts(self, query: str = "") -> list[Account]:
        return self.ledger.list_accounts(query)

    def progress(self, account: Account) -> Progress:
        return self.ledger.progress(account)
