"""
Stamp ledger — customer accounts and the stamp/redeem state machine.

Each account is either accruing (stamp_count < reward_threshold) or eligible
(stamp_count >= reward_threshold). add_stamps is the only way into eligible,
redeem the only way back. Stamps keep accumulating past the threshold until
someone redeems; nothing happens automatically on crossing it.

Usage:
    ledger = StampLedger(reward_threshold=8)
    account_id = ledger.create_account("Sara", "+9665...")
    ledger.add_stamps(account_id, 2)
    result = ledger.redeem(account_id)
    if result.approved:
        ...
"""

from __future__ import annotations

import logging
import secrets
import string
import threading
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum

from stampcard.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_REWARD_THRESHOLD = 8

_ID_ALPHABET = string.digits + string.ascii_lowercase
_ID_LENGTH = 8


def new_account_id() -> str:
    """Random 8-character base36 token."""
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(_ID_LENGTH))


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Account:
    """Customer loyalty record. Immutable; the ledger swaps whole records."""

    id: str
    name: str
    phone: str
    stamp_count: int = 0
    redeemed_count: int = 0
    created_at: datetime | None = None


@dataclass(frozen=True)
class Progress:
    """Stamp card progress toward the next reward."""

    filled: int
    remaining: int
    ready_to_redeem: bool
    rewards_available: int


class RedeemStatus(str, Enum):
    APPROVED = "approved"
    DENIED = "denied"


@dataclass(frozen=True)
class RedeemResult:
    """Outcome of a redemption attempt. DENIED is a normal business result."""

    status: RedeemStatus
    account: Account
    reward_threshold: int

    @property
    def approved(self) -> bool:
        return self.status is RedeemStatus.APPROVED

    @property
    def stamp_count(self) -> int:
        return self.account.stamp_count

    @property
    def redeemed_count(self) -> int:
        return self.account.redeemed_count


class StampLedger:
    """
    In-memory collection of accounts plus the operations that mutate them.

    Every mutation runs its check-then-write under one lock, so two
    concurrent redeems can never both spend the same balance.
    """

    def __init__(self, reward_threshold: int = DEFAULT_REWARD_THRESHOLD) -> None:
        if (
            isinstance(reward_threshold, bool)
            or not isinstance(reward_threshold, int)
            or reward_threshold <= 0
        ):
            raise ValidationError(
                "STAMPCARD_INVALID_THRESHOLD",
                reward_threshold=reward_threshold,
            )
        self._reward_threshold = reward_threshold
        self._accounts: dict[str, Account] = {}
        # Survives clear_all so ids are never reissued
        self._issued_ids: set[str] = set()
        self._lock = threading.RLock()

    @property
    def reward_threshold(self) -> int:
        return self._reward_threshold

    def __len__(self) -> int:
        return len(self._accounts)

    def __contains__(self, account_id: object) -> bool:
        return account_id in self._accounts

    def __repr__(self):
        return f"<StampLedger accounts={len(self)} reward_threshold={self._reward_threshold}>"

    def copy(self) -> StampLedger:
        """Independent ledger with the same accounts and issued ids."""
        with self._lock:
            other = StampLedger(reward_threshold=self._reward_threshold)
            other._accounts = dict(self._accounts)
            other._issued_ids = set(self._issued_ids)
        return other

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create_account(self, name: str, phone: str = "") -> str:
        """
        Open a new account with zero balances.

        Args:
            name: Customer display name (required, trimmed)
            phone: Customer phone (optional, trimmed)

        Returns:
            The new account id

        Raises:
            ValidationError: If name is empty after trimming
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("STAMPCARD_INVALID_NAME")

        with self._lock:
            account_id = self._unused_id()
            self._accounts[account_id] = Account(
                id=account_id,
                name=name,
                phone=(phone or "").strip(),
                created_at=_utc_now(),
            )

        logger.info("Account %s created for %r", account_id, name)
        return account_id

    def add_stamps(self, account_id: str, count: int = 1) -> Account:
        """
        Credit stamps to an account.

        Raises:
            ValidationError: If count is not a positive integer
            NotFoundError: If the account does not exist
        """
        if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
            raise ValidationError("STAMPCARD_INVALID_COUNT", count=count)

        with self._lock:
            account = self._require(account_id)
            account = replace(account, stamp_count=account.stamp_count + count)
            self._accounts[account_id] = account

        logger.info("Account %s +%d stamps (balance %d)", account_id, count, account.stamp_count)
        return account

    def redeem(self, account_id: str) -> RedeemResult:
        """
        Exchange one reward's worth of stamps for a free item.

        Spends exactly reward_threshold stamps per call, even when the
        balance covers several rewards.

        Raises:
            NotFoundError: If the account does not exist
        """
        with self._lock:
            account = self._require(account_id)

            if account.stamp_count < self._reward_threshold:
                logger.warning(
                    "Account %s redeem denied (%d/%d stamps)",
                    account_id,
                    account.stamp_count,
                    self._reward_threshold,
                )
                return RedeemResult(RedeemStatus.DENIED, account, self._reward_threshold)

            account = replace(
                account,
                stamp_count=account.stamp_count - self._reward_threshold,
                redeemed_count=account.redeemed_count + 1,
            )
            self._accounts[account_id] = account

        logger.info("Account %s redeemed reward #%d", account_id, account.redeemed_count)
        return RedeemResult(RedeemStatus.APPROVED, account, self._reward_threshold)

    def clear_all(self) -> int:
        """Remove every account. Returns how many were removed."""
        with self._lock:
            removed = len(self._accounts)
            self._accounts.clear()
        logger.info("Ledger cleared (%d accounts removed)", removed)
        return removed

    def restore(self, account: Account) -> None:
        """
        Insert a fully-formed record (seed data, decoding).

        Raises:
            ValidationError: If the record breaks a balance invariant
        """
        for field_name in ("stamp_count", "redeemed_count"):
            value = getattr(account, field_name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValidationError(
                    "STAMPCARD_INVALID_RECORD",
                    message=f"{field_name} must be a non-negative integer",
                    account_id=account.id,
                )
        if not account.id or not isinstance(account.id, str):
            raise ValidationError("STAMPCARD_INVALID_RECORD", message="Account id is required")

        with self._lock:
            self._accounts[account.id] = account
            self._issued_ids.add(account.id)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_account(self, account_id: str) -> Account | None:
        """Get account by id."""
        return self._accounts.get(account_id)

    def accounts(self) -> list[Account]:
        """All accounts in insertion order."""
        with self._lock:
            return list(self._accounts.values())

    def list_accounts(self, query: str = "") -> list[Account]:
        """Accounts whose name + phone + id contains query (case-insensitive)."""
        needle = (query or "").lower()
        return [
            account
            for account in self.accounts()
            if needle in f"{account.name}{account.phone}{account.id}".lower()
        ]

    def progress(self, account: Account) -> Progress:
        """
        Stamp card progress for an account.

        filled wraps to 0 at every multiple of the threshold, so readiness is
        read from the raw balance: 8 of 8 stamps is filled=0, ready=True.
        """
        threshold = self._reward_threshold
        filled = account.stamp_count % threshold
        return Progress(
            filled=filled,
            remaining=threshold - filled,
            ready_to_redeem=account.stamp_count >= threshold,
            rewards_available=account.stamp_count // threshold,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require(self, account_id: str) -> Account:
        account = self._accounts.get(account_id)
        if account is None:
            raise NotFoundError(account_id=account_id)
        return account

    def _unused_id(self) -> str:
        while True:
            account_id = new_account_id()
            if account_id not in self._issued_ids:
                self._issued_ids.add(account_id)
                return account_id
