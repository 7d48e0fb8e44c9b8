"""
Ledger codec — JSON document <-> StampLedger.

Document shape (one entry per account, keyed by id):

    {
        "ab12cd34": {
            "id": "ab12cd34",
            "name": "Sara",
            "phone": "+9665...",
            "stampCount": 5,
            "redeemedCount": 1,
            "createdAt": 1718000000000
        }
    }

createdAt is epoch milliseconds. Documents exported by the browser demo
(keys "stamps"/"redeemed") load as well.

Loading never raises: a missing, empty or corrupt document, or any
malformed record, gives an empty ledger.
"""

from __future__ import annotations

import json
import logging
import math
from datetime import datetime, timezone
from typing import Any

from stampcard.exceptions import StampcardError
from stampcard.ledger import DEFAULT_REWARD_THRESHOLD, Account, StampLedger

logger = logging.getLogger(__name__)


def _to_epoch_ms(value: datetime | None) -> int | None:
    if value is None:
        return None
    return int(value.timestamp() * 1000)


def _from_epoch_ms(value: Any) -> datetime | None:
    if value is None:
        return None
    if (
        isinstance(value, bool)
        or not isinstance(value, (int, float))
        or (isinstance(value, float) and not math.isfinite(value))
    ):
        raise ValueError(f"createdAt must be epoch milliseconds, got {value!r}")
    try:
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    except (OverflowError, OSError) as exc:
        raise ValueError(f"createdAt out of range: {value!r}") from exc


def account_to_dict(account: Account) -> dict:
    return {
        "id": account.id,
        "name": account.name,
        "phone": account.phone,
        "stampCount": account.stamp_count,
        "redeemedCount": account.redeemed_count,
        "createdAt": _to_epoch_ms(account.created_at),
    }


def account_from_dict(data: dict) -> Account:
    """
    Build an Account from a document record.

    Raises:
        ValueError, TypeError, KeyError: If the record is malformed
    """
    if not isinstance(data, dict):
        raise TypeError(f"Account record must be an object, got {type(data).__name__}")

    stamp_count = data["stampCount"] if "stampCount" in data else data["stamps"]
    if "redeemedCount" in data:
        redeemed_count = data["redeemedCount"]
    else:
        redeemed_count = data.get("redeemed", 0)

    name = data["name"]
    phone = data.get("phone") or ""
    if not isinstance(name, str) or not isinstance(phone, str):
        raise TypeError("name and phone must be strings")

    return Account(
        id=data["id"],
        name=name,
        phone=phone,
        stamp_count=stamp_count,
        redeemed_count=redeemed_count,
        created_at=_from_epoch_ms(data.get("createdAt")),
    )


def ledger_to_dict(ledger: StampLedger) -> dict:
    return {account.id: account_to_dict(account) for account in ledger.accounts()}


def dumps(ledger: StampLedger) -> str:
    """Encode a ledger as a JSON string."""
    return json.dumps(ledger_to_dict(ledger), ensure_ascii=False)


def loads(
    text: str | bytes | None,
    reward_threshold: int = DEFAULT_REWARD_THRESHOLD,
) -> StampLedger:
    """
    Decode a JSON document into a new ledger.

    Args:
        text: Encoded document (None or empty means no saved state)
        reward_threshold: Threshold for the new ledger

    Returns:
        StampLedger (empty when the document is missing or corrupt)
    """
    ledger = StampLedger(reward_threshold=reward_threshold)
    if not text:
        return ledger

    try:
        document = json.loads(text)
        if not isinstance(document, dict):
            raise TypeError(f"Ledger document must be an object, got {type(document).__name__}")

        accounts = []
        for key, record in document.items():
            account = account_from_dict(record)
            if account.id != key:
                raise ValueError(f"Record id {account.id!r} does not match key {key!r}")
            accounts.append(account)

        for account in accounts:
            ledger.restore(account)
    except (
        ValueError,
        TypeError,
        KeyError,
        OverflowError,
        OSError,
        RecursionError,
        StampcardError,
    ) as exc:
        logger.warning("Discarding corrupt ledger document: %s", exc)
        return StampLedger(reward_threshold=reward_threshold)

    return ledger


def save(ledger: StampLedger) -> bytes:
    """Encode a ledger as UTF-8 JSON bytes."""
    return dumps(ledger).encode("utf-8")


def load(
    data: bytes | str | None,
    reward_threshold: int = DEFAULT_REWARD_THRESHOLD,
) -> StampLedger:
    """Decode UTF-8 JSON bytes (or text) into a new ledger. Never raises on bad data."""
    return loads(data, reward_threshold=reward_threshold)
