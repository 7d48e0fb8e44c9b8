"""
Scan payloads — messages produced by a QR/camera scanner or POS.

Two shapes are accepted:

    {"type": "stamp", "accountId": "ab12cd34", "timestamp": 1718000000000}
    {"t": "stamp", "uid": "ab12cd34", "ts": 1718000000000}

The second is the compact form printed in the customer's QR code. Payloads
are not authenticated.
"""

from __future__ import annotations

import json
import math
import time
from dataclasses import dataclass
from typing import Any

from stampcard.exceptions import ValidationError
from stampcard.ledger import Account, StampLedger

SCAN_TYPE_STAMP = "stamp"


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class ScanEvent:
    """A single scan: credit stamps to account_id."""

    account_id: str
    timestamp: int
    type: str = SCAN_TYPE_STAMP

    def to_dict(self) -> dict:
        return {"type": self.type, "accountId": self.account_id, "timestamp": self.timestamp}


def build_qr_payload(account_id: str, timestamp: int | None = None) -> str:
    """Compact JSON string to render as the customer's QR code."""
    return json.dumps(
        {"t": SCAN_TYPE_STAMP, "uid": account_id, "ts": _now_ms() if timestamp is None else timestamp},
        separators=(",", ":"),
    )


def parse_scan_payload(payload: dict | str | bytes) -> ScanEvent:
    """
    Parse a scan payload in either shape.

    Raises:
        ValidationError: If the payload is not a stamp scan for an account
    """
    data: Any = payload
    if isinstance(payload, (str, bytes)):
        try:
            data = json.loads(payload)
        except (json.JSONDecodeError, UnicodeDecodeError, RecursionError):
            raise ValidationError("STAMPCARD_INVALID_SCAN", message="Scan payload is not valid JSON")

    if not isinstance(data, dict):
        raise ValidationError("STAMPCARD_INVALID_SCAN", message="Scan payload must be an object")

    scan_type = data.get("type", data.get("t"))
    if scan_type != SCAN_TYPE_STAMP:
        raise ValidationError("STAMPCARD_INVALID_SCAN", message=f"Unsupported scan type: {scan_type!r}")

    account_id = data.get("accountId", data.get("uid"))
    if not isinstance(account_id, str) or not account_id:
        raise ValidationError("STAMPCARD_INVALID_SCAN", message="Scan payload has no account id")

    timestamp = data.get("timestamp", data.get("ts"))
    if timestamp is None:
        timestamp = _now_ms()
    elif (
        isinstance(timestamp, bool)
        or not isinstance(timestamp, (int, float))
        or (isinstance(timestamp, float) and not math.isfinite(timestamp))
    ):
        raise ValidationError("STAMPCARD_INVALID_SCAN", message="Scan timestamp must be epoch milliseconds")

    return ScanEvent(account_id=account_id, timestamp=int(timestamp))


def apply_scan(ledger: StampLedger, payload: dict | str | bytes | ScanEvent, count: int = 1) -> Account:
    """
    Credit stamps for a scan.

    Raises:
        ValidationError: Bad payload or count
        NotFoundError: Scanned account does not exist
    """
    event = payload if isinstance(payload, ScanEvent) else parse_scan_payload(payload)
    return ledger.add_stamps(event.account_id, count)
