"""Stampcard protocols."""

from stampcard.protocols.storage import LedgerStorage

__all__ = [
    "LedgerStorage",
]
