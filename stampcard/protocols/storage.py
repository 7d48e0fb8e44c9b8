"""Ledger storage protocol."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class LedgerStorage(Protocol):
    """
    Protocol for where an encoded ledger lives.

    Backends store one opaque blob (the codec output) and know nothing
    about accounts.
    """

    def read(self) -> bytes | None:
        """Return the stored document, or None if nothing was saved."""
        ...

    def write(self, data: bytes) -> None:
        """Replace the stored document."""
        ...

    def delete(self) -> None:
        """Remove the stored document. No-op if absent."""
        ...
