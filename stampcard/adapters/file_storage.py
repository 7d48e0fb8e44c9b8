"""JSON file LedgerStorage adapter."""

import logging
import os
import tempfile
from pathlib import Path

from stampcard.conf import stampcard_settings

logger = logging.getLogger(__name__)


class FileLedgerStorage:
    """
    Adapter that implements LedgerStorage with a file on disk.

    Writes go to a temp file in the same directory and are renamed over
    the target, so a crash mid-write never leaves a half-written ledger.

    Configuration in settings.py:
        STAMPCARD = {
            "STORAGE_BACKEND": "stampcard.adapters.file_storage.FileLedgerStorage",
            "LEDGER_PATH": "/var/lib/stampcard/ledger.json",
        }
    """

    def __init__(self, path: str | os.PathLike | None = None) -> None:
        self.path = Path(path if path is not None else stampcard_settings.LEDGER_PATH)

    def read(self) -> bytes | None:
        try:
            return self.path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.warning("Cannot read ledger file %s: %s", self.path, exc)
            return None

    def write(self, data: bytes) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def delete(self) -> None:
        self.path.unlink(missing_ok=True)

    def __repr__(self):
        return f"<FileLedgerStorage {self.path}>"
