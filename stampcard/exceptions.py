"""Stampcard exceptions."""


class StampcardError(Exception):
    """
    Structured exception for stamp card operations.

    Carries a stable ``code``, a human ``message`` and arbitrary ``data``.

    Usage:
        try:
            ledger.add_stamps("ab12cd34", 1)
        except StampcardError as e:
            if e.code == "STAMPCARD_ACCOUNT_NOT_FOUND":
                handle_not_found()
    """

    _default_messages: dict[str, str] = {
        "STAMPCARD_INVALID_NAME": "Customer name is required",
        "STAMPCARD_INVALID_COUNT": "Stamp count must be a positive integer",
        "STAMPCARD_INVALID_THRESHOLD": "Reward threshold must be a positive integer",
        "STAMPCARD_INVALID_SCAN": "Invalid scan payload",
        "STAMPCARD_INVALID_RECORD": "Invalid account record",
        "STAMPCARD_INVALID_JSON": "Invalid JSON",
        "STAMPCARD_ACCOUNT_NOT_FOUND": "Account not found",
    }

    def __init__(self, code: str, message: str | None = None, **data):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(self.message)

    def as_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "data": self.data}

    def __repr__(self):
        return f"{type(self).__name__}({self.code!r}, {self.message!r})"


class ValidationError(StampcardError):
    """Bad input: empty name, non-positive stamp count, malformed scan."""


class NotFoundError(StampcardError):
    """Unknown account id."""

    def __init__(self, code: str = "STAMPCARD_ACCOUNT_NOT_FOUND", message: str | None = None, **data):
        super().__init__(code, message, **data)
