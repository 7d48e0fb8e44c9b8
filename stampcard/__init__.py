"""
Django Stampcard - Café loyalty stamp cards.

Usage:
    from stampcard import StampLedger, StampcardService

    ledger = StampLedger(reward_threshold=8)
    account_id = ledger.create_account("Sara", "+9665...")
    ledger.add_stamps(account_id, 8)
    result = ledger.redeem(account_id)

    # Persistent, configured from settings.STAMPCARD
    service = StampcardService.from_settings()
"""


def __getattr__(name):
    if name in ("StampLedger", "Account", "Progress", "RedeemResult", "RedeemStatus"):
        from stampcard import ledger

        return getattr(ledger, name)
    if name == "StampcardService":
        from stampcard.service import StampcardService

        return StampcardService
    if name in ("StampcardError", "ValidationError", "NotFoundError"):
        from stampcard import exceptions

        return getattr(exceptions, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "StampLedger",
    "Account",
    "Progress",
    "RedeemResult",
    "RedeemStatus",
    "StampcardService",
    "StampcardError",
    "ValidationError",
    "NotFoundError",
]
__version__ = "0.1.0"
