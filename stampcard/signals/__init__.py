"""
Stampcard signals — public event API.

Emitted signals (all by StampcardService, after the change is saved):
- account_created: account=Account
- stamps_added: account=Account, count=int
- reward_redeemed: result=RedeemResult (approved only)
- ledger_cleared: removed=int
"""

from django.dispatch import Signal

account_created = Signal()  # sender=StampcardService, account
stamps_added = Signal()  # sender=StampcardService, account, count
reward_redeemed = Signal()  # sender=StampcardService, result
ledger_cleared = Signal()  # sender=StampcardService, removed
