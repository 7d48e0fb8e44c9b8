"""Stampcard storage adapters (LedgerStorage implementations)."""
