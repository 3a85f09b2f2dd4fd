"""Ledger-client boundary for the Barista DLP client."""

from barista_dlp.ledger.client import InMemoryLedgerClient, LedgerClient

__all__ = [
    "InMemoryLedgerClient",
    "LedgerClient",
]
