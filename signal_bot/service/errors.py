"""Errors surfaced by :class:`SignalService` to its callers."""

from __future__ import annotations


class SignalBotError(Exception):
    """Base class; the CLI turns any of these into exit status 1."""


class UnknownAsset(SignalBotError, LookupError):
    """Symbol not in the catalog, or catalogued but inactive. Never retried."""

    def __init__(self, symbol: str, reason: str = "not found") -> None:
        super().__init__(f"Unknown asset '{symbol}': {reason}")
        self.symbol = symbol
        self.reason = reason


class DataUnavailable(SignalBotError):
    """Price history could not be obtained (after retries) or was unusable."""

    def __init__(self, symbol: str, interval: str, detail: str) -> None:
        super().__init__(f"No usable {interval} price history for '{symbol}': {detail}")
        self.symbol = symbol
        self.interval = interval


class PersistenceError(SignalBotError):
    """The signal store rejected or failed to write a record."""
