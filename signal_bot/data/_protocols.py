"""Protocol definitions for price sources and the asset catalog."""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

import pandas as pd

from signal_bot.signals.models import Asset

PRICE_COLS: list[str] = ["time", "open", "high", "low", "close", "volume"]


@runtime_checkable
class PriceSource(Protocol):
    """Abstraction over any bar-data provider (Yahoo, CSV replay, mock).

    ``fetch`` returns a frame with :data:`PRICE_COLS`, oldest row first, or
    an empty frame when the provider has no history. Transport problems are
    raised, never returned as an empty frame.
    """

    def fetch(self, symbol: str, interval: str, period: str) -> pd.DataFrame: ...


@runtime_checkable
class AssetCatalog(Protocol):
    """Read-only view of the externally managed asset list."""

    def get(self, symbol: str) -> Optional[Asset]: ...
    def active(self) -> list[Asset]: ...


def empty_price_frame() -> pd.DataFrame:
    return pd.DataFrame(columns=PRICE_COLS)
