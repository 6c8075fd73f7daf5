"""In-memory PriceSource for tests and offline replays."""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from ._protocols import PRICE_COLS, empty_price_frame

log = logging.getLogger(__name__)


class FramePriceSource:
    """Serves pre-loaded frames keyed by ``(symbol, interval)``.

    ``period`` is ignored: the whole stored frame is returned. Unknown keys
    return an empty frame, like a provider with no history.
    """

    def __init__(self, frames: dict[tuple[str, str], pd.DataFrame] | None = None) -> None:
        self._frames: dict[tuple[str, str], pd.DataFrame] = {}
        self.calls: list[tuple[str, str, str]] = []
        for (symbol, interval), df in (frames or {}).items():
            self.add(symbol, interval, df)

    def add(self, symbol: str, interval: str, df: pd.DataFrame) -> None:
        missing = [c for c in PRICE_COLS if c not in df.columns]
        if missing:
            raise ValueError(f"Frame for {symbol}/{interval} missing columns: {missing}")
        self._frames[(symbol, interval)] = df.loc[:, PRICE_COLS].copy()

    @classmethod
    def from_csv_dir(cls, directory: str | Path) -> FramePriceSource:
        """Load ``<SYMBOL>_<interval>.csv`` files, e.g. ``EURUSD=X_5m.csv``."""
        source = cls()
        for csv_file in sorted(Path(directory).glob("*.csv")):
            symbol, _, interval = csv_file.stem.rpartition("_")
            if not symbol:
                log.warning("Skipping %s: expected <symbol>_<interval>.csv", csv_file.name)
                continue
            df = pd.read_csv(csv_file)
            df["time"] = pd.to_datetime(df["time"], utc=True)
            source.add(symbol, interval, df)
            log.info("  Loaded %s  (%s rows)", csv_file.name, f"{len(df):,}")
        return source

    def fetch(self, symbol: str, interval: str, period: str) -> pd.DataFrame:
        self.calls.append((symbol, interval, period))
        df = self._frames.get((symbol, interval))
        if df is None:
            return empty_price_frame()
        return df.copy()
