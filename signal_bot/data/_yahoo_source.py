"""Concrete PriceSource backed by the yfinance package."""

from __future__ import annotations

import logging

import pandas as pd

from ._protocols import PRICE_COLS, empty_price_frame

log = logging.getLogger(__name__)

_RENAMES = {
    "Datetime": "time",
    "Date": "time",
    "Open": "open",
    "High": "high",
    "Low": "low",
    "Close": "close",
    "Volume": "volume",
}


class YahooPriceSource:
    """Fetch intraday bars from Yahoo Finance (e.g. ``EURUSD=X``, ``BTC-USD``)."""

    def __init__(self) -> None:
        self._yf = None  # lazy import

    def _lib(self):
        if self._yf is None:
            import yfinance as _yf
            self._yf = _yf
        return self._yf

    def fetch(self, symbol: str, interval: str, period: str) -> pd.DataFrame:
        yf = self._lib()
        log.debug("Yahoo fetch %s interval=%s period=%s", symbol, interval, period)
        try:
            raw = yf.Ticker(symbol).history(
                period=period,
                interval=interval,
                auto_adjust=False,
                actions=False,
            )
        except Exception as exc:
            raise RuntimeError(f"Yahoo Finance fetch failed for {symbol}: {exc}") from exc

        if raw is None or raw.empty:
            log.warning("No data returned from Yahoo Finance for %s (%s)", symbol, interval)
            return empty_price_frame()

        return normalize_yahoo_frame(raw)


def normalize_yahoo_frame(raw: pd.DataFrame) -> pd.DataFrame:
    """Map a yfinance history frame onto the PriceSeries schema (UTC, sorted)."""
    df = raw.reset_index().rename(columns=_RENAMES)
    missing = [c for c in PRICE_COLS if c not in df.columns]
    if missing:
        raise RuntimeError(f"Yahoo Finance frame missing columns: {missing}")

    df["time"] = pd.to_datetime(df["time"])
    if df["time"].dt.tz is None:
        df["time"] = df["time"].dt.tz_localize("UTC")
    else:
        df["time"] = df["time"].dt.tz_convert("UTC")

    # Yahoo pads the current, still-open bar with NaNs on some markets
    df = df.dropna(subset=["open", "high", "low", "close"])
    df["volume"] = df["volume"].fillna(0.0)

    df = df.loc[:, PRICE_COLS].drop_duplicates(subset=["time"], keep="last")
    return df.sort_values("time").reset_index(drop=True)
