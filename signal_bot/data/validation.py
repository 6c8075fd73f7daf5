"""Fail-fast data-integrity checks for price-series DataFrames."""

from __future__ import annotations

import pandas as pd

from signal_bot.indicators.core.interfaces import validate_ohlcv


def validate_price_series(df: pd.DataFrame) -> None:
    """Validate a fetched price series *before* any indicator sees it.

    Raises ``ValueError`` on the first problem found so that corrupt or
    malformed data never silently becomes a vote.
    """

    # 1. Timestamp column exists with no nulls ──────────────────────────
    if "time" not in df.columns:
        raise ValueError("Missing 'time' column")
    if df["time"].isna().any():
        n = int(df["time"].isna().sum())
        raise ValueError(f"Null timestamps found: {n} rows")

    # 2. OHLCV columns present ─────────────────────────────────────────
    validate_ohlcv(df)

    # 3. Strictly increasing time ───────────────────────────────────────
    times = pd.to_datetime(df["time"], utc=True)

    n_dupes = int(times.duplicated().sum())
    if n_dupes > 0:
        raise ValueError(f"Duplicate timestamps found: {n_dupes}")

    if not times.is_monotonic_increasing:
        raise ValueError("Timestamps not monotonic increasing")

    # 4. No NaNs in OHLC fields ────────────────────────────────────────
    na_cols = [c for c in ("open", "high", "low", "close") if df[c].isna().any()]
    if na_cols:
        raise ValueError(f"NaN values in {na_cols}")

    # 5. Price sanity ──────────────────────────────────────────────────
    non_positive = int((df["close"] <= 0).sum())
    if non_positive > 0:
        raise ValueError(f"Non-positive close found: {non_positive} rows")
