"""Tests for signal_bot.data.validation.validate_price_series."""

from __future__ import annotations

import pandas as pd
import pytest

from signal_bot.data.validation import validate_price_series


# ── helpers ──────────────────────────────────────────────────────────────

def _good_df() -> pd.DataFrame:
    """Return a minimal valid price-series DataFrame."""
    return pd.DataFrame({
        "time": pd.to_datetime([
            "2024-01-01 00:00:00+00:00",
            "2024-01-01 00:05:00+00:00",
            "2024-01-01 00:10:00+00:00",
        ]),
        "open":  [100.0, 101.0, 102.0],
        "high":  [101.0, 102.0, 103.0],
        "low":   [99.0,  100.0, 101.0],
        "close": [100.5, 101.5, 102.5],
        "volume": [10, 12, 9],
    })


# ── happy path ───────────────────────────────────────────────────────────

def test_valid_df_passes():
    validate_price_series(_good_df())   # should not raise


def test_nan_volume_passes():
    df = _good_df()
    df.loc[1, "volume"] = float("nan")
    validate_price_series(df)           # volume is not a price field


# ── structure ────────────────────────────────────────────────────────────

def test_missing_time_column():
    df = _good_df().drop(columns=["time"])
    with pytest.raises(ValueError, match="Missing 'time' column"):
        validate_price_series(df)


def test_missing_ohlcv_column():
    df = _good_df().drop(columns=["high"])
    with pytest.raises(ValueError, match="missing required columns"):
        validate_price_series(df)


# ── timestamp checks ─────────────────────────────────────────────────────

def test_null_timestamps():
    df = _good_df()
    df.loc[1, "time"] = pd.NaT
    with pytest.raises(ValueError, match="Null timestamps found: 1"):
        validate_price_series(df)


def test_duplicate_timestamps():
    df = _good_df()
    df.loc[2, "time"] = df.loc[1, "time"]
    with pytest.raises(ValueError, match="Duplicate timestamps found: 1"):
        validate_price_series(df)


def test_non_monotonic_timestamps():
    df = _good_df()
    df.loc[0, "time"], df.loc[2, "time"] = df.loc[2, "time"], df.loc[0, "time"]
    with pytest.raises(ValueError, match="Timestamps not monotonic increasing"):
        validate_price_series(df)


# ── price checks ─────────────────────────────────────────────────────────

def test_nan_in_close():
    df = _good_df()
    df.loc[0, "close"] = float("nan")
    with pytest.raises(ValueError, match="NaN values in"):
        validate_price_series(df)


def test_non_positive_close():
    df = _good_df()
    df.loc[2, "close"] = 0.0
    with pytest.raises(ValueError, match="Non-positive close found: 1"):
        validate_price_series(df)
