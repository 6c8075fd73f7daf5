"""Higher-timeframe trend bias from the slope of a single moving average."""

from __future__ import annotations

import logging
from typing import Optional

import pandas as pd

from signal_bot.config import TrendConfig
from signal_bot.indicators.impl.ma import SMA
from .models import Vote

log = logging.getLogger(__name__)


class TrendFilter:
    """Computes a CALL / PUT / NEUTRAL bias from a long (e.g. hourly) series.

    Only used to qualify a signal as strong; never counted in its strength.
    """

    def __init__(self, config: Optional[TrendConfig] = None) -> None:
        self.config = config or TrendConfig()

    @property
    def min_history(self) -> int:
        return self.config.period + self.config.slope_lookback

    def slope(self, long_series: pd.DataFrame) -> Optional[float]:
        """Relative MA change over ``slope_lookback`` samples, or None if too short."""
        if len(long_series) < self.min_history:
            log.debug(
                "trend: %d samples < %d required, bias NEUTRAL",
                len(long_series), self.min_history,
            )
            return None

        ma = SMA(self.config.period).compute(long_series).iloc[:, 0]
        now = ma.iloc[-1]
        before = ma.iloc[-1 - self.config.slope_lookback]
        if pd.isna(now) or pd.isna(before) or before == 0:
            return None
        return float((now - before) / abs(before))

    def bias(self, long_series: pd.DataFrame) -> Vote:
        slope = self.slope(long_series)
        if slope is None:
            return Vote.NEUTRAL
        if slope > self.config.threshold:
            return Vote.CALL
        if slope < -self.config.threshold:
            return Vote.PUT
        return Vote.NEUTRAL
