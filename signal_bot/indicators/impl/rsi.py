from dataclasses import dataclass

import numpy as np
import pandas as pd

from ..core.interfaces import source_series


@dataclass(frozen=True)
class RSI:
    """Relative Strength Index with Wilder smoothing (alpha = 1 / period)."""

    period: int = 14
    src: str = "close"

    @property
    def name(self) -> str:
        return f"rsi_{self.period}"

    @property
    def lookback(self) -> int:
        # one extra row for the first price difference
        return self.period + 1

    def compute(self, ohlcv: pd.DataFrame) -> pd.DataFrame:
        delta = source_series(ohlcv, self.src).diff()
        gain = delta.clip(lower=0.0)
        loss = -delta.clip(upper=0.0)

        alpha = 1.0 / self.period
        avg_gain = gain.ewm(alpha=alpha, min_periods=self.period, adjust=False).mean()
        avg_loss = loss.ewm(alpha=alpha, min_periods=self.period, adjust=False).mean()

        rs = avg_gain / avg_loss.replace(0.0, np.nan)
        rsi = 100.0 - 100.0 / (1.0 + rs)

        # No losses in the window: pinned at 100, or 50 for a perfectly flat series
        rsi = rsi.mask((avg_loss == 0) & (avg_gain > 0), 100.0)
        rsi = rsi.mask((avg_loss == 0) & (avg_gain == 0), 50.0)

        return rsi.to_frame(name=self.name)
