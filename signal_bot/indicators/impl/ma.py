from dataclasses import dataclass
import pandas as pd

from ..core.interfaces import source_series


@dataclass(frozen=True)
class SMA:
    period: int
    src: str = "close"

    @property
    def name(self) -> str:
        return f"sma_{self.period}_{self.src}"

    @property
    def lookback(self) -> int:
        return self.period

    def compute(self, ohlcv: pd.DataFrame) -> pd.DataFrame:
        """
        Computes the Simple Moving Average (SMA).

        Args:
            ohlcv: A DataFrame containing OHLCV data.

        Returns:
            A single-column DataFrame, NaN for the first ``period - 1`` rows.
        """
        values = source_series(ohlcv, self.src)
        feature = values.rolling(window=self.period, min_periods=self.period).mean()
        return feature.to_frame(name=self.name)
