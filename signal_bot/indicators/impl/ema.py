from dataclasses import dataclass
import pandas as pd

from ..core.interfaces import source_series


@dataclass(frozen=True)
class EMA:
    period: int
    src: str = "close"

    @property
    def name(self) -> str:
        return f"ema_{self.period}_{self.src}"

    @property
    def lookback(self) -> int:
        return self.period

    def compute(self, ohlcv: pd.DataFrame) -> pd.DataFrame:
        feature = ewm_mean(source_series(ohlcv, self.src), self.period)
        return feature.to_frame(name=self.name)


def ewm_mean(values: pd.Series, span: int) -> pd.Series:
    """Recursive EMA seeded at the first sample; NaN until ``span`` observations."""
    return values.ewm(span=span, min_periods=span, adjust=False).mean()
