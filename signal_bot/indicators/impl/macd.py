from dataclasses import dataclass
import pandas as pd

from ..core.interfaces import source_series
from .ema import ewm_mean


@dataclass(frozen=True)
class MACD:
    fast: int = 12
    slow: int = 26
    signal: int = 9
    src: str = "close"

    @property
    def name(self) -> str:
        return f"macd_{self.fast}_{self.slow}_{self.signal}"

    @property
    def lookback(self) -> int:
        # signal line needs `signal` valid MACD values, the first of which lands at row `slow`
        return self.slow + self.signal - 1

    def compute(self, ohlcv: pd.DataFrame) -> pd.DataFrame:
        if self.fast >= self.slow:
            raise ValueError(f"MACD fast period ({self.fast}) must be below slow ({self.slow})")

        values = source_series(ohlcv, self.src)
        macd_line = ewm_mean(values, self.fast) - ewm_mean(values, self.slow)
        signal_line = ewm_mean(macd_line, self.signal)

        return pd.DataFrame(
            {
                f"{self.name}_line": macd_line,
                f"{self.name}_signal": signal_line,
                f"{self.name}_hist": macd_line - signal_line,
            },
            index=ohlcv.index,
        )
