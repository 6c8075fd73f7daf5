from dataclasses import dataclass
import pandas as pd

from ..core.interfaces import source_series


@dataclass(frozen=True)
class BollingerBands:
    """Rolling mean +/- ``k`` population standard deviations."""

    window: int = 20
    k: float = 2.0
    src: str = "close"

    @property
    def name(self) -> str:
        return f"bb_{self.window}_{self.k:g}"

    @property
    def lookback(self) -> int:
        return self.window

    def compute(self, ohlcv: pd.DataFrame) -> pd.DataFrame:
        values = source_series(ohlcv, self.src)
        roll = values.rolling(window=self.window, min_periods=self.window)
        middle = roll.mean()
        std = roll.std(ddof=0)

        return pd.DataFrame(
            {
                f"{self.name}_middle": middle,
                f"{self.name}_upper": middle + self.k * std,
                f"{self.name}_lower": middle - self.k * std,
            },
            index=ohlcv.index,
        )
