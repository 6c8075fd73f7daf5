from typing import Protocol, runtime_checkable
import pandas as pd

REQUIRED_COLUMNS = ("open", "high", "low", "close", "volume")


@runtime_checkable
class Indicator(Protocol):
    name: str
    lookback: int

    def compute(self, ohlcv: pd.DataFrame) -> pd.DataFrame:
        """
        Computes the indicator series over the whole input.

        Args:
            ohlcv: A DataFrame containing OHLCV data.

        Returns:
            A DataFrame of indicator columns aligned to the input index.
            Rows inside the warmup window are NaN.
        """
        ...


def validate_ohlcv(df: pd.DataFrame) -> None:
    """
    Raises ValueError when any OHLCV column is missing.
    """
    missing = set(REQUIRED_COLUMNS) - set(df.columns)
    if missing:
        raise ValueError(f"Input DataFrame missing required columns: {sorted(missing)}")


def source_series(ohlcv: pd.DataFrame, src: str) -> pd.Series:
    if src not in ohlcv.columns:
        raise ValueError(f"Source column '{src}' not found in input DataFrame.")
    return ohlcv[src].astype("float64")
