from .core.interfaces import Indicator, validate_ohlcv
from .impl.ma import SMA
from .impl.ema import EMA
from .impl.rsi import RSI
from .impl.bbands import BollingerBands
from .impl.macd import MACD
from .votes import MIN_HISTORY, VOTE_FUNCTIONS
from .engine import IndicatorEngine

__all__ = [
    "Indicator",
    "validate_ohlcv",
    "SMA",
    "EMA",
    "RSI",
    "BollingerBands",
    "MACD",
    "MIN_HISTORY",
    "VOTE_FUNCTIONS",
    "IndicatorEngine",
]
