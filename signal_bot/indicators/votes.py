"""Per-indicator vote functions.

Each function has the same shape ``(ohlcv, cfg) -> Vote`` and looks only at
the most recent samples of the series it computes. A series shorter than the
function's minimum history yields ``Vote.NEUTRAL`` instead of an error.
"""

from __future__ import annotations

import logging
from typing import Callable

import pandas as pd

from signal_bot.config import IndicatorConfig
from signal_bot.signals.models import Vote
from .impl.bbands import BollingerBands
from .impl.ema import EMA
from .impl.macd import MACD
from .impl.rsi import RSI

log = logging.getLogger(__name__)

VoteFunction = Callable[[pd.DataFrame, IndicatorConfig], Vote]


def _has_history(ohlcv: pd.DataFrame, required: int, indicator: str) -> bool:
    if len(ohlcv) < required:
        log.debug(
            "%s: %d samples < %d required, voting NEUTRAL",
            indicator, len(ohlcv), required,
        )
        return False
    return True


def _crossed_above(prev_a: float, prev_b: float, a: float, b: float) -> bool:
    return prev_a <= prev_b and a > b


def _crossed_below(prev_a: float, prev_b: float, a: float, b: float) -> bool:
    return prev_a >= prev_b and a < b


# -- EMA crossover ------------------------------------------------------------

def ema_min_history(cfg: IndicatorConfig) -> int:
    return cfg.ema_slow + 1


def ema_vote(ohlcv: pd.DataFrame, cfg: IndicatorConfig) -> Vote:
    if not _has_history(ohlcv, ema_min_history(cfg), "ema"):
        return Vote.NEUTRAL

    fast = EMA(cfg.ema_fast).compute(ohlcv).iloc[:, 0]
    slow = EMA(cfg.ema_slow).compute(ohlcv).iloc[:, 0]
    f_prev, f_now = fast.iloc[-2], fast.iloc[-1]
    s_prev, s_now = slow.iloc[-2], slow.iloc[-1]
    if pd.isna([f_prev, f_now, s_prev, s_now]).any():
        return Vote.NEUTRAL

    if _crossed_above(f_prev, s_prev, f_now, s_now):
        return Vote.CALL
    if _crossed_below(f_prev, s_prev, f_now, s_now):
        return Vote.PUT

    if s_now == 0:
        return Vote.NEUTRAL
    separation = (f_now - s_now) / abs(s_now)
    if f_now > s_now and separation >= cfg.ema_min_separation:
        return Vote.CALL
    if f_now < s_now and -separation >= cfg.ema_min_separation:
        return Vote.PUT
    return Vote.NEUTRAL


# -- RSI band -----------------------------------------------------------------

def rsi_min_history(cfg: IndicatorConfig) -> int:
    return RSI(cfg.rsi_period).lookback


def rsi_vote(ohlcv: pd.DataFrame, cfg: IndicatorConfig) -> Vote:
    if not _has_history(ohlcv, rsi_min_history(cfg), "rsi"):
        return Vote.NEUTRAL

    rsi = RSI(cfg.rsi_period).compute(ohlcv).iloc[-1, 0]
    if pd.isna(rsi):
        return Vote.NEUTRAL
    # oversold → reversal-buy bias
    if rsi < cfg.rsi_oversold:
        return Vote.CALL
    if rsi > cfg.rsi_overbought:
        return Vote.PUT
    return Vote.NEUTRAL


# -- Bollinger band position --------------------------------------------------

def bbands_min_history(cfg: IndicatorConfig) -> int:
    return BollingerBands(cfg.bb_window, cfg.bb_k).lookback


def bbands_vote(ohlcv: pd.DataFrame, cfg: IndicatorConfig) -> Vote:
    if not _has_history(ohlcv, bbands_min_history(cfg), "bbands"):
        return Vote.NEUTRAL

    bands = BollingerBands(cfg.bb_window, cfg.bb_k)
    last = bands.compute(ohlcv).iloc[-1]
    upper = last[f"{bands.name}_upper"]
    lower = last[f"{bands.name}_lower"]
    close = float(ohlcv["close"].iloc[-1])
    if pd.isna(upper) or pd.isna(lower):
        return Vote.NEUTRAL

    # zero-width bands (constant window)
    if upper <= lower:
        return Vote.NEUTRAL
    if close <= lower:
        return Vote.CALL
    if close >= upper:
        return Vote.PUT
    return Vote.NEUTRAL


# -- MACD crossover -----------------------------------------------------------

def macd_min_history(cfg: IndicatorConfig) -> int:
    return MACD(cfg.macd_fast, cfg.macd_slow, cfg.macd_signal).lookback + 1


def macd_vote(ohlcv: pd.DataFrame, cfg: IndicatorConfig) -> Vote:
    if not _has_history(ohlcv, macd_min_history(cfg), "macd"):
        return Vote.NEUTRAL

    macd = MACD(cfg.macd_fast, cfg.macd_slow, cfg.macd_signal)
    frame = macd.compute(ohlcv)
    line = frame[f"{macd.name}_line"]
    signal = frame[f"{macd.name}_signal"]
    m_prev, m_now = line.iloc[-2], line.iloc[-1]
    s_prev, s_now = signal.iloc[-2], signal.iloc[-1]
    if pd.isna([m_prev, m_now, s_prev, s_now]).any():
        return Vote.NEUTRAL

    if _crossed_above(m_prev, s_prev, m_now, s_now):
        return Vote.CALL
    if _crossed_below(m_prev, s_prev, m_now, s_now):
        return Vote.PUT
    if m_now > 0 and m_now > m_prev:
        return Vote.CALL
    if m_now < 0 and m_now < m_prev:
        return Vote.PUT
    return Vote.NEUTRAL


VOTE_FUNCTIONS: dict[str, VoteFunction] = {
    "ema": ema_vote,
    "rsi": rsi_vote,
    "bbands": bbands_vote,
    "macd": macd_vote,
}

MIN_HISTORY: dict[str, Callable[[IndicatorConfig], int]] = {
    "ema": ema_min_history,
    "rsi": rsi_min_history,
    "bbands": bbands_min_history,
    "macd": macd_min_history,
}
