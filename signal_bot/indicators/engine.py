"""IndicatorEngine: runs every vote function over one price series."""

from __future__ import annotations

import logging
from typing import Optional

import pandas as pd

from signal_bot.config import IndicatorConfig
from signal_bot.signals.models import IndicatorVotes
from .core.interfaces import validate_ohlcv
from .votes import MIN_HISTORY, VOTE_FUNCTIONS

log = logging.getLogger(__name__)


class IndicatorEngine:
    """Stateless: holds only its (frozen) config, safe to share across threads."""

    def __init__(self, config: Optional[IndicatorConfig] = None) -> None:
        self.config = config or IndicatorConfig()

    @property
    def min_history(self) -> int:
        """Samples needed for every indicator to cast a non-default vote."""
        return max(fn(self.config) for fn in MIN_HISTORY.values())

    def compute(self, series: pd.DataFrame) -> IndicatorVotes:
        validate_ohlcv(series)
        votes = {name: fn(series, self.config) for name, fn in VOTE_FUNCTIONS.items()}
        log.debug(
            "votes ema=%s rsi=%s bbands=%s macd=%s (%d samples)",
            votes["ema"].value, votes["rsi"].value,
            votes["bbands"].value, votes["macd"].value, len(series),
        )
        return IndicatorVotes(**votes)
