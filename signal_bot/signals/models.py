"""Signal-layer value objects: votes, directions, assets and the Signal record."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

import pandas as pd


class Vote(str, Enum):
    """A single indicator's directional opinion."""

    CALL = "CALL"
    PUT = "PUT"
    NEUTRAL = "NEUTRAL"


class Direction(str, Enum):
    """Outcome of the confluence decision. ``ESPERAR`` means wait / no trade."""

    CALL = "CALL"
    PUT = "PUT"
    ESPERAR = "ESPERAR"


STRONG_MIN_STRENGTH = 3


def is_strong(direction: Direction, strength: int, trend: Vote) -> bool:
    """True when confluence is high and the long-term trend agrees."""
    return strength >= STRONG_MIN_STRENGTH and trend.value == direction.value


@dataclass(frozen=True)
class Asset:
    """Catalog entry for a tradable instrument (read-only here)."""

    id: int
    symbol: str
    name: str
    active: bool = True


@dataclass(frozen=True)
class IndicatorVotes:
    """The four core votes, one per indicator."""

    ema: Vote = Vote.NEUTRAL
    rsi: Vote = Vote.NEUTRAL
    bbands: Vote = Vote.NEUTRAL
    macd: Vote = Vote.NEUTRAL

    def as_tuple(self) -> tuple[Vote, Vote, Vote, Vote]:
        return (self.ema, self.rsi, self.bbands, self.macd)


@dataclass(frozen=True)
class Signal:
    """Immutable output of one analysis.

    Attributes
    ----------
    direction : Direction
        CALL, PUT or ESPERAR.
    strength : int
        Number of core votes (0-4) agreeing with ``direction``; 0 for ESPERAR.
    ema_signal, rsi_signal, bbands_signal, macd_signal : Vote
        Raw per-indicator votes, kept for auditability.
    long_term_trend : Vote
        Higher-timeframe bias. Never counted in ``strength``.
    """

    symbol: str
    direction: Direction
    strength: int
    ema_signal: Vote
    rsi_signal: Vote
    bbands_signal: Vote
    macd_signal: Vote
    long_term_trend: Vote
    created_at: datetime
    id: Optional[int] = None

    @property
    def votes(self) -> IndicatorVotes:
        return IndicatorVotes(
            ema=self.ema_signal,
            rsi=self.rsi_signal,
            bbands=self.bbands_signal,
            macd=self.macd_signal,
        )

    @property
    def is_strong(self) -> bool:
        """Strong = high confluence corroborated by the long-term trend."""
        return is_strong(self.direction, self.strength, self.long_term_trend)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "symbol": self.symbol,
            "direction": self.direction.value,
            "strength": self.strength,
            "emaSignal": self.ema_signal.value,
            "rsiSignal": self.rsi_signal.value,
            "bbandsSignal": self.bbands_signal.value,
            "macdSignal": self.macd_signal.value,
            "longTermTrend": self.long_term_trend.value,
            "createdAt": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, record: dict) -> Signal:
        raw_id = record.get("id")
        signal_id = None if raw_id is None or pd.isna(raw_id) else int(raw_id)
        return cls(
            id=signal_id,
            symbol=str(record["symbol"]),
            direction=Direction(record["direction"]),
            strength=int(record["strength"]),
            ema_signal=Vote(record["emaSignal"]),
            rsi_signal=Vote(record["rsiSignal"]),
            bbands_signal=Vote(record["bbandsSignal"]),
            macd_signal=Vote(record["macdSignal"]),
            long_term_trend=Vote(record["longTermTrend"]),
            created_at=pd.Timestamp(record["createdAt"]).to_pydatetime(),
        )
