"""Signal layer: value objects, trend filter and confluence scoring."""

from .models import Asset, Direction, IndicatorVotes, Signal, STRONG_MIN_STRENGTH, Vote, is_strong
from .confluence import ConfluenceResult, ConfluenceScorer
from .trend import TrendFilter

__all__ = [
    "Asset",
    "Direction",
    "IndicatorVotes",
    "Signal",
    "STRONG_MIN_STRENGTH",
    "Vote",
    "ConfluenceResult",
    "ConfluenceScorer",
    "is_strong",
    "TrendFilter",
]
