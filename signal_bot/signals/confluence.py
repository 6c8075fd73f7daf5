"""ConfluenceScorer: turns four indicator votes into a direction and strength.

Rules:
  1. count CALL and PUT votes
  2. the majority wins; a tie is always ESPERAR (no arbitrary pick)
  3. a winner below the confluence threshold is downgraded to ESPERAR
  4. strength = winning count, or 0 for ESPERAR

"Strong" is derived from (direction, strength, trend) at read time and is
never stored.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from signal_bot.config import ScoringConfig
from .models import Direction, IndicatorVotes, Vote

N_VOTES = 4


@dataclass(frozen=True)
class ConfluenceResult:
    direction: Direction
    strength: int
    n_call: int
    n_put: int


class ConfluenceScorer:
    """Pure function of its inputs; the instance only carries the threshold."""

    def __init__(self, config: Optional[ScoringConfig] = None) -> None:
        self.config = config or ScoringConfig()
        if not 1 <= self.config.confluence_threshold <= N_VOTES:
            raise ValueError(
                f"confluence_threshold must be in 1..{N_VOTES}, "
                f"got {self.config.confluence_threshold}"
            )

    @property
    def threshold(self) -> int:
        return self.config.confluence_threshold

    def score(self, votes: IndicatorVotes, trend: Vote = Vote.NEUTRAL) -> ConfluenceResult:
        # trend never moves strength, see models.is_strong()
        values = votes.as_tuple()
        n_call = sum(1 for v in values if v is Vote.CALL)
        n_put = sum(1 for v in values if v is Vote.PUT)

        if n_call > n_put:
            direction, count = Direction.CALL, n_call
        elif n_put > n_call:
            direction, count = Direction.PUT, n_put
        else:
            direction, count = Direction.ESPERAR, 0

        if direction is not Direction.ESPERAR and count < self.threshold:
            direction, count = Direction.ESPERAR, 0

        return ConfluenceResult(
            direction=direction,
            strength=count,
            n_call=n_call,
            n_put=n_put,
        )
