"""SignalStore contract plus the ordering/filter rules every backend shares."""

from __future__ import annotations

from typing import Iterable, Optional, Protocol, runtime_checkable

from signal_bot.signals.models import Signal


@runtime_checkable
class SignalStore(Protocol):
    """Append-only persistence for generated signals.

    No update or delete: records are immutable once saved. ``limit=None``
    means unbounded; an empty result is an empty list, never an error.
    """

    def save(self, signal: Signal) -> int: ...
    def query_recent(self, limit: Optional[int]) -> list[Signal]: ...
    def query_by_min_strength(
        self, min_strength: int, limit: Optional[int], trend_confirmed: bool = False,
    ) -> list[Signal]: ...


def check_limit(limit: Optional[int]) -> None:
    if limit is not None and limit < 0:
        raise ValueError(f"limit must be >= 0 or None, got {limit}")


def newest_first(signals: Iterable[Signal]) -> list[Signal]:
    """Descending by ``created_at``; equal timestamps keep later saves first."""
    return sorted(signals, key=lambda s: (s.created_at, s.id or 0), reverse=True)


def select(
    signals: Iterable[Signal],
    limit: Optional[int],
    min_strength: Optional[int] = None,
    trend_confirmed: bool = False,
) -> list[Signal]:
    check_limit(limit)
    out = newest_first(signals)
    if min_strength is not None:
        out = [s for s in out if s.strength >= min_strength]
    if trend_confirmed:
        out = [s for s in out if s.is_strong]
    return out if limit is None else out[:limit]
