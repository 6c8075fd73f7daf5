"""In-memory SignalStore backend for tests and dry runs."""

from __future__ import annotations

import dataclasses
import threading
from typing import Optional

from signal_bot.signals.models import Signal
from ._protocols import select


class InMemorySignalStore:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._signals: list[Signal] = []
        self._next_id = 1

    def save(self, signal: Signal) -> int:
        with self._lock:
            if signal.id is None:
                signal = dataclasses.replace(signal, id=self._next_id)
            elif any(s.id == signal.id for s in self._signals):
                raise ValueError(f"Signal id {signal.id} already stored")
            self._signals.append(signal)
            self._next_id = max(self._next_id, signal.id) + 1
            return signal.id

    def query_recent(self, limit: Optional[int]) -> list[Signal]:
        with self._lock:
            snapshot = list(self._signals)
        return select(snapshot, limit)

    def query_by_min_strength(
        self, min_strength: int, limit: Optional[int], trend_confirmed: bool = False,
    ) -> list[Signal]:
        with self._lock:
            snapshot = list(self._signals)
        return select(snapshot, limit, min_strength=min_strength, trend_confirmed=trend_confirmed)

    def __len__(self) -> int:
        return len(self._signals)
