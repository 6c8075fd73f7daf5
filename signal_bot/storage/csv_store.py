"""Append-only CSV SignalStore, safe for several writers on one file."""

from __future__ import annotations

import dataclasses
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Optional

import pandas as pd
from filelock import FileLock

from signal_bot.signals.models import Signal
from ._protocols import select

log = logging.getLogger(__name__)

SIGNAL_COLS: list[str] = [
    "id", "symbol", "direction", "strength",
    "emaSignal", "rsiSignal", "bbandsSignal", "macdSignal",
    "longTermTrend", "createdAt",
]


class CsvSignalStore:
    """One CSV file, one row per signal.

    Every instance on the same path (other threads, the scan script, another
    ``signal-bot analyze``) serializes on the sidecar ``<file>.lock``. Under
    that lock ``save`` re-reads the stored ids and appends a single row; the
    existing rows are never rewritten.
    """

    def __init__(self, path: str | Path, lock_timeout: float = 30.0) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()
        self._file_lock = FileLock(f"{self._path}.lock", timeout=lock_timeout)

    @property
    def path(self) -> Path:
        return self._path

    # -- SignalStore interface ---------------------------------------------

    def save(self, signal: Signal) -> int:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._lock, self._file_lock:
            ids = self._read_ids()

            if signal.id is None:
                signal = dataclasses.replace(signal, id=max(ids, default=0) + 1)
            elif signal.id in ids:
                raise ValueError(f"Signal id {signal.id} already stored")

            row = pd.DataFrame([signal.to_dict()], columns=SIGNAL_COLS).astype(str)
            if self._has_rows():
                row.to_csv(self._path, mode="a", header=False, index=False)
            else:
                self._atomic_write_csv(row, self._path)

        log.debug("Appended signal %d to %s", signal.id, self._path)
        return signal.id

    def query_recent(self, limit: Optional[int]) -> list[Signal]:
        return select(self._load(), limit)

    def query_by_min_strength(
        self, min_strength: int, limit: Optional[int], trend_confirmed: bool = False,
    ) -> list[Signal]:
        return select(self._load(), limit, min_strength=min_strength, trend_confirmed=trend_confirmed)

    # -- Private helpers ---------------------------------------------------

    def _has_rows(self) -> bool:
        return self._path.exists() and self._path.stat().st_size > 0

    def _read_frame(self, usecols: Optional[list[str]] = None) -> pd.DataFrame:
        if not self._has_rows():
            return pd.DataFrame(columns=usecols or SIGNAL_COLS)
        # everything as text so symbols like "NA" survive the round-trip
        return pd.read_csv(self._path, dtype=str, keep_default_na=False, usecols=usecols)

    def _read_ids(self) -> set[int]:
        return set(self._read_frame(["id"])["id"].astype("int64").tolist())

    def _load(self) -> list[Signal]:
        if not self._path.parent.exists():
            return []
        with self._lock, self._file_lock:
            df = self._read_frame()
        return [Signal.from_dict(rec) for rec in df.to_dict(orient="records")]

    @staticmethod
    def _atomic_write_csv(df: pd.DataFrame, target: Path) -> None:
        """Write *df* to a temp file then rename, so the header never lands alone."""
        fd, tmp = tempfile.mkstemp(
            dir=target.parent, suffix=".tmp", prefix=target.stem,
        )
        try:
            os.close(fd)
            df.to_csv(tmp, index=False)
            os.replace(tmp, target)
        except BaseException:
            if os.path.exists(tmp):
                os.remove(tmp)
            raise
