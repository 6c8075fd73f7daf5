"""Signal persistence: the append-only SignalStore contract and its backends."""

from ._protocols import SignalStore, newest_first, select
from .csv_store import CsvSignalStore
from .memory import InMemorySignalStore

__all__ = [
    "SignalStore",
    "newest_first",
    "select",
    "CsvSignalStore",
    "InMemorySignalStore",
]
