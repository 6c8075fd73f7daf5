"""Service layer: orchestration and the errors it surfaces."""

from .errors import DataUnavailable, PersistenceError, SignalBotError, UnknownAsset
from .signal_service import SignalService

__all__ = [
    "DataUnavailable",
    "PersistenceError",
    "SignalBotError",
    "UnknownAsset",
    "SignalService",
]
