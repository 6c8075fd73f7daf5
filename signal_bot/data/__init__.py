"""
signal_bot.data: price-history and asset-catalog collaborators.

The service depends only on the :class:`PriceSource` and
:class:`AssetCatalog` protocols; Yahoo Finance is the production source and
:class:`FramePriceSource` replays frames held in memory or on disk.
"""

from ._protocols import PRICE_COLS, AssetCatalog, PriceSource, empty_price_frame
from ._frame_source import FramePriceSource
from ._yahoo_source import YahooPriceSource, normalize_yahoo_frame
from .catalog import InMemoryAssetCatalog, YamlAssetCatalog
from .validation import validate_price_series

__all__ = [
    "PRICE_COLS",
    "AssetCatalog",
    "PriceSource",
    "empty_price_frame",
    "FramePriceSource",
    "YahooPriceSource",
    "normalize_yahoo_frame",
    "InMemoryAssetCatalog",
    "YamlAssetCatalog",
    "validate_price_series",
]
