"""SignalService: orchestrates fetch → votes → trend → scoring → store."""

from __future__ import annotations

import logging
import time
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional, Union

import pandas as pd

from signal_bot.config import AppConfig, DataConfig, resolve_path
from signal_bot.data import (
    AssetCatalog,
    PriceSource,
    YahooPriceSource,
    YamlAssetCatalog,
    validate_price_series,
)
from signal_bot.indicators import IndicatorEngine
from signal_bot.signals import Asset, ConfluenceScorer, Signal, TrendFilter
from signal_bot.storage import CsvSignalStore, InMemorySignalStore, SignalStore
from .errors import DataUnavailable, PersistenceError, SignalBotError, UnknownAsset

log = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SignalService:
    """Public entry point for analysis and signal queries.

    Parameters
    ----------
    catalog : AssetCatalog
        Resolves symbols to active assets.
    price_source : PriceSource
        Supplies the short (indicator) and long (trend) series.
    store : SignalStore
        Append-only signal log.
    config : AppConfig, optional
        Indicator, trend, scoring and data settings.
    clock, sleep :
        Injected for deterministic tests.
    """

    def __init__(
        self,
        catalog: AssetCatalog,
        price_source: PriceSource,
        store: SignalStore,
        config: Optional[AppConfig] = None,
        clock: Callable[[], datetime] = _utcnow,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config or AppConfig()
        self.catalog = catalog
        self.price_source = price_source
        self.store = store
        self.engine = IndicatorEngine(self.config.indicators)
        self.trend_filter = TrendFilter(self.config.trend)
        self.scorer = ConfluenceScorer(self.config.scoring)
        self._clock = clock
        self._sleep = sleep

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        price_source: Optional[PriceSource] = None,
        store: Optional[SignalStore] = None,
        catalog: Optional[AssetCatalog] = None,
    ) -> SignalService:
        """Wire the production collaborators named in *config*."""
        if catalog is None:
            catalog = YamlAssetCatalog(resolve_path(config.assets_file))
        if store is None:
            if config.store.backend == "memory":
                store = InMemorySignalStore()
            else:
                store = CsvSignalStore(resolve_path(config.store.path))
        if price_source is None:
            price_source = YahooPriceSource()
        return cls(catalog, price_source, store, config)

    # -- Public API --------------------------------------------------------

    def get_active_assets(self) -> list[Asset]:
        return self.catalog.active()

    def analyze(self, symbol: str) -> Signal:
        """Compute, persist and return a new signal for *symbol*.

        Raises
        ------
        UnknownAsset
            Symbol missing from the catalog or inactive.
        DataUnavailable
            Price history could not be fetched or validated.
        PersistenceError
            The store failed to save the record.
        """
        asset = self._resolve(symbol)
        data = self.config.data

        short = self._fetch_series(asset.symbol, data.short_interval, data.short_period)
        long = self._fetch_series(asset.symbol, data.long_interval, data.long_period)

        votes = self.engine.compute(short)
        trend = self.trend_filter.bias(long)
        result = self.scorer.score(votes, trend)

        signal = Signal(
            symbol=asset.symbol,
            direction=result.direction,
            strength=result.strength,
            ema_signal=votes.ema,
            rsi_signal=votes.rsi,
            bbands_signal=votes.bbands,
            macd_signal=votes.macd,
            long_term_trend=trend,
            created_at=self._clock(),
        )

        try:
            signal_id = self.store.save(signal)
        except Exception as exc:
            log.error("Could not persist signal for %s: %s", asset.symbol, exc)
            raise PersistenceError(f"Failed to save signal for '{asset.symbol}': {exc}") from exc

        signal = replace(signal, id=signal_id)
        log.info(
            "Signal #%d %s: %s strength=%d/4 trend=%s%s",
            signal_id, signal.symbol, signal.direction.value, signal.strength,
            signal.long_term_trend.value, " [strong]" if signal.is_strong else "",
        )
        return signal

    def analyze_many(self, symbols: Iterable[str]) -> dict[str, Union[Signal, SignalBotError]]:
        """Analyze each symbol in turn; a failure is logged and returned in its slot."""
        results: dict[str, Union[Signal, SignalBotError]] = {}
        for symbol in symbols:
            try:
                results[symbol] = self.analyze(symbol)
            except SignalBotError as exc:
                log.error("Analysis of %s failed: %s", symbol, exc)
                results[symbol] = exc
        return results

    def get_recent(self, limit: Optional[int] = 20) -> list[Signal]:
        return self.store.query_recent(limit)

    def get_strong(
        self,
        min_strength: int = 3,
        limit: Optional[int] = 10,
        trend_confirmed: bool = False,
    ) -> list[Signal]:
        """Most recent first, ``strength >= min_strength``.

        With ``trend_confirmed`` only strong signals are returned, see
        :func:`signal_bot.signals.models.is_strong`.
        """
        return self.store.query_by_min_strength(min_strength, limit, trend_confirmed)

    def fetch_history(self, symbol: str, timeframe: str = "short") -> pd.DataFrame:
        """Validated price series for an active asset: ``"short"`` or ``"long"`` window."""
        asset = self._resolve(symbol)
        data = self.config.data
        if timeframe == "short":
            return self._fetch_series(asset.symbol, data.short_interval, data.short_period)
        if timeframe == "long":
            return self._fetch_series(asset.symbol, data.long_interval, data.long_period)
        raise ValueError(f"timeframe must be 'short' or 'long', got '{timeframe}'")

    # -- Private helpers ---------------------------------------------------

    def _resolve(self, symbol: str) -> Asset:
        asset = self.catalog.get(symbol)
        if asset is None:
            raise UnknownAsset(symbol)
        if not asset.active:
            raise UnknownAsset(symbol, "inactive")
        return asset

    def _fetch_series(self, symbol: str, interval: str, period: str) -> pd.DataFrame:
        df = self._fetch_with_retry(symbol, interval, period, self.config.data)

        if df.empty:
            raise DataUnavailable(symbol, interval, "provider returned no rows")
        try:
            validate_price_series(df)
        except ValueError as exc:
            raise DataUnavailable(symbol, interval, str(exc)) from exc

        return df.reset_index(drop=True)

    def _fetch_with_retry(
        self, symbol: str, interval: str, period: str, cfg: DataConfig,
    ) -> pd.DataFrame:
        last_err: Optional[Exception] = None
        for attempt in range(1, cfg.fetch_retries + 1):
            try:
                return self.price_source.fetch(symbol, interval, period)
            except Exception as exc:
                last_err = exc
                if attempt < cfg.fetch_retries:
                    delay = cfg.fetch_backoff_sec * 2 ** (attempt - 1)
                    log.warning(
                        "Price fetch %s/%s failed (attempt %d/%d): %s; retrying in %.1fs ...",
                        symbol, interval, attempt, cfg.fetch_retries, exc, delay,
                    )
                    self._sleep(delay)

        raise DataUnavailable(
            symbol, interval, f"failed after {cfg.fetch_retries} attempt(s): {last_err}",
        ) from last_err
