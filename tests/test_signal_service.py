"""SignalService orchestration: resolution, retries, scoring wiring, persistence."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta, timezone

import numpy as np
import pandas as pd
import pytest

from signal_bot.config import AppConfig, DataConfig
from signal_bot.data import FramePriceSource, InMemoryAssetCatalog
from signal_bot.service import DataUnavailable, PersistenceError, SignalService, UnknownAsset
from signal_bot.signals.models import Asset, Direction, IndicatorVotes, Signal, Vote
from signal_bot.storage import InMemorySignalStore

T0 = datetime(2024, 5, 6, 9, 30, tzinfo=timezone.utc)

C, P, N = Vote.CALL, Vote.PUT, Vote.NEUTRAL


# ── helpers ──────────────────────────────────────────────────────────────

def _frame(close, freq: str = "5min") -> pd.DataFrame:
    close = np.asarray(close, dtype=float)
    return pd.DataFrame({
        "time": pd.date_range("2024-05-01", periods=len(close), freq=freq, tz="UTC"),
        "open": close,
        "high": close + 0.05,
        "low": close - 0.05,
        "close": close,
        "volume": np.full(len(close), 500.0),
    })


def _catalog() -> InMemoryAssetCatalog:
    return InMemoryAssetCatalog([
        Asset(1, "EURUSD=X", "EUR/USD"),
        Asset(2, "BTC-USD", "Bitcoin"),
        Asset(7, "USDCAD=X", "USD/CAD", active=False),
    ])


def _source() -> FramePriceSource:
    short = _frame(100 + np.sin(np.linspace(0, 6, 80)))
    long = _frame(np.linspace(100, 110, 40), freq="1h")
    return FramePriceSource({
        ("EURUSD=X", "5m"): short,
        ("EURUSD=X", "1h"): long,
        ("BTC-USD", "5m"): short,
        ("BTC-USD", "1h"): long,
    })


class _Clock:
    def __init__(self) -> None:
        self.now = T0

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(minutes=1)
        return current


class _FlakySource:
    """Raises ``failures`` times, then delegates."""

    def __init__(self, inner, failures: int) -> None:
        self.inner = inner
        self.failures = failures
        self.attempts = 0

    def fetch(self, symbol, interval, period):
        self.attempts += 1
        if self.attempts <= self.failures:
            raise ConnectionError("provider timeout")
        return self.inner.fetch(symbol, interval, period)


class _StubEngine:
    def __init__(self, votes: IndicatorVotes) -> None:
        self.votes = votes

    def compute(self, series):
        return self.votes


class _StubTrend:
    def __init__(self, bias: Vote) -> None:
        self._bias = bias

    def bias(self, series):
        return self._bias


class _BrokenStore(InMemorySignalStore):
    def save(self, signal):
        raise OSError("disk full")


def _service(source=None, store=None, config=None):
    sleeps: list[float] = []
    svc = SignalService(
        _catalog(),
        source if source is not None else _source(),
        store if store is not None else InMemorySignalStore(),
        config,
        clock=_Clock(),
        sleep=sleeps.append,
    )
    return svc, sleeps


def _stubbed(votes, trend: Vote):
    svc, _ = _service()
    svc.engine = _StubEngine(IndicatorVotes(*votes))
    svc.trend_filter = _StubTrend(trend)
    return svc


# ── happy path ───────────────────────────────────────────────────────────

def test_analyze_persists_and_returns_signal():
    store = InMemorySignalStore()
    svc, sleeps = _service(store=store)

    signal = svc.analyze("EURUSD=X")

    assert signal.id == 1
    assert signal.symbol == "EURUSD=X"
    assert signal.created_at == T0
    assert signal.long_term_trend is Vote.CALL   # steadily rising 1h series
    assert store.query_recent(None) == [signal]
    assert sleeps == []


def test_strength_matches_recorded_votes():
    svc, _ = _service()
    signal = svc.analyze("EURUSD=X")
    if signal.direction is Direction.ESPERAR:
        assert signal.strength == 0
    else:
        agreeing = sum(v.value == signal.direction.value for v in signal.votes.as_tuple())
        assert signal.strength == agreeing >= 3


def test_fetches_short_and_long_windows():
    source = _source()
    svc, _ = _service(source=source)
    svc.analyze("EURUSD=X")
    assert source.calls == [("EURUSD=X", "5m", "5d"), ("EURUSD=X", "1h", "1mo")]


def test_short_history_yields_esperar_without_error():
    source = FramePriceSource({
        ("EURUSD=X", "5m"): _frame(np.linspace(100, 101, 10)),
        ("EURUSD=X", "1h"): _frame(np.linspace(100, 101, 5), freq="1h"),
    })
    svc, _ = _service(source=source)
    signal = svc.analyze("EURUSD=X")
    assert signal.direction is Direction.ESPERAR
    assert signal.strength == 0
    assert signal.votes == IndicatorVotes()
    assert signal.long_term_trend is Vote.NEUTRAL
    assert signal.id == 1


def test_real_votes_flow_into_a_strong_signal():
    close = 100.0 + np.arange(120, dtype=float)
    close[-1] = close[-2] - 35.0
    source = FramePriceSource({
        ("EURUSD=X", "5m"): _frame(close),
        ("EURUSD=X", "1h"): _frame(np.linspace(100, 110, 40), freq="1h"),
    })
    svc, _ = _service(source=source)

    signal = svc.analyze("EURUSD=X")

    assert signal.votes == IndicatorVotes(C, C, C, P)
    assert (signal.direction, signal.strength) == (Direction.CALL, 3)
    assert signal.long_term_trend is Vote.CALL
    assert signal.is_strong
    assert svc.get_strong(trend_confirmed=True) == [signal]


# ── asset resolution ─────────────────────────────────────────────────────

def test_unknown_symbol_raises_and_fetches_nothing():
    source = _source()
    svc, _ = _service(source=source)
    with pytest.raises(UnknownAsset, match="not found"):
        svc.analyze("DOGE-USD")
    assert source.calls == []


def test_inactive_symbol_is_rejected():
    svc, _ = _service()
    with pytest.raises(UnknownAsset, match="inactive") as exc_info:
        svc.analyze("USDCAD=X")
    assert isinstance(exc_info.value, LookupError)
    assert svc.get_recent() == []


def test_active_assets_sorted_by_id():
    svc, _ = _service()
    assert [a.symbol for a in svc.get_active_assets()] == ["EURUSD=X", "BTC-USD"]


# ── data failures ────────────────────────────────────────────────────────

def test_retries_with_exponential_backoff_then_fails():
    store = InMemorySignalStore()
    flaky = _FlakySource(_source(), failures=10)
    svc, sleeps = _service(source=flaky, store=store)

    with pytest.raises(DataUnavailable, match="failed after 3 attempt") as exc_info:
        svc.analyze("EURUSD=X")

    assert flaky.attempts == 3
    assert sleeps == [1.0, 2.0]
    assert isinstance(exc_info.value.__cause__, ConnectionError)
    assert store.query_recent(None) == []


def test_recovers_after_transient_failure():
    flaky = _FlakySource(_source(), failures=1)
    svc, sleeps = _service(source=flaky)
    signal = svc.analyze("EURUSD=X")
    assert signal.id == 1
    assert sleeps == [1.0]


def test_retry_count_is_configurable():
    flaky = _FlakySource(_source(), failures=10)
    cfg = AppConfig(data=DataConfig(fetch_retries=1))
    svc, sleeps = _service(source=flaky, config=cfg)
    with pytest.raises(DataUnavailable):
        svc.analyze("EURUSD=X")
    assert flaky.attempts == 1
    assert sleeps == []


def test_empty_history_is_data_unavailable():
    svc, sleeps = _service(source=FramePriceSource())
    with pytest.raises(DataUnavailable, match="no rows"):
        svc.analyze("EURUSD=X")
    assert sleeps == []


def test_malformed_history_is_data_unavailable():
    bad = _frame(np.linspace(100, 101, 40))
    bad.loc[5, "time"] = bad.loc[4, "time"]
    source = _source()
    source.add("EURUSD=X", "5m", bad)
    svc, _ = _service(source=source)
    with pytest.raises(DataUnavailable, match="Duplicate timestamps") as exc_info:
        svc.analyze("EURUSD=X")
    assert isinstance(exc_info.value.__cause__, ValueError)


# ── persistence ──────────────────────────────────────────────────────────

def test_store_failure_is_persistence_error():
    svc, _ = _service(store=_BrokenStore())
    with pytest.raises(PersistenceError) as exc_info:
        svc.analyze("EURUSD=X")
    assert isinstance(exc_info.value.__cause__, OSError)


# ── scoring scenarios (stubbed votes) ────────────────────────────────────

def test_three_calls_with_confirming_trend_is_strong():
    svc = _stubbed((C, C, C, N), C)
    signal = svc.analyze("EURUSD=X")
    assert (signal.direction, signal.strength) == (Direction.CALL, 3)
    assert signal.is_strong
    assert svc.get_strong(trend_confirmed=True) == [signal]


def test_four_puts_counter_trend_not_strong():
    svc = _stubbed((P, P, P, P), C)
    signal = svc.analyze("EURUSD=X")
    assert (signal.direction, signal.strength) == (Direction.PUT, 4)
    assert not signal.is_strong


def test_split_votes_wait():
    svc = _stubbed((C, C, P, P), C)
    signal = svc.analyze("EURUSD=X")
    assert (signal.direction, signal.strength) == (Direction.ESPERAR, 0)
    assert signal.long_term_trend is Vote.CALL


def test_counter_trend_signal_listed_but_not_confirmed():
    svc = _stubbed((C, C, C, N), P)
    signal = svc.analyze("EURUSD=X")
    assert (signal.direction, signal.strength) == (Direction.CALL, 3)
    assert svc.get_strong() == [signal]
    assert svc.get_strong(trend_confirmed=True) == []


def test_recorded_votes_are_the_computed_votes():
    svc = _stubbed((C, N, P, C), N)
    signal = svc.analyze("EURUSD=X")
    assert signal.votes == IndicatorVotes(C, N, P, C)
    assert signal.direction is Direction.ESPERAR


def test_confirmed_view_excludes_weak_signals_at_low_threshold():
    cfg = AppConfig.from_dict({"scoring": {"confluence_threshold": 2}})
    svc, _ = _service(config=cfg)
    svc.engine = _StubEngine(IndicatorVotes(C, C, N, N))
    svc.trend_filter = _StubTrend(C)

    signal = svc.analyze("EURUSD=X")

    assert (signal.direction, signal.strength) == (Direction.CALL, 2)
    assert not signal.is_strong
    assert svc.get_strong(min_strength=2) == [signal]
    assert svc.get_strong(min_strength=2, trend_confirmed=True) == []


# ── queries ──────────────────────────────────────────────────────────────

def test_recent_and_strong_queries():
    svc, _ = _service()
    svc.engine = _StubEngine(IndicatorVotes(C, C, C, C))
    first = svc.analyze("EURUSD=X")
    svc.engine = _StubEngine(IndicatorVotes(C, P, N, N))
    second = svc.analyze("BTC-USD")

    assert svc.get_recent() == [second, first]
    assert svc.get_recent(1) == [second]
    assert svc.get_strong(min_strength=3) == [first]
    assert svc.get_strong(min_strength=0) == [second, first]


def test_analyze_many_collects_errors_per_symbol():
    svc, _ = _service()
    results = svc.analyze_many(["EURUSD=X", "NOPE", "BTC-USD"])
    assert list(results) == ["EURUSD=X", "NOPE", "BTC-USD"]
    assert isinstance(results["EURUSD=X"], Signal)
    assert isinstance(results["NOPE"], UnknownAsset)
    assert isinstance(results["BTC-USD"], Signal)
    assert len(svc.get_recent(None)) == 2


def test_fetch_history_windows():
    svc, _ = _service()
    assert len(svc.fetch_history("EURUSD=X")) == 80
    assert len(svc.fetch_history("EURUSD=X", "long")) == 40
    with pytest.raises(ValueError, match="timeframe"):
        svc.fetch_history("EURUSD=X", "weekly")


def test_from_config_uses_memory_backend(tmp_path):
    assets = tmp_path / "assets.yaml"
    assets.write_text('assets:\n  - {id: 1, symbol: "EURUSD=X", name: "EUR/USD"}\n')
    cfg = AppConfig.from_dict({"assets_file": str(assets), "store": {"backend": "memory"}})
    svc = SignalService.from_config(cfg, price_source=_source())
    assert isinstance(svc.store, InMemorySignalStore)
    assert svc.analyze("EURUSD=X").id == 1
