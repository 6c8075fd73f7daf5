"""Immutable configuration for the signal engine, loaded from YAML."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional

import yaml

_REPO_ROOT = Path(__file__).resolve().parent.parent


@dataclass(frozen=True)
class IndicatorConfig:
    """Periods and thresholds for the four core indicators."""

    ema_fast: int = 9
    ema_slow: int = 21
    ema_min_separation: float = 0.0005  # relative to the slow EMA
    rsi_period: int = 14
    rsi_oversold: float = 30.0
    rsi_overbought: float = 70.0
    bb_window: int = 20
    bb_k: float = 2.0
    macd_fast: int = 12
    macd_slow: int = 26
    macd_signal: int = 9

    def __post_init__(self) -> None:
        if not 0 < self.ema_fast < self.ema_slow:
            raise ValueError(
                f"ema_fast ({self.ema_fast}) must be positive and below ema_slow ({self.ema_slow})"
            )
        if not 0 < self.macd_fast < self.macd_slow:
            raise ValueError(
                f"macd_fast ({self.macd_fast}) must be positive and below macd_slow ({self.macd_slow})"
            )
        if not 0 <= self.rsi_oversold < self.rsi_overbought <= 100:
            raise ValueError(
                f"RSI thresholds out of order: {self.rsi_oversold}/{self.rsi_overbought}"
            )
        for name in ("rsi_period", "bb_window", "macd_signal"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be >= 1")
        if self.bb_k <= 0:
            raise ValueError("bb_k must be positive")
        if self.ema_min_separation < 0:
            raise ValueError("ema_min_separation must be >= 0")


@dataclass(frozen=True)
class TrendConfig:
    """Higher-timeframe moving-average slope filter."""

    period: int = 20
    slope_lookback: int = 3
    threshold: float = 0.0005  # relative MA change over slope_lookback samples

    def __post_init__(self) -> None:
        if self.period < 1 or self.slope_lookback < 1:
            raise ValueError("trend period and slope_lookback must be >= 1")
        if self.threshold < 0:
            raise ValueError("trend threshold must be >= 0")


@dataclass(frozen=True)
class ScoringConfig:
    confluence_threshold: int = 3


@dataclass(frozen=True)
class DataConfig:
    """Price-history windows and fetch retry policy."""

    short_interval: str = "5m"
    short_period: str = "5d"
    long_interval: str = "1h"
    long_period: str = "1mo"
    fetch_retries: int = 3
    fetch_backoff_sec: float = 1.0

    def __post_init__(self) -> None:
        if self.fetch_retries < 1:
            raise ValueError("fetch_retries must be >= 1")
        if self.fetch_backoff_sec < 0:
            raise ValueError("fetch_backoff_sec must be >= 0")


@dataclass(frozen=True)
class StoreConfig:
    backend: str = "csv"  # "csv" or "memory"
    path: str = "runs/signals.csv"

    def __post_init__(self) -> None:
        if self.backend not in ("csv", "memory"):
            raise ValueError(f"Unknown store backend '{self.backend}'. Expected 'csv' or 'memory'")


@dataclass(frozen=True)
class AppConfig:
    """Top-level bag of settings, one section per YAML block."""

    indicators: IndicatorConfig = field(default_factory=IndicatorConfig)
    trend: TrendConfig = field(default_factory=TrendConfig)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    data: DataConfig = field(default_factory=DataConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    assets_file: str = "configs/assets.yaml"

    @classmethod
    def from_dict(cls, raw: Optional[dict]) -> AppConfig:
        raw = dict(raw or {})
        sections = {
            "indicators": IndicatorConfig,
            "trend": TrendConfig,
            "scoring": ScoringConfig,
            "data": DataConfig,
            "store": StoreConfig,
        }
        unknown = set(raw) - set(sections) - {"assets_file"}
        if unknown:
            raise ValueError(f"Unknown config sections: {sorted(unknown)}")

        kwargs: dict = {}
        for key, section_cls in sections.items():
            if key in raw:
                kwargs[key] = _build_section(section_cls, raw[key], key)
        if "assets_file" in raw:
            kwargs["assets_file"] = str(raw["assets_file"])
        return cls(**kwargs)

    @classmethod
    def from_yaml(cls, path: str | Path) -> AppConfig:
        """Load a config file. Relative paths resolve against the repo root."""
        cfg_path = resolve_path(path)
        with open(cfg_path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
        if raw is not None and not isinstance(raw, dict):
            raise ValueError(f"Config {cfg_path} must be a mapping, got {type(raw).__name__}")
        return cls.from_dict(raw)


def _build_section(section_cls: type, values: Optional[dict], key: str):
    values = dict(values or {})
    allowed = {f.name for f in fields(section_cls)}
    unknown = set(values) - allowed
    if unknown:
        raise ValueError(f"Unknown keys in '{key}' config: {sorted(unknown)}")
    return section_cls(**values)


def resolve_path(path: str | Path) -> Path:
    p = Path(path)
    if not p.is_absolute() and not p.exists():
        p = _REPO_ROOT / p
    return p
