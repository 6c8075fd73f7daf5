"""Plotting utilities for indicator charts."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import pandas as pd  # noqa: E402

from signal_bot.config import IndicatorConfig  # noqa: E402
from signal_bot.indicators import EMA, BollingerBands  # noqa: E402
from signal_bot.signals.models import Direction, Signal  # noqa: E402

log = logging.getLogger(__name__)

_MARKERS = {
    Direction.CALL: ("^", "#2e9e4f"),
    Direction.PUT: ("v", "#c0392b"),
}


def plot_indicator_chart(
    df: pd.DataFrame,
    out_path: str | Path,
    cfg: Optional[IndicatorConfig] = None,
    signal: Optional[Signal] = None,
    title: str = "",
) -> Path:
    """Plot close price with fast/slow EMA and Bollinger bands, save as PNG.

    Parameters
    ----------
    df : pd.DataFrame
        Price series with ``time`` and ``close`` columns.
    out_path : str | Path
        Destination file path.
    signal : Signal, optional
        When given (and not ESPERAR), marks its direction on the last bar.
    """
    cfg = cfg or IndicatorConfig()
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    fast = EMA(cfg.ema_fast).compute(df).iloc[:, 0]
    slow = EMA(cfg.ema_slow).compute(df).iloc[:, 0]
    bands_ind = BollingerBands(cfg.bb_window, cfg.bb_k)
    bands = bands_ind.compute(df)

    fig, ax = plt.subplots(figsize=(14, 5))
    ax.plot(df["time"], df["close"], linewidth=0.8, color="#d4af37", label="close")
    ax.plot(df["time"], fast, linewidth=0.7, label=f"EMA {cfg.ema_fast}")
    ax.plot(df["time"], slow, linewidth=0.7, label=f"EMA {cfg.ema_slow}")
    ax.fill_between(
        df["time"],
        bands[f"{bands_ind.name}_lower"],
        bands[f"{bands_ind.name}_upper"],
        color="grey", alpha=0.15, label=f"BB {cfg.bb_window}, k={cfg.bb_k:g}",
    )

    if signal is not None and signal.direction in _MARKERS and not df.empty:
        marker, color = _MARKERS[signal.direction]
        ax.scatter(
            [df["time"].iloc[-1]], [df["close"].iloc[-1]],
            marker=marker, s=120, color=color, zorder=5,
            label=f"{signal.direction.value} {signal.strength}/4",
        )

    ax.set_title(title or "Close / EMA / Bollinger")
    ax.set_xlabel("Time")
    ax.set_ylabel("Price")
    ax.grid(True, alpha=0.3)
    ax.legend(loc="upper left", fontsize=8)
    fig.tight_layout()
    fig.savefig(out_path, dpi=100)
    plt.close(fig)

    log.info("Saved indicator chart → %s", out_path)
    return out_path
