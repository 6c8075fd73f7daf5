"""Batch runner: analyzes every active asset once and prints a summary table."""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

import pandas as pd

# Ensure repo root is importable
_REPO_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(_REPO_ROOT))

from signal_bot.config import AppConfig  # noqa: E402
from signal_bot.service import SignalService  # noqa: E402
from signal_bot.signals import Signal  # noqa: E402

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger(__name__)

SUMMARY_COLS = [
    "symbol",
    "direction",
    "strength",
    "strong",
    "ema",
    "rsi",
    "bbands",
    "macd",
    "trend_1h",
    "error",
]


def main() -> None:
    p = argparse.ArgumentParser(description="Analyze all active assets once")
    p.add_argument("--config", default="configs/default.yaml", help="Path to YAML config file")
    args = p.parse_args()

    cfg = AppConfig.from_yaml(args.config)
    service = SignalService.from_config(cfg)
    symbols = [a.symbol for a in service.get_active_assets()]
    if not symbols:
        log.error("No active assets in %s", cfg.assets_file)
        sys.exit(1)

    log.info("Scanning %d assets: %s", len(symbols), ", ".join(symbols))
    results = service.analyze_many(symbols)

    rows: list[dict] = []
    for symbol, outcome in results.items():
        if isinstance(outcome, Signal):
            rows.append({
                "symbol": symbol,
                "direction": outcome.direction.value,
                "strength": outcome.strength,
                "strong": outcome.is_strong,
                "ema": outcome.ema_signal.value,
                "rsi": outcome.rsi_signal.value,
                "bbands": outcome.bbands_signal.value,
                "macd": outcome.macd_signal.value,
                "trend_1h": outcome.long_term_trend.value,
                "error": "",
            })
        else:
            rows.append({"symbol": symbol, "error": str(outcome)})

    summary = pd.DataFrame(rows, columns=SUMMARY_COLS).fillna("")

    print("\n" + "=" * 80)
    print("SIGNAL SCAN")
    print("=" * 80)
    print(summary.to_string(index=False))
    print("=" * 80 + "\n")

    out_dir = _REPO_ROOT / "runs"
    out_dir.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    out_path = out_dir / f"scan_{stamp}.csv"
    summary.to_csv(out_path, index=False)
    log.info("Summary saved to %s", out_path)

    if all(not isinstance(o, Signal) for o in results.values()):
        sys.exit(1)


if __name__ == "__main__":
    main()
