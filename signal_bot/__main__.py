"""Unified entry point: ``python -m signal_bot <command> [args...]``."""

from __future__ import annotations

import argparse
import json
import logging
import sys

log = logging.getLogger(__name__)

COMMANDS = {
    "assets": "List active assets",
    "analyze": "Analyze one symbol and store the resulting signal",
    "recent": "Most recent signals",
    "strong": "Most recent signals at or above a strength",
    "chart": "Render close/EMA/Bollinger chart for a symbol",
}


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def _usage() -> None:
    logging.basicConfig(level=logging.INFO)
    log.error("Usage: python -m signal_bot <command> [args...]")
    log.error("Available commands:")
    for name, help_text in COMMANDS.items():
        log.error("  %-8s - %s", name, help_text)


def _parser(command: str) -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog=f"signal_bot {command}", description=COMMANDS[command])
    p.add_argument("--config", default="configs/default.yaml", help="Path to YAML config (default: %(default)s)")
    p.add_argument("--verbose", action="store_true", help="Debug logging")

    if command in ("analyze", "chart"):
        p.add_argument("--symbol", required=True, help="Asset symbol, e.g. EURUSD=X")
    if command in ("recent", "strong"):
        p.add_argument("--limit", type=int, default=20 if command == "recent" else 10)
    if command == "strong":
        p.add_argument("--min-strength", type=int, default=3)
        p.add_argument("--confirmed", action="store_true", help="Only strong signals (strength >= 3, 1h trend agrees)")
    if command == "chart":
        p.add_argument("--out", default=None, help="PNG path (default: runs/charts/<symbol>.png)")
        p.add_argument("--analyze", action="store_true", help="Also run and mark a fresh analysis")
    return p


def _emit(payload) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv or argv[0] not in COMMANDS:
        _usage()
        if argv:
            log.error("Unknown command: %s", argv[0])
        return 1

    command = argv[0]
    args = _parser(command).parse_args(argv[1:])
    _configure_logging(args.verbose)

    from signal_bot.config import AppConfig
    from signal_bot.service import SignalBotError, SignalService

    try:
        cfg = AppConfig.from_yaml(args.config)
        service = SignalService.from_config(cfg)

        if command == "assets":
            _emit([
                {"id": a.id, "symbol": a.symbol, "name": a.name, "active": a.active}
                for a in service.get_active_assets()
            ])
        elif command == "analyze":
            _emit(service.analyze(args.symbol).to_dict())
        elif command == "recent":
            _emit([s.to_dict() for s in service.get_recent(args.limit)])
        elif command == "strong":
            signals = service.get_strong(args.min_strength, args.limit, trend_confirmed=args.confirmed)
            _emit([s.to_dict() for s in signals])
        elif command == "chart":
            from signal_bot.reporting import plot_indicator_chart

            signal = service.analyze(args.symbol) if args.analyze else None
            history = service.fetch_history(args.symbol, "short")
            safe = args.symbol.replace("=", "_").replace("/", "_")
            out = args.out or f"runs/charts/{safe}.png"
            path = plot_indicator_chart(
                history, out, cfg.indicators, signal=signal,
                title=f"{args.symbol} {cfg.data.short_interval}",
            )
            _emit({"chart": str(path)})
    except SignalBotError as exc:
        log.error("%s", exc)
        return 1
    except (ValueError, OSError) as exc:
        log.error("Configuration or I/O error: %s", exc)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
