"""Asset catalog backends: in-memory and YAML file."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

import yaml

from signal_bot.signals.models import Asset

log = logging.getLogger(__name__)


class InMemoryAssetCatalog:
    def __init__(self, assets: Iterable[Asset] = ()) -> None:
        self._by_symbol: dict[str, Asset] = {}
        for asset in assets:
            if asset.symbol in self._by_symbol:
                raise ValueError(f"Duplicate asset symbol: {asset.symbol}")
            self._by_symbol[asset.symbol] = asset

    def get(self, symbol: str) -> Optional[Asset]:
        return self._by_symbol.get(symbol)

    def active(self) -> list[Asset]:
        return sorted(
            (a for a in self._by_symbol.values() if a.active),
            key=lambda a: a.id,
        )

    def __len__(self) -> int:
        return len(self._by_symbol)


class YamlAssetCatalog(InMemoryAssetCatalog):
    """Catalog read once from a YAML file with a top-level ``assets`` list::

        assets:
          - {id: 1, symbol: "EURUSD=X", name: "EUR/USD", active: true}
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        with open(self._path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

        records = raw.get("assets", []) if isinstance(raw, dict) else None
        if not isinstance(records, list):
            raise ValueError(f"{self._path}: 'assets' must be a list")

        assets = []
        for i, rec in enumerate(records):
            try:
                active = rec.get("active", True)
                if not isinstance(active, bool):
                    raise TypeError(f"active must be true or false, got {active!r}")
                assets.append(
                    Asset(
                        id=int(rec["id"]),
                        symbol=str(rec["symbol"]),
                        name=str(rec.get("name", rec["symbol"])),
                        active=active,
                    )
                )
            except (AttributeError, KeyError, TypeError, ValueError) as exc:
                raise ValueError(f"{self._path}: bad asset record #{i}: {rec!r}") from exc

        super().__init__(assets)
        log.info("Loaded %d assets (%d active) from %s", len(self), len(self.active()), self._path)
