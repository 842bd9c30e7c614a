from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from pydantic import ValidationError

from domain.assets import Asset, AssetId
from domain.pricing import CatalogProvider

logger = logging.getLogger(__name__)

DEFAULT_FIAT_CODES = ("usd", "eur", "uzs", "rub", "gbp", "try", "kzt")
DEFAULT_SEARCH_LIMIT = 12


class AssetDirectory:
    """In-memory catalog of tradable assets plus the fixed set of fiat codes.

    The catalog keeps provider order and is never mutated after a load; a new
    ``load`` replaces it wholesale. ``search`` is a pure lookup and does no
    debouncing, callers are expected to throttle keystrokes themselves.
    """

    def __init__(
        self,
        *,
        fiat_codes: Iterable[str] | None = None,
        search_limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> None:
        codes = tuple(dict.fromkeys(code.lower() for code in (fiat_codes or DEFAULT_FIAT_CODES)))
        if not codes:
            msg = "fiat_codes must contain at least one entry"
            raise ValueError(msg)
        if search_limit <= 0:
            msg = "search_limit must be > 0"
            raise ValueError(msg)

        self._fiat_codes = codes
        self._fiat_lookup = frozenset(codes)
        self.search_limit = search_limit
        self._assets: tuple[Asset, ...] = ()
        self._by_id: dict[str, Asset] = {}

    def __len__(self) -> int:
        return len(self._assets)

    @property
    def fiat_codes(self) -> tuple[str, ...]:
        return self._fiat_codes

    @property
    def assets(self) -> tuple[Asset, ...]:
        return self._assets

    def load(self, raw_entries: Iterable[Mapping[str, Any]]) -> None:
        assets: list[Asset] = []
        by_id: dict[str, Asset] = {}
        skipped = 0
        for entry in raw_entries:
            asset = self._parse_entry(entry)
            if asset is None:
                skipped += 1
                continue
            assets.append(asset)
            by_id.setdefault(asset.id, asset)

        self._assets = tuple(assets)
        self._by_id = by_id
        logger.info("Loaded %d assets into directory (%d skipped)", len(assets), skipped)

    def refresh(self, provider: CatalogProvider) -> bool:
        """Best-effort load from ``provider``; a failure keeps the current catalog."""
        try:
            entries = provider.list_assets()
        except Exception as exc:
            logger.warning("Asset catalog load failed, keeping %d cached assets: %s", len(self._assets), exc)
            return False
        self.load(entries)
        return True

    def search(self, query: str) -> list[Asset]:
        needle = query.strip().upper()
        if not needle:
            return []

        matches: list[Asset] = []
        for asset in self._assets:
            if (
                asset.symbol.upper().startswith(needle)
                or asset.id.upper().startswith(needle)
                or needle in asset.name.upper()
            ):
                matches.append(asset)
                if len(matches) >= self.search_limit:
                    break
        return matches

    def get(self, asset_id: str) -> Asset | None:
        return self._by_id.get(asset_id)

    def is_crypto(self, source_id: str) -> bool:
        return source_id in self._by_id

    def is_fiat(self, code: str) -> bool:
        return code.lower() in self._fiat_lookup

    @staticmethod
    def _parse_entry(entry: Any) -> Asset | None:
        if not isinstance(entry, Mapping):
            return None
        asset_id = entry.get("id") or ""
        symbol = entry.get("symbol") or ""
        name = entry.get("name") or ""
        if not asset_id or not symbol:
            return None
        try:
            return Asset(id=AssetId(str(asset_id)), symbol=str(symbol), name=str(name))
        except ValidationError:
            return None


__all__ = ["DEFAULT_FIAT_CODES", "DEFAULT_SEARCH_LIMIT", "AssetDirectory"]
