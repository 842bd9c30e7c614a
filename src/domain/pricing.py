from __future__ import annotations

from decimal import Decimal
from typing import Any, Iterable, Protocol


class PriceProviderError(Exception):
    """Transport or payload failure raised by any catalog or price provider."""


class CatalogProvider(Protocol):
    """Source of raw ``{id, symbol, name}`` records for every known asset."""

    def list_assets(self) -> list[dict[str, Any]]: ...


class PriceProvider(Protocol):
    """Batched lookup of asset prices, returned as ``{asset_id: {currency_code: rate}}``."""

    def simple_price(self, ids: Iterable[str], vs_currencies: Iterable[str]) -> dict[str, dict[str, Decimal]]: ...


__all__ = ["CatalogProvider", "PriceProvider", "PriceProviderError"]
