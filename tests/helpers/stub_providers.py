from __future__ import annotations

from decimal import Decimal
from typing import Any, Iterable


class StubPriceProvider:
    """Returns a canned ``simple_price`` payload and records every call."""

    def __init__(self, prices: dict[str, dict[str, Any]] | None = None, *, error: Exception | None = None) -> None:
        self.prices = {
            asset_id: {code: Decimal(str(rate)) for code, rate in quotes.items()}
            for asset_id, quotes in (prices or {}).items()
        }
        self.error = error
        self.calls: list[tuple[list[str], list[str]]] = []

    def simple_price(self, ids: Iterable[str], vs_currencies: Iterable[str]) -> dict[str, dict[str, Decimal]]:
        id_list = list(ids)
        code_list = list(vs_currencies)
        self.calls.append((id_list, code_list))
        if self.error is not None:
            raise self.error
        return {
            asset_id: {code: rate for code, rate in quotes.items() if code in code_list}
            for asset_id, quotes in self.prices.items()
            if asset_id in id_list
        }


class StubCatalogProvider:
    def __init__(self, entries: list[dict[str, Any]] | None = None, *, error: Exception | None = None) -> None:
        self.entries = entries or []
        self.error = error
        self.calls = 0

    def list_assets(self) -> list[dict[str, Any]]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.entries)
