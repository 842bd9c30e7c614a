from typing import Any

import pytest

from services.asset_directory import AssetDirectory

CATALOG: list[dict[str, Any]] = [
    {"id": "bitcoin", "symbol": "btc", "name": "Bitcoin"},
    {"id": "ethereum", "symbol": "eth", "name": "Ethereum"},
    {"id": "wrapped-bitcoin", "symbol": "wbtc", "name": "Wrapped Bitcoin"},
    {"id": "tether", "symbol": "usdt", "name": "Tether"},
    {"id": "usd-coin", "symbol": "usdc", "name": "USDC"},
    {"id": "bitcoin-cash", "symbol": "bch", "name": "Bitcoin Cash"},
    {"id": "solana", "symbol": "sol", "name": "Solana"},
]


@pytest.fixture(scope="function")
def catalog_entries() -> list[dict[str, Any]]:
    return [dict(entry) for entry in CATALOG]


@pytest.fixture(scope="function")
def directory(catalog_entries: list[dict[str, Any]]) -> AssetDirectory:
    loaded = AssetDirectory()
    loaded.load(catalog_entries)
    return loaded
