from __future__ import annotations

from typing import Any

import pytest
import requests

from services.asset_directory import AssetDirectory
from services.coingecko_client import CoinGeckoAPIError
from tests.helpers.stub_providers import StubCatalogProvider


def test_load_skips_entries_without_symbol() -> None:
    directory = AssetDirectory()
    directory.load(
        [
            {"id": "bitcoin", "symbol": "btc", "name": "Bitcoin"},
            {"id": "ghost", "symbol": "", "name": "Ghost"},
            {"id": "nosymbol", "name": "No Symbol"},
            {"id": "", "symbol": "zzz", "name": "No Id"},
            "not-a-record",
        ]
    )

    assert len(directory) == 1
    assert directory.is_crypto("bitcoin")
    assert not directory.is_crypto("ghost")


def test_load_keeps_catalog_order(directory: AssetDirectory, catalog_entries: list[dict[str, Any]]) -> None:
    assert [asset.id for asset in directory.assets] == [entry["id"] for entry in catalog_entries]


def test_search_empty_query_returns_nothing(directory: AssetDirectory) -> None:
    assert directory.search("") == []
    assert directory.search("   ") == []


def test_search_matches_symbol_prefix_case_insensitively(directory: AssetDirectory) -> None:
    results = directory.search("Bt")

    assert [asset.id for asset in results] == ["bitcoin"]


def test_search_matches_id_prefix_and_name_substring_in_catalog_order(directory: AssetDirectory) -> None:
    results = directory.search("bitcoin")

    # "wrapped-bitcoin" only matches on name substring but still keeps catalog position.
    assert [asset.id for asset in results] == ["bitcoin", "wrapped-bitcoin", "bitcoin-cash"]


def test_search_does_not_match_symbol_substring(directory: AssetDirectory) -> None:
    # "sdt" is inside "usdt" but neither a prefix of symbol/id nor part of the name.
    assert directory.search("sdt") == []


def test_search_results_satisfy_match_rule(directory: AssetDirectory) -> None:
    for query in ("b", "usd", "coin", "e", "sol"):
        needle = query.upper()
        for asset in directory.search(query):
            assert (
                asset.symbol.upper().startswith(needle)
                or asset.id.upper().startswith(needle)
                or needle in asset.name.upper()
            )


def test_search_is_capped_at_twelve_results() -> None:
    directory = AssetDirectory()
    directory.load({"id": f"token-{idx}", "symbol": f"tk{idx}", "name": f"Token {idx}"} for idx in range(50))

    results = directory.search("tk")

    assert len(results) == 12
    assert results[0].id == "token-0"
    assert results[-1].id == "token-11"


def test_search_limit_is_configurable() -> None:
    directory = AssetDirectory(search_limit=2)
    directory.load({"id": f"coin-{idx}", "symbol": "c", "name": "Coin"} for idx in range(5))

    assert len(directory.search("c")) == 2


def test_search_on_empty_directory_returns_nothing() -> None:
    assert AssetDirectory().search("btc") == []


def test_is_fiat_uses_fixed_code_set(directory: AssetDirectory) -> None:
    assert directory.is_fiat("usd")
    assert directory.is_fiat("UZS")
    assert not directory.is_fiat("bitcoin")
    assert not directory.is_crypto("usd")


def test_get_returns_asset_by_id(directory: AssetDirectory) -> None:
    asset = directory.get("ethereum")

    assert asset is not None
    assert asset.symbol == "eth"
    assert asset.label == "ETH — Ethereum"
    assert directory.get("missing") is None


def test_refresh_loads_catalog_from_provider(catalog_entries: list[dict[str, Any]]) -> None:
    provider = StubCatalogProvider(catalog_entries)
    directory = AssetDirectory()

    assert directory.refresh(provider) is True
    assert len(directory) == len(catalog_entries)
    assert provider.calls == 1


@pytest.mark.parametrize(
    "error",
    [CoinGeckoAPIError("boom", status_code=500), requests.ConnectionError("offline")],
)
def test_refresh_failure_is_silent_and_leaves_directory_empty(error: Exception) -> None:
    directory = AssetDirectory()

    assert directory.refresh(StubCatalogProvider(error=error)) is False
    assert len(directory) == 0
    assert directory.search("btc") == []


def test_refresh_failure_keeps_previous_catalog(directory: AssetDirectory) -> None:
    before = len(directory)

    assert directory.refresh(StubCatalogProvider(error=CoinGeckoAPIError("down"))) is False
    assert len(directory) == before


def test_directory_validates_configuration() -> None:
    with pytest.raises(ValueError):
        AssetDirectory(search_limit=0)
