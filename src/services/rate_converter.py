from __future__ import annotations

import logging
from decimal import Decimal

from domain.conversion import (
    ConversionPath,
    ConversionRequest,
    ConversionResult,
    InvalidInputError,
    ProviderUnreachableError,
    RateUnavailableError,
)
from domain.pricing import PriceProvider, PriceProviderError

from .asset_directory import AssetDirectory

logger = logging.getLogger(__name__)

DEFAULT_REFERENCE_ASSET_ID = "bitcoin"


class RateConverter:
    """Converts an amount of a catalog asset or fiat currency into a target currency.

    Catalog assets are priced directly in the target. Fiat sources have no
    direct quote, so both legs are read from one batched lookup of the
    reference asset and divided (``price_in_target / price_in_source``).
    Each step calls the provider at most once; failures are raised, never retried.
    """

    def __init__(
        self,
        *,
        directory: AssetDirectory,
        provider: PriceProvider,
        reference_asset_id: str = DEFAULT_REFERENCE_ASSET_ID,
    ) -> None:
        if not reference_asset_id:
            msg = "reference_asset_id must be provided"
            raise ValueError(msg)
        self.directory = directory
        self.provider = provider
        self.reference_asset_id = reference_asset_id

    def convert(self, request: ConversionRequest) -> ConversionResult:
        source = request.source_id
        target = request.target_code.lower()

        if self.directory.is_crypto(source):
            rate = self._direct_rate(source, target)
            path = ConversionPath.DIRECT
        elif self.directory.is_fiat(source):
            rate = self._bridged_rate(source.lower(), target)
            path = ConversionPath.BRIDGED
        else:
            raise InvalidInputError(f"{source!r} is neither a known asset id nor a supported fiat code")

        return ConversionResult(value=request.amount * rate, target_code=target, rate=rate, path=path)

    def _direct_rate(self, asset_id: str, target: str) -> Decimal:
        prices = self._fetch([asset_id], [target])
        rate = prices.get(asset_id, {}).get(target)
        if rate is None:
            logger.warning("No %s quote for %s", target, asset_id)
            raise RateUnavailableError(f"No {target} rate available for {asset_id}")
        return rate

    def _bridged_rate(self, source: str, target: str) -> Decimal:
        reference = self.reference_asset_id
        prices = self._fetch([reference], list(dict.fromkeys([source, target])))
        quotes = prices.get(reference, {})
        source_price = quotes.get(source)
        target_price = quotes.get(target)
        if source_price is None or target_price is None:
            logger.warning("Missing %s leg(s) for %s->%s bridge: %s", reference, source, target, quotes)
            raise RateUnavailableError(f"No {reference} quote in both {source} and {target}")
        if source_price <= 0:
            logger.warning("Degenerate %s price in %s: %s", reference, source, source_price)
            raise RateUnavailableError(f"{reference} price in {source} is {source_price}")
        return target_price / source_price

    def _fetch(self, ids: list[str], codes: list[str]) -> dict[str, dict[str, Decimal]]:
        logger.debug("Fetching prices for ids=%s vs=%s", ids, codes)
        try:
            return self.provider.simple_price(ids, codes)
        except PriceProviderError as exc:
            logger.warning("Price provider unreachable for ids=%s vs=%s: %s", ids, codes, exc)
            raise ProviderUnreachableError(str(exc)) from exc


__all__ = ["DEFAULT_REFERENCE_ASSET_ID", "RateConverter"]
