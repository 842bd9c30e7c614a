from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from config import config
from domain.conversion import ConversionStatus
from services.asset_directory import AssetDirectory
from services.coingecko_client import CoinGeckoClient
from services.converter_session import ConverterSession
from services.rate_converter import RateConverter


def build_session(client: CoinGeckoClient | None = None) -> tuple[AssetDirectory, ConverterSession]:
    settings = config()
    client = client or CoinGeckoClient()
    directory = AssetDirectory(fiat_codes=settings.fiat_codes, search_limit=settings.search_limit)
    directory.refresh(client)
    converter = RateConverter(directory=directory, provider=client, reference_asset_id=settings.reference_asset_id)
    return directory, ConverterSession(converter)


def run_search(directory: AssetDirectory, query: str) -> int:
    for asset in directory.search(query):
        print(f"{asset.label}  ({asset.id})")
    return 0


def run_convert(session: ConverterSession, amount: str, source: str, target: str) -> int:
    state = session.submit(amount, source, target)
    if state.status is ConversionStatus.SUCCEEDED and state.result is not None:
        print(state.result.display())
        return 0
    print(state.message, file=sys.stderr)
    return 1


def main(argv: Sequence[str] | None = None) -> int:
    settings = config()
    parser = argparse.ArgumentParser(description="Convert amounts between crypto assets and fiat currencies.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    search_parser = subparsers.add_parser("search", help="Find catalog assets by symbol, id or name.")
    search_parser.add_argument("query")

    convert_parser = subparsers.add_parser("convert", help="Convert an amount into a target currency.")
    convert_parser.add_argument("amount", help="Positive number; ',' is accepted as decimal separator.")
    convert_parser.add_argument("source", help="Catalog asset id (e.g. bitcoin) or fiat code (e.g. usd).")
    convert_parser.add_argument("--to", dest="target", default=settings.default_target_code)

    subparsers.add_parser("fiats", help="List supported fiat currency codes.")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    if args.command == "fiats":
        print("\n".join(code.upper() for code in settings.fiat_codes))
        return 0

    directory, session = build_session()
    if args.command == "search":
        return run_search(directory, args.query)
    return run_convert(session, args.amount, args.source, args.target)


if __name__ == "__main__":
    sys.exit(main())
