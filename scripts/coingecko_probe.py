# flake8: noqa E402
# Run via uv so project deps are loaded, e.g.:
# uv run scripts/coingecko_probe.py --ids bitcoin,ethereum --vs usd,eur
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

# Ensure the src directory is importable when the script is invoked via uv/python directly.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from services.coingecko_client import CoinGeckoAPIError, CoinGeckoClient
from utils.formatting import format_decimal


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fetch a live CoinGecko simple price snapshot.")
    parser.add_argument("--ids", default="bitcoin", help="Comma separated asset ids (default: bitcoin).")
    parser.add_argument("--vs", default="usd,eur", help="Comma separated currency codes (default: usd,eur).")
    parser.add_argument("--catalog", action="store_true", help="Also report the size of the coin catalog.")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    client = CoinGeckoClient(retry_attempts=0)

    try:
        if args.catalog:
            entries = client.list_assets()
            print(f"Catalog entries: {len(entries)}")
        prices = client.simple_price(args.ids.split(","), args.vs.split(","))
    except CoinGeckoAPIError as exc:
        print(f"CoinGecko request failed ({exc.status_code}): {exc}", file=sys.stderr)
        if exc.payload is not None:
            print(json.dumps(exc.payload, indent=2, default=str), file=sys.stderr)
        sys.exit(1)

    print(json.dumps({asset: {code: format_decimal(rate) for code, rate in quotes.items()} for asset, quotes in prices.items()}, indent=2))


if __name__ == "__main__":
    main()
