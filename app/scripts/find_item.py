#!/usr/bin/env python3
"""
Look up one QuickBooks inventory item by SKU or name and print it as JSON.

Usage:
  python -m app.scripts.find_item --sku PRTO12
  python -m app.scripts.find_item --name "Acme Salsa Hot"
"""

import argparse
import asyncio
import json
import sys

from app.quickbooks.quickbooks import QuickBooksClient


async def run(sku: str | None, name: str | None, refresh: bool):
    client = QuickBooksClient()
    if refresh:
        previous = client.refresh_token
        await client.refresh_access_token()
        if client.refresh_token != previous:
            # the .env copy is now stale
            print("QuickBooks rotated the refresh token; update QBO_REFRESH_TOKEN", file=sys.stderr)
    if sku:
        return await client.find_product_by_sku(sku)
    return await client.find_product_by_name(name)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Find a QuickBooks inventory item")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--sku")
    group.add_argument("--name")
    parser.add_argument("--refresh", action="store_true", help="refresh the access token first")
    args = parser.parse_args(argv)

    item = asyncio.run(run(args.sku, args.name, args.refresh))
    if item is None:
        print("not found", file=sys.stderr)
        return 1
    print(json.dumps(item, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
