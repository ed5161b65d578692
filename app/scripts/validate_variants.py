#!/usr/bin/env python3
"""
Fetch every Shopify product variant and print the validation report.
Exits with status 1 when any variant fails validation.

Usage:
  python -m app.scripts.validate_variants
  python -m app.scripts.validate_variants --page-size 50 --json
"""

import argparse
import asyncio
import json
import sys

from app.shopify.shopify import ShopifyClient
from app.shopify.validation import format_validation_results, validate_product_variants


async def run(page_size: int | None, as_json: bool) -> bool:
    client = ShopifyClient(page_size=page_size)
    variants = await client.get_all_product_variants()
    report = validate_product_variants(variants)
    if as_json:
        print(json.dumps(report.model_dump(), indent=2))
    else:
        print("\n".join(format_validation_results(report)))
    return report.ok


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Validate Shopify product variants for QuickBooks sync")
    parser.add_argument("--page-size", type=int, default=None, help="variants per GraphQL page")
    parser.add_argument("--json", action="store_true", help="print the raw report as JSON")
    args = parser.parse_args(argv)
    ok = asyncio.run(run(args.page_size, args.json))
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
