# app/sync/pagination.py
from __future__ import annotations

import logging
from typing import Awaitable, Callable, List, Optional

from app.models.variants import ProductVariant, VariantPage

logger = logging.getLogger("uvicorn.error")


async def fetch_all(fetch_page: Callable[[Optional[str]], Awaitable[VariantPage]]) -> List[ProductVariant]:
    """
    Follow the variant cursor from the first page until a page reports no next cursor.
    A failing page aborts the whole collection.
    """
    variants: List[ProductVariant] = []
    cursor: Optional[str] = None
    pages = 0
    while True:
        page = await fetch_page(cursor)
        pages += 1
        variants.extend(page.items or [])
        cursor = page.next_cursor
        if not cursor:
            break
    logger.info("Fetched %d Shopify variants over %d page(s)", len(variants), pages)
    return variants
