#==========================================================================================
# app/shopify/shopify.py
# Shopify Admin GraphQL interface module.
# Fetches product variants page by page and maps them onto ProductVariant.
#==========================================================================================
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from app.config import settings
from app.models.variants import (
    InventoryItem,
    ProductVariant,
    SelectedOption,
    UnitCost,
    VariantPage,
)
from app.sync.pagination import fetch_all

logger = logging.getLogger("uvicorn.error")

GET_PRODUCT_VARIANTS = """
query getProductVariants($first: Int!, $cursor: String) {
    productVariants(first: $first, after: $cursor) {
        pageInfo {
            hasNextPage
        }
        edges {
            cursor
            node {
                id
                sku
                barcode
                product {
                    id
                    title
                    vendor
                    productType
                }
                selectedOptions {
                    name
                    value
                }
                price
                inventoryItem {
                    unitCost {
                        currencyCode
                        amount
                    }
                }
                taxable
            }
        }
    }
}
"""


class ShopifyGraphQLError(RuntimeError):
    """The Admin API answered 200 but reported GraphQL errors."""

    def __init__(self, errors: List[Dict[str, Any]]):
        self.errors = errors
        messages = "; ".join(str(e.get("message")) for e in errors if isinstance(e, dict))
        super().__init__(f"Shopify GraphQL errors: {messages or errors}")


def admin_uri(shop: str, api_version: str) -> str:
    return f"https://{shop}.myshopify.com/admin/api/{api_version}/graphql.json"


def _str_or_none(value) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def parse_variant_node(node: Dict[str, Any]) -> ProductVariant:
    product = node.get("product") or {}
    unit_cost = (node.get("inventoryItem") or {}).get("unitCost")
    return ProductVariant(
        id=node.get("id"),
        product_id=product.get("id"),
        title=product.get("title"),
        vendor=product.get("vendor"),
        product_type=product.get("productType"),
        sku=node.get("sku"),
        barcode=node.get("barcode"),
        price=_str_or_none(node.get("price")),
        selected_options=[
            SelectedOption(name=o.get("name"), value=o.get("value"))
            for o in (node.get("selectedOptions") or [])
        ],
        inventory_item=InventoryItem(
            unit_cost=UnitCost(
                amount=_str_or_none(unit_cost.get("amount")),
                currency_code=unit_cost.get("currencyCode"),
            ) if unit_cost else None
        ),
        taxable=node.get("taxable"),
    )


class ShopifyClient:
    def __init__(
        self,
        shop: str | None = None,
        access_token: str | None = None,
        api_version: str | None = None,
        page_size: int | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.shop = shop or settings.SHOPIFY_SHOP
        self.access_token = access_token or settings.SHOPIFY_ADMIN_API_PASSWORD
        self.api_version = api_version or settings.SHOPIFY_API_VERSION
        self.page_size = page_size or settings.SHOPIFY_PAGE_SIZE
        self.timeout = timeout or settings.HTTP_TIMEOUT
        self.endpoint = admin_uri(self.shop, self.api_version)
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        return {
            "X-Shopify-Access-Token": self.access_token,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    async def graphql(self, query: str, variables: Dict[str, Any] | None = None) -> Dict[str, Any]:
        payload = {"query": query, "variables": variables or {}}
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            r = await client.post(self.endpoint, headers=self._headers(), json=payload)
        if r.status_code >= 400:
            raise httpx.HTTPStatusError(
                f"Shopify GraphQL HTTP {r.status_code}: {r.text}", request=r.request, response=r
            )
        data = r.json()
        if data.get("errors"):
            raise ShopifyGraphQLError(data["errors"])
        return data

    async def get_product_variants(self, cursor: Optional[str] = None) -> VariantPage:
        """One page of variants; next_cursor is the last edge's cursor when another page exists."""
        variables: Dict[str, Any] = {"first": self.page_size}
        if cursor:
            variables["cursor"] = cursor
        res = await self.graphql(GET_PRODUCT_VARIANTS, variables)

        connection = (res.get("data") or {}).get("productVariants")
        if not connection:
            return VariantPage(items=None, next_cursor=None)

        edges = connection.get("edges") or []
        items = [parse_variant_node(edge.get("node") or {}) for edge in edges]

        next_cursor = None
        if (connection.get("pageInfo") or {}).get("hasNextPage") and edges:
            next_cursor = edges[-1].get("cursor")

        logger.debug("Shopify variant page: %d items, next_cursor=%s", len(items), next_cursor)
        return VariantPage(items=items, next_cursor=next_cursor)

    async def get_all_product_variants(self) -> List[ProductVariant]:
        return await fetch_all(self.get_product_variants)
