# app/shopify/parser.py
from __future__ import annotations

from typing import Optional

from app.models.variants import NormalizedProduct, ProductVariant
from app.shopify.naming import generate_product_name, generate_product_description


def _to_float(value) -> Optional[float]:
    # absent, blank or unparseable stays None; 0 is a real price
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_product(variant: ProductVariant) -> NormalizedProduct:
    """Map a parsed Shopify variant onto the product shape the sync engine consumes."""
    name = generate_product_name(variant.vendor, variant.title, variant.selected_options)
    description = generate_product_description(name, variant.barcode)

    unit_cost = variant.inventory_item.unit_cost if variant.inventory_item else None

    return NormalizedProduct(
        name=name,
        category=variant.product_type or None,
        sku=variant.sku,
        description=description,
        unit_price=_to_float(variant.price),
        purchase_cost=_to_float(unit_cost.amount if unit_cost else None),
        taxable=variant.taxable,
    )
