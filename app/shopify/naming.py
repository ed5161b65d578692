# app/shopify/naming.py
# Canonical QuickBooks item name/description derived from Shopify variant fields.
from __future__ import annotations

from typing import Any, Iterable

DEFAULT_OPTION_VALUE = "Default Title"


def _option_value(option: Any):
    if isinstance(option, dict):
        return option.get("value")
    return getattr(option, "value", None)


def generate_product_name(vendor, title, selected_options: Iterable[Any] | None) -> str:
    """
    "{vendor} {title}" plus every selected option value that is set and is not
    Shopify's "Default Title" placeholder, in option order.
    Length and leading "_" are checked by the validator, not here.
    """
    name = f"{vendor} {title}"
    for option in selected_options or []:
        value = _option_value(option)
        if value and value != DEFAULT_OPTION_VALUE:
            name = f"{name} {value}"
    return name


def generate_product_description(name: str, barcode) -> str:
    return f"{name}, barcode: {barcode}"
