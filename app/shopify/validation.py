# app/shopify/validation.py
# =======================================================
# Shopify variant validation (report only, nothing raised)
# - required fields: price, cost, vendor, title, sku, barcode
# - generated name shape: no "_" prefix, <= 100 chars
# - batch uniqueness of name, sku and barcode (first one wins)
# =======================================================
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from app.models.validation import ValidationError, ValidationReport, ValidationResult
from app.models.variants import ProductVariant
from app.shopify.naming import generate_product_name

logger = logging.getLogger("uvicorn.error")

# QuickBooks caps Item.Name at 100 characters
MAX_NAME_LENGTH = 100
# renamed/deactivated items are parked under "_<sku>" by the sync engine
RESERVED_NAME_PREFIX = "_"

PRICE_REQUIRED = 100
COST_REQUIRED = 101
VENDOR_REQUIRED = 102
TITLE_REQUIRED = 103
NAME_RESERVED_PREFIX = 104
NAME_TOO_LONG = 105
NAME_DUPLICATE = 106
SKU_REQUIRED = 107
SKU_DUPLICATE = 108
BARCODE_REQUIRED = 109
BARCODE_DUPLICATE = 110


@dataclass
class SeenKeys:
    """First-seen variant id per name, sku and barcode over one validation pass."""
    names: Dict[str, Optional[str]] = field(default_factory=dict)
    skus: Dict[str, Optional[str]] = field(default_factory=dict)
    barcodes: Dict[str, Optional[str]] = field(default_factory=dict)

    def claim(self, kind: str, key: str, variant_id: Optional[str]) -> Optional[str]:
        """Record `key` under `kind` for `variant_id`; return the earlier owner's id if it was already taken."""
        seen: Dict[str, Optional[str]] = getattr(self, kind)
        if key in seen:
            return seen[key] or ""
        seen[key] = variant_id
        return None


def _blank(value) -> bool:
    # whitespace-only counts as empty
    return value is None or (isinstance(value, str) and not value.strip())


def _error(code: int, message: str) -> ValidationError:
    return ValidationError(code=code, message=message)


def _unit_cost_amount(variant: ProductVariant):
    inventory_item = variant.inventory_item
    if not inventory_item or not inventory_item.unit_cost:
        return None
    return inventory_item.unit_cost.amount


def _validate_variant(variant: ProductVariant, seen: SeenKeys) -> List[ValidationError]:
    errors: List[ValidationError] = []

    if _blank(variant.price):
        errors.append(_error(PRICE_REQUIRED, "invalid price: price can't be empty"))

    if _blank(_unit_cost_amount(variant)):
        errors.append(_error(COST_REQUIRED, "invalid cost: cost can't be empty"))

    if _blank(variant.vendor) or _blank(variant.title):
        # no name can be generated, so name shape/uniqueness are not evaluated
        if _blank(variant.vendor):
            errors.append(_error(VENDOR_REQUIRED, "invalid vendor: vendor can't be empty"))
        if _blank(variant.title):
            errors.append(_error(TITLE_REQUIRED, "invalid title: title can't be empty"))
    else:
        name = generate_product_name(variant.vendor, variant.title, variant.selected_options)
        if name.startswith(RESERVED_NAME_PREFIX) or len(name) > MAX_NAME_LENGTH:
            if name.startswith(RESERVED_NAME_PREFIX):
                errors.append(_error(NAME_RESERVED_PREFIX, 'invalid name: name can\'t start with "_"'))
            if len(name) > MAX_NAME_LENGTH:
                errors.append(_error(
                    NAME_TOO_LONG,
                    f"invalid name: name can't have more than {MAX_NAME_LENGTH} characters",
                ))
        else:
            owner = seen.claim("names", name, variant.id)
            if owner is not None:
                errors.append(_error(
                    NAME_DUPLICATE,
                    f"duplicate name: {name}; the name is already in use by product variant with id: {owner}",
                ))

    if _blank(variant.sku):
        errors.append(_error(SKU_REQUIRED, "invalid sku: sku can't be empty"))
    else:
        owner = seen.claim("skus", variant.sku, variant.id)
        if owner is not None:
            errors.append(_error(
                SKU_DUPLICATE,
                f"duplicate sku: {variant.sku}; the sku is already in use by product variant with id: {owner}",
            ))

    if _blank(variant.barcode):
        errors.append(_error(BARCODE_REQUIRED, "invalid barcode: barcode can't be empty"))
    else:
        owner = seen.claim("barcodes", variant.barcode, variant.id)
        if owner is not None:
            errors.append(_error(
                BARCODE_DUPLICATE,
                f"duplicate barcode: {variant.barcode}; the barcode is already in use by product variant with id: {owner}",
            ))

    return errors


def validate_product_variants(variants: Iterable[ProductVariant]) -> ValidationReport:
    """
    Validate a batch of variants in input order.

    Every rule is evaluated independently so one variant can carry several
    errors. Uniqueness is tracked across the whole batch regardless of any
    other error on the earlier variant. The batch is ok iff no result has errors.
    """
    seen = SeenKeys()
    results: List[ValidationResult] = []
    for variant in variants:
        results.append(ValidationResult(
            id=variant.id,
            product_id=variant.product_id,
            title=variant.title,
            errors=_validate_variant(variant, seen),
        ))
    ok = all(not r.errors for r in results)
    return ValidationReport(ok=ok, results=results)


# ---- Rendering ----

def format_validation_results(report: ValidationReport) -> List[str]:
    lines: List[str] = []
    for result in report.results:
        lines.append(f"   [{result.id}]")
        lines.append(f"       product id: {result.product_id}")
        lines.append(f"       product name: {result.title}")
        if result.errors:
            lines.append("       status: FAILED")
            lines.append("       errors:")
            for err in result.errors:
                lines.append(f"           {err.code} {err.message}")
        else:
            lines.append("       status: PASSED")
        lines.append("")

    if report.ok:
        lines.append("   all variants passed validation")
    else:
        lines.append("   some variants did not pass validation")
    return lines


def log_validation_results(report: ValidationReport) -> None:
    for result in report.results:
        if result.errors:
            logger.warning(
                "❌ [%s] product=%s title=%s FAILED: %s",
                result.id, result.product_id, result.title,
                "; ".join(f"{e.code} {e.message}" for e in result.errors),
            )
        else:
            logger.debug("✅ [%s] product=%s title=%s PASSED", result.id, result.product_id, result.title)

    failed = sum(1 for r in report.results if r.errors)
    if report.ok:
        logger.info("all variants passed validation (%d checked)", len(report.results))
    else:
        logger.warning("some variants did not pass validation (%d of %d failed)", failed, len(report.results))
