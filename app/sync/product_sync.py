# app/sync/product_sync.py
# =======================================================
# Shopify → QuickBooks Online Product Sync
# - Category resolve-or-create
# - Name-collision guard (stale item yields its name)
# - Update only on content change or inactive item
# - Create with ledger account refs + inventory tracking
# - Full pass: fetch → validate → sync, strictly sequential
# =======================================================
from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Any, Awaitable, Callable, Dict, Optional

from app.models.audit_log import add_audit_entry
from app.models.variants import NormalizedProduct
from app.shopify.parser import parse_product
from app.shopify.validation import log_validation_results, validate_product_variants
from app.sync.capabilities import AccountingStore, Record, VariantSource
from app.sync.pagination import fetch_all

logger = logging.getLogger("uvicorn.error")

INCOME_ACCOUNT_NAME = "Sales of Product Income"
EXPENSE_ACCOUNT_NAME = "Cost of Goods Sold"
ASSET_ACCOUNT_NAME = "Inventory Asset"

# target field -> ledger account it references on creation
ACCOUNT_REF_FIELDS = {
    "IncomeAccountRef": INCOME_ACCOUNT_NAME,
    "ExpenseAccountRef": EXPENSE_ACCOUNT_NAME,
    "AssetAccountRef": ASSET_ACCOUNT_NAME,
}

INACTIVE_NAME_PREFIX = "_"

# fields whose difference forces an update (ParentRef compared by value separately)
CONTENT_FIELDS = ("Name", "Sku", "Description", "UnitPrice", "PurchaseCost")


# ---- Helpers ----

async def find_or_create_by_name(
    name: str,
    find: Callable[[str], Awaitable[Optional[Record]]],
    create: Optional[Callable[[str], Awaitable[Record]]] = None,
) -> Optional[Record]:
    """
    Look an entity up by name; create it when missing and a creator is given.
    Without a creator the lookup result (possibly None) is returned as is.
    """
    found = await find(name)
    if found or create is None:
        return found
    return await create(name)


def _ref(entity: Optional[Record]) -> Optional[Dict[str, Any]]:
    if not entity:
        return None
    return {"value": entity.get("Id"), "name": entity.get("Name")}


def _same_parent(existing: Optional[Record], target: Optional[Record]) -> bool:
    if not existing and not target:
        return True
    if existing and target:
        return existing.get("value") == target.get("value")
    return False


def did_change_product_content(existing: Record, target: Record) -> bool:
    if not _same_parent(existing.get("ParentRef"), target.get("ParentRef")):
        return True
    return any(existing.get(f) != target.get(f) for f in CONTENT_FIELDS)


def build_target_item(product: NormalizedProduct, category: Optional[Record]) -> Record:
    return {
        "Name": product.name,
        "Sku": product.sku,
        "Description": product.description,
        "PurchaseDesc": product.description,
        "UnitPrice": product.unit_price,
        "PurchaseCost": product.purchase_cost,
        "Taxable": product.taxable,
        "SubItem": bool(category),
        "ParentRef": _ref(category),
    }


# ---- Engine ----

class ProductSyncEngine:
    """Converges QuickBooks inventory items towards normalized Shopify products, one at a time."""

    def __init__(self, store: AccountingStore, today: Callable[[], date] = date.today):
        self.store = store
        self._today = today

    async def resolve_account_refs(self) -> Dict[str, Optional[Dict[str, Any]]]:
        """
        Income/expense/asset refs for a new inventory item. A missing account
        leaves its ref as None; QuickBooks decides whether that is acceptable.
        """
        names = list(ACCOUNT_REF_FIELDS.values())
        accounts = await asyncio.gather(*(
            find_or_create_by_name(n, self.store.find_account_by_name) for n in names
        ))
        refs: Dict[str, Optional[Dict[str, Any]]] = {}
        for (field, expected), account in zip(ACCOUNT_REF_FIELDS.items(), accounts):
            if not account:
                logger.warning("⚠️ QuickBooks account %r not found; %s left empty", expected, field)
            refs[field] = _ref(account)
        return refs

    async def _yield_name(self, item: Record) -> None:
        """Park a stale item under "_<sku>" and deactivate it so its name is free."""
        parked = f"{INACTIVE_NAME_PREFIX}{item.get('Sku')}"
        logger.info("🟡 Yielding name %r: renaming item %s to %r and deactivating", item.get("Name"), item.get("Id"), parked)
        await self.store.update_product({
            **item,
            "Name": parked,
            "Active": False,
            "sparse": False,
        })
        add_audit_entry("Item Deactivated", item.get("Sku"), f"renamed {item.get('Name')!r} to {parked!r}")

    async def sync_product(self, product: NormalizedProduct) -> Dict[str, Any]:
        category = None
        if product.category:
            category = await find_or_create_by_name(
                product.category,
                self.store.find_category_by_name,
                self.store.create_category,
            )

        target = build_target_item(product, category)
        outcome: Dict[str, Any] = {"sku": product.sku, "name": product.name, "action": None, "yielded": None}

        existing: Optional[Record] = None

        # an item holding our name under another sku would make creation fail on a duplicate name
        same_name = await self.store.find_product_by_name(target["Name"])
        if same_name:
            if same_name.get("Sku") == target["Sku"]:
                existing = same_name
            else:
                await self._yield_name(same_name)
                outcome["yielded"] = same_name.get("Sku")

        if not existing:
            existing = await self.store.find_product_by_sku(target["Sku"])

        if existing:
            if did_change_product_content(existing, target) or not existing.get("Active"):
                logger.info("🔵 Updating QuickBooks item %s (sku=%s)", existing.get("Id"), target["Sku"])
                await self.store.update_product({
                    **existing,
                    **target,
                    "Active": True,
                    "sparse": False,
                })
                add_audit_entry("Item Updated", target["Sku"], f"name={target['Name']!r}")
                outcome["action"] = "updated"
            else:
                logger.debug("Item %s (sku=%s) unchanged", existing.get("Id"), target["Sku"])
                outcome["action"] = "unchanged"
            return outcome

        accounts = await self.resolve_account_refs()
        logger.info("🟢 Creating QuickBooks item %r (sku=%s)", target["Name"], target["Sku"])
        await self.store.create_product({
            **target,
            "Active": True,
            "TrackQtyOnHand": True,
            "QtyOnHand": 0,
            "InvStartDate": self._today().isoformat(),
            **accounts,
        })
        add_audit_entry("Item Created", target["Sku"], f"name={target['Name']!r}")
        outcome["action"] = "created"
        return outcome


# ---- Full pass ----

async def sync_products(
    source: VariantSource,
    store: AccountingStore,
    *,
    skip_invalid: bool = True,
    continue_on_error: bool = False,
) -> Dict[str, Any]:
    """
    Fetch every Shopify variant, validate the batch, then sync variants one by one.

    skip_invalid: variants that failed validation are not synced.
    continue_on_error: a failing product is recorded in stats["errors"] and the
    pass moves on; otherwise the capability error propagates.
    """
    variants = await fetch_all(source.get_product_variants)
    report = validate_product_variants(variants)
    log_validation_results(report)

    engine = ProductSyncEngine(store)
    stats: Dict[str, Any] = {
        "validation_ok": report.ok,
        "fetched": len(variants),
        "created": 0,
        "updated": 0,
        "unchanged": 0,
        "skipped": 0,
        "yielded": [],
        "errors": [],
    }

    for variant, result in zip(variants, report.results):
        if skip_invalid and not result.passed:
            stats["skipped"] += 1
            continue
        try:
            outcome = await engine.sync_product(parse_product(variant))
        except Exception as e:
            if not continue_on_error:
                raise
            logger.error("Sync failed for variant %s (sku=%s): %s", variant.id, variant.sku, e)
            stats["errors"].append({"id": variant.id, "sku": variant.sku, "error": str(e)})
            continue
        stats[outcome["action"]] += 1
        if outcome["yielded"]:
            stats["yielded"].append(outcome["yielded"])

    logger.info(
        "Sync finished: created=%d updated=%d unchanged=%d skipped=%d errors=%d",
        stats["created"], stats["updated"], stats["unchanged"], stats["skipped"], len(stats["errors"]),
    )
    return stats
