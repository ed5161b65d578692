"""Shared test fixtures: in-memory Shopify source and QuickBooks store."""

import copy
from typing import Any, Dict, List, Optional

import pytest

from app.models.audit_log import clear_audit_log
from app.models.variants import (
    InventoryItem,
    ProductVariant,
    SelectedOption,
    UnitCost,
    VariantPage,
)

DEFAULT_ACCOUNTS = [
    {"Id": "79", "Name": "Sales of Product Income"},
    {"Id": "80", "Name": "Cost of Goods Sold"},
    {"Id": "81", "Name": "Inventory Asset"},
]


class FakeVariantSource:
    """Serves pre-built pages; page i answers cursor c{i}, the first page answers None."""

    def __init__(self, pages: List[List[ProductVariant]]):
        self.pages = pages
        self.calls: List[Optional[str]] = []

    async def get_product_variants(self, cursor=None) -> VariantPage:
        self.calls.append(cursor)
        index = 0 if cursor is None else int(cursor[1:])
        next_cursor = f"c{index + 1}" if index + 1 < len(self.pages) else None
        return VariantPage(items=self.pages[index], next_cursor=next_cursor)


class FakeQuickBooksStore:
    """Synchronously consistent stand-in for QuickBooks Item/Account endpoints."""

    def __init__(self, accounts: Optional[List[Dict[str, Any]]] = None, fail_on: Optional[Dict[str, Exception]] = None):
        self.fail_on = fail_on or {}
        self.items: List[Dict[str, Any]] = []
        self.categories: List[Dict[str, Any]] = []
        self.accounts = copy.deepcopy(DEFAULT_ACCOUNTS if accounts is None else accounts)
        self.writes: List[tuple] = []
        self._next_id = 1

    def _new_id(self) -> str:
        self._next_id += 1
        return str(self._next_id)

    def add_item(self, **fields) -> Dict[str, Any]:
        item = {"Id": self._new_id(), "SyncToken": "0", "Active": True, **fields}
        self.items.append(item)
        return copy.deepcopy(item)

    def _maybe_fail(self, op):
        if op in self.fail_on:
            raise self.fail_on[op]

    def item_by_id(self, item_id) -> Dict[str, Any]:
        return next(i for i in self.items if i["Id"] == item_id)

    async def find_category_by_name(self, name):
        found = next((c for c in self.categories if c["Name"] == name), None)
        return copy.deepcopy(found)

    async def create_category(self, name):
        category = {"Id": self._new_id(), "Name": name, "Type": "Category"}
        self.categories.append(category)
        self.writes.append(("create_category", copy.deepcopy(category)))
        return copy.deepcopy(category)

    async def find_product_by_name(self, name):
        return copy.deepcopy(next((i for i in self.items if i.get("Name") == name), None))

    async def find_product_by_sku(self, sku):
        return copy.deepcopy(next((i for i in self.items if i.get("Sku") == sku), None))

    async def create_product(self, fields):
        self._maybe_fail("create_product")
        item = {**copy.deepcopy(fields), "Id": self._new_id(), "SyncToken": "0"}
        self.items.append(item)
        self.writes.append(("create_product", copy.deepcopy(fields)))
        return copy.deepcopy(item)

    async def update_product(self, fields):
        self._maybe_fail("update_product")
        stored = self.item_by_id(fields["Id"])
        stored.clear()
        stored.update(copy.deepcopy(fields))
        stored["SyncToken"] = str(int(fields.get("SyncToken") or 0) + 1)
        self.writes.append(("update_product", copy.deepcopy(fields)))
        return copy.deepcopy(stored)

    async def find_account_by_name(self, name):
        return copy.deepcopy(next((a for a in self.accounts if a["Name"] == name), None))


@pytest.fixture(autouse=True)
def _fresh_audit_log():
    clear_audit_log()
    yield
    clear_audit_log()


@pytest.fixture
def make_variant():
    """Factory for a valid variant; keyword arguments override single fields."""
    counter = {"n": 0}

    def _make(**overrides) -> ProductVariant:
        counter["n"] += 1
        n = counter["n"]
        fields = {
            "id": f"gid://shopify/ProductVariant/{n}",
            "product_id": f"gid://shopify/Product/{n}",
            "title": f"Salsa {n}",
            "vendor": "Acme",
            "product_type": "Sauces",
            "sku": f"SKU{n}",
            "barcode": f"BC{n}",
            "price": "4.99",
            "selected_options": [SelectedOption(name="Title", value="Default Title")],
            "inventory_item": InventoryItem(unit_cost=UnitCost(amount="2.10", currency_code="USD")),
            "taxable": True,
        }
        fields.update(overrides)
        return ProductVariant(**fields)

    return _make


@pytest.fixture
def store():
    return FakeQuickBooksStore()


@pytest.fixture
def make_source():
    return FakeVariantSource


@pytest.fixture
def make_store():
    return FakeQuickBooksStore
