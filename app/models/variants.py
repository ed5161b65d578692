# app/models/variants.py
# Storefront variant shapes and the normalized product handed to the sync engine.
from pydantic import BaseModel, Field
from typing import Optional, List


class SelectedOption(BaseModel):
    name: Optional[str] = None
    value: Optional[str] = None
    class Config:
        frozen = True


class UnitCost(BaseModel):
    amount: Optional[str] = None
    currency_code: Optional[str] = None
    class Config:
        frozen = True


class InventoryItem(BaseModel):
    unit_cost: Optional[UnitCost] = None
    class Config:
        frozen = True


class ProductVariant(BaseModel):
    """A Shopify product variant flattened together with its parent product fields."""
    id: Optional[str] = Field(None, description="Variant GID")
    product_id: Optional[str] = Field(None, description="Parent product GID")
    title: Optional[str] = None
    vendor: Optional[str] = None
    product_type: Optional[str] = None
    sku: Optional[str] = None
    barcode: Optional[str] = None
    price: Optional[str] = None
    selected_options: List[SelectedOption] = Field(default_factory=list)
    inventory_item: InventoryItem = Field(default_factory=InventoryItem)
    taxable: Optional[bool] = None
    class Config:
        frozen = True


class VariantPage(BaseModel):
    items: Optional[List[ProductVariant]] = None
    next_cursor: Optional[str] = None


class NormalizedProduct(BaseModel):
    name: str
    category: Optional[str] = None
    sku: Optional[str] = None
    description: str
    unit_price: Optional[float] = None
    purchase_cost: Optional[float] = None
    taxable: Optional[bool] = None
    class Config:
        frozen = True
