# app/sync/capabilities.py
# Remote operations the sync pipeline depends on, one method per call.
from __future__ import annotations

from typing import Any, Dict, Optional, Protocol

from app.models.variants import VariantPage

Record = Dict[str, Any]


class VariantSource(Protocol):
    async def get_product_variants(self, cursor: Optional[str] = None) -> VariantPage: ...


class AccountingStore(Protocol):
    async def find_category_by_name(self, name: str) -> Optional[Record]: ...

    async def create_category(self, name: str) -> Record: ...

    async def find_product_by_name(self, name: str) -> Optional[Record]: ...

    async def find_product_by_sku(self, sku: str) -> Optional[Record]: ...

    async def create_product(self, fields: Record) -> Record: ...

    async def update_product(self, fields: Record) -> Record: ...

    async def find_account_by_name(self, name: str) -> Optional[Record]: ...
