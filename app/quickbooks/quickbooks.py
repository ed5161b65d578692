#===========================================================================
# app/quickbooks/quickbooks.py
# QuickBooks Online API interface module.
# Item (Inventory/Category) and Account lookups and writes over the v3 REST API.
#===========================================================================
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from app.config import settings

logger = logging.getLogger("uvicorn.error")

SANDBOX_BASE_URL = "https://sandbox-quickbooks.api.intuit.com"
PRODUCTION_BASE_URL = "https://quickbooks.api.intuit.com"
TOKEN_URL = "https://oauth.platform.intuit.com/oauth2/v1/tokens/bearer"


class QuickBooksAuthError(RuntimeError):
    """The OAuth2 token endpoint did not hand back a usable token pair."""


# ---------------------------
# Query helpers
# ---------------------------

def _quote(value: Any) -> str:
    # QBO query language escapes single quotes with a backslash
    s = str(value if value is not None else "")
    return "'" + s.replace("\\", "\\\\").replace("'", "\\'") + "'"


def build_query(entity: str, criteria: Dict[str, Any], *, include_inactive: bool = False) -> str:
    where: List[str] = [f"{field} = {_quote(value)}" for field, value in criteria.items()]
    if include_inactive:
        # the query endpoint only returns active rows unless asked otherwise
        where.append("Active IN (true, false)")
    query = f"select * from {entity}"
    if where:
        query += " where " + " and ".join(where)
    return query


def _json_or_text(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except Exception:
        return resp.text


def _first(data: Any, entity: str) -> Optional[Dict[str, Any]]:
    rows = ((data or {}).get("QueryResponse") or {}).get(entity) or []
    if isinstance(rows, dict):
        rows = [rows]
    return rows[0] if rows else None


# ---------------------------
# Client
# ---------------------------

class QuickBooksClient:
    def __init__(
        self,
        client_id: str | None = None,
        client_secret: str | None = None,
        access_token: str | None = None,
        refresh_token: str | None = None,
        realm_id: str | None = None,
        sandbox: bool | None = None,
        minor_version: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client_id = client_id or settings.QBO_CLIENT_ID
        self.client_secret = client_secret or settings.QBO_CLIENT_SECRET
        self.access_token = access_token or settings.QBO_ACCESS_TOKEN
        self.refresh_token = refresh_token or settings.QBO_REFRESH_TOKEN
        self.realm_id = realm_id or settings.QBO_REALM_ID
        self.sandbox = settings.QBO_SANDBOX if sandbox is None else sandbox
        self.minor_version = minor_version or settings.QBO_MINOR_VERSION
        self.timeout = timeout or settings.HTTP_TIMEOUT
        self._transport = transport

    @property
    def base_url(self) -> str:
        return SANDBOX_BASE_URL if self.sandbox else PRODUCTION_BASE_URL

    def _company_url(self, path: str) -> str:
        return f"{self.base_url}/v3/company/{self.realm_id}{path}"

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    async def _request(self, method: str, path: str, *, params: Dict[str, Any] | None = None,
                       json: Dict[str, Any] | None = None) -> Any:
        params = {**(params or {}), "minorversion": self.minor_version}
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            r = await client.request(method, self._company_url(path), headers=self._headers(),
                                     params=params, json=json)
        if r.status_code >= 400:
            raise httpx.HTTPStatusError(
                f"{method} {path} failed: {_json_or_text(r)}", request=r.request, response=r
            )
        return r.json()

    async def query_one(self, entity: str, criteria: Dict[str, Any], *,
                        include_inactive: bool = False) -> Optional[Dict[str, Any]]:
        query = build_query(entity, criteria, include_inactive=include_inactive)
        logger.debug("QBO query: %s", query)
        data = await self._request("GET", "/query", params={"query": query})
        return _first(data, entity)

    async def _write_item(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        data = await self._request("POST", "/item", json=payload)
        return data.get("Item", data)

    # ---- Auth ----

    async def refresh_access_token(self) -> Dict[str, Any]:
        """Exchange the refresh token for a new access/refresh token pair."""
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            r = await client.post(
                TOKEN_URL,
                auth=(self.client_id, self.client_secret),
                headers={"Accept": "application/json"},
                data={"grant_type": "refresh_token", "refresh_token": self.refresh_token},
            )
        if r.status_code >= 400:
            raise httpx.HTTPStatusError(
                f"token refresh failed: {_json_or_text(r)}", request=r.request, response=r
            )
        res = r.json()
        if not res.get("access_token") or not res.get("refresh_token"):
            raise QuickBooksAuthError("missing auth data")
        self.access_token = res["access_token"]
        self.refresh_token = res["refresh_token"]
        logger.info("QuickBooks access token refreshed")
        return res

    # ---- Categories ----

    async def find_category_by_name(self, name: str) -> Optional[Dict[str, Any]]:
        return await self.query_one("Item", {"Name": name, "Type": "Category"})

    async def create_category(self, name: str) -> Dict[str, Any]:
        return await self._write_item({"Name": name, "Type": "Category"})

    # ---- Inventory items ----

    async def find_product_by_name(self, name: str) -> Optional[Dict[str, Any]]:
        return await self.query_one("Item", {"Name": name, "Type": "Inventory"}, include_inactive=True)

    async def find_product_by_sku(self, sku: str) -> Optional[Dict[str, Any]]:
        return await self.query_one("Item", {"Sku": sku, "Type": "Inventory"}, include_inactive=True)

    async def create_product(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        return await self._write_item({**fields, "Type": "Inventory"})

    async def update_product(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        # full update: fields carries Id + SyncToken from the fetched item
        return await self._write_item(fields)

    # ---- Accounts ----

    async def find_account_by_name(self, name: str) -> Optional[Dict[str, Any]]:
        return await self.query_one("Account", {"Name": name})
