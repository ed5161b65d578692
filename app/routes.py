#=======================================================================================
# app/routes.py
# FastAPI routes for Shopify → QuickBooks validation and sync.
#
# All endpoints live under /api/* and require HTTP Basic (admin).
#=======================================================================================

import json
import secrets
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from fastapi.responses import JSONResponse

from app.config import settings
from app.models.audit_log import get_audit_log
from app.quickbooks.quickbooks import QuickBooksClient
from app.shopify.shopify import ShopifyClient
from app.shopify.validation import validate_product_variants
from app.sync.pagination import fetch_all
from app.sync.product_sync import sync_products

logger = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/api", tags=["Sync API"])

# ---------------------------
# HTTP Basic (admin)
# ---------------------------
security = HTTPBasic()

def verify_admin(credentials: HTTPBasicCredentials = Depends(security)):
    ok_user = secrets.compare_digest(credentials.username or "", settings.ADMIN_USER or "")
    ok_pass = secrets.compare_digest(credentials.password or "", settings.ADMIN_PASS or "")
    if not (ok_user and ok_pass):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Basic"},
        )

# ---------------------------
# Remote clients (overridable in tests)
# ---------------------------
def get_variant_source():
    return ShopifyClient()

# Shared across requests; a refresh rotates its tokens in place.
_qbo_client: Optional[QuickBooksClient] = None

async def get_accounting_store():
    global _qbo_client
    if _qbo_client is None:
        _qbo_client = QuickBooksClient()
    if settings.QBO_REFRESH_ON_START and _qbo_client.refresh_token:
        await _qbo_client.refresh_access_token()
    return _qbo_client

# ---------------------------
# Helpers
# ---------------------------
async def _safe_json(req: Request) -> Dict[str, Any]:
    """Best-effort JSON body parsing; an empty or broken body means defaults."""
    try:
        raw = (await req.body()).decode("utf-8", "ignore")
        data = json.loads(raw) if raw.strip() else {}
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}

def _get_bool(payload: Dict[str, Any], *keys: str, default: bool = False) -> bool:
    for k in keys:
        if k in payload:
            return bool(payload.get(k))
    return default

# ----------------------------------------------------------------------
# Validation
# ----------------------------------------------------------------------

@router.get("/variants/validate", dependencies=[Depends(verify_admin)])
async def api_validate_variants(source=Depends(get_variant_source)):
    """Fetch every Shopify variant and return the validation report (no writes)."""
    variants = await fetch_all(source.get_product_variants)
    report = validate_product_variants(variants)
    return JSONResponse(content=report.model_dump())

# ----------------------------------------------------------------------
# Sync
# ----------------------------------------------------------------------

@router.post("/sync/full", dependencies=[Depends(verify_admin)])
async def api_sync_full(
    request: Request,
    source=Depends(get_variant_source),
    store=Depends(get_accounting_store),
):
    """
    Full Shopify → QuickBooks sync (blocking).

    Body:
      {
        "skip_invalid" | "skipInvalid": bool (default SYNC_SKIP_INVALID),
        "continue_on_error" | "continueOnError": bool (default SYNC_CONTINUE_ON_ERROR)
      }
    """
    payload = await _safe_json(request)
    skip_invalid = _get_bool(payload, "skip_invalid", "skipInvalid", default=settings.SYNC_SKIP_INVALID)
    continue_on_error = _get_bool(
        payload, "continue_on_error", "continueOnError", default=settings.SYNC_CONTINUE_ON_ERROR
    )
    logger.info("[SYNC] full sync requested (skip_invalid=%s, continue_on_error=%s)", skip_invalid, continue_on_error)
    result = await sync_products(source, store, skip_invalid=skip_invalid, continue_on_error=continue_on_error)
    result["request"] = {"skip_invalid": skip_invalid, "continue_on_error": continue_on_error}
    return JSONResponse(content=result)


@router.get("/sync/audit", dependencies=[Depends(verify_admin)])
async def api_sync_audit():
    """Every QuickBooks write made by this process, oldest first."""
    return JSONResponse(content={"entries": get_audit_log()})
