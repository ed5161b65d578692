#=================================================================
# app/main_app.py
# FastAPI application entry-point.
#=================================================================

import logging

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.logging_filters import install_log_filters
from app.routes import router as api_router

# --- FastAPI instance ---
app = FastAPI(
    title="Shopify QuickBooks Sync",
    description="Syncs Shopify product variants into QuickBooks Online inventory items.",
)

# --- Logging setup (console, INFO level) ---
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s | %(message)s"
)
logger = logging.getLogger("uvicorn.error")
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
install_log_filters()

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)  # /api/*

# --- Root endpoint ---
@app.get("/")
async def home():
    return {"status": "running", "service": "Shopify QuickBooks Sync"}

# --- Upstream (Shopify / QuickBooks) HTTP failures ---
@app.exception_handler(httpx.HTTPStatusError)
async def upstream_exception_handler(request: Request, exc: httpx.HTTPStatusError):
    logger.error("Upstream call failed: %s", exc)
    return JSONResponse(
        status_code=502,
        content={"detail": f"Sync failed: {str(exc)}", "upstream_status": exc.response.status_code},
    )

# --- Global error handler (keeps full stack trace in logs) ---
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled error", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"detail": f"Sync failed: {str(exc)}"},
    )

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
