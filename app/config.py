# ----------------------------------------------------------------
# Import configuration variables to be used throughout the project
# ----------------------------------------------------------------
import os
from dotenv import load_dotenv

# Load .env (allow container env to override file values)
load_dotenv(override=True)


def _get_bool(name: str, default: bool = False) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return str(v).strip().lower() in {"1", "true", "yes", "on", "y"}


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name, "")
    try:
        return int(raw) if raw.strip() else default
    except ValueError:
        return default


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name, "")
    try:
        return float(raw) if raw.strip() else default
    except ValueError:
        return default


class Settings:
    # ── Shopify (Admin GraphQL API) ──────────────────────────────────────────
    SHOPIFY_SHOP: str = os.getenv("SHOPIFY_SHOP", "")  # "<shop>" of <shop>.myshopify.com
    SHOPIFY_ADMIN_API_PASSWORD: str = os.getenv("SHOPIFY_ADMIN_API_PASSWORD", "")
    SHOPIFY_API_VERSION: str = os.getenv("SHOPIFY_API_VERSION", "2024-10")
    SHOPIFY_PAGE_SIZE: int = _get_int("SHOPIFY_PAGE_SIZE", 100)

    # ── QuickBooks Online ────────────────────────────────────────────────────
    QBO_CLIENT_ID: str = os.getenv("QBO_CLIENT_ID", "")
    QBO_CLIENT_SECRET: str = os.getenv("QBO_CLIENT_SECRET", "")
    QBO_ACCESS_TOKEN: str = os.getenv("QBO_ACCESS_TOKEN", "")
    QBO_REFRESH_TOKEN: str = os.getenv("QBO_REFRESH_TOKEN", "")
    QBO_REALM_ID: str = os.getenv("QBO_REALM_ID", "")
    QBO_SANDBOX: bool = _get_bool("QBO_SANDBOX", True)
    QBO_MINOR_VERSION: str = os.getenv("QBO_MINOR_VERSION", "70")
    # refresh the access token once before a sync pass when a refresh token is set
    QBO_REFRESH_ON_START: bool = _get_bool("QBO_REFRESH_ON_START", True)

    # ── HTTP ─────────────────────────────────────────────────────────────────
    HTTP_TIMEOUT: float = _get_float("HTTP_TIMEOUT", 30.0)

    # ── Sync behaviour ───────────────────────────────────────────────────────
    SYNC_SKIP_INVALID: bool = _get_bool("SYNC_SKIP_INVALID", True)
    SYNC_CONTINUE_ON_ERROR: bool = _get_bool("SYNC_CONTINUE_ON_ERROR", False)

    # ── Admin API ────────────────────────────────────────────────────────────
    ADMIN_USER: str = os.getenv("ADMIN_USER", "admin")
    ADMIN_PASS: str = os.getenv("ADMIN_PASS", "changeme")

    # ── CORS ─────────────────────────────────────────────────────────────────
    # Comma-separated list in .env, e.g. "https://example.com, https://foo.bar"
    CORS_ORIGINS: list[str] = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]


settings = Settings()
