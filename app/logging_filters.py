# --- Global log sanitizer: trims HTML error pages and masks bearer tokens --------
import logging, re

_HTML_SIG_RE = re.compile(r'(?is)<!DOCTYPE html|<html[^>]*>')
_TITLE_RE    = re.compile(r'(?is)<title[^>]*>(.*?)</title>')
_TAG_RE      = re.compile(r'(?is)<[^>]+>')
_SCRIPT_RE   = re.compile(r'(?is)<(script|style)[^>]*>.*?</\1>')
_BEARER_RE   = re.compile(r'(?i)(bearer\s+)[A-Za-z0-9\-._~+/]+=*')
_SHOPIFY_TOKEN_RE = re.compile(r'(?i)(X-Shopify-Access-Token["\']?\s*[:=]\s*["\']?)[^"\'\s,}]+')


def _strip_tags(s: str) -> str:
    s = _SCRIPT_RE.sub('', s)
    s = _TAG_RE.sub(' ', s)
    return re.sub(r'\s+', ' ', s).strip()


def _summarize_html(s: str, limit: int = 200) -> str:
    title = None
    m = _TITLE_RE.search(s)
    if m:
        title = _strip_tags(m.group(1))
    preview = title or _strip_tags(s)[:limit]
    return f"{preview} [HTML {len(s)} chars trimmed]"


def mask_secrets(s: str) -> str:
    s = _BEARER_RE.sub(r'\1***', s)
    return _SHOPIFY_TOKEN_RE.sub(r'\1***', s)


class SyncLogFilter(logging.Filter):
    """
    Intuit and Shopify both answer some failures with full HTML pages; replace
    those with a short summary. Access tokens never reach the log output.
    """
    def filter(self, record: logging.LogRecord) -> bool:
        msg = record.getMessage()
        if not isinstance(msg, str):
            return True
        cleaned = msg
        if len(cleaned) > 200 and _HTML_SIG_RE.search(cleaned):
            cleaned = _summarize_html(cleaned)
        cleaned = mask_secrets(cleaned)
        if cleaned != msg:
            record.msg = cleaned
            record.args = ()
        return True


def install_log_filters() -> None:
    # root + uvicorn family
    for _name in ("", "uvicorn", "uvicorn.error"):
        logger = logging.getLogger(_name)
        if not any(isinstance(f, SyncLogFilter) for f in logger.filters):
            logger.addFilter(SyncLogFilter())
