# app/models/audit_log.py
# In-process record of every write the sync engine makes against QuickBooks.
# Only the newest AUDIT_LOG_MAX_ENTRIES are kept.
from collections import deque
from typing import Deque, List, Dict, Any, Optional
import threading
import time

AUDIT_LOG_MAX_ENTRIES = 1000

audit_log: Deque[Dict[str, Any]] = deque(maxlen=AUDIT_LOG_MAX_ENTRIES)
lock = threading.Lock()

def add_audit_entry(action: str, sku: Optional[str], details: str):
    entry = {"action": action, "sku": sku, "timestamp": time.strftime("%Y-%m-%d %H:%M:%S"), "details": details}
    with lock:
        audit_log.append(entry)

def get_audit_log() -> List[Dict[str, Any]]:
    with lock:
        return list(audit_log)

def clear_audit_log() -> None:
    with lock:
        audit_log.clear()
