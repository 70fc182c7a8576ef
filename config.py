"""
trafficdesk - Centralised configuration.

All tunables live here.  Every other module imports from config
instead of reading os.environ directly.
"""

from __future__ import annotations
import os
from pathlib import Path


# ── Paths ──────────────────────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent

# ── Database ───────────────────────────────────────────────────────────
DB_URL = os.environ.get("TRAFFICDESK_DB", f"sqlite:///{BASE_DIR / 'trafficdesk.sqlite'}")

# ── Server ─────────────────────────────────────────────────────────────
HOST   = os.environ.get("TRAFFICDESK_HOST", "0.0.0.0")
PORT   = int(os.environ.get("TRAFFICDESK_PORT", "3000"))
DEBUG  = os.environ.get("TRAFFICDESK_DEBUG", "0") == "1"
SECRET = os.environ.get("TRAFFICDESK_SECRET", "trafficdesk-dev-key-change-in-prod")
LOG_LEVEL = os.environ.get("TRAFFICDESK_LOG_LEVEL", "INFO")

# ── Uploads ────────────────────────────────────────────────────────────
MAX_UPLOAD_BYTES = int(os.environ.get("TRAFFICDESK_MAX_UPLOAD_MB", "50")) * 1024 * 1024
IMPORT_EXTENSIONS = frozenset({".csv", ".xlsx"})

# ── Import accounting ──────────────────────────────────────────────────
IMPORT_ERROR_LOG_LIMIT = 100      # errors persisted on the batch row
IMPORT_ERROR_RESULT_LIMIT = 10    # errors returned to the caller

# ── Pagination ─────────────────────────────────────────────────────────
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE     = 100
