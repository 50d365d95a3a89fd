"""
store — SQLite-backed persistence for resolution runs.

Public API
──────────
RunRecord  — dataclass representing one stored run
RunStore   — CRUD interface (save, get, search, invalidate, …)
"""

from hookmap.store.models import RunRecord
from hookmap.store.db import RunStore

__all__ = ["RunRecord", "RunStore"]
