"""Data models for the store module."""

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

__all__ = ["RunRecord"]


@dataclass
class RunRecord:
    """
    Persistent record of one resolution pass.

    Fields
    ──────
    id             — SQLite row id (None until saved)
    artifact_hash  — hash of the entity model file, used as cache key
    revision       — artifact revision label (may be empty)
    report_json    — ResolutionReport.to_json()
    hooks_json     — JSON-serialised hook list
    resolved_count — mappers resolved in the pass
    failed_count   — mappers failed or skipped in the pass
    created_at     — UTC timestamp of creation
    """
    artifact_hash:  str
    report_json:    str
    revision:       str                = ""
    hooks_json:     str                = "[]"   # JSON string
    resolved_count: int                = 0
    failed_count:   int                = 0
    id:             Optional[int]      = None
    created_at:     Optional[datetime] = None

    def __post_init__(self) -> None:
        if self.created_at is None:
            self.created_at = datetime.now(tz=timezone.utc)

    @property
    def report(self) -> dict:
        return json.loads(self.report_json)

    @property
    def hooks(self) -> list:
        return json.loads(self.hooks_json)

    def __str__(self) -> str:
        return (
            f"RunRecord(id={self.id}, revision={self.revision!r}, "
            f"resolved={self.resolved_count}, failed={self.failed_count})"
        )
