"""
RunStore — SQLite-backed persistence for resolution runs.

Usage::

    store = RunStore(db_path="~/.hookmap/runs.db")

    rec = store.get(artifact_hash="abc123")
    if rec is None:
        table = ResolutionEngine(model, registry).run()
        store.save(RunRecord(...))

    # Drop a stale run
    removed = store.invalidate(artifact_hash="abc123")
"""

import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from hookmap.exceptions import StoreError
from hookmap.store.models import RunRecord

__all__ = ["RunStore"]

logger = logging.getLogger(__name__)

# Path to the SQL schema file bundled with this package
_SCHEMA_PATH = Path(__file__).parent / "migrations" / "schema.sql"

_TS_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


class RunStore:
    """
    CRUD interface for the local SQLite run store.

    The database file and schema are created automatically on first open.
    Each operation opens its own connection; none is kept between calls.
    sqlite3 errors surface as StoreError.
    """

    def __init__(self, db_path: str) -> None:
        self._db_path = Path(db_path).expanduser()
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._ensure_schema()
        except (OSError, sqlite3.Error) as exc:
            raise StoreError(f"Cannot open run store at {self._db_path}: {exc}") from exc

    @property
    def path(self) -> Path:
        return self._db_path

    # ── Internal helpers ──────────────────────────────────────────────────

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path))
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        """Create tables if they don't already exist."""
        sql = _SCHEMA_PATH.read_text(encoding="utf-8")
        with self._connect() as conn:
            conn.executescript(sql)

    def _execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        try:
            with self._connect() as conn:
                cur = conn.execute(sql, params)
                conn.commit()
                return cur
        except sqlite3.Error as exc:
            raise StoreError(f"Run store query failed: {exc}") from exc

    def _fetch(self, sql: str, params: tuple = ()) -> list[sqlite3.Row]:
        try:
            with self._connect() as conn:
                return conn.execute(sql, params).fetchall()
        except sqlite3.Error as exc:
            raise StoreError(f"Run store query failed: {exc}") from exc

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> RunRecord:
        def _dt(s: Optional[str]) -> Optional[datetime]:
            if not s:
                return None
            try:
                return datetime.fromisoformat(s.replace("Z", "+00:00"))
            except ValueError:
                return None

        return RunRecord(
            id=row["id"],
            artifact_hash=row["artifact_hash"],
            revision=row["revision"],
            report_json=row["report_json"],
            hooks_json=row["hooks_json"],
            resolved_count=row["resolved_count"],
            failed_count=row["failed_count"],
            created_at=_dt(row["created_at"]),
        )

    # ── Public API ────────────────────────────────────────────────────────

    def save(self, record: RunRecord) -> int:
        """
        Persist *record*; a run for the same artifact_hash is replaced.

        Returns:
            The SQLite rowid of the inserted row.
        """
        created = (
            record.created_at.strftime(_TS_FORMAT)
            if record.created_at
            else datetime.now(tz=timezone.utc).strftime(_TS_FORMAT)
        )
        cur = self._execute(
            """
            INSERT OR REPLACE INTO runs
                (artifact_hash, revision, report_json, hooks_json,
                 resolved_count, failed_count, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                record.artifact_hash,
                record.revision,
                record.report_json,
                record.hooks_json,
                record.resolved_count,
                record.failed_count,
                created,
            ),
        )
        record.id = cur.lastrowid
        logger.debug("Saved run %s for artifact %s", record.id, record.artifact_hash)
        return cur.lastrowid  # type: ignore[return-value]

    def get(self, artifact_hash: str) -> Optional[RunRecord]:
        """
        Retrieve the stored run for *artifact_hash*.

        Returns:
            RunRecord if found, None otherwise.
        """
        rows = self._fetch("SELECT * FROM runs WHERE artifact_hash=?", (artifact_hash,))
        return self._row_to_record(rows[0]) if rows else None

    def get_by_id(self, record_id: int) -> Optional[RunRecord]:
        rows = self._fetch("SELECT * FROM runs WHERE id=?", (record_id,))
        return self._row_to_record(rows[0]) if rows else None

    def search(self, revision: str = "") -> list[RunRecord]:
        """
        Search stored runs by revision substring.

        Args:
            revision: Substring to match (case-insensitive).
                      Empty string returns all records.

        Returns:
            Matching RunRecord objects, newest first.
        """
        rows = self._fetch(
            "SELECT * FROM runs WHERE revision LIKE ? ORDER BY created_at DESC, id DESC",
            (f"%{revision}%",),
        )
        return [self._row_to_record(r) for r in rows]

    def invalidate(self, artifact_hash: str) -> int:
        """
        Delete the stored run for *artifact_hash*.

        Returns:
            Number of rows deleted.
        """
        cur = self._execute("DELETE FROM runs WHERE artifact_hash=?", (artifact_hash,))
        return cur.rowcount

    def delete(self, record_id: int) -> bool:
        """
        Delete a single run by id.

        Returns:
            True if a row was deleted, False if id not found.
        """
        cur = self._execute("DELETE FROM runs WHERE id=?", (record_id,))
        return cur.rowcount > 0
