"""AuditHistory: SQLite-backed record of aggregated audit results.

One row per audit id. Re-aggregating an audit updates its results but keeps
its original position in the timeline. Used to report the score trend
between consecutive audits.
"""

from __future__ import annotations

import sqlite3
import time
from pathlib import Path


class AuditHistory:
    """SQLite store of overall scores per audit."""

    def __init__(self, db_path: "Path | str") -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn: "sqlite3.Connection | None" = None
        self._init_db()

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(str(self.db_path))
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.execute("PRAGMA synchronous=NORMAL")
        return self._conn

    def _init_db(self) -> None:
        conn = self._get_conn()
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS audits (
                audit_id TEXT PRIMARY KEY,
                recorded_at REAL NOT NULL,
                overall_score REAL,
                verdict TEXT,
                total_components INTEGER NOT NULL DEFAULT 0,
                critical_issues INTEGER NOT NULL DEFAULT 0,
                artifacts_loaded INTEGER NOT NULL DEFAULT 0,
                artifacts_failed INTEGER NOT NULL DEFAULT 0
            );

            CREATE INDEX IF NOT EXISTS idx_audits_recorded
                ON audits(recorded_at);
        """)
        conn.commit()

    def record(
        self,
        audit_id: str,
        overall_score: "float | None",
        verdict: "str | None",
        total_components: int = 0,
        critical_issues: int = 0,
        artifacts_loaded: int = 0,
        artifacts_failed: int = 0,
        recorded_at: "float | None" = None,
    ) -> None:
        """Insert the row for *audit_id*, or update its results if already recorded.

        Re-aggregating an audit keeps its original ``recorded_at`` so its
        place in the timeline does not move. An empty batch is recorded with
        a NULL score, never a zero.
        """
        conn = self._get_conn()
        conn.execute(
            """INSERT INTO audits
               (audit_id, recorded_at, overall_score, verdict, total_components,
                critical_issues, artifacts_loaded, artifacts_failed)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?)
               ON CONFLICT(audit_id) DO UPDATE SET
                overall_score = excluded.overall_score,
                verdict = excluded.verdict,
                total_components = excluded.total_components,
                critical_issues = excluded.critical_issues,
                artifacts_loaded = excluded.artifacts_loaded,
                artifacts_failed = excluded.artifacts_failed""",
            (
                audit_id,
                recorded_at if recorded_at is not None else time.time(),
                overall_score,
                verdict,
                total_components,
                critical_issues,
                artifacts_loaded,
                artifacts_failed,
            ),
        )
        conn.commit()

    def get(self, audit_id: str) -> "dict | None":
        conn = self._get_conn()
        row = conn.execute("SELECT * FROM audits WHERE audit_id = ?", (audit_id,)).fetchone()
        return dict(row) if row else None

    def previous(self, before_audit_id: str) -> "dict | None":
        """Most recent scored audit other than *before_audit_id*.

        If *before_audit_id* is already recorded, only audits recorded before
        it are considered.
        """
        conn = self._get_conn()
        current = self.get(before_audit_id)
        if current is not None:
            row = conn.execute(
                """SELECT * FROM audits
                   WHERE audit_id != ? AND overall_score IS NOT NULL AND recorded_at <= ?
                   ORDER BY recorded_at DESC LIMIT 1""",
                (before_audit_id, current["recorded_at"]),
            ).fetchone()
        else:
            row = conn.execute(
                """SELECT * FROM audits
                   WHERE overall_score IS NOT NULL
                   ORDER BY recorded_at DESC LIMIT 1""",
            ).fetchone()
        return dict(row) if row else None

    def recent(self, limit: int = 10) -> list[dict]:
        """Most recent audits first."""
        conn = self._get_conn()
        rows = conn.execute(
            "SELECT * FROM audits ORDER BY recorded_at DESC LIMIT ?",
            (limit,),
        ).fetchall()
        return [dict(row) for row in rows]

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
