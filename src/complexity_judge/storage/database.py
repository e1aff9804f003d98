"""SQLite-backed issue log, stored in .judge/ under the working directory."""

import json
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..exceptions import StorageError
from ..logging_config import get_logger
from ..models import Comment, ExtensionTarget
from .base import IssueSink, StoredIssue

logger = get_logger(__name__)

# Current schema version (bump when tables change).
_SCHEMA_VERSION = 1


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class SqliteIssueSink(IssueSink):
    """Persists review output to a SQLite database.

    Every ``transaction`` creates a row in ``runs``; comments and issues
    written inside it reference that run, and the read methods return the
    most recent run for an extension. Scores and result values are kept
    per extension; starting a run clears those left by earlier runs.

    Usage::

        with SqliteIssueSink(".judge/issues.db") as sink:
            pipeline = ScoringPipeline(config, sink)
            pipeline.execute(ExtensionTarget("app/code/Vendor/Module"))
    """

    def __init__(self, db_path: str) -> None:
        super().__init__()
        self.db_path: Path = Path(db_path)
        self._conn: Optional[sqlite3.Connection] = None
        self._run_id: Optional[int] = None

    @property
    def conn(self) -> sqlite3.Connection:
        """Return the active connection. Raises if not connected."""
        if self._conn is None:
            raise RuntimeError("SqliteIssueSink is not connected. Use as context manager or call connect().")
        return self._conn

    # ── lifecycle ─────────────────────────────────────────────────

    def _ensure_dir(self) -> None:
        """Create the database directory; a fresh .judge/ gets a .gitignore."""
        db_dir = self.db_path.parent
        created = not db_dir.exists()
        db_dir.mkdir(parents=True, exist_ok=True)
        if created and db_dir.name == ".judge":
            (db_dir / ".gitignore").write_text("*\n")

    def connect(self) -> sqlite3.Connection:
        """Open (or create) the database and run migrations."""
        try:
            self._ensure_dir()
            conn = sqlite3.connect(str(self.db_path), isolation_level=None)
            conn.execute("PRAGMA foreign_keys=ON")
            conn.row_factory = sqlite3.Row
        except (OSError, sqlite3.Error) as e:
            raise StorageError(
                f"Cannot open issue database: {self.db_path}", details={"reason": str(e)}
            ) from e
        self._conn = conn
        self._migrate()
        logger.debug("Issue DB connected at %s", self.db_path)
        return conn

    def close(self) -> None:
        """Close the connection if open."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> "SqliteIssueSink":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # ── migration ─────────────────────────────────────────────────

    def _migrate(self) -> None:
        """Idempotently create all tables."""
        c = self.conn

        c.execute("CREATE TABLE IF NOT EXISTS schema_version (version INTEGER NOT NULL)")
        row = c.execute("SELECT version FROM schema_version").fetchone()
        if row is None:
            c.execute("INSERT INTO schema_version (version) VALUES (?)", (_SCHEMA_VERSION,))

        c.execute(
            """
            CREATE TABLE IF NOT EXISTS runs (
                id          INTEGER PRIMARY KEY AUTOINCREMENT,
                extension   TEXT    NOT NULL,
                started_at  TEXT    NOT NULL
            )
            """
        )
        c.execute(
            """
            CREATE TABLE IF NOT EXISTS scores (
                extension   TEXT    NOT NULL,
                check_name  TEXT    NOT NULL,
                score       REAL    NOT NULL,
                updated_at  TEXT    NOT NULL,
                PRIMARY KEY (extension, check_name)
            )
            """
        )
        c.execute(
            """
            CREATE TABLE IF NOT EXISTS comments (
                id          INTEGER PRIMARY KEY AUTOINCREMENT,
                run_id      INTEGER REFERENCES runs(id) ON DELETE CASCADE,
                extension   TEXT    NOT NULL,
                check_name  TEXT    NOT NULL,
                level       TEXT    NOT NULL DEFAULT 'info',
                text        TEXT    NOT NULL
            )
            """
        )
        c.execute(
            """
            CREATE TABLE IF NOT EXISTS issues (
                id          INTEGER PRIMARY KEY AUTOINCREMENT,
                run_id      INTEGER REFERENCES runs(id) ON DELETE CASCADE,
                extension   TEXT    NOT NULL,
                check_name  TEXT    NOT NULL,
                category    TEXT    NOT NULL,
                value       TEXT    NOT NULL
            )
            """
        )
        c.execute(
            """
            CREATE TABLE IF NOT EXISTS issue_details (
                issue_id    INTEGER NOT NULL REFERENCES issues(id) ON DELETE CASCADE,
                key         TEXT    NOT NULL,
                value       TEXT    NOT NULL
            )
            """
        )
        c.execute(
            """
            CREATE TABLE IF NOT EXISTS issue_files (
                issue_id    INTEGER NOT NULL REFERENCES issues(id) ON DELETE CASCADE,
                file_path   TEXT    NOT NULL
            )
            """
        )
        c.execute(
            """
            CREATE TABLE IF NOT EXISTS result_values (
                extension   TEXT    NOT NULL,
                check_name  TEXT    NOT NULL,
                key         TEXT    NOT NULL,
                value       TEXT    NOT NULL,
                PRIMARY KEY (extension, check_name, key)
            )
            """
        )
        c.execute("CREATE INDEX IF NOT EXISTS idx_issues_extension ON issues(extension, run_id)")
        c.execute("CREATE INDEX IF NOT EXISTS idx_comments_extension ON comments(extension, run_id)")

    # ── transaction hooks ─────────────────────────────────────────

    def _begin(self) -> None:
        cur = self.conn.cursor()
        cur.execute("BEGIN")
        cur.execute(
            "INSERT INTO runs (extension, started_at) VALUES (?, ?)",
            (self._extension, _now()),
        )
        self._run_id = cur.lastrowid
        # A run replaces what earlier runs recorded for this extension
        cur.execute("DELETE FROM scores WHERE extension = ?", (self._extension,))
        cur.execute("DELETE FROM result_values WHERE extension = ?", (self._extension,))

    def _commit(self) -> None:
        self.conn.execute("COMMIT")
        self._run_id = None

    def _rollback(self) -> None:
        self.conn.execute("ROLLBACK")
        self._run_id = None

    # ── writes ────────────────────────────────────────────────────

    def add_comment(
        self, target: ExtensionTarget, check_name: str, text: str, level: str = "info"
    ) -> None:
        self.conn.execute(
            """
            INSERT INTO comments (run_id, extension, check_name, level, text)
            VALUES (?, ?, ?, ?, ?)
            """,
            (self._run_id, target.path, check_name, level, text),
        )

    def set_score(self, target: ExtensionTarget, check_name: str, score: float) -> None:
        self.conn.execute(
            """
            INSERT INTO scores (extension, check_name, score, updated_at)
            VALUES (?, ?, ?, ?)
            ON CONFLICT (extension, check_name)
            DO UPDATE SET score = excluded.score, updated_at = excluded.updated_at
            """,
            (target.path, check_name, score, _now()),
        )

    def set_result_value(
        self, target: ExtensionTarget, check_name: str, key: str, value: Any
    ) -> None:
        self.conn.execute(
            """
            INSERT INTO result_values (extension, check_name, key, value)
            VALUES (?, ?, ?, ?)
            ON CONFLICT (extension, check_name, key) DO UPDATE SET value = excluded.value
            """,
            (target.path, check_name, key, json.dumps(value)),
        )

    def _write_issue(self, issue: StoredIssue) -> None:
        cur = self.conn.cursor()
        cur.execute(
            """
            INSERT INTO issues (run_id, extension, check_name, category, value)
            VALUES (?, ?, ?, ?, ?)
            """,
            (self._run_id, issue.extension, issue.check_name, issue.category, json.dumps(issue.value)),
        )
        issue_id = cur.lastrowid
        if issue.details:
            cur.executemany(
                "INSERT INTO issue_details (issue_id, key, value) VALUES (?, ?, ?)",
                [(issue_id, k, json.dumps(v)) for k, v in issue.details.items()],
            )
        if issue.files:
            cur.executemany(
                "INSERT INTO issue_files (issue_id, file_path) VALUES (?, ?)",
                [(issue_id, f) for f in issue.files],
            )

    # ── reads ─────────────────────────────────────────────────────

    def _latest_run(self, target: ExtensionTarget) -> Optional[int]:
        row = self.conn.execute(
            "SELECT MAX(id) AS run_id FROM runs WHERE extension = ?", (target.path,)
        ).fetchone()
        return row["run_id"] if row else None

    def comments(self, target: ExtensionTarget) -> List[Comment]:
        rows = self.conn.execute(
            """
            SELECT check_name, text, level FROM comments
            WHERE extension = ? AND run_id IS ?
            ORDER BY id
            """,
            (target.path, self._latest_run(target)),
        ).fetchall()
        return [Comment(r["check_name"], r["text"], r["level"]) for r in rows]

    def issues(self, target: ExtensionTarget) -> List[StoredIssue]:
        rows = self.conn.execute(
            """
            SELECT id, check_name, category, value FROM issues
            WHERE extension = ? AND run_id IS ?
            ORDER BY id
            """,
            (target.path, self._latest_run(target)),
        ).fetchall()

        issues = []
        for r in rows:
            details = {
                d["key"]: json.loads(d["value"])
                for d in self.conn.execute(
                    "SELECT key, value FROM issue_details WHERE issue_id = ?", (r["id"],)
                )
            }
            files = [
                f["file_path"]
                for f in self.conn.execute(
                    "SELECT file_path FROM issue_files WHERE issue_id = ?", (r["id"],)
                )
            ]
            issues.append(
                StoredIssue(
                    extension=target.path,
                    check_name=r["check_name"],
                    category=r["category"],
                    value=json.loads(r["value"]),
                    details=details,
                    files=files,
                )
            )
        return issues

    def score(self, target: ExtensionTarget, check_name: str) -> Optional[float]:
        row = self.conn.execute(
            "SELECT score FROM scores WHERE extension = ? AND check_name = ?",
            (target.path, check_name),
        ).fetchone()
        return row["score"] if row else None

    def result_values(self, target: ExtensionTarget) -> Dict[str, Dict[str, Any]]:
        values: Dict[str, Dict[str, Any]] = {}
        for r in self.conn.execute(
            "SELECT check_name, key, value FROM result_values WHERE extension = ?",
            (target.path,),
        ):
            values.setdefault(r["check_name"], {})[r["key"]] = json.loads(r["value"])
        return values
