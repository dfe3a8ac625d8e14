"""
stdledger — SQLite release ledger.

Two tables: releases (one row per version, unique) and package_changes
(many rows per release). persist() writes a whole ReleaseDocument in a
single transaction and replaces whatever that version held before.
"""

from __future__ import annotations

import sqlite3
from datetime import date
from pathlib import Path

from stdledger.errors import ReleaseNotFoundError, StorageError
from stdledger.models.release import ExtractedChange, ReleaseDocument
from stdledger.models.stored import LedgerStats, StoredChange, StoredRelease, TimelineEntry
from stdledger.utils.logging import logger

SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS releases (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        version TEXT UNIQUE NOT NULL,
        release_date TEXT NOT NULL,
        url TEXT NOT NULL DEFAULT '',
        created_at TEXT DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS package_changes (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        release_id INTEGER NOT NULL,
        package TEXT NOT NULL,
        change_type TEXT NOT NULL,
        description TEXT,
        summary TEXT,
        source_url TEXT,
        created_at TEXT DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY (release_id) REFERENCES releases (id) ON DELETE CASCADE
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_package_changes_package ON package_changes (package)",
    "CREATE INDEX IF NOT EXISTS idx_package_changes_change_type ON package_changes (change_type)",
    "CREATE INDEX IF NOT EXISTS idx_releases_version ON releases (version)",
)

_CHANGE_COLUMNS = """
    pc.id, pc.release_id, pc.package, pc.change_type,
    COALESCE(pc.description, '') AS description,
    COALESCE(pc.summary, '') AS summary,
    COALESCE(pc.source_url, '') AS source_url,
    pc.created_at
"""


class Database:
    def __init__(self, db_path: str | Path = ":memory:"):
        self.db_path = str(db_path)
        try:
            # The API serves sync endpoints from a thread pool.
            self.conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self.conn.row_factory = sqlite3.Row
            self.conn.execute("PRAGMA foreign_keys = ON")
            self._create_tables()
        except sqlite3.Error as exc:
            raise StorageError("open database", str(exc)) from exc

    def __enter__(self) -> Database:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self.conn.close()

    def _create_tables(self) -> None:
        with self.conn:
            for statement in SCHEMA:
                self.conn.execute(statement)

    # ── writes ──────────────────────────────────────────────

    def _upsert_release(self, version: str, release_date: date, url: str) -> int:
        self.conn.execute(
            """
            INSERT INTO releases (version, release_date, url) VALUES (?, ?, ?)
            ON CONFLICT(version) DO UPDATE SET
                release_date = excluded.release_date,
                url = excluded.url
            """,
            (version, release_date.isoformat(), url),
        )
        row = self.conn.execute("SELECT id FROM releases WHERE version = ?", (version,)).fetchone()
        return int(row["id"])

    def _insert_change(self, release_id: int, change: ExtractedChange) -> None:
        self.conn.execute(
            """
            INSERT INTO package_changes
                (release_id, package, change_type, description, summary, source_url)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                release_id,
                change.package,
                change.change_type.value,
                change.description,
                change.summary,
                change.source_url,
            ),
        )

    def save_release(self, version: str, release_date: date, url: str = "") -> int:
        """Insert or update a release row; returns its id."""
        try:
            with self.conn:
                return self._upsert_release(version, release_date, url)
        except sqlite3.Error as exc:
            raise StorageError(f"save release {version}", str(exc)) from exc

    def save_change(self, release_id: int, change: ExtractedChange) -> None:
        try:
            with self.conn:
                self._insert_change(release_id, change)
        except sqlite3.Error as exc:
            raise StorageError(f"save change {change.package}", str(exc)) from exc

    def persist(self, document: ReleaseDocument) -> int:
        """Store a release and its changes atomically, replacing earlier changes."""
        try:
            with self.conn:
                release_id = self._upsert_release(document.version, document.release_date, document.url)
                self.conn.execute("DELETE FROM package_changes WHERE release_id = ?", (release_id,))
                for change in document.changes:
                    self._insert_change(release_id, change)
        except sqlite3.Error as exc:
            raise StorageError(f"persist release {document.version}", str(exc)) from exc
        logger.info("  Stored Go %s: %d changes (release id %d)", document.version, len(document.changes), release_id)
        return release_id

    def clear(self) -> None:
        try:
            with self.conn:
                self.conn.execute("DELETE FROM package_changes")
                self.conn.execute("DELETE FROM releases")
        except sqlite3.Error as exc:
            raise StorageError("clear data", str(exc)) from exc

    # ── reads ───────────────────────────────────────────────

    def _query(self, sql: str, params: tuple = ()) -> list[sqlite3.Row]:
        try:
            return self.conn.execute(sql, params).fetchall()
        except sqlite3.Error as exc:
            raise StorageError("query", str(exc)) from exc

    def all_releases(self) -> list[StoredRelease]:
        rows = self._query("SELECT id, version, release_date, url, created_at FROM releases ORDER BY release_date, version")
        return [StoredRelease(**dict(row)) for row in rows]

    def release(self, version: str) -> StoredRelease:
        rows = self._query("SELECT id, version, release_date, url, created_at FROM releases WHERE version = ?", (version,))
        if not rows:
            raise ReleaseNotFoundError(version)
        return StoredRelease(**dict(rows[0]))

    def release_id(self, version: str) -> int | None:
        rows = self._query("SELECT id FROM releases WHERE version = ?", (version,))
        return int(rows[0]["id"]) if rows else None

    def package_changes(self, release_id: int) -> list[StoredChange]:
        rows = self._query(
            f"SELECT {_CHANGE_COLUMNS} FROM package_changes pc WHERE pc.release_id = ? ORDER BY pc.package, pc.id",
            (release_id,),
        )
        return [StoredChange(**dict(row)) for row in rows]

    def all_package_changes(self) -> list[StoredChange]:
        rows = self._query(
            f"""
            SELECT {_CHANGE_COLUMNS} FROM package_changes pc
            JOIN releases r ON pc.release_id = r.id
            ORDER BY r.release_date, pc.package, pc.id
            """
        )
        return [StoredChange(**dict(row)) for row in rows]

    def package_evolution(self, package: str) -> list[TimelineEntry]:
        """Every change of one package, oldest release first."""
        rows = self._query(
            """
            SELECT r.version, r.release_date, pc.change_type,
                   COALESCE(pc.description, '') AS description,
                   COALESCE(pc.summary, '') AS summary,
                   COALESCE(pc.source_url, '') AS source_url
            FROM package_changes pc
            JOIN releases r ON pc.release_id = r.id
            WHERE pc.package = ?
            ORDER BY r.release_date, r.version, pc.id
            """,
            (package,),
        )
        return [TimelineEntry(**dict(row)) for row in rows]

    def unique_packages(self) -> list[str]:
        rows = self._query("SELECT DISTINCT package FROM package_changes ORDER BY package")
        return [row["package"] for row in rows]

    def packages_in_version(self, version: str) -> list[str]:
        rows = self._query(
            """
            SELECT DISTINCT pc.package FROM package_changes pc
            JOIN releases r ON pc.release_id = r.id
            WHERE r.version = ?
            ORDER BY pc.package
            """,
            (version,),
        )
        return [row["package"] for row in rows]

    def visualization_data(self) -> dict:
        """Releases, packages and a per-package timeline, ready for JSON."""
        releases = self.all_releases()
        packages = self.unique_packages()
        evolution = {
            package: [entry.model_dump(mode="json") for entry in self.package_evolution(package)]
            for package in packages
        }
        return {
            "releases": [r.model_dump(mode="json") for r in releases],
            "packages": packages,
            "package_evolution": evolution,
        }

    def stats(self) -> LedgerStats:
        by_type = self._query(
            "SELECT change_type, COUNT(*) AS n FROM package_changes GROUP BY change_type ORDER BY change_type"
        )
        per_release = self._query(
            """
            SELECT r.version, COUNT(pc.id) AS n FROM releases r
            LEFT JOIN package_changes pc ON pc.release_id = r.id
            GROUP BY r.id ORDER BY r.release_date, r.version
            """
        )
        totals = self._query(
            """
            SELECT (SELECT COUNT(*) FROM releases) AS releases,
                   (SELECT COUNT(DISTINCT package) FROM package_changes) AS packages,
                   (SELECT COUNT(*) FROM package_changes) AS changes
            """
        )[0]
        return LedgerStats(
            releases=totals["releases"],
            packages=totals["packages"],
            changes=totals["changes"],
            by_change_type={row["change_type"]: row["n"] for row in by_type},
            changes_per_release={row["version"]: row["n"] for row in per_release},
        )

    def load_documents(self) -> list[ReleaseDocument]:
        """Rebuild every stored release as a ReleaseDocument, oldest first."""
        changes_by_release: dict[int, list[ExtractedChange]] = {}
        for row in self.all_package_changes():
            changes_by_release.setdefault(row.release_id, []).append(ExtractedChange(
                package=row.package,
                change_type=row.change_type,
                description=row.description,
                summary=row.summary,
                source_url=row.source_url,
            ))
        return [
            ReleaseDocument(
                version=release.version,
                release_date=release.release_date,
                url=release.url,
                changes=tuple(changes_by_release.get(release.id, ())),
            )
            for release in self.all_releases()
        ]
