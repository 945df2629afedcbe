"""Persistent job catalog backed by SQLite."""
from __future__ import annotations

import sqlite3
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Iterator

from coop_tracker.errors import StoreError
from coop_tracker.log import get_logger
from coop_tracker.models import (
    DESCRIPTIVE_FIELDS,
    STATUS_CLOSED,
    STATUS_OPEN,
    TRACKING_STATUSES,
    JobRecord,
)

log = get_logger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS jobs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    company TEXT NOT NULL,
    role TEXT NOT NULL,
    location TEXT NOT NULL DEFAULT '',
    category TEXT NOT NULL DEFAULT '',
    url TEXT NOT NULL UNIQUE,
    age TEXT,
    age_minutes INTEGER,
    status TEXT NOT NULL DEFAULT 'OPEN',
    first_seen_at TEXT NOT NULL,
    last_seen_at TEXT NOT NULL
)
"""


@dataclass(frozen=True)
class StatusFilter:
    """Records with ``status`` whose url is (``present``) or is not in ``urls``."""

    status: str
    urls: frozenset[str]
    present: bool


class JobStore(ABC):
    @abstractmethod
    def find_by_key(self, url: str) -> JobRecord | None:
        pass

    @abstractmethod
    def upsert(
        self,
        url: str,
        fields: dict[str, Any],
        create_defaults: dict[str, Any],
    ) -> JobRecord:
        """Create with ``fields`` + ``create_defaults``, or overwrite ``fields`` only."""

    @abstractmethod
    def bulk_set_status(self, status_filter: StatusFilter, new_status: str) -> int:
        pass

    @abstractmethod
    def transaction(self) -> Iterator["JobStore"]:
        """Context manager; everything inside commits together or not at all."""

    @abstractmethod
    def list_records(self, status: str | None = None) -> list[JobRecord]:
        pass


def _row_to_record(row: sqlite3.Row) -> JobRecord:
    return JobRecord(
        id=row["id"],
        company=row["company"],
        role=row["role"],
        location=row["location"],
        category=row["category"],
        url=row["url"],
        age=row["age"],
        age_minutes=row["age_minutes"],
        status=row["status"],
        first_seen_at=datetime.fromisoformat(row["first_seen_at"]),
        last_seen_at=datetime.fromisoformat(row["last_seen_at"]),
    )


class SqliteJobStore(JobStore):
    """SQLite catalog keyed by posting URL.

    Writes outside ``transaction()`` commit immediately. Inside it, nothing is
    committed until the block exits cleanly; any ``sqlite3.Error`` rolls the
    block back and surfaces as ``StoreError``.
    """

    def __init__(self, db_path: str | Path = ":memory:") -> None:
        self.db_path = db_path
        if str(db_path) != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(str(db_path))
        self.conn.row_factory = sqlite3.Row
        self._in_transaction = False
        self.conn.execute(_SCHEMA)
        self.conn.execute("CREATE INDEX IF NOT EXISTS idx_jobs_status ON jobs(status)")
        self.conn.commit()

    def close(self) -> None:
        self.conn.close()

    def _commit(self) -> None:
        if not self._in_transaction:
            self.conn.commit()

    @contextmanager
    def transaction(self) -> Iterator["SqliteJobStore"]:
        if self._in_transaction:
            yield self
            return
        self._in_transaction = True
        try:
            with self.conn:
                yield self
        except sqlite3.Error as exc:
            raise StoreError(f"Transaction rolled back: {exc}") from exc
        finally:
            self._in_transaction = False

    def find_by_key(self, url: str) -> JobRecord | None:
        row = self.conn.execute("SELECT * FROM jobs WHERE url = ?", (url,)).fetchone()
        return _row_to_record(row) if row else None

    def upsert(
        self,
        url: str,
        fields: dict[str, Any],
        create_defaults: dict[str, Any],
    ) -> JobRecord:
        descriptive = {k: fields.get(k) for k in DESCRIPTIVE_FIELDS}
        seen_at = create_defaults["first_seen_at"]
        last_seen = fields.get("last_seen_at", seen_at)
        values = {
            **descriptive,
            "url": url,
            "status": create_defaults.get("status", STATUS_OPEN),
            "first_seen_at": _iso(seen_at),
            "last_seen_at": _iso(last_seen),
        }
        columns = ", ".join(values)
        placeholders = ", ".join(f":{k}" for k in values)
        # status and first_seen_at only apply on insert
        updates = ", ".join(f"{k} = excluded.{k}" for k in (*DESCRIPTIVE_FIELDS, "last_seen_at"))
        try:
            self.conn.execute(
                f"INSERT INTO jobs ({columns}) VALUES ({placeholders}) "
                f"ON CONFLICT(url) DO UPDATE SET {updates}",
                values,
            )
        except sqlite3.Error as exc:
            if self._in_transaction:
                raise
            raise StoreError(f"Upsert failed for {url}: {exc}") from exc
        self._commit()
        record = self.find_by_key(url)
        if record is None:
            raise StoreError(f"Upsert of {url} did not persist a row")
        return record

    def bulk_set_status(self, status_filter: StatusFilter, new_status: str) -> int:
        membership = "IN" if status_filter.present else "NOT IN"
        try:
            self.conn.execute("CREATE TEMP TABLE IF NOT EXISTS filter_urls (url TEXT PRIMARY KEY)")
            self.conn.execute("DELETE FROM filter_urls")
            self.conn.executemany(
                "INSERT OR IGNORE INTO filter_urls (url) VALUES (?)",
                ((u,) for u in status_filter.urls),
            )
            cur = self.conn.execute(
                f"UPDATE jobs SET status = ? WHERE status = ? "
                f"AND url {membership} (SELECT url FROM filter_urls)",
                (new_status, status_filter.status),
            )
        except sqlite3.Error as exc:
            if self._in_transaction:
                raise
            raise StoreError(f"Status update failed: {exc}") from exc
        self._commit()
        return cur.rowcount

    def list_records(self, status: str | None = None) -> list[JobRecord]:
        if status is None:
            rows = self.conn.execute("SELECT * FROM jobs ORDER BY id").fetchall()
        else:
            rows = self.conn.execute(
                "SELECT * FROM jobs WHERE status = ? ORDER BY id", (status,)
            ).fetchall()
        return [_row_to_record(r) for r in rows]

    def set_status(self, url: str, status: str) -> bool:
        """Direct status write, used by downstream tracking (e.g. APPLIED)."""
        if status not in (STATUS_OPEN, STATUS_CLOSED, *TRACKING_STATUSES):
            raise ValueError(f"Unknown job status: {status!r}")
        cur = self.conn.execute("UPDATE jobs SET status = ? WHERE url = ?", (status, url))
        self._commit()
        return cur.rowcount > 0


def _iso(value: datetime | str) -> str:
    return value.isoformat() if isinstance(value, datetime) else str(value)


def open_store(db_path: str | Path) -> SqliteJobStore:
    store = SqliteJobStore(db_path)
    log.debug("Opened job store at %s", db_path)
    return store
