"""Live record store adapters: the externally owned source of truth."""

import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterable, Optional, Protocol

import structlog

from ..errors import LiveStoreError
from ..state.models import Identity, StateRecord, Version
from ..state.ordering import sort_records

# Stay below SQLite's bound-parameter limit
QUERY_CHUNK_SIZE = 500


class LiveStore(Protocol):
    """Queryable collection of live entities."""

    def query(self, tracked_identities: Iterable[Identity]) -> list[StateRecord]:
        """Return rows that are active or whose identity is already tracked."""
        ...


class InMemoryLiveStore:
    """Mapping-backed live store for tests and embedding."""

    def __init__(self, records: Optional[Iterable[StateRecord]] = None) -> None:
        self._records: dict[Identity, StateRecord] = {}
        self._titles: dict[Identity, str] = {}
        for record in records or ():
            self.upsert(record)

    def upsert(self, record: StateRecord, title: Optional[str] = None) -> None:
        self._records[record.identity] = record
        if title is not None:
            self._titles[record.identity] = title

    def delete(self, identity: Identity) -> None:
        self._records.pop(identity, None)
        self._titles.pop(identity, None)

    def query(self, tracked_identities: Iterable[Identity]) -> list[StateRecord]:
        tracked = set(tracked_identities)
        return sort_records(
            record for record in self._records.values()
            if record.active or record.identity in tracked
        )

    def content_for(self, record: StateRecord) -> dict[str, Any]:
        return {
            "identity": record.identity,
            "version": record.version,
            "title": self._titles.get(record.identity, str(record.identity)),
        }


class SQLiteLiveStore:
    """
    SQLite-backed live store.

    Rows are retained when an entity is deactivated (``active = 0``) and
    physically removed by ``delete``. Both cases are visible to the
    reconciler: deactivation through the version change, deletion through
    the identity being absent from the current set.
    """

    def __init__(self, db_path: str = "notisync_live.db", timeout: float = 30.0):
        self.db_path = Path(db_path)
        self.timeout = timeout
        self.logger = structlog.get_logger("notisync.live_store")
        self._lock = threading.Lock()

        self._init_database()

    def _init_database(self) -> None:
        """Initialize database schema."""
        with self._get_connection() as conn:
            # identity and version carry no type affinity so ints stay ints
            # and opaque string tokens stay strings
            conn.execute("""
                CREATE TABLE IF NOT EXISTS entities (
                    identity PRIMARY KEY,
                    version NOT NULL,
                    active INTEGER NOT NULL DEFAULT 0,
                    title TEXT
                )
            """)

            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_entities_active ON entities(active)
            """)

            conn.commit()

    @contextmanager
    def _get_connection(self):
        """Get database connection, translating sqlite failures."""
        conn = None
        try:
            conn = sqlite3.connect(self.db_path, timeout=self.timeout)
            conn.row_factory = sqlite3.Row
            yield conn
        except sqlite3.Error as e:
            if conn:
                conn.rollback()
            self.logger.error("Live store error", db_path=str(self.db_path), error=str(e))
            raise LiveStoreError(f"Live store failure: {e}", query="entities") from e
        finally:
            if conn:
                conn.close()

    def upsert(self, record: StateRecord, title: Optional[str] = None) -> None:
        """Insert or update one entity."""
        with self._lock:
            with self._get_connection() as conn:
                conn.execute("""
                    INSERT INTO entities (identity, version, active, title)
                    VALUES (?, ?, ?, ?)
                    ON CONFLICT(identity) DO UPDATE SET
                        version = excluded.version,
                        active = excluded.active,
                        title = COALESCE(excluded.title, entities.title)
                """, (record.identity, record.version, int(record.active), title))
                conn.commit()

    def set_active(self, identity: Identity, active: bool, version: Version) -> None:
        """Flip the active flag; the caller supplies the bumped version."""
        with self._lock:
            with self._get_connection() as conn:
                conn.execute(
                    "UPDATE entities SET active = ?, version = ? WHERE identity = ?",
                    (int(active), version, identity)
                )
                conn.commit()

    def delete(self, identity: Identity) -> None:
        """Physically remove an entity."""
        with self._lock:
            with self._get_connection() as conn:
                conn.execute("DELETE FROM entities WHERE identity = ?", (identity,))
                conn.commit()

    def query(self, tracked_identities: Iterable[Identity]) -> list[StateRecord]:
        """Return entities with ``active = 1 OR identity IN tracked``."""
        tracked = list(dict.fromkeys(tracked_identities))
        rows: dict[Identity, sqlite3.Row] = {}

        with self._get_connection() as conn:
            for row in conn.execute(
                "SELECT identity, version, active FROM entities WHERE active = 1"
            ):
                rows[row["identity"]] = row

            for start in range(0, len(tracked), QUERY_CHUNK_SIZE):
                chunk = tracked[start:start + QUERY_CHUNK_SIZE]
                placeholders = ", ".join("?" for _ in chunk)
                for row in conn.execute(
                    f"SELECT identity, version, active FROM entities WHERE identity IN ({placeholders})",
                    chunk
                ):
                    rows[row["identity"]] = row

        self.logger.debug(
            "Live store queried",
            tracked=len(tracked),
            returned=len(rows)
        )

        return sort_records(
            StateRecord(identity=row["identity"], version=row["version"], active=bool(row["active"]))
            for row in rows.values()
        )

    def content_for(self, record: StateRecord) -> dict[str, Any]:
        """Notification content for a record, using the stored title if any."""
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT title FROM entities WHERE identity = ?",
                (record.identity,)
            ).fetchone()

        title = row["title"] if row and row["title"] else str(record.identity)
        return {
            "identity": record.identity,
            "version": record.version,
            "title": title,
        }
