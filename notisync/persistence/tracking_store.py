"""Tracking state persistence: which identities currently have a notification."""

import json
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

import structlog

from ..errors import MalformedRecordError, PersistenceError
from ..state.models import Identity, StateRecord, identity_key


class TrackingStore(Protocol):
    """Persisted map of identity key -> last notified state."""

    def get_all(self) -> dict[str, StateRecord]:
        ...

    def put(self, record: StateRecord) -> None:
        ...

    def remove(self, identity: Identity) -> None:
        ...

    def clear(self) -> None:
        ...


def encode_record(record: StateRecord) -> str:
    """Encode a record as the stored JSON value."""
    payload = record.to_dict()
    payload["tracked_at"] = datetime.now(timezone.utc).isoformat()
    return json.dumps(payload)


def decode_record(key: str, value: str) -> StateRecord:
    """Decode a stored JSON value back into a record."""
    try:
        payload = json.loads(value)
        record = StateRecord.from_dict(payload)
    except (ValueError, TypeError, KeyError) as e:
        raise MalformedRecordError(
            f"Unreadable tracking record for key {key!r}: {e}",
            side="previous",
            raw_data=str(value)[:100]
        ) from e

    if record.key != key:
        raise MalformedRecordError(
            f"Tracking record key {key!r} does not match identity {record.identity!r}",
            side="previous",
            raw_data=str(value)[:100]
        )
    return record


class InMemoryTrackingStore:
    """Dictionary-backed tracking store holding encoded values like the SQLite one."""

    def __init__(self) -> None:
        self._values: dict[str, str] = {}

    def get_all(self) -> dict[str, StateRecord]:
        return {key: decode_record(key, value) for key, value in self._values.items()}

    def put(self, record: StateRecord) -> None:
        self._values[record.key] = encode_record(record)

    def remove(self, identity: Identity) -> None:
        self._values.pop(identity_key(identity), None)

    def clear(self) -> None:
        self._values.clear()

    def __len__(self) -> int:
        return len(self._values)


class SQLiteTrackingStore:
    """SQLite-based tracking store."""

    def __init__(self, db_path: str = "notisync_tracking.db", timeout: float = 30.0):
        self.db_path = Path(db_path)
        self.timeout = timeout
        self.logger = structlog.get_logger("notisync.tracking_store")
        self._lock = threading.Lock()

        self._init_database()

    def _init_database(self) -> None:
        """Initialize database schema."""
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS tracked_notifications (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
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
            self.logger.error("Tracking store error", db_path=str(self.db_path), error=str(e))
            raise PersistenceError(
                f"Tracking store failure: {e}",
                operation="sqlite",
                target=str(self.db_path)
            ) from e
        finally:
            if conn:
                conn.close()

    def get_all(self) -> dict[str, StateRecord]:
        """Read every tracked record, keyed by identity string."""
        with self._get_connection() as conn:
            rows = conn.execute(
                "SELECT key, value FROM tracked_notifications"
            ).fetchall()

        return {row["key"]: decode_record(row["key"], row["value"]) for row in rows}

    def put(self, record: StateRecord) -> None:
        """Insert or replace the tracking record for one identity."""
        with self._lock:
            with self._get_connection() as conn:
                conn.execute("""
                    INSERT INTO tracked_notifications (key, value, updated_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                """, (
                    record.key,
                    encode_record(record),
                    datetime.now(timezone.utc).isoformat()
                ))
                conn.commit()

        self.logger.debug(
            "Tracking record stored",
            identity=record.identity,
            version=record.version,
            active=record.active
        )

    def remove(self, identity: Identity) -> None:
        """Delete the tracking record for one identity; missing keys are ignored."""
        with self._lock:
            with self._get_connection() as conn:
                cursor = conn.execute(
                    "DELETE FROM tracked_notifications WHERE key = ?",
                    (identity_key(identity),)
                )
                conn.commit()

        self.logger.debug("Tracking record removed", identity=identity, deleted=cursor.rowcount)

    def clear(self) -> None:
        """Drop all tracking records."""
        with self._lock:
            with self._get_connection() as conn:
                conn.execute("DELETE FROM tracked_notifications")
                conn.commit()

    def count(self) -> int:
        with self._get_connection() as conn:
            return conn.execute("SELECT COUNT(*) FROM tracked_notifications").fetchone()[0]
