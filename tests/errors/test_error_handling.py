"""
Error handling tests for the reconciliation engine.

Covers the exception hierarchy and how malformed snapshots and failing
collaborators surface through the snapshot boundary.
"""

import pytest

from conftest import RecordingPresenter, make_tracking_store, record
from notisync.data.snapshot import SnapshotSource
from notisync.engine import ReconciliationEngine
from notisync.errors import (
    DeliveryError,
    DuplicateIdentityError,
    InconsistentApplicationError,
    LiveStoreError,
    MalformedRecordError,
    PersistenceError,
    RecoverableError,
    SnapshotError,
    SystemFailureError,
    UnsortedSnapshotError,
)
from notisync.persistence.live_store import InMemoryLiveStore
from notisync.persistence.tracking_store import InMemoryTrackingStore


class TestErrorHierarchy:
    """Test error classes and their attributes."""

    def test_snapshot_errors(self):
        for cls in (UnsortedSnapshotError, DuplicateIdentityError, MalformedRecordError):
            assert issubclass(cls, SnapshotError)

        error = UnsortedSnapshotError("out of order", position=3, side="current")
        assert error.position == 3
        assert error.side == "current"
        assert error.context == {}
        assert error.recoverable is False

    def test_system_failures_are_not_recoverable(self):
        for cls in (PersistenceError, LiveStoreError, DeliveryError):
            assert issubclass(cls, SystemFailureError)

        error = DeliveryError("boom", presenter="stdout", identity=4, context={"attempts": 3})
        assert error.recoverable is False
        assert error.presenter == "stdout"
        assert error.context == {"attempts": 3}

    def test_inconsistent_application_is_recoverable(self):
        error = InconsistentApplicationError(
            "posted but not tracked",
            identity=4,
            applied_step="post",
            failed_step="track"
        )
        assert isinstance(error, RecoverableError)
        assert error.recoverable is True
        assert str(error) == "posted but not tracked"


class CorruptTrackingStore(InMemoryTrackingStore):
    """Tracking store returning whatever it was seeded with."""

    def __init__(self, values):
        super().__init__()
        self.values = values

    def get_all(self):
        return self.values


class UnorderedLiveStore:
    """Live store that ignores the ordering contract and repeats rows."""

    def __init__(self, rows):
        self.rows = rows

    def query(self, tracked_identities):
        return list(self.rows)


class TestSnapshotBoundary:
    """Malformed input is rejected before it reaches the merge."""

    def test_unordered_rows_are_sorted(self):
        source = SnapshotSource(
            make_tracking_store(),
            UnorderedLiveStore([record("b"), record(10), record("a"), record(2)])
        )

        current = source.snapshots().current

        assert [r.identity for r in current] == [2, 10, "a", "b"]

    def test_duplicate_rows_strict(self):
        source = SnapshotSource(
            make_tracking_store(),
            UnorderedLiveStore([record(1), record(1, version=2)])
        )

        with pytest.raises(DuplicateIdentityError) as exc_info:
            source.snapshots()
        assert exc_info.value.side == "current"

    def test_duplicate_rows_lenient(self):
        source = SnapshotSource(
            make_tracking_store(),
            UnorderedLiveStore([record(1), record(1, version=2)]),
            strict_validation=False
        )

        assert len(source.snapshots().current) == 1

    def test_malformed_tracking_value(self):
        source = SnapshotSource(
            CorruptTrackingStore({"1": "not a record"}),
            InMemoryLiveStore()
        )

        with pytest.raises(MalformedRecordError) as exc_info:
            source.previous()
        assert exc_info.value.side == "previous"

    def test_engine_propagates_snapshot_errors(self):
        engine = ReconciliationEngine(
            make_tracking_store(),
            UnorderedLiveStore([record(1), record(1, version=2)]),
            RecordingPresenter()
        )

        with pytest.raises(SnapshotError):
            engine.handle("change")
