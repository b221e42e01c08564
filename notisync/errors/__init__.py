"""
Error classification for the reconciliation engine.

Structured exception hierarchy separating malformed snapshots (caught at the
snapshot boundary), collaborator failures (surfaced to the caller) and
partially applied actions (self-healing on the next pass).
"""

from .snapshot_quality import (
    SnapshotError,
    UnsortedSnapshotError,
    DuplicateIdentityError,
    MalformedRecordError,
)
from .system_failures import (
    SystemFailureError,
    PersistenceError,
    LiveStoreError,
    DeliveryError,
)
from .recovery import (
    RecoverableError,
    InconsistentApplicationError,
)

__all__ = [
    # Snapshot Errors
    "SnapshotError",
    "UnsortedSnapshotError",
    "DuplicateIdentityError",
    "MalformedRecordError",
    # System Failures
    "SystemFailureError",
    "PersistenceError",
    "LiveStoreError",
    "DeliveryError",
    # Recovery Categories
    "RecoverableError",
    "InconsistentApplicationError",
]
