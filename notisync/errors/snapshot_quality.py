"""
Snapshot error classifications.

These exceptions describe record sequences that violate the reconciler's
preconditions. They are raised while building snapshots, never from inside
the merge itself.
"""

from typing import Any, Dict, Optional


class SnapshotError(Exception):
    """Base class for snapshots that cannot be reconciled as given."""

    def __init__(self, message: str, side: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.side = side
        self.context = context or {}
        self.recoverable = False


class UnsortedSnapshotError(SnapshotError):
    """Records are not in canonical identity order."""

    def __init__(self, message: str, position: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.position = position


class DuplicateIdentityError(SnapshotError):
    """The same identity appears more than once on one side."""

    def __init__(self, message: str, identity: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self.identity = identity


class MalformedRecordError(SnapshotError):
    """A stored or queried record is missing fields or has the wrong types."""

    def __init__(self, message: str, raw_data: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.raw_data = raw_data
