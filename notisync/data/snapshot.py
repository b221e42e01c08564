"""Snapshot source: builds both sides of a reconciliation from the stores."""

from dataclasses import dataclass

import structlog

from ..persistence.live_store import LiveStore
from ..persistence.tracking_store import TrackingStore
from ..state.models import StateRecord
from .validators import normalize_snapshot

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Snapshots:
    """Both sides of one reconciliation, canonically ordered."""
    previous: list[StateRecord]
    current: list[StateRecord]


class SnapshotSource:
    """
    Reads the tracking store and the live store into ordered sequences.

    Both sides are re-sorted with the canonical identity order regardless
    of how the collaborators ordered them, so the reconciler never sees
    two differently ordered inputs.
    """

    def __init__(
        self,
        tracking_store: TrackingStore,
        live_store: LiveStore,
        strict_validation: bool = True
    ) -> None:
        self.tracking_store = tracking_store
        self.live_store = live_store
        self.strict_validation = strict_validation

    def previous(self) -> list[StateRecord]:
        """Records for every identity we currently track."""
        return normalize_snapshot(
            self.tracking_store.get_all().values(),
            side="previous",
            strict=self.strict_validation
        )

    def current(self, previous: list[StateRecord]) -> list[StateRecord]:
        """Live rows that are active or already tracked."""
        rows = self.live_store.query(record.identity for record in previous)
        return normalize_snapshot(rows, side="current", strict=self.strict_validation)

    def snapshots(self) -> Snapshots:
        previous = self.previous()
        current = self.current(previous)

        logger.info(
            "Snapshots loaded",
            previous_count=len(previous),
            current_count=len(current)
        )
        return Snapshots(previous=previous, current=current)
