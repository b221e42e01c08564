"""Pytest configuration and shared fixtures."""

from typing import Any, Optional

import pytest

from notisync.delivery.base import (
    BaseNotificationPresenter,
    DeliveryResult,
    DeliveryStatus,
)
from notisync.persistence.live_store import InMemoryLiveStore
from notisync.persistence.tracking_store import InMemoryTrackingStore
from notisync.state.models import Identity, StateRecord


class RecordingPresenter(BaseNotificationPresenter):
    """Presenter that remembers what it displays and can be told to fail."""

    def __init__(self, name: str = "recording"):
        super().__init__(name, config=None)
        self.displayed: dict[Identity, dict[str, Any]] = {}
        self.calls: list[tuple[str, Identity]] = []
        self.fail_post: set[Identity] = set()
        self.fail_cancel: set[Identity] = set()

    def post(self, identity: Identity, content: dict[str, Any]) -> DeliveryResult:
        self.calls.append(("post", identity))
        if identity in self.fail_post:
            return DeliveryResult(status=DeliveryStatus.FAILED, message="post refused")
        self.displayed[identity] = content
        return DeliveryResult(status=DeliveryStatus.SUCCESS)

    def cancel(self, identity: Identity) -> DeliveryResult:
        self.calls.append(("cancel", identity))
        if identity in self.fail_cancel:
            return DeliveryResult(status=DeliveryStatus.FAILED, message="cancel refused")
        self.displayed.pop(identity, None)
        return DeliveryResult(status=DeliveryStatus.SUCCESS)

    def health_check(self) -> bool:
        return True


def record(identity: Identity, version: Any = 1, active: bool = True) -> StateRecord:
    """Shorthand for building records in tests."""
    return StateRecord(identity=identity, version=version, active=active)


@pytest.fixture
def presenter() -> RecordingPresenter:
    return RecordingPresenter()


@pytest.fixture
def tracking_store() -> InMemoryTrackingStore:
    return InMemoryTrackingStore()


@pytest.fixture
def live_store() -> InMemoryLiveStore:
    return InMemoryLiveStore()


@pytest.fixture
def sample_previous() -> list[StateRecord]:
    """Previously notified records, canonically ordered."""
    return [
        record(1, version=1, active=True),
        record(2, version=4, active=True),
        record(5, version=1, active=True),
    ]


@pytest.fixture
def sample_current() -> list[StateRecord]:
    """Live records covering an unchanged, a deactivated and a new entity."""
    return [
        record(2, version=4, active=True),
        record(5, version=2, active=False),
        record(7, version=1, active=True),
    ]


def make_tracking_store(records: Optional[list[StateRecord]] = None) -> InMemoryTrackingStore:
    store = InMemoryTrackingStore()
    for item in records or []:
        store.put(item)
    return store
