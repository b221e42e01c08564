"""Unit tests for the reconciliation engine."""

import pytest

from conftest import RecordingPresenter, make_tracking_store, record
from notisync.config.defaults import DefaultConfig, DeliveryParams, TriggerParams
from notisync.engine import ReconcileReport, ReconciliationEngine
from notisync.errors import (
    DuplicateIdentityError,
    LiveStoreError,
    PersistenceError,
    UnsortedSnapshotError,
)
from notisync.persistence.live_store import InMemoryLiveStore
from notisync.persistence.tracking_store import InMemoryTrackingStore
from notisync.state.models import ActionKind, TriggerKind


class FailingLiveStore:
    def query(self, tracked_identities):
        raise LiveStoreError("live store offline", query="entities")


class FlakyTrackingStore(InMemoryTrackingStore):
    """Tracking store that refuses writes for selected identities."""

    def __init__(self, refuse=()):
        super().__init__()
        self.refuse = set(refuse)

    def put(self, record):
        if record.identity in self.refuse:
            raise PersistenceError("write refused", operation="put", target="memory")
        super().put(record)


def make_engine(previous=(), current=(), presenter=None, tracking_store=None, config=None,
                renderer=None):
    config = config or DefaultConfig(delivery=DeliveryParams(retry_attempts=0, retry_delay_seconds=0.0))
    store = tracking_store if tracking_store is not None else make_tracking_store(list(previous))
    return ReconciliationEngine(
        tracking_store=store,
        live_store=InMemoryLiveStore(current),
        presenter=presenter or RecordingPresenter(),
        renderer=renderer,
        config=config
    )


class TestTriggerResolution:
    """Test trigger tag mapping."""

    def test_configured_tags_are_bulk(self):
        engine = make_engine()
        assert engine.resolve_trigger("boot_completed") == TriggerKind.BULK_RESYNC
        assert engine.resolve_trigger("bulk_resync") == TriggerKind.BULK_RESYNC

    def test_other_tags_are_change(self):
        engine = make_engine()
        assert engine.resolve_trigger("task_saved") == TriggerKind.CHANGE
        assert engine.resolve_trigger(None) == TriggerKind.CHANGE

    def test_custom_tags(self):
        config = DefaultConfig(trigger=TriggerParams(bulk_resync_tags=("locale_changed",)))
        engine = make_engine(config=config)
        assert engine.resolve_trigger("locale_changed") == TriggerKind.BULK_RESYNC
        assert engine.resolve_trigger("boot_completed") == TriggerKind.CHANGE


class TestPlan:
    """Test action planning without side effects."""

    def test_change_plan(self, sample_previous, sample_current):
        presenter = RecordingPresenter()
        engine = make_engine(sample_previous, sample_current, presenter=presenter)

        plan = engine.plan(TriggerKind.CHANGE)

        assert [(a.identity, a.kind) for a in plan] == [
            (1, ActionKind.REMOVE),
            (2, ActionKind.NOOP),
            (5, ActionKind.REMOVE),
            (7, ActionKind.NOTIFY),
        ]
        assert presenter.calls == []

    def test_bulk_plan_ignores_live_store(self):
        previous = [record(1), record(2), record(3)]
        engine = make_engine(previous, [record(4)])

        plan = engine.plan("boot_completed")

        assert [a.identity for a in plan] == [1, 2, 3]
        assert all(a.kind == ActionKind.NOTIFY for a in plan)
        assert plan[0].record == record(1)

    def test_empty_stores(self):
        assert make_engine().plan("change") == []


class TestHandle:
    """Test applying a full pass."""

    def test_change_pass_converges(self, sample_previous, sample_current):
        presenter = RecordingPresenter()
        engine = make_engine(sample_previous, sample_current, presenter=presenter)

        report = engine.handle("task_saved")

        assert report.ok
        assert report.summary() == {
            "trigger": "change",
            "notify": 1,
            "remove": 2,
            "noop": 1,
            "failures": 0,
        }
        assert report.applied == 3
        assert set(engine.tracking_store.get_all()) == {"2", "7"}
        assert ("post", 7) in presenter.calls
        assert ("cancel", 1) in presenter.calls
        assert ("cancel", 5) in presenter.calls

    def test_bulk_resync_reposts_everything(self):
        presenter = RecordingPresenter()
        engine = make_engine([record(1), record(2), record(3)], [], presenter=presenter)

        report = engine.handle(TriggerKind.BULK_RESYNC)

        assert report.counts[ActionKind.NOTIFY] == 3
        assert presenter.calls == [("post", 1), ("post", 2), ("post", 3)]
        assert len(engine.tracking_store.get_all()) == 3

    def test_delivery_failure_is_reported_and_pass_continues(self):
        presenter = RecordingPresenter()
        presenter.fail_post.add(3)
        engine = make_engine([], [record(3), record(4)], presenter=presenter)

        report = engine.handle("change")

        assert not report.ok
        assert len(report.failures) == 1
        failure = report.failures[0]
        assert failure.identity == 3
        assert failure.error_type == "DeliveryError"
        assert failure.recoverable is False
        assert set(engine.tracking_store.get_all()) == {"4"}

    def test_render_failure_does_not_block_later_identities(self):
        def renderer(r):
            if r.identity == 1:
                raise LiveStoreError("title lookup failed", query="entities")
            return {"title": f"Task {r.identity}"}

        presenter = RecordingPresenter()
        engine = make_engine([], [record(1), record(2)], presenter=presenter, renderer=renderer)

        report = engine.handle("change")

        assert [f.identity for f in report.failures] == [1]
        assert report.failures[0].error_type == "DeliveryError"
        assert presenter.calls == [("post", 2)]
        assert set(engine.tracking_store.get_all()) == {"2"}

    def test_partial_application_is_recoverable(self):
        store = FlakyTrackingStore(refuse={3})
        engine = make_engine([], [record(3)], tracking_store=store)

        report = engine.handle("change")

        assert report.failures[0].error_type == "InconsistentApplicationError"
        assert report.failures[0].recoverable is True
        assert report.applied == 0

    def test_live_store_failure_propagates(self):
        engine = ReconciliationEngine(
            tracking_store=make_tracking_store([record(1)]),
            live_store=FailingLiveStore(),
            presenter=RecordingPresenter()
        )

        with pytest.raises(LiveStoreError):
            engine.handle("change")


class TestReconcileSnapshots:
    """Test reconciling caller-supplied snapshots."""

    def test_sorted_input(self, sample_previous, sample_current):
        actions = make_engine().reconcile_snapshots(sample_previous, sample_current)
        assert [a.kind for a in actions] == [
            ActionKind.REMOVE, ActionKind.NOOP, ActionKind.REMOVE, ActionKind.NOTIFY,
        ]

    def test_unsorted_input_rejected(self):
        with pytest.raises(UnsortedSnapshotError) as exc_info:
            make_engine().reconcile_snapshots([record(2), record(1)], [])
        assert exc_info.value.side == "previous"

    def test_duplicate_input_rejected(self):
        with pytest.raises(DuplicateIdentityError):
            make_engine().reconcile_snapshots([], [record(1), record(1, version=2)])


class TestReport:
    """Test report bookkeeping."""

    def test_empty_report(self):
        report = ReconcileReport(trigger=TriggerKind.CHANGE)
        assert report.ok
        assert report.applied == 0
        assert report.summary()["noop"] == 0

    def test_runtime_stats(self):
        engine = make_engine([record(1)], [record(1)])
        engine.handle("change")

        stats = engine.get_runtime_stats()

        assert stats["tracked_notifications"] == 1
        assert stats["presenter_healthy"] is True
        assert stats["presenter"]["name"] == "recording"
