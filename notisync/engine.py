"""
Main reconciliation engine coordinator.

Turns a wake-up trigger into one full reconciliation pass:
Trigger → Snapshots → Merge-diff → Classification → Action sink.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Optional, Union

import structlog

from .config.defaults import DefaultConfig, get_default_config
from .data.snapshot import SnapshotSource
from .data.validators import check_canonical_order
from .delivery.base import BaseNotificationPresenter
from .delivery.sink import ActionSink, Renderer
from .errors import DeliveryError, InconsistentApplicationError
from .persistence.live_store import LiveStore
from .persistence.tracking_store import TrackingStore
from .state.classify import reconcile
from .state.models import Action, ActionKind, Identity, StateRecord, TriggerKind

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ActionFailure:
    """An action that could not be fully applied."""
    identity: Identity
    kind: ActionKind
    error_type: str
    message: str
    recoverable: bool


@dataclass
class ReconcileReport:
    """Outcome of one reconciliation pass."""
    trigger: TriggerKind
    counts: dict[ActionKind, int] = field(
        default_factory=lambda: {kind: 0 for kind in ActionKind}
    )
    failures: list[ActionFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def applied(self) -> int:
        return self.counts[ActionKind.NOTIFY] + self.counts[ActionKind.REMOVE] - len(self.failures)

    def summary(self) -> dict[str, Any]:
        return {
            "trigger": self.trigger.value,
            "notify": self.counts[ActionKind.NOTIFY],
            "remove": self.counts[ActionKind.REMOVE],
            "noop": self.counts[ActionKind.NOOP],
            "failures": len(self.failures),
        }


class ReconciliationEngine:
    """
    Coordinator for notification reconciliation.

    Holds no state between passes: every trigger reads fresh snapshots and
    builds a new diff stream. Passes are expected to run serially.
    """

    def __init__(
        self,
        tracking_store: TrackingStore,
        live_store: LiveStore,
        presenter: BaseNotificationPresenter,
        renderer: Optional[Renderer] = None,
        config: Optional[DefaultConfig] = None
    ) -> None:
        """Initialize the reconciliation engine."""
        self.logger = logger
        self.config = config or get_default_config()

        self.tracking_store = tracking_store
        self.live_store = live_store
        self.presenter = presenter

        self.snapshot_source = SnapshotSource(
            tracking_store,
            live_store,
            strict_validation=self.config.snapshot.strict_validation
        )
        self.sink = ActionSink(
            presenter,
            tracking_store,
            renderer=renderer,
            delivery_params=self.config.delivery
        )

        self.logger.info("Reconciliation engine initialized", presenter=presenter.name)

    def resolve_trigger(self, trigger: Union[TriggerKind, str]) -> TriggerKind:
        """Map a trigger tag to its kind using the configured bulk tags."""
        return TriggerKind.from_tag(trigger, self.config.trigger.bulk_resync_tags)

    def handle(self, trigger: Union[TriggerKind, str]) -> ReconcileReport:
        """
        Run one reconciliation pass for a trigger and apply its actions.

        Snapshot read failures propagate to the caller. Failures applying
        individual actions are logged and reported; the remaining actions
        still run and the next pass retries whatever did not converge.
        """
        kind = self.resolve_trigger(trigger)
        report = ReconcileReport(trigger=kind)

        self.logger.info("Reconciliation started", trigger=kind.value, tag=str(trigger))

        for action in self._actions_for(kind):
            report.counts[action.kind] += 1
            if action.kind == ActionKind.NOOP:
                continue

            try:
                self.sink.apply(action)

            except InconsistentApplicationError as e:
                self.logger.warning(
                    "Action partially applied",
                    identity=action.identity,
                    action=action.kind.value,
                    applied_step=e.applied_step,
                    failed_step=e.failed_step,
                    error=str(e)
                )
                report.failures.append(self._failure(action, e))

            except DeliveryError as e:
                self.logger.error(
                    "Action failed at presenter",
                    identity=action.identity,
                    action=action.kind.value,
                    presenter=e.presenter,
                    error=str(e)
                )
                report.failures.append(self._failure(action, e))

        self.logger.info("Reconciliation finished", **report.summary())
        return report

    def plan(self, trigger: Union[TriggerKind, str]) -> list[Action]:
        """Compute the actions for a trigger without applying them."""
        return list(self._actions_for(self.resolve_trigger(trigger)))

    def bulk_resync_actions(self) -> Iterator[Action]:
        """NOTIFY for every tracked identity, ignoring the live store."""
        for record in self.snapshot_source.previous():
            yield Action.notify(record, reason="bulk_resync")

    def change_actions(self) -> Iterator[Action]:
        """Diff the tracking store against the live store."""
        snapshots = self.snapshot_source.snapshots()
        return reconcile(snapshots.previous, snapshots.current)

    def reconcile_snapshots(
        self,
        previous: Iterable[StateRecord],
        current: Iterable[StateRecord]
    ) -> list[Action]:
        """
        Classify caller-supplied snapshots that are already in canonical order.

        Raises:
            UnsortedSnapshotError: a side is out of canonical order
            DuplicateIdentityError: a side repeats an identity
        """
        previous = list(previous)
        current = list(current)
        check_canonical_order(previous, side="previous")
        check_canonical_order(current, side="current")
        return list(reconcile(previous, current))

    def _actions_for(self, kind: TriggerKind) -> Iterator[Action]:
        if kind == TriggerKind.BULK_RESYNC:
            return self.bulk_resync_actions()
        return self.change_actions()

    def _failure(self, action: Action, error: Exception) -> ActionFailure:
        return ActionFailure(
            identity=action.identity,
            kind=action.kind,
            error_type=type(error).__name__,
            message=str(error),
            recoverable=bool(getattr(error, "recoverable", False))
        )

    def get_runtime_stats(self) -> dict[str, Any]:
        """Get runtime statistics."""
        return {
            "tracked_notifications": len(self.tracking_store.get_all()),
            "presenter": self.presenter.get_stats(),
            "presenter_healthy": self.presenter.health_check(),
        }
