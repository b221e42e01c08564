"""
Action sink: applies reconciliation actions to the collaborators.

NOTIFY posts the rendered notification and then records the state in the
tracking store; REMOVE cancels the notification and then forgets the
identity. The presenter call always comes first. If it fails nothing has
changed and the next pass produces the same action again; if the tracking
write fails afterwards the stale record re-diffs on the next pass.
"""

from typing import Any, Callable, Optional

from ..config.defaults import DeliveryParams
from ..errors import (
    DeliveryError,
    InconsistentApplicationError,
    PersistenceError,
    SnapshotError,
    SystemFailureError,
)
from ..logging.config import get_sink_logger
from ..persistence.tracking_store import TrackingStore
from ..state.models import Action, ActionKind, StateRecord
from .base import BaseNotificationPresenter

Renderer = Callable[[StateRecord], dict[str, Any]]


def default_renderer(record: StateRecord) -> dict[str, Any]:
    """Render a record as its plain field values."""
    return record.to_dict()


class ActionSink:
    """Executes actions against the presenter and the tracking store."""

    def __init__(
        self,
        presenter: BaseNotificationPresenter,
        tracking_store: TrackingStore,
        renderer: Optional[Renderer] = None,
        delivery_params: Optional[DeliveryParams] = None
    ) -> None:
        self.presenter = presenter
        self.tracking_store = tracking_store
        self.renderer = renderer or default_renderer
        self.delivery_params = delivery_params or DeliveryParams()
        self.logger = get_sink_logger(__name__)

    def apply(self, action: Action) -> None:
        """
        Apply one action.

        Raises:
            DeliveryError: rendering or the presenter call failed; nothing
                was changed
            InconsistentApplicationError: the presenter call succeeded but
                the tracking store write failed
        """
        if action.kind == ActionKind.NOTIFY:
            self._notify(action)
        elif action.kind == ActionKind.REMOVE:
            self._remove(action)

    def _notify(self, action: Action) -> None:
        record = action.record
        if record is None:
            raise ValueError(f"NOTIFY action for {action.identity!r} carries no record")

        try:
            content = self.renderer(record)
        except (SystemFailureError, SnapshotError, ValueError, KeyError) as e:
            raise DeliveryError(
                f"Rendering notification for {record.identity!r} failed: {e}",
                presenter=self.presenter.name,
                identity=record.identity
            ) from e

        result = self.presenter.post_with_retry(
            record.identity,
            content,
            max_retries=self.delivery_params.retry_attempts,
            retry_delay=self.delivery_params.retry_delay_seconds
        )
        if not result.ok:
            raise DeliveryError(
                f"Posting notification for {record.identity!r} failed: {result.message}",
                presenter=self.presenter.name,
                identity=record.identity
            )

        try:
            self.tracking_store.put(record)
        except PersistenceError as e:
            raise InconsistentApplicationError(
                f"Notification for {record.identity!r} posted but not tracked: {e}",
                identity=record.identity,
                applied_step="post",
                failed_step="track"
            ) from e

        self.logger.info(
            "Notification posted",
            identity=record.identity,
            version=record.version,
            reason=action.reason,
            attempts=result.attempt_count
        )

    def _remove(self, action: Action) -> None:
        result = self.presenter.cancel_with_retry(
            action.identity,
            max_retries=self.delivery_params.retry_attempts,
            retry_delay=self.delivery_params.retry_delay_seconds
        )
        if not result.ok:
            raise DeliveryError(
                f"Cancelling notification for {action.identity!r} failed: {result.message}",
                presenter=self.presenter.name,
                identity=action.identity
            )

        try:
            self.tracking_store.remove(action.identity)
        except PersistenceError as e:
            raise InconsistentApplicationError(
                f"Notification for {action.identity!r} cancelled but still tracked: {e}",
                identity=action.identity,
                applied_step="cancel",
                failed_step="untrack"
            ) from e

        self.logger.info(
            "Notification removed",
            identity=action.identity,
            reason=action.reason
        )
