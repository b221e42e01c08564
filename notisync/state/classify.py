"""
Classification of diff pairs into actions.

Pure functions, no I/O. Every decision is logged through the reconcile
logger so a pass can be audited after the fact.
"""

from typing import Iterable, Iterator

from ..logging.config import get_reconcile_logger, log_action_decision
from .diff import diff
from .models import Action, DiffPair, StateRecord

reconcile_logger = get_reconcile_logger(__name__)


def classify(pair: DiffPair) -> Action:
    """
    Decide the action for one diff pair.

    Policy:
    - Only current present: notify when active. An inactive addition means
      the snapshot filter let through a row it should not have; it is
      ignored.
    - Only previous present: remove.
    - Both present, same version: nothing changed.
    - Both present, version changed: notify when the entity is active now,
      remove when it was active before and no longer is, otherwise nothing.
    """
    previous, current = pair.previous, pair.current

    if pair.is_addition:
        if current.active:
            return Action.notify(current, reason="added")
        return Action.noop(current.identity, reason="inactive_addition")

    if pair.is_removal:
        return Action.remove(pair.identity, reason="no_longer_present")

    if previous is None or current is None:
        raise ValueError("DiffPair has neither a previous nor a current record")

    if previous.version == current.version:
        return Action.noop(current.identity, reason="unchanged")

    if current.active:
        return Action.notify(current, reason="changed")

    if previous.active:
        return Action.remove(current.identity, reason="deactivated")

    return Action.noop(current.identity, reason="changed_inactive")


def reconcile(
    previous: Iterable[StateRecord],
    current: Iterable[StateRecord]
) -> Iterator[Action]:
    """Diff two canonically ordered sequences and classify every pair."""
    for pair in diff(previous, current):
        action = classify(pair)

        if action.reason == "inactive_addition":
            reconcile_logger.warning(
                "Inactive record outside the tracked set",
                identity=action.identity,
                anomaly="snapshot_filter"
            )

        log_action_decision(
            reconcile_logger,
            identity=action.identity,
            action=action.kind.value,
            reason=action.reason
        )
        yield action
