"""
Reconciliation data models.

This module defines the immutable values exchanged between the snapshot
source, the reconciler and the action sink: one entity's notification
state, the diff pair keyed by identity, the resulting action and the
trigger kinds that start a reconciliation pass.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional, Union

Identity = Union[int, str]
Version = Union[int, str]


def identity_key(identity: Identity) -> str:
    """
    String key for an identity in stores and presenter logs.

    JSON-encoded so the integer 5 and the string "5" get different keys.
    """
    return json.dumps(identity)


class ActionKind(str, Enum):
    """Outcome of reconciling a single identity."""
    NOTIFY = "notify"
    REMOVE = "remove"
    NOOP = "noop"


class TriggerKind(str, Enum):
    """Wake-up kinds that affect control flow."""
    BULK_RESYNC = "bulk_resync"
    CHANGE = "change"

    @classmethod
    def from_tag(cls, tag: Any, bulk_resync_tags: Iterable[str] = ()) -> "TriggerKind":
        """
        Map an opaque event tag to a trigger kind.

        Tags listed in ``bulk_resync_tags`` (and the literal kind values)
        select the matching kind; everything else is a change event.
        """
        if isinstance(tag, cls):
            return tag
        if tag == cls.BULK_RESYNC.value or tag in set(bulk_resync_tags):
            return cls.BULK_RESYNC
        return cls.CHANGE


@dataclass(frozen=True)
class StateRecord:
    """Notification-relevant state of one trackable entity."""

    identity: Identity
    version: Version
    active: bool

    @property
    def key(self) -> str:
        """String key used by the tracking store."""
        return identity_key(self.identity)

    def to_dict(self) -> dict[str, Any]:
        return {
            "identity": self.identity,
            "version": self.version,
            "active": self.active,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StateRecord":
        return cls(
            identity=data["identity"],
            version=data["version"],
            active=bool(data["active"]),
        )


@dataclass(frozen=True)
class DiffPair:
    """Previous and current record for one identity; either side may be absent."""

    previous: Optional[StateRecord] = None
    current: Optional[StateRecord] = None

    @property
    def identity(self) -> Identity:
        record = self.previous if self.previous is not None else self.current
        if record is None:
            raise ValueError("DiffPair has neither a previous nor a current record")
        return record.identity

    @property
    def is_addition(self) -> bool:
        return self.previous is None and self.current is not None

    @property
    def is_removal(self) -> bool:
        return self.previous is not None and self.current is None


@dataclass(frozen=True)
class Action:
    """
    Reconciliation outcome for one identity.

    ``record`` is the state the sink persists when applying a NOTIFY: the
    current record for diff actions, the persisted record for bulk resync.
    """

    kind: ActionKind
    identity: Identity
    record: Optional[StateRecord] = None
    reason: str = ""

    @classmethod
    def notify(cls, record: StateRecord, reason: str = "") -> "Action":
        return cls(kind=ActionKind.NOTIFY, identity=record.identity, record=record, reason=reason)

    @classmethod
    def remove(cls, identity: Identity, reason: str = "") -> "Action":
        return cls(kind=ActionKind.REMOVE, identity=identity, reason=reason)

    @classmethod
    def noop(cls, identity: Identity, reason: str = "") -> "Action":
        return cls(kind=ActionKind.NOOP, identity=identity, reason=reason)
