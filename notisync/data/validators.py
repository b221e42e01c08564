"""
Snapshot validation at the reconciler boundary.

The merge assumes strictly ascending identities on both sides. These
checks run before a sequence reaches the reconciler so violations surface
as typed errors here instead of silently wrong diffs later.
"""

from typing import Any, Iterable

import structlog

from ..errors import DuplicateIdentityError, MalformedRecordError, UnsortedSnapshotError
from ..state.models import StateRecord
from ..state.ordering import compare_identities, is_canonically_sorted, sort_records

logger = structlog.get_logger(__name__)


def check_record(record: Any, side: str) -> StateRecord:
    """Reject values that are not well-formed StateRecords."""
    if not isinstance(record, StateRecord):
        raise MalformedRecordError(
            f"Expected StateRecord on {side} side, got {type(record).__name__}",
            side=side,
            raw_data=str(record)[:100]
        )

    if isinstance(record.identity, bool) or not isinstance(record.identity, (int, str)):
        raise MalformedRecordError(
            f"Identity must be int or str, got {type(record.identity).__name__}",
            side=side,
            raw_data=str(record)[:100]
        )

    if isinstance(record.version, bool) or not isinstance(record.version, (int, str)):
        raise MalformedRecordError(
            f"Version must be int or str, got {type(record.version).__name__}",
            side=side,
            raw_data=str(record)[:100]
        )

    if not isinstance(record.active, bool):
        raise MalformedRecordError(
            f"Active flag must be bool, got {type(record.active).__name__}",
            side=side,
            raw_data=str(record)[:100]
        )

    return record


def check_canonical_order(records: list[StateRecord], side: str) -> None:
    """Raise if records are not strictly ascending in canonical order."""
    if is_canonically_sorted(records):
        return

    for position in range(len(records) - 1):
        left, right = records[position], records[position + 1]
        order = compare_identities(left.identity, right.identity)
        if order == 0:
            raise DuplicateIdentityError(
                f"Identity {left.identity!r} appears more than once on {side} side",
                identity=left.identity,
                side=side
            )
        if order > 0:
            raise UnsortedSnapshotError(
                f"{side} snapshot out of order at position {position + 1}: "
                f"{left.identity!r} before {right.identity!r}",
                position=position + 1,
                side=side
            )


def normalize_snapshot(
    records: Iterable[Any],
    side: str,
    strict: bool = True
) -> list[StateRecord]:
    """
    Validate, canonically sort and de-duplicate one side of a reconciliation.

    Args:
        records: Raw records from a collaborator, in any order
        side: "previous" or "current", used in errors and logs
        strict: Raise on duplicate identities instead of keeping the first

    Returns:
        Strictly ascending list of records
    """
    ordered = sort_records(check_record(record, side) for record in records)

    unique: list[StateRecord] = []
    for record in ordered:
        if unique and compare_identities(unique[-1].identity, record.identity) == 0:
            if strict:
                raise DuplicateIdentityError(
                    f"Identity {record.identity!r} appears more than once on {side} side",
                    identity=record.identity,
                    side=side
                )
            logger.warning(
                "Dropping duplicate identity from snapshot",
                identity=record.identity,
                side=side
            )
            continue
        unique.append(record)

    return unique
