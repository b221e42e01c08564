"""
Canonical identity ordering.

Both sides of a reconciliation must be ordered by the same comparator or
the merge silently pairs the wrong records. Everything that sorts or
compares identities goes through ``identity_sort_key``; there is no
second comparator anywhere in the package.
"""

from typing import Any, Iterable

from .models import Identity, StateRecord


def identity_order_key(identity: Identity) -> tuple[int, Any]:
    """
    Total order over identities.

    Integers sort before strings, each group in natural order, so mixed
    identity types still produce a deterministic sequence.
    """
    if isinstance(identity, int) and not isinstance(identity, bool):
        return (0, identity)
    return (1, str(identity))


def identity_sort_key(record: StateRecord) -> tuple[int, Any]:
    """Sort key for a record under the canonical identity order."""
    return identity_order_key(record.identity)


def compare_identities(left: Identity, right: Identity) -> int:
    """Three-way comparison of two identities: -1, 0 or 1."""
    left_key = identity_order_key(left)
    right_key = identity_order_key(right)
    if left_key < right_key:
        return -1
    if left_key > right_key:
        return 1
    return 0


def sort_records(records: Iterable[StateRecord]) -> list[StateRecord]:
    """Return records sorted by the canonical identity order."""
    return sorted(records, key=identity_sort_key)


def is_canonically_sorted(records: list[StateRecord]) -> bool:
    """True if records are strictly ascending (sorted and free of duplicates)."""
    return all(
        compare_identities(records[i].identity, records[i + 1].identity) < 0
        for i in range(len(records) - 1)
    )
