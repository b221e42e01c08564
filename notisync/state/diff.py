"""
Sorted merge-diff of previous and current record sequences.

Both inputs must be ordered by the canonical identity order (see
``ordering``). The generator walks them with two cursors and yields one
``DiffPair`` per identity found on either side. It is lazy and single
pass: create a new one for every reconciliation.
"""

from typing import Iterable, Iterator, Optional

from .models import DiffPair, StateRecord
from .ordering import compare_identities


def diff(
    previous: Iterable[StateRecord],
    current: Iterable[StateRecord]
) -> Iterator[DiffPair]:
    """
    Merge two canonically ordered sequences into diff pairs.

    Args:
        previous: Records reconstructed from the tracking store
        current: Records read from the live store

    Yields:
        DiffPair(previous, None) for removals, DiffPair(None, current) for
        additions and DiffPair(previous, current) for shared identities
    """
    prev_iter = iter(previous)
    curr_iter = iter(current)

    prev: Optional[StateRecord] = next(prev_iter, None)
    curr: Optional[StateRecord] = next(curr_iter, None)

    while prev is not None and curr is not None:
        order = compare_identities(curr.identity, prev.identity)
        if order < 0:
            yield DiffPair(previous=None, current=curr)
            curr = next(curr_iter, None)
        elif order > 0:
            yield DiffPair(previous=prev, current=None)
            prev = next(prev_iter, None)
        else:
            yield DiffPair(previous=prev, current=curr)
            prev = next(prev_iter, None)
            curr = next(curr_iter, None)

    # Only one side can have entries left
    while prev is not None:
        yield DiffPair(previous=prev, current=None)
        prev = next(prev_iter, None)

    while curr is not None:
        yield DiffPair(previous=None, current=curr)
        curr = next(curr_iter, None)
