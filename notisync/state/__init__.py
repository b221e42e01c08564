"""
Reconciliation state module.

Defines the immutable state records, the canonical identity ordering and
the merge-diff reconciler that turns two ordered snapshots into actions.
"""
