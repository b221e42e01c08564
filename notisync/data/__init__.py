"""
Snapshot ingestion module.

Builds the previous/current record sequences from the tracking store and
the live store and validates them before they reach the reconciler.
"""
