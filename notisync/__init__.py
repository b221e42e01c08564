"""
notisync - Notification State Reconciliation Engine

Keeps a persisted set of active notifications in sync with a live record
store. Each wake-up diffs what was previously notified against what the
live data says should be notified, and applies the minimal set of
notify/remove actions needed to converge.
"""

__version__ = "0.1.0"
__author__ = "notisync Team"
