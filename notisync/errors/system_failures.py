"""
Collaborator failure classifications.

These exceptions wrap I/O failures at the tracking store, live store and
notification presenter boundaries.
"""

from typing import Any, Dict, Optional


class SystemFailureError(Exception):
    """Base class for collaborator failures."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class PersistenceError(SystemFailureError):
    """Tracking store read or write failures."""

    def __init__(self, message: str, operation: Optional[str] = None,
                 target: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.operation = operation
        self.target = target


class LiveStoreError(SystemFailureError):
    """Live record store could not be queried."""

    def __init__(self, message: str, query: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.query = query


class DeliveryError(SystemFailureError):
    """Notification post or cancel failures."""

    def __init__(self, message: str, presenter: Optional[str] = None,
                 identity: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self.presenter = presenter
        self.identity = identity
