"""
Recovery classifications for error handling.

Errors in this module leave the system in a state the next reconciliation
pass corrects on its own.
"""

from typing import Any


class RecoverableError(Exception):
    """Mixin for errors that can be recovered from automatically."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message)
        self.recoverable = True


class InconsistentApplicationError(RecoverableError):
    """An action was only partially applied, e.g. posted but not tracked."""

    def __init__(self, message: str, identity: Any = None,
                 applied_step: str = "", failed_step: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.identity = identity
        self.applied_step = applied_step
        self.failed_step = failed_step
