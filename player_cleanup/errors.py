"""
Cleanup error types

The run never retries: a connection error stops it before any phase,
an operation error stops it at the first failing store call.
"""
from typing import Any, Optional


class CleanupError(Exception):
    """Base class for every error raised by the cleanup routine"""


class StoreConnectionError(CleanupError):
    """The player store could not be reached or configured"""


class StoreOperationError(CleanupError):
    """A read or delete against the player store failed"""

    def __init__(self, operation: str, message: str, record_id: Optional[Any] = None):
        self.operation = operation
        self.record_id = record_id
        detail = f"{operation} failed"
        if record_id is not None:
            detail += f" (id={record_id})"
        super().__init__(f"{detail}: {message}")
