"""Dispatch failure taxonomy.

Every class carries a stable ``error_type`` string that the HTTP layer returns
alongside the human-readable message.
"""

from __future__ import annotations


class DispatchError(Exception):
    error_type = "dispatch"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class DispatchValidationError(DispatchError):
    """Unknown zone code, unknown vehicle type or malformed request."""

    error_type = "validation"


class ResourceUnavailableError(DispatchError):
    """No depot, or no inventory at any eligible source."""

    error_type = "resource_unavailable"


class ConnectivityError(DispatchError):
    """Destination is unreachable from the chosen source."""

    error_type = "connectivity"


class AllocationConflictError(DispatchError):
    """The conditional decrement kept losing to concurrent claims."""

    error_type = "conflict"


class DispatchStoreError(DispatchError):
    """Backing store read/write failed or returned invalid data."""

    error_type = "store"
