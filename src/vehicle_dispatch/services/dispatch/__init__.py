"""Dispatch engine: source selection, routing and allocation."""

from .allocation import AllocationTransaction
from .errors import (
    AllocationConflictError,
    ConnectivityError,
    DispatchError,
    DispatchStoreError,
    DispatchValidationError,
    ResourceUnavailableError,
)
from .models import DispatchMode, DispatchResult
from .service import DispatchOrchestrator, dispatch_vehicle

__all__ = [
    "AllocationConflictError",
    "AllocationTransaction",
    "ConnectivityError",
    "DispatchError",
    "DispatchMode",
    "DispatchOrchestrator",
    "DispatchResult",
    "DispatchStoreError",
    "DispatchValidationError",
    "ResourceUnavailableError",
    "dispatch_vehicle",
]
