"""Store contract consumed by the dispatch engine."""

from __future__ import annotations

from functools import lru_cache
from typing import Protocol

from ..config import settings
from ..models.domain import DispatchRecord, Edge, VehicleType, Zone


class DispatchStore(Protocol):
    """Zone/edge reads plus the atomic counter primitives and the append-only log.

    ``try_decrement`` and ``try_increment`` are compare-and-swap operations: they
    change the counter only if it still equals ``expected`` and report whether
    the swap happened.
    """

    def load_zones(self) -> list[Zone]: ...

    def load_edges(self) -> list[Edge]: ...

    def read_count(self, zone_id: str, vehicle_type: VehicleType) -> int: ...

    def try_decrement(self, zone_id: str, vehicle_type: VehicleType, expected: int) -> bool: ...

    def try_increment(self, zone_id: str, vehicle_type: VehicleType, expected: int) -> bool: ...

    def append_dispatch(self, record: DispatchRecord) -> DispatchRecord: ...

    def list_dispatches(self, limit: int) -> list[DispatchRecord]: ...


@lru_cache()
def get_dispatch_store() -> DispatchStore:
    """Return the configured store backend (cached for the process)."""
    if settings.store_backend == "memory":
        from .filesystem import load_network_file
        from .memory import InMemoryDispatchStore

        if settings.network_file:
            zones, edges = load_network_file(settings.network_file)
            return InMemoryDispatchStore(zones, edges)
        return InMemoryDispatchStore()

    from .database import SupabaseDispatchStore

    return SupabaseDispatchStore()
