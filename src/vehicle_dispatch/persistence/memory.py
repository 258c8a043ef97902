"""Process-local store backend for development runs and tests."""

from __future__ import annotations

import threading
import uuid
from dataclasses import replace
from typing import Iterable

from ..models.domain import DispatchRecord, Edge, VehicleType, Zone
from ..services.dispatch.errors import DispatchStoreError


class InMemoryDispatchStore:
    """Lock-guarded zone rows with compare-and-swap counters.

    Readers get copies, so a loaded snapshot never changes underneath a request.
    """

    def __init__(self, zones: Iterable[Zone] = (), edges: Iterable[Edge] = ()) -> None:
        self._lock = threading.Lock()
        self._zones: dict[str, Zone] = {}
        for zone in zones:
            self._zones[zone.id] = _copy_zone(zone)
        self._edges: list[Edge] = list(edges)
        self._log: list[DispatchRecord] = []

    def load_zones(self) -> list[Zone]:
        with self._lock:
            return [_copy_zone(zone) for zone in self._zones.values()]

    def load_edges(self) -> list[Edge]:
        with self._lock:
            return list(self._edges)

    def read_count(self, zone_id: str, vehicle_type: VehicleType) -> int:
        with self._lock:
            return self._zone(zone_id).available(vehicle_type)

    def try_decrement(self, zone_id: str, vehicle_type: VehicleType, expected: int) -> bool:
        with self._lock:
            zone = self._zone(zone_id)
            current = zone.available(vehicle_type)
            if current != expected or current <= 0:
                return False
            zone.counts[vehicle_type] = current - 1
            return True

    def try_increment(self, zone_id: str, vehicle_type: VehicleType, expected: int) -> bool:
        with self._lock:
            zone = self._zone(zone_id)
            if zone.available(vehicle_type) != expected:
                return False
            zone.counts[vehicle_type] = expected + 1
            return True

    def append_dispatch(self, record: DispatchRecord) -> DispatchRecord:
        stored = replace(record, id=record.id or str(uuid.uuid4()))
        with self._lock:
            self._log.append(stored)
        return stored

    def list_dispatches(self, limit: int) -> list[DispatchRecord]:
        with self._lock:
            newest_first = sorted(reversed(self._log), key=lambda record: record.created_at, reverse=True)
        return newest_first[:limit]

    def _zone(self, zone_id: str) -> Zone:
        zone = self._zones.get(zone_id)
        if zone is None:
            raise DispatchStoreError(f"Zone '{zone_id}' does not exist in the store.")
        return zone


def _copy_zone(zone: Zone) -> Zone:
    return replace(zone, counts=dict(zone.counts), depots=dict(zone.depots))
