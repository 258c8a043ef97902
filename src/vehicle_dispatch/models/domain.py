"""Domain models for zones, edges and dispatch records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class VehicleType(str, Enum):
    """Closed set of emergency vehicle categories."""

    AMBULANCE = "ambulance"
    FIRE_TRUCK = "fire_truck"
    POLICE = "police"

    @property
    def count_column(self) -> str:
        return f"{self.value}_count"

    @property
    def depot_column(self) -> str:
        return f"is_{self.value}_depot"

    @classmethod
    def parse(cls, value: str | VehicleType) -> VehicleType:
        """Return the member for ``value``; raises ValueError for anything outside the set."""
        if isinstance(value, cls):
            return value
        for member in cls:
            if member.value == value:
                return member
        allowed = ", ".join(member.value for member in cls)
        raise ValueError(f"Unknown vehicle type '{value}'. Expected one of: {allowed}.")


@dataclass(slots=True)
class Zone:
    """A network node with its own per-type vehicle inventory."""

    id: str
    code: str
    name: str
    counts: dict[VehicleType, int] = field(default_factory=dict)
    depots: dict[VehicleType, bool] = field(default_factory=dict)
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    def available(self, vehicle_type: VehicleType) -> int:
        return self.counts.get(vehicle_type, 0)

    def is_depot(self, vehicle_type: VehicleType) -> bool:
        return bool(self.depots.get(vehicle_type, False))


@dataclass(slots=True, frozen=True)
class Edge:
    """Undirected weighted link between two zone ids."""

    id: str
    source_id: str
    dest_id: str
    weight: float


@dataclass(slots=True, frozen=True)
class DispatchRecord:
    """Append-only log entry for a committed allocation."""

    vehicle_type: VehicleType
    source_code: str
    dest_code: str
    path: tuple[str, ...]
    distance: float
    created_at: datetime
    id: Optional[str] = None


@dataclass(slots=True)
class GraphSnapshot:
    """Point-in-time read of the zone and edge relations."""

    zones: list[Zone]
    edges: list[Edge]

    def zone_by_code(self, code: str) -> Zone | None:
        for zone in self.zones:
            if zone.code == code:
                return zone
        return None

    def zone_ids(self) -> list[str]:
        return [zone.id for zone in self.zones]

    def codes_by_id(self) -> dict[str, str]:
        return {zone.id: zone.code for zone in self.zones}
