"""Dispatch domain models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List

from ...models.domain import DispatchRecord, Edge, VehicleType, Zone


class DispatchMode(str, Enum):
    DEPOT = "depot"
    NEAREST = "nearest"


@dataclass(slots=True)
class SourceSelection:
    source: Zone
    path: List[str]
    distance: float


@dataclass(slots=True)
class DispatchResult:
    mode: DispatchMode
    vehicle_type: VehicleType
    source: Zone
    destination: Zone
    path: List[str]
    distance: float
    forest_edges: List[Edge]
    record: DispatchRecord
    zone_codes: dict[str, str]

    @property
    def message(self) -> str:
        origin = "depot " if self.mode is DispatchMode.DEPOT else ""
        text = f"{self.vehicle_type.value} dispatched from {origin}{self.source.code} to {self.destination.code}"
        if self.distance > 0:
            text += f" ({self.distance:g} km)"
        return text
