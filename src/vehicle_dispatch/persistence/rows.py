"""Conversion between store rows (dicts) and domain objects."""

from __future__ import annotations

import json
import math
import re
from datetime import datetime, timezone
from typing import Any

from ..models.domain import DispatchRecord, Edge, VehicleType, Zone

_FRACTION = re.compile(r"\.(\d+)")


def zone_from_row(row: dict[str, Any]) -> Zone:
    """Build a Zone from a ``zip_codes`` row; missing counts default to 0."""
    counts: dict[VehicleType, int] = {}
    depots: dict[VehicleType, bool] = {}
    for vehicle_type in VehicleType:
        count = int(row.get(vehicle_type.count_column) or 0)
        if count < 0:
            raise ValueError(f"Zone '{row.get('code')}' has negative {vehicle_type.value} count {count}")
        counts[vehicle_type] = count
        depots[vehicle_type] = bool(row.get(vehicle_type.depot_column) or False)

    latitude = row.get("latitude")
    longitude = row.get("longitude")
    return Zone(
        id=str(row["id"]),
        code=str(row["code"]).strip(),
        name=str(row.get("name") or row["code"]),
        counts=counts,
        depots=depots,
        latitude=float(latitude) if latitude is not None else None,
        longitude=float(longitude) if longitude is not None else None,
    )


def zone_to_row(zone: Zone) -> dict[str, Any]:
    row: dict[str, Any] = {
        "id": zone.id,
        "code": zone.code,
        "name": zone.name,
        "latitude": zone.latitude,
        "longitude": zone.longitude,
    }
    for vehicle_type in VehicleType:
        row[vehicle_type.count_column] = zone.available(vehicle_type)
        row[vehicle_type.depot_column] = zone.is_depot(vehicle_type)
    return row


def edge_from_row(row: dict[str, Any], position: int = 0) -> Edge:
    """Build an Edge from an ``edges`` row; undefined or negative weights are data errors."""
    weight = row.get("weight")
    if weight is None:
        raise ValueError(f"Edge {row.get('id', position)} has no weight")
    weight = float(weight)
    if math.isnan(weight) or weight < 0:
        raise ValueError(f"Edge {row.get('id', position)} has invalid weight {weight}")
    return Edge(
        id=str(row.get("id") or f"edge-{position}"),
        source_id=str(row["source_zip_id"]),
        dest_id=str(row["dest_zip_id"]),
        weight=weight,
    )


def record_to_row(record: DispatchRecord) -> dict[str, Any]:
    row: dict[str, Any] = {
        "vehicle_type": record.vehicle_type.value,
        "source_zip_code": record.source_code,
        "dest_zip_code": record.dest_code,
        "path": list(record.path),
        "distance": record.distance,
        "created_at": record.created_at.isoformat(),
    }
    if record.id:
        row["id"] = record.id
    return row


def record_from_row(row: dict[str, Any]) -> DispatchRecord:
    path = row.get("path") or []
    if isinstance(path, str):
        path = json.loads(path)
    created_at = row.get("created_at")
    if isinstance(created_at, str):
        created_at = parse_timestamp(created_at)
    elif created_at is None:
        created_at = datetime.now(timezone.utc)
    return DispatchRecord(
        vehicle_type=VehicleType.parse(row["vehicle_type"]),
        source_code=str(row["source_zip_code"]),
        dest_code=str(row["dest_zip_code"]),
        path=tuple(str(code) for code in path),
        distance=float(row.get("distance") or 0.0),
        created_at=created_at,
        id=str(row["id"]) if row.get("id") is not None else None,
    )


def parse_timestamp(value: str) -> datetime:
    """Parse a PostgREST ``timestamptz``; fractional seconds may have any number of digits."""
    text = value.strip().replace("Z", "+00:00").replace(" ", "T", 1)
    text = _FRACTION.sub(lambda match: "." + match.group(1)[:6].ljust(6, "0"), text, count=1)
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
