"""File-based loading of a network topology for the in-memory store."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ..models.domain import Edge, Zone
from .rows import edge_from_row, zone_from_row, zone_to_row


def load_network_file(path: Path) -> tuple[list[Zone], list[Edge]]:
    """Read ``{"zones": [...], "edges": [...]}`` using the same row layout as the database.

    Edges may name their endpoints by zone id (``source_zip_id``/``dest_zip_id``)
    or by zone code (``source``/``dest``).
    """
    if not path.exists():
        raise FileNotFoundError(f"Network file not found: {path}")

    with path.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)

    zone_rows = payload.get("zones") or []
    for position, row in enumerate(zone_rows):
        row.setdefault("id", row.get("code") or f"zone-{position}")
    zones = [zone_from_row(row) for row in zone_rows]
    id_by_code = {zone.code: zone.id for zone in zones}

    edges: list[Edge] = []
    for position, row in enumerate(payload.get("edges") or []):
        edges.append(edge_from_row(_resolve_endpoints(row, id_by_code), position))
    return zones, edges


def write_network_file(path: Path, zones: list[Zone], edges: list[Edge], *, indent: int = 2) -> None:
    data = {
        "zones": [zone_to_row(zone) for zone in zones],
        "edges": [
            {"id": edge.id, "source_zip_id": edge.source_id, "dest_zip_id": edge.dest_id, "weight": edge.weight}
            for edge in edges
        ],
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        json.dump(data, handle, ensure_ascii=False, indent=indent)


def _resolve_endpoints(row: dict[str, Any], id_by_code: dict[str, str]) -> dict[str, Any]:
    resolved = dict(row)
    for id_key, code_key in (("source_zip_id", "source"), ("dest_zip_id", "dest")):
        if id_key in resolved:
            continue
        code = resolved.get(code_key)
        if code not in id_by_code:
            raise ValueError(f"Edge {row.get('id', '?')} references unknown zone code '{code}'")
        resolved[id_key] = id_by_code[code]
    return resolved
