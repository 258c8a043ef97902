"""Read-only views over the zone network and dispatch log."""

from __future__ import annotations

from ..config import settings
from ..models.domain import VehicleType
from ..persistence.store import DispatchStore, get_dispatch_store
from ..schemas.dispatch import DispatchLogModel, MstEdgeModel
from ..schemas.network import (
    EdgeModel,
    NetworkStatsResponse,
    SpanningTreeResponse,
    TreeRouteModel,
    ZoneModel,
)
from .dispatch.errors import DispatchValidationError
from .dispatch.service import load_snapshot
from .graph import build_spanning_forest


def list_zones(store: DispatchStore | None = None) -> list[ZoneModel]:
    snapshot = load_snapshot(store or get_dispatch_store())
    return [
        ZoneModel(
            id=zone.id,
            code=zone.code,
            name=zone.name,
            latitude=zone.latitude,
            longitude=zone.longitude,
            counts={vehicle_type.value: zone.available(vehicle_type) for vehicle_type in VehicleType},
            depots=[vehicle_type.value for vehicle_type in VehicleType if zone.is_depot(vehicle_type)],
        )
        for zone in snapshot.zones
    ]


def list_edges(store: DispatchStore | None = None) -> list[EdgeModel]:
    snapshot = load_snapshot(store or get_dispatch_store())
    codes = snapshot.codes_by_id()
    return [
        EdgeModel(id=edge.id, source=codes[edge.source_id], dest=codes[edge.dest_id], weight=edge.weight)
        for edge in snapshot.edges
    ]


def spanning_tree(
    source_code: str | None = None,
    target_code: str | None = None,
    store: DispatchStore | None = None,
) -> SpanningTreeResponse:
    """Advisory spanning forest, optionally with the forest route between two zones."""
    snapshot = load_snapshot(store or get_dispatch_store())
    forest = build_spanning_forest(snapshot.zone_ids(), snapshot.edges)
    codes = snapshot.codes_by_id()

    tree_route = None
    if source_code or target_code:
        if not (source_code and target_code):
            raise DispatchValidationError("Both source and target are required for a tree route")
        source = snapshot.zone_by_code(source_code)
        target = snapshot.zone_by_code(target_code)
        if source is None or target is None:
            missing = source_code if source is None else target_code
            raise DispatchValidationError(f"Zip code '{missing}' not found")
        route = forest.tree_route(source.id, target.id)
        if route is not None:
            nodes, distance = route
            tree_route = TreeRouteModel(path=[codes[node] for node in nodes], distance=distance)

    return SpanningTreeResponse(
        edges=[
            MstEdgeModel(source=codes[edge.source_id], dest=codes[edge.dest_id], weight=edge.weight)
            for edge in forest.edges
        ],
        total_weight=sum(edge.weight for edge in forest.edges),
        component_count=forest.component_count(),
        tree_route=tree_route,
    )


def network_stats(store: DispatchStore | None = None) -> NetworkStatsResponse:
    snapshot = load_snapshot(store or get_dispatch_store())
    return NetworkStatsResponse(
        zone_count=len(snapshot.zones),
        edge_count=len(snapshot.edges),
        available={
            vehicle_type.value: sum(zone.available(vehicle_type) for zone in snapshot.zones)
            for vehicle_type in VehicleType
        },
        depots={
            vehicle_type.value: [zone.code for zone in snapshot.zones if zone.is_depot(vehicle_type)]
            for vehicle_type in VehicleType
        },
    )


def recent_dispatches(limit: int | None = None, store: DispatchStore | None = None) -> list[DispatchLogModel]:
    store = store or get_dispatch_store()
    limit = min(limit or settings.dispatch_log_limit, settings.dispatch_log_limit)
    return [
        DispatchLogModel(
            id=record.id,
            vehicle_type=record.vehicle_type.value,
            source_zip_code=record.source_code,
            dest_zip_code=record.dest_code,
            path=list(record.path),
            distance=record.distance,
            created_at=record.created_at,
        )
        for record in store.list_dispatches(limit)
    ]
