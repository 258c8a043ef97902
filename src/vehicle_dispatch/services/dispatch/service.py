"""Dispatch orchestration service."""

from __future__ import annotations

import logging
import math

from ...models.domain import GraphSnapshot, VehicleType, Zone
from ...persistence.store import DispatchStore, get_dispatch_store
from ...schemas.dispatch import DispatchRequest, DispatchSuccessResponse, MstEdgeModel
from ..graph import build_adjacency, build_spanning_forest, shortest_path_tree
from .allocation import AllocationTransaction
from .errors import (
    ConnectivityError,
    DispatchError,
    DispatchStoreError,
    DispatchValidationError,
    ResourceUnavailableError,
)
from .models import DispatchMode, DispatchResult, SourceSelection

logger = logging.getLogger(__name__)

Adjacency = dict[str, list[tuple[str, float]]]


def load_snapshot(store: DispatchStore) -> GraphSnapshot:
    """Read zones and edges once; edges pointing at unknown zones are dropped."""
    try:
        zones = store.load_zones()
        edges = store.load_edges()
    except DispatchError:
        raise
    except Exception as exc:
        raise DispatchStoreError(f"Failed to load network: {exc}") from exc

    known = {zone.id for zone in zones}
    usable = []
    for edge in edges:
        if edge.source_id in known and edge.dest_id in known:
            usable.append(edge)
        else:
            logger.warning(f"Ignoring edge {edge.id}: references a zone that does not exist")
    return GraphSnapshot(zones=zones, edges=usable)


def resolve_mode(destination_code: str | None, source_code: str | None) -> tuple[DispatchMode, str]:
    destination_code = (destination_code or "").strip()
    source_code = (source_code or "").strip()
    if destination_code and source_code:
        raise DispatchValidationError("Provide either destinationZoneCode or sourceZoneCode, not both")
    if destination_code:
        return DispatchMode.DEPOT, destination_code
    if source_code:
        return DispatchMode.NEAREST, source_code
    raise DispatchValidationError("destinationZoneCode or sourceZoneCode is required")


class DispatchOrchestrator:
    """Resolves the source for a request, routes it and commits the allocation.

    Routing always runs Dijkstra over every edge. The spanning forest is
    built alongside for display and has no say in the route.
    """

    def __init__(self, store: DispatchStore, allocation: AllocationTransaction | None = None) -> None:
        self.store = store
        self.allocation = allocation or AllocationTransaction(store)

    def dispatch(
        self,
        vehicle_type: str | VehicleType,
        *,
        destination_code: str | None = None,
        source_code: str | None = None,
    ) -> DispatchResult:
        mode, zone_code = resolve_mode(destination_code, source_code)
        try:
            vehicle = VehicleType.parse(vehicle_type)
        except ValueError as exc:
            raise DispatchValidationError(str(exc)) from exc

        snapshot = load_snapshot(self.store)
        zone = snapshot.zone_by_code(zone_code)
        if zone is None:
            label = "Destination" if mode is DispatchMode.DEPOT else "Source"
            raise DispatchValidationError(f"{label} zip code '{zone_code}' not found")

        forest = build_spanning_forest(snapshot.zone_ids(), snapshot.edges)
        adjacency = build_adjacency(snapshot.edges)
        codes = snapshot.codes_by_id()

        # the requested zone is the destination in both modes
        destination = zone
        if mode is DispatchMode.DEPOT:
            selection = self._select_depot(snapshot, adjacency, codes, vehicle, destination)
        else:
            selection = self._select_nearest(snapshot, adjacency, codes, vehicle, destination)

        logger.info(
            f"Dispatching {vehicle.value} ({mode.value}) {selection.source.code} -> {destination.code}: "
            f"path={selection.path} distance={selection.distance}"
        )
        record = self.allocation.commit(
            vehicle_type=vehicle,
            source=selection.source,
            destination=destination,
            path=selection.path,
            distance=selection.distance,
        )
        return DispatchResult(
            mode=mode,
            vehicle_type=vehicle,
            source=selection.source,
            destination=destination,
            path=list(record.path),
            distance=record.distance,
            forest_edges=forest.edges_in_component(selection.source.id),
            record=record,
            zone_codes=codes,
        )

    def _select_depot(
        self,
        snapshot: GraphSnapshot,
        adjacency: Adjacency,
        codes: dict[str, str],
        vehicle: VehicleType,
        destination: Zone,
    ) -> SourceSelection:
        depots = [zone for zone in snapshot.zones if zone.is_depot(vehicle)]
        if not depots:
            raise ResourceUnavailableError(f"No depot configured for {vehicle.value}")
        if len(depots) > 1:
            logger.warning(
                f"{len(depots)} zones flagged as {vehicle.value} depot: "
                f"{[depot.code for depot in depots]}; using the nearest stocked one"
            )

        stocked = [depot for depot in depots if depot.available(vehicle) > 0]
        if not stocked:
            depot_codes = ", ".join(depot.code for depot in depots)
            raise ResourceUnavailableError(f"No {vehicle.value} available at depot {depot_codes}")

        best: SourceSelection | None = None
        for depot in stocked:
            route = shortest_path_tree(adjacency, depot.id, destination.id).path_to(destination.id)
            if route is None:
                continue
            if best is None or route.distance < best.distance:
                best = SourceSelection(
                    source=depot,
                    path=[codes[node] for node in route.nodes],
                    distance=route.distance,
                )

        if best is None:
            depot_codes = ", ".join(depot.code for depot in stocked)
            raise ConnectivityError(f"No path found from depot {depot_codes} to {destination.code}")
        return best

    def _select_nearest(
        self,
        snapshot: GraphSnapshot,
        adjacency: Adjacency,
        codes: dict[str, str],
        vehicle: VehicleType,
        incident: Zone,
    ) -> SourceSelection:
        if incident.available(vehicle) > 0:
            return SourceSelection(source=incident, path=[incident.code], distance=0.0)

        # one run from the incident ranks every candidate; edges are undirected
        tree = shortest_path_tree(adjacency, incident.id)
        best: Zone | None = None
        best_distance = math.inf
        for zone in snapshot.zones:
            if zone.available(vehicle) <= 0:
                continue
            distance = tree.distance_to(zone.id)
            if distance < best_distance:
                best, best_distance = zone, distance

        if best is None:
            raise ResourceUnavailableError(
                f"No {vehicle.value} available in any zone connected to {incident.code}"
            )

        route = tree.path_to(best.id)
        path = [codes[node] for node in reversed(route.nodes)]
        return SourceSelection(source=best, path=path, distance=route.distance)


def to_response(result: DispatchResult) -> DispatchSuccessResponse:
    codes = result.zone_codes
    return DispatchSuccessResponse(
        source_zip_code=result.source.code,
        dest_zip_code=result.destination.code,
        path=result.path,
        distance=result.distance,
        mst_edges=[
            MstEdgeModel(source=codes[edge.source_id], dest=codes[edge.dest_id], weight=edge.weight)
            for edge in result.forest_edges
        ],
        message=result.message,
        vehicle_type=result.vehicle_type.value,
        mode=result.mode.value,
        dispatch_id=result.record.id,
        created_at=result.record.created_at,
    )


def dispatch_vehicle(payload: DispatchRequest, store: DispatchStore | None = None) -> DispatchSuccessResponse:
    orchestrator = DispatchOrchestrator(store or get_dispatch_store())
    result = orchestrator.dispatch(
        payload.vehicle_type,
        destination_code=payload.destination_zone_code,
        source_code=payload.source_zone_code,
    )
    return to_response(result)
