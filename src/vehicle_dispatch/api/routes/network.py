"""Read-only zone network endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query, status

from ...schemas.network import EdgeModel, NetworkStatsResponse, SpanningTreeResponse, ZoneModel
from ...services.dispatch import DispatchStoreError, DispatchValidationError
from ...services.network import list_edges, list_zones, network_stats, spanning_tree

router = APIRouter(prefix="/network", tags=["network"])


def _store_failure(action: str, exc: Exception) -> HTTPException:
    logging.exception(f"Error loading {action}: {exc}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to load {action}: {str(exc)}",
    )


@router.get("/zones", response_model=list[ZoneModel], status_code=status.HTTP_200_OK)
def zones() -> list[ZoneModel]:
    try:
        return list_zones()
    except DispatchStoreError as exc:
        raise _store_failure("zones", exc) from exc


@router.get("/edges", response_model=list[EdgeModel], status_code=status.HTTP_200_OK)
def edges() -> list[EdgeModel]:
    try:
        return list_edges()
    except DispatchStoreError as exc:
        raise _store_failure("edges", exc) from exc


@router.get("/spanning-tree", response_model=SpanningTreeResponse, status_code=status.HTTP_200_OK)
def get_spanning_tree(
    source: str | None = Query(default=None, description="Zip code where the tree route starts"),
    target: str | None = Query(default=None, description="Zip code where the tree route ends"),
) -> SpanningTreeResponse:
    """Minimum spanning forest for display.

    The optional tree route follows forest edges only and is not the route a
    dispatch would take.
    """
    try:
        return spanning_tree(source, target)
    except DispatchValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message) from exc
    except DispatchStoreError as exc:
        raise _store_failure("spanning tree", exc) from exc


@router.get("/stats", response_model=NetworkStatsResponse, status_code=status.HTTP_200_OK)
def stats() -> NetworkStatsResponse:
    try:
        return network_stats()
    except DispatchStoreError as exc:
        raise _store_failure("network stats", exc) from exc
