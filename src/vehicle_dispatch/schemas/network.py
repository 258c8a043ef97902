"""Read-only network view schemas."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .dispatch import MstEdgeModel


class ZoneModel(BaseModel):
    id: str
    code: str
    name: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    counts: Dict[str, int]
    depots: List[str] = Field(default_factory=list, description="Vehicle types this zone is depot for.")


class EdgeModel(BaseModel):
    id: str
    source: str
    dest: str
    weight: float


class TreeRouteModel(BaseModel):
    path: List[str]
    distance: float


class SpanningTreeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    edges: List[MstEdgeModel]
    total_weight: float = Field(..., alias="totalWeight")
    component_count: int = Field(..., alias="componentCount")
    tree_route: Optional[TreeRouteModel] = Field(
        default=None,
        alias="treeRoute",
        description="Route along forest edges only; display aid, not a shortest path.",
    )


class NetworkStatsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    zone_count: int = Field(..., alias="zoneCount")
    edge_count: int = Field(..., alias="edgeCount")
    available: Dict[str, int]
    depots: Dict[str, List[str]]
