"""Dispatch request/response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class DispatchRequest(BaseModel):
    """Exactly one of the zone codes selects the mode.

    ``destinationZoneCode`` dispatches from the depot for the type;
    ``sourceZoneCode`` dispatches the nearest available unit to that incident zone.
    """

    model_config = ConfigDict(populate_by_name=True)

    destination_zone_code: Optional[str] = Field(default=None, alias="destinationZoneCode")
    source_zone_code: Optional[str] = Field(default=None, alias="sourceZoneCode")
    vehicle_type: str = Field(..., alias="vehicleType", description="ambulance | fire_truck | police")


class MstEdgeModel(BaseModel):
    source: str
    dest: str
    weight: float


class DispatchSuccessResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    dispatched: bool = True
    source_zip_code: str = Field(..., alias="sourceZipCode")
    dest_zip_code: str = Field(..., alias="destZipCode")
    path: List[str]
    distance: float
    mst_edges: List[MstEdgeModel] = Field(default_factory=list, alias="mstEdges")
    message: str
    vehicle_type: str = Field(..., alias="vehicleType")
    mode: str
    dispatch_id: Optional[str] = Field(default=None, alias="dispatchId")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")


class DispatchFailureResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = False
    error: str
    error_type: str = Field(..., alias="errorType")


class DispatchLogModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    vehicle_type: str = Field(..., alias="vehicleType")
    source_zip_code: str = Field(..., alias="sourceZipCode")
    dest_zip_code: str = Field(..., alias="destZipCode")
    path: List[str]
    distance: float
    created_at: datetime = Field(..., alias="createdAt")
