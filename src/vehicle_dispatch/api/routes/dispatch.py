"""Dispatch endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Query, Response, status
from fastapi.responses import JSONResponse

from ...schemas.dispatch import (
    DispatchFailureResponse,
    DispatchLogModel,
    DispatchRequest,
    DispatchSuccessResponse,
)
from ...services.dispatch import DispatchError, dispatch_vehicle
from ...services.network import recent_dispatches

router = APIRouter(tags=["dispatch"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def failure_response(message: str, error_type: str) -> JSONResponse:
    body = DispatchFailureResponse(error=message, error_type=error_type)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=body.model_dump(by_alias=True),
    )


@router.options("/dispatch", include_in_schema=False)
def dispatch_preflight() -> Response:
    return Response(status_code=status.HTTP_200_OK, headers=CORS_HEADERS)


@router.post(
    "/dispatch",
    response_model=DispatchSuccessResponse,
    status_code=status.HTTP_200_OK,
    responses={400: {"model": DispatchFailureResponse}},
)
def dispatch(payload: DispatchRequest):
    try:
        return dispatch_vehicle(payload)
    except DispatchError as exc:
        logging.info(f"Dispatch rejected ({exc.error_type}): {exc.message}")
        return failure_response(exc.message, exc.error_type)
    except Exception as exc:
        logging.exception(f"Error dispatching vehicle: {exc}")
        return failure_response(f"Failed to dispatch vehicle: {str(exc)}", "store")


@router.get("/dispatch-logs", response_model=list[DispatchLogModel], status_code=status.HTTP_200_OK)
def dispatch_logs(
    limit: int | None = Query(default=None, ge=1, description="Maximum number of entries, newest first"),
):
    try:
        return recent_dispatches(limit)
    except DispatchError as exc:
        return failure_response(exc.message, exc.error_type)
