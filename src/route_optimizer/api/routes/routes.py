"""Routing endpoints."""

from __future__ import annotations

import logging
from typing import Callable, TypeVar

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import Response

from ...schemas.routing import (
    ClusterRequest,
    ClusterResponse,
    CostRequest,
    CostResponse,
    EstimateResponse,
    FleetRequest,
    FleetResponse,
    OptimizationRequest,
    OptimizationResponse,
)
from ...services.routing.service import (
    cluster_request,
    cost_request,
    estimate_request,
    fleet_request,
    optimize_request,
    optimize_request_csv,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/routes", tags=["routes"])

T = TypeVar("T")


def _handle(action: str, call: Callable[[], T]) -> T:
    try:
        return call()
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error during {action}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to {action}: {str(exc)}",
        ) from exc


@router.post("/optimize", response_model=OptimizationResponse, status_code=status.HTTP_200_OK)
def optimize(payload: OptimizationRequest) -> OptimizationResponse:
    return _handle("optimize route", lambda: optimize_request(payload))


@router.post("/optimize/csv", status_code=status.HTTP_200_OK)
def optimize_csv(payload: OptimizationRequest) -> Response:
    """Optimized stop order as a CSV dispatch sheet."""
    content = _handle("export route", lambda: optimize_request_csv(payload))
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="route.csv"'},
    )


@router.post("/estimate", response_model=EstimateResponse, status_code=status.HTTP_200_OK)
def estimate(payload: OptimizationRequest) -> EstimateResponse:
    return _handle("estimate route", lambda: estimate_request(payload))


@router.post("/fleet", response_model=FleetResponse, status_code=status.HTTP_200_OK)
def fleet(payload: FleetRequest) -> FleetResponse:
    return _handle("optimize fleet", lambda: fleet_request(payload))


@router.post("/costs", response_model=CostResponse, status_code=status.HTTP_200_OK)
def costs(payload: CostRequest) -> CostResponse:
    return _handle("calculate route costs", lambda: cost_request(payload))


@router.post("/cluster", response_model=ClusterResponse, status_code=status.HTTP_200_OK)
def cluster(payload: ClusterRequest) -> ClusterResponse:
    return _handle("cluster stops", lambda: cluster_request(payload))
