"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/settings", status_code=status.HTTP_200_OK)
def health_settings() -> dict:
    """Expose the active optimizer defaults."""
    return {
        "earth_radius_miles": settings.earth_radius_miles,
        "two_opt_epsilon": settings.two_opt_epsilon,
        "two_opt_max_iterations": settings.two_opt_max_iterations,
        "defaults": {
            "fuel_price_per_unit": settings.fuel_price_per_unit,
            "vehicle_efficiency": settings.vehicle_efficiency,
            "avg_speed": settings.avg_speed,
            "stop_service_minutes": settings.stop_service_minutes,
            "driver_hourly_rate": settings.driver_hourly_rate,
        },
    }
