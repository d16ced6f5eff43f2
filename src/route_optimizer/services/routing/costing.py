"""Fuel, labor and duration estimates for a route."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from ...exceptions import InvalidInputError
from ...models.domain import TuningParameters
from .matrix import route_distance
from .models import RouteMetrics, Savings


def estimate_costs(
    distance: float,
    stop_count: int,
    parameters: TuningParameters | None = None,
) -> RouteMetrics:
    """Convert a distance and stop count into unrounded cost/time figures."""

    parameters = parameters or TuningParameters()
    parameters.validate()
    if distance < 0:
        raise InvalidInputError("distance", f"must be >= 0, got {distance}")
    if stop_count < 0:
        raise InvalidInputError("stop_count", f"must be >= 0, got {stop_count}")

    fuel_volume = distance / parameters.vehicle_efficiency
    fuel_cost = fuel_volume * parameters.fuel_price_per_unit
    drive_minutes = distance / parameters.avg_speed * 60
    stop_minutes = stop_count * parameters.stop_service_minutes
    total_minutes = drive_minutes + stop_minutes
    labor_cost = total_minutes / 60 * parameters.driver_hourly_rate

    return RouteMetrics(
        total_distance=distance,
        fuel_volume=fuel_volume,
        fuel_cost=fuel_cost,
        drive_minutes=drive_minutes,
        stop_minutes=stop_minutes,
        total_minutes=total_minutes,
        labor_cost=labor_cost,
        total_cost=fuel_cost + labor_cost,
        stop_count=stop_count,
    )


def route_metrics(
    route: Sequence[int],
    matrix: np.ndarray,
    parameters: TuningParameters | None = None,
) -> RouteMetrics:
    """Metrics for an open route ``[depot, stops...]`` driven back to the depot."""

    distance = route_distance(route, matrix, closed=True)
    return estimate_costs(distance, max(0, len(route) - 1), parameters)


def compare_metrics(before: RouteMetrics, after: RouteMetrics) -> Savings:
    distance_saved = before.total_distance - after.total_distance
    percent = (distance_saved / before.total_distance * 100) if before.total_distance > 0 else 0.0
    return Savings(
        distance=distance_saved,
        distance_percent=percent,
        fuel_cost=before.fuel_cost - after.fuel_cost,
        time_minutes=before.total_minutes - after.total_minutes,
        labor_cost=before.labor_cost - after.labor_cost,
        total_cost=before.total_cost - after.total_cost,
    )


def format_duration(minutes: float) -> str:
    """Render minutes as ``"45m"`` or ``"2h 5m"``."""

    total = int(round(minutes))
    hours, mins = divmod(total, 60)
    if hours == 0:
        return f"{mins}m"
    return f"{hours}h {mins}m"
