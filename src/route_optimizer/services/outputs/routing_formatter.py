"""Serializers for optimization outputs.

This is the reporting boundary: values are kept unrounded inside the engine
and rounded only here (distance, volume and currency to 2 dp, minutes to
whole numbers, percentages to 1 dp).
"""

from __future__ import annotations

import csv
import io
from dataclasses import asdict

from ...models.domain import Location, TuningParameters
from ..routing.costing import format_duration
from ..routing.models import OptimizationResult, RouteMetrics, Savings


def _r2(value: float) -> float:
    return round(float(value), 2)


def _minutes(value: float) -> int:
    return int(round(value))


def metrics_to_json(metrics: RouteMetrics) -> dict:
    return {
        "total_distance": _r2(metrics.total_distance),
        "fuel_volume": _r2(metrics.fuel_volume),
        "fuel_cost": _r2(metrics.fuel_cost),
        "drive_minutes": _minutes(metrics.drive_minutes),
        "stop_minutes": _minutes(metrics.stop_minutes),
        "total_minutes": _minutes(metrics.total_minutes),
        "labor_cost": _r2(metrics.labor_cost),
        "total_cost": _r2(metrics.total_cost),
        "stop_count": metrics.stop_count,
        "total_time_formatted": format_duration(metrics.total_minutes),
    }


def savings_to_json(savings: Savings) -> dict:
    return {
        "distance": _r2(savings.distance),
        "distance_percent": round(savings.distance_percent, 1),
        "fuel_cost": _r2(savings.fuel_cost),
        "time_minutes": _minutes(savings.time_minutes),
        "labor_cost": _r2(savings.labor_cost),
        "total_cost": _r2(savings.total_cost),
    }


def parameters_to_json(parameters: TuningParameters) -> dict:
    return asdict(parameters)


def _depot_to_json(depot: Location) -> dict:
    return {
        "id": depot.location_id,
        "lat": depot.latitude,
        "lng": depot.longitude,
        "name": depot.name,
        "address": depot.address,
    }


def optimization_result_to_json(result: OptimizationResult) -> dict:
    return {
        "depot": _depot_to_json(result.depot),
        "ordered_stops": [
            {
                "id": stop.location.location_id,
                "position": stop.position,
                "distance_from_previous": _r2(stop.distance_from_previous),
                "eta_minutes_from_previous": _minutes(stop.eta_minutes_from_previous),
                "arrival_minutes": _minutes(stop.arrival_minutes),
                "name": stop.location.name,
                "address": stop.location.address,
                "lat": stop.location.latitude,
                "lng": stop.location.longitude,
                "demand": stop.location.demand,
            }
            for stop in result.ordered_stops
        ],
        "segments": [
            {
                "from_id": segment.from_id,
                "to_id": segment.to_id,
                "distance": _r2(segment.distance),
                "minutes": _minutes(segment.minutes),
                "cumulative_distance": _r2(segment.cumulative_distance),
                "cumulative_minutes": _minutes(segment.cumulative_minutes),
            }
            for segment in result.segments
        ],
        "metrics": metrics_to_json(result.metrics),
        "original_metrics": metrics_to_json(result.original_metrics),
        "input_order_metrics": metrics_to_json(result.input_order_metrics),
        "savings": savings_to_json(result.savings),
        "route_order": list(result.route_order),
        "iterations": result.iterations,
        "converged": result.converged,
        "total_demand": _r2(result.total_demand),
        "parameters": parameters_to_json(result.parameters),
        "algorithm": result.algorithm,
    }


def optimization_result_to_csv(result: OptimizationResult) -> str:
    buffer = io.StringIO()
    fieldnames = [
        "position",
        "stop_id",
        "name",
        "address",
        "lat",
        "lng",
        "demand",
        "distance_from_previous",
        "eta_minutes_from_previous",
        "arrival_minutes",
    ]
    writer = csv.DictWriter(buffer, fieldnames=fieldnames)
    writer.writeheader()
    for stop in result.ordered_stops:
        writer.writerow(
            {
                "position": stop.position,
                "stop_id": stop.location.location_id,
                "name": stop.location.name or "",
                "address": stop.location.address or "",
                "lat": stop.location.latitude,
                "lng": stop.location.longitude,
                "demand": "" if stop.location.demand is None else stop.location.demand,
                "distance_from_previous": _r2(stop.distance_from_previous),
                "eta_minutes_from_previous": _minutes(stop.eta_minutes_from_previous),
                "arrival_minutes": _minutes(stop.arrival_minutes),
            }
        )
    return buffer.getvalue()
