"""Routing orchestration service."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional, Sequence

import numpy as np

from ...exceptions import InvalidInputError
from ...models.domain import Location, LocationRole, TuningParameters
from ...schemas.routing import (
    ClusterRequest,
    ClusterResponse,
    CostRequest,
    CostResponse,
    EstimateResponse,
    FleetRequest,
    FleetResponse,
    LocationModel,
    OptimizationOptions,
    OptimizationRequest,
    OptimizationResponse,
)
from ..geospatial import is_valid_coordinate, validate_coordinate
from ..outputs.routing_formatter import (
    metrics_to_json,
    optimization_result_to_csv,
    optimization_result_to_json,
    parameters_to_json,
)
from ..zoning.clustering import FarthestPointClustering
from .costing import compare_metrics, estimate_costs, route_metrics
from .heuristics import TwoOptOutcome, nearest_neighbor, two_opt
from .matrix import build_distance_matrix, close_route
from .models import OptimizationResult, OrderedStop, RouteEstimate, Segment

logger = logging.getLogger(__name__)

ALGORITHM = "nearest_neighbor+2opt"


def _as_float(value) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _validate_depot(depot: Location | None) -> Location:
    if depot is None:
        raise InvalidInputError("depot", "a depot location is required")
    lat, lng = _as_float(depot.latitude), _as_float(depot.longitude)
    validate_coordinate(lat, lng, field="depot")
    return replace(depot, latitude=lat, longitude=lng, role=LocationRole.DEPOT)


def _filter_stops(stops: Sequence[Location]) -> list[Location]:
    valid: list[Location] = []
    for stop in stops:
        if is_valid_coordinate(stop.latitude, stop.longitude):
            valid.append(
                replace(
                    stop,
                    latitude=float(stop.latitude),
                    longitude=float(stop.longitude),
                    role=LocationRole.STOP,
                )
            )
        else:
            logger.warning(
                f"Skipping stop {stop.location_id}: invalid coordinates ({stop.latitude}, {stop.longitude})"
            )
    return valid


def _prepare(
    depot: Location | None,
    stops: Sequence[Location],
    parameters: TuningParameters | None,
    epsilon: float | None,
    max_iterations: int | None,
) -> tuple[Location, list[Location], TuningParameters]:
    """Run every input check up front so no matrix is built for a rejected call."""

    depot = _validate_depot(depot)
    parameters = parameters or TuningParameters()
    parameters.validate()
    if epsilon is not None and epsilon < 0:
        raise InvalidInputError("epsilon", f"must be >= 0, got {epsilon}")
    if max_iterations is not None and max_iterations < 1:
        raise InvalidInputError("max_iterations", f"must be >= 1, got {max_iterations}")

    valid_stops = _filter_stops(stops)
    if not valid_stops:
        raise InvalidInputError("stops", "no stops with valid GPS coordinates")
    return depot, valid_stops, parameters


def _solve(
    locations: list[Location],
    epsilon: float | None,
    max_iterations: int | None,
) -> tuple[np.ndarray, list[int], TwoOptOutcome]:
    matrix = build_distance_matrix([location.coordinate for location in locations])
    nn_route = nearest_neighbor(matrix, 0)
    outcome = two_opt(nn_route, matrix, epsilon=epsilon, max_iterations=max_iterations)
    return matrix, nn_route, outcome


def _walk_route(
    route: list[int],
    locations: list[Location],
    matrix: np.ndarray,
    parameters: TuningParameters,
) -> tuple[list[Segment], list[OrderedStop]]:
    closed = close_route(route)
    segments: list[Segment] = []
    ordered_stops: list[OrderedStop] = []
    cumulative_distance = 0.0
    cumulative_minutes = 0.0

    for position, (from_idx, to_idx) in enumerate(zip(closed, closed[1:])):
        distance = float(matrix[from_idx, to_idx])
        minutes = distance / parameters.avg_speed * 60
        if position > 0:
            # service time at the stop being left
            cumulative_minutes += parameters.stop_service_minutes
        cumulative_distance += distance
        cumulative_minutes += minutes
        segments.append(
            Segment(
                from_id=locations[from_idx].location_id,
                to_id=locations[to_idx].location_id,
                distance=distance,
                minutes=minutes,
                cumulative_distance=cumulative_distance,
                cumulative_minutes=cumulative_minutes,
            )
        )
        if position < len(route) - 1:
            ordered_stops.append(
                OrderedStop(
                    location=locations[to_idx],
                    position=position + 1,
                    distance_from_previous=distance,
                    eta_minutes_from_previous=minutes,
                    arrival_minutes=cumulative_minutes,
                )
            )
    return segments, ordered_stops


def optimize_route(
    depot: Location | None,
    stops: Sequence[Location],
    parameters: TuningParameters | None = None,
    *,
    epsilon: float | None = None,
    max_iterations: int | None = None,
) -> OptimizationResult:
    """Order ``stops`` from ``depot`` with nearest neighbour + 2-opt and report savings.

    Savings compare the improved route with the nearest-neighbour route. The
    metrics of the stops in their given order are reported alongside.

    Raises:
        InvalidInputError: depot missing or invalid, no stop with valid
            coordinates, or non-positive tuning parameters.
    """
    depot, valid_stops, parameters = _prepare(depot, stops, parameters, epsilon, max_iterations)
    locations = [depot, *valid_stops]

    matrix, nn_route, outcome = _solve(locations, epsilon, max_iterations)
    original_metrics = route_metrics(nn_route, matrix, parameters)
    optimized_metrics = route_metrics(outcome.route, matrix, parameters)
    input_order_metrics = route_metrics(list(range(len(locations))), matrix, parameters)
    savings = compare_metrics(original_metrics, optimized_metrics)
    segments, ordered_stops = _walk_route(outcome.route, locations, matrix, parameters)

    logger.info(
        f"Optimized {len(valid_stops)} stops from depot {depot.location_id}: "
        f"{original_metrics.total_distance:.2f} -> {optimized_metrics.total_distance:.2f} miles "
        f"in {outcome.iterations} 2-opt passes (converged={outcome.converged})"
    )

    return OptimizationResult(
        depot=depot,
        ordered_stops=ordered_stops,
        segments=segments,
        metrics=optimized_metrics,
        original_metrics=original_metrics,
        input_order_metrics=input_order_metrics,
        savings=savings,
        route_order=[locations[index].location_id for index in close_route(outcome.route)],
        iterations=outcome.iterations,
        converged=outcome.converged,
        total_demand=sum(stop.demand or 0.0 for stop in valid_stops),
        parameters=parameters,
        algorithm=ALGORITHM,
    )


def estimate_route(
    depot: Location | None,
    stops: Sequence[Location],
    parameters: TuningParameters | None = None,
    *,
    epsilon: float | None = None,
    max_iterations: int | None = None,
) -> RouteEstimate:
    """Metrics of the optimized route only, without the comparison blocks."""

    depot, valid_stops, parameters = _prepare(depot, stops, parameters, epsilon, max_iterations)
    locations = [depot, *valid_stops]
    matrix, _, outcome = _solve(locations, epsilon, max_iterations)
    return RouteEstimate(
        metrics=route_metrics(outcome.route, matrix, parameters),
        route_order=[locations[index].location_id for index in close_route(outcome.route)],
        parameters=parameters,
    )


def optimize_fleet(
    depot: Location | None,
    stops: Sequence[Location],
    vehicle_count: int,
    parameters: TuningParameters | None = None,
    *,
    random_state: int | None = None,
    epsilon: float | None = None,
    max_iterations: int | None = None,
) -> tuple[list[list[str]], list[OptimizationResult]]:
    """Split stops into at most ``vehicle_count`` clusters and optimize each one on its own.

    Clusters are not balanced and routes are not optimized jointly.
    """
    depot, valid_stops, parameters = _prepare(depot, stops, parameters, epsilon, max_iterations)
    strategy = FarthestPointClustering(random_state=random_state)
    clustering = strategy.generate(stops=valid_stops, target_clusters=vehicle_count, depot=depot)

    results = [
        optimize_route(
            depot,
            clustering.stops_for_cluster(index, valid_stops),
            parameters,
            epsilon=epsilon,
            max_iterations=max_iterations,
        )
        for index in range(len(clustering.clusters))
    ]
    logger.info(f"Split {len(valid_stops)} stops across {len(results)} vehicles (requested {vehicle_count})")
    return clustering.clusters, results


# Request adapters


def _to_location(model: LocationModel, role: LocationRole = LocationRole.STOP) -> Location:
    return Location(
        location_id=str(model.id),
        latitude=model.lat,
        longitude=model.lng,
        name=model.name,
        address=model.address,
        demand=model.demand,
        role=role,
    )


def _build_parameters(options: Optional[OptimizationOptions]) -> TuningParameters:
    base = TuningParameters()
    if options is None:
        return base
    overrides = {
        name: getattr(options, name)
        for name in (
            "fuel_price_per_unit",
            "vehicle_efficiency",
            "avg_speed",
            "stop_service_minutes",
            "driver_hourly_rate",
        )
        if getattr(options, name) is not None
    }
    return replace(base, **overrides)


def _unpack(payload: OptimizationRequest) -> tuple[Location | None, list[Location], TuningParameters, dict]:
    depot = _to_location(payload.depot, LocationRole.DEPOT) if payload.depot else None
    stops = [_to_location(stop) for stop in payload.stops]
    options = payload.options
    search = {
        "epsilon": options.epsilon if options else None,
        "max_iterations": options.max_iterations if options else None,
    }
    return depot, stops, _build_parameters(options), search


def optimize_request(payload: OptimizationRequest) -> OptimizationResponse:
    depot, stops, parameters, search = _unpack(payload)
    result = optimize_route(depot, stops, parameters, **search)
    return OptimizationResponse.model_validate(optimization_result_to_json(result))


def optimize_request_csv(payload: OptimizationRequest) -> str:
    depot, stops, parameters, search = _unpack(payload)
    return optimization_result_to_csv(optimize_route(depot, stops, parameters, **search))


def estimate_request(payload: OptimizationRequest) -> EstimateResponse:
    depot, stops, parameters, search = _unpack(payload)
    estimate = estimate_route(depot, stops, parameters, **search)
    return EstimateResponse(
        metrics=metrics_to_json(estimate.metrics),
        route_order=estimate.route_order,
        parameters=parameters_to_json(estimate.parameters),
    )


def fleet_request(payload: FleetRequest) -> FleetResponse:
    depot, stops, parameters, search = _unpack(payload)
    clusters, results = optimize_fleet(
        depot,
        stops,
        payload.vehicle_count,
        parameters,
        random_state=payload.seed,
        **search,
    )
    return FleetResponse(
        routes=[OptimizationResponse.model_validate(optimization_result_to_json(result)) for result in results],
        clusters=clusters,
    )


def cost_request(payload: CostRequest) -> CostResponse:
    parameters = _build_parameters(payload.options)
    metrics = estimate_costs(payload.distance, payload.stop_count, parameters)
    return CostResponse(metrics=metrics_to_json(metrics), parameters=parameters_to_json(parameters))


def cluster_request(payload: ClusterRequest) -> ClusterResponse:
    strategy = FarthestPointClustering(random_state=payload.seed)
    depot = _to_location(payload.depot, LocationRole.DEPOT) if payload.depot else None
    result = strategy.generate(
        stops=[_to_location(stop) for stop in payload.stops],
        target_clusters=payload.cluster_count,
        depot=depot,
    )
    return ClusterResponse(clusters=result.clusters, metadata=result.metadata)
