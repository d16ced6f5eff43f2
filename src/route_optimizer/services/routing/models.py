"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ...models.domain import Location, TuningParameters


@dataclass(slots=True)
class RouteMetrics:
    total_distance: float
    fuel_volume: float
    fuel_cost: float
    drive_minutes: float
    stop_minutes: float
    total_minutes: float
    labor_cost: float
    total_cost: float
    stop_count: int


@dataclass(slots=True)
class Savings:
    distance: float
    distance_percent: float
    fuel_cost: float
    time_minutes: float
    labor_cost: float
    total_cost: float


@dataclass(slots=True)
class Segment:
    from_id: str
    to_id: str
    distance: float
    minutes: float
    cumulative_distance: float
    cumulative_minutes: float


@dataclass(slots=True)
class OrderedStop:
    location: Location
    position: int
    distance_from_previous: float
    eta_minutes_from_previous: float
    arrival_minutes: float


@dataclass(slots=True)
class OptimizationResult:
    depot: Location
    ordered_stops: List[OrderedStop]
    segments: List[Segment]
    metrics: RouteMetrics
    original_metrics: RouteMetrics
    input_order_metrics: RouteMetrics
    savings: Savings
    route_order: List[str]
    iterations: int
    converged: bool
    total_demand: float
    parameters: TuningParameters
    algorithm: str


@dataclass(slots=True)
class RouteEstimate:
    metrics: RouteMetrics
    route_order: List[str]
    parameters: TuningParameters
