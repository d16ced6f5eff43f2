"""Routing request/response schemas."""

from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LocationModel(_CamelModel):
    id: Union[str, int]
    lat: Optional[float] = None
    lng: Optional[float] = None
    name: Optional[str] = None
    address: Optional[str] = None
    demand: Optional[float] = Field(default=None, ge=0, description="Requested volume (e.g. gallons).")


class OptimizationOptions(_CamelModel):
    fuel_price_per_unit: Optional[float] = None
    vehicle_efficiency: Optional[float] = Field(None, description="Distance per fuel unit.")
    avg_speed: Optional[float] = None
    stop_service_minutes: Optional[float] = None
    driver_hourly_rate: Optional[float] = None
    epsilon: Optional[float] = Field(None, description="Minimum 2-opt gain in miles.")
    max_iterations: Optional[int] = Field(None, description="Cap on 2-opt passes.")


class OptimizationRequest(_CamelModel):
    depot: Optional[LocationModel] = None
    stops: List[LocationModel] = Field(default_factory=list)
    options: Optional[OptimizationOptions] = None


class FleetRequest(OptimizationRequest):
    vehicle_count: int = Field(..., description="Number of vehicles to split the stops across.")
    seed: Optional[int] = Field(default=None, description="Seed for the first cluster centroid.")


class CostRequest(_CamelModel):
    distance: float
    stop_count: int = 0
    options: Optional[OptimizationOptions] = None


class ClusterRequest(_CamelModel):
    stops: List[LocationModel]
    cluster_count: int
    depot: Optional[LocationModel] = None
    seed: Optional[int] = None


class OrderedStopModel(_CamelModel):
    id: str
    position: int
    distance_from_previous: float
    eta_minutes_from_previous: int
    arrival_minutes: int
    name: Optional[str] = None
    address: Optional[str] = None
    lat: float
    lng: float
    demand: Optional[float] = None


class SegmentModel(_CamelModel):
    from_id: str
    to_id: str
    distance: float
    minutes: int
    cumulative_distance: float
    cumulative_minutes: int


class MetricsModel(_CamelModel):
    total_distance: float
    fuel_volume: float
    fuel_cost: float
    drive_minutes: int
    stop_minutes: int
    total_minutes: int
    labor_cost: float
    total_cost: float
    stop_count: int
    total_time_formatted: str


class SavingsModel(_CamelModel):
    distance: float
    distance_percent: float
    fuel_cost: float
    time_minutes: int
    labor_cost: float
    total_cost: float


class ParametersModel(_CamelModel):
    fuel_price_per_unit: float
    vehicle_efficiency: float
    avg_speed: float
    stop_service_minutes: float
    driver_hourly_rate: float


class DepotModel(_CamelModel):
    id: str
    lat: float
    lng: float
    name: Optional[str] = None
    address: Optional[str] = None


class OptimizationResponse(_CamelModel):
    depot: DepotModel
    ordered_stops: List[OrderedStopModel]
    segments: List[SegmentModel]
    metrics: MetricsModel
    original_metrics: MetricsModel
    input_order_metrics: MetricsModel
    savings: SavingsModel
    route_order: List[str]
    iterations: int
    converged: bool
    total_demand: float
    parameters: ParametersModel
    algorithm: str


class EstimateResponse(_CamelModel):
    metrics: MetricsModel
    route_order: List[str]
    parameters: ParametersModel


class CostResponse(_CamelModel):
    metrics: MetricsModel
    parameters: ParametersModel


class FleetResponse(_CamelModel):
    routes: List[OptimizationResponse]
    clusters: List[List[str]]


class ClusterResponse(_CamelModel):
    clusters: List[List[str]]
    metadata: dict
