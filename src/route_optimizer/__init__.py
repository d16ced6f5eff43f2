"""Depot route optimization: nearest neighbour construction, 2-opt improvement and cost estimates."""

from .exceptions import InvalidInputError
from .models.domain import Location, LocationRole, TuningParameters
from .services.routing.service import estimate_route, optimize_fleet, optimize_route
from .services.zoning.clustering import cluster_stops

__all__ = [
    "InvalidInputError",
    "Location",
    "LocationRole",
    "TuningParameters",
    "cluster_stops",
    "estimate_route",
    "optimize_fleet",
    "optimize_route",
]
