"""Domain models for depot and stop records."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..config import settings
from ..exceptions import InvalidInputError


class LocationRole(str, Enum):
    DEPOT = "depot"
    STOP = "stop"


@dataclass(slots=True)
class Location:
    """A depot or delivery stop. Coordinates may be missing on input."""

    location_id: str
    latitude: Optional[float]
    longitude: Optional[float]
    name: Optional[str] = None
    address: Optional[str] = None
    demand: Optional[float] = None
    role: LocationRole = LocationRole.STOP

    @property
    def coordinate(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)


def _default(name: str) -> float:
    return getattr(settings, name)


@dataclass(slots=True, frozen=True)
class TuningParameters:
    """Cost model inputs. Defaults follow the configured settings."""

    fuel_price_per_unit: float = field(default_factory=lambda: _default("fuel_price_per_unit"))
    vehicle_efficiency: float = field(default_factory=lambda: _default("vehicle_efficiency"))
    avg_speed: float = field(default_factory=lambda: _default("avg_speed"))
    stop_service_minutes: float = field(default_factory=lambda: _default("stop_service_minutes"))
    driver_hourly_rate: float = field(default_factory=lambda: _default("driver_hourly_rate"))

    def validate(self) -> None:
        for name in (
            "fuel_price_per_unit",
            "vehicle_efficiency",
            "avg_speed",
            "stop_service_minutes",
            "driver_hourly_rate",
        ):
            value = getattr(self, name)
            if value is None or not value > 0:
                raise InvalidInputError(name, f"must be a positive number, got {value!r}")
