"""Application configuration and settings management."""

from typing import Any

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="ROUTE_OPT_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Delivery Route Optimizer API"
    api_prefix: str = "/api"
    log_level: str = Field(default="INFO", description="Root log level applied by create_app().")
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Geodesy and local search tunables
    earth_radius_miles: float = Field(
        default=3958.8,
        gt=0.0,
        description="Sphere radius used by the haversine distance (3959 is an accepted alternative).",
    )
    two_opt_epsilon: float = Field(
        default=0.001,
        ge=0.0,
        description="Minimum distance gain (miles) for a 2-opt move to be accepted.",
    )
    two_opt_max_iterations: int = Field(
        default=1000,
        ge=1,
        description="Safety cap on full 2-opt passes.",
    )

    # Cost model defaults
    fuel_price_per_unit: float = Field(default=3.50, gt=0.0)
    vehicle_efficiency: float = Field(default=8.0, gt=0.0, description="Miles per fuel unit.")
    avg_speed: float = Field(default=35.0, gt=0.0, description="Average travel speed in mph.")
    stop_service_minutes: float = Field(default=20.0, gt=0.0)
    driver_hourly_rate: float = Field(default=25.0, gt=0.0)

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            # Try JSON first
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()
