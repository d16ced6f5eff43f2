import csv
import io

from route_optimizer.services.outputs.routing_formatter import (
    metrics_to_json,
    optimization_result_to_csv,
    optimization_result_to_json,
)
from route_optimizer.services.routing.models import RouteMetrics
from route_optimizer.services.routing.service import optimize_route


def test_metrics_are_rounded_at_the_boundary():
    metrics = RouteMetrics(
        total_distance=12.3456,
        fuel_volume=1.54321,
        fuel_cost=5.40123,
        drive_minutes=21.16,
        stop_minutes=40.0,
        total_minutes=61.16,
        labor_cost=25.4833,
        total_cost=30.8845,
        stop_count=2,
    )

    payload = metrics_to_json(metrics)

    assert payload["total_distance"] == 12.35
    assert payload["fuel_volume"] == 1.54
    assert payload["fuel_cost"] == 5.40
    assert payload["drive_minutes"] == 21
    assert payload["total_minutes"] == 61
    assert payload["labor_cost"] == 25.48
    assert payload["total_time_formatted"] == "1h 1m"
    assert metrics.total_distance == 12.3456


def test_result_json_shape(hexagon_depot, hexagon_stops):
    payload = optimization_result_to_json(optimize_route(hexagon_depot, hexagon_stops))

    assert payload["depot"]["id"] == "DC"
    assert [stop["position"] for stop in payload["ordered_stops"]] == [1, 2, 3, 4, 5, 6]
    assert isinstance(payload["ordered_stops"][0]["eta_minutes_from_previous"], int)
    assert set(payload["savings"]) == {
        "distance",
        "distance_percent",
        "fuel_cost",
        "time_minutes",
        "labor_cost",
        "total_cost",
    }
    assert payload["parameters"]["avg_speed"] == 35
    assert payload["algorithm"] == "nearest_neighbor+2opt"


def test_result_csv(atlanta_depot, atlanta_stops):
    content = optimization_result_to_csv(optimize_route(atlanta_depot, atlanta_stops))

    rows = list(csv.DictReader(io.StringIO(content)))
    assert [row["stop_id"] for row in rows] == ["S2", "S1"]
    assert rows[0]["position"] == "1"
    assert rows[1]["demand"] == "500"
