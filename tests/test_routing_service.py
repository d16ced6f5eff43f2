import pytest

from route_optimizer.exceptions import InvalidInputError
from route_optimizer.models.domain import Location, LocationRole, TuningParameters
from route_optimizer.services.geospatial import haversine_miles
from route_optimizer.services.routing import service as routing_service
from route_optimizer.services.routing.service import estimate_route, optimize_fleet, optimize_route


def _stop(sid: str, lat, lon, demand: float | None = None) -> Location:
    return Location(location_id=sid, latitude=lat, longitude=lon, name=f"Stop {sid}", demand=demand)


def test_optimize_atlanta_route(atlanta_depot, atlanta_stops):
    result = optimize_route(atlanta_depot, atlanta_stops)

    depot = atlanta_depot.coordinate
    s1, s2 = (stop.coordinate for stop in atlanta_stops)
    tour = haversine_miles(*depot, *s1) + haversine_miles(*s1, *s2) + haversine_miles(*s2, *depot)

    assert {stop.location.location_id for stop in result.ordered_stops} == {"S1", "S2"}
    assert [stop.position for stop in result.ordered_stops] == [1, 2]
    assert result.metrics.total_distance <= tour + 1e-9
    assert result.metrics.total_distance == pytest.approx(tour)
    assert result.route_order[0] == result.route_order[-1] == "DC"
    assert result.total_demand == 750
    assert result.depot.role is LocationRole.DEPOT


def test_nearest_neighbor_visits_closer_stop_first(atlanta_depot, atlanta_stops):
    result = optimize_route(atlanta_depot, atlanta_stops)
    first = result.ordered_stops[0]
    assert first.location.location_id == "S2"
    assert 5.4 <= first.distance_from_previous <= 5.7


def test_two_stops_skip_improvement(atlanta_depot, atlanta_stops):
    result = optimize_route(atlanta_depot, atlanta_stops)
    assert result.iterations == 0
    assert result.converged
    assert result.savings.distance == 0.0
    assert result.metrics.total_distance == result.original_metrics.total_distance


def test_single_stop_at_depot_has_zero_distance(atlanta_depot):
    stop = _stop("S1", atlanta_depot.latitude, atlanta_depot.longitude)

    result = optimize_route(atlanta_depot, [stop])

    assert result.metrics.total_distance == 0.0
    assert result.metrics.fuel_cost == 0.0
    assert result.metrics.fuel_volume == 0.0
    assert result.metrics.stop_minutes == 20.0
    assert result.savings.distance == 0.0
    assert result.savings.distance_percent == 0.0
    assert len(result.ordered_stops) == 1
    assert result.ordered_stops[0].position == 1
    assert result.route_order == ["DC", "S1", "DC"]


def test_empty_stop_list_after_filtering_is_rejected(atlanta_depot):
    stops = [_stop("S1", None, -84.3), _stop("S2", 33.7, None), _stop("S3", 200.0, 10.0)]
    with pytest.raises(InvalidInputError) as excinfo:
        optimize_route(atlanta_depot, stops)
    assert excinfo.value.field == "stops"


def test_empty_stop_list_is_rejected(atlanta_depot):
    with pytest.raises(InvalidInputError):
        optimize_route(atlanta_depot, [])


@pytest.mark.parametrize(
    "depot",
    [
        None,
        Location(location_id="DC", latitude=None, longitude=-84.3),
        Location(location_id="DC", latitude=float("nan"), longitude=-84.3),
        Location(location_id="DC", latitude=33.7, longitude=-190.0),
    ],
)
def test_invalid_depot_is_rejected(depot, atlanta_stops):
    with pytest.raises(InvalidInputError) as excinfo:
        optimize_route(depot, atlanta_stops)
    assert excinfo.value.field == "depot"


def test_invalid_input_is_detected_before_matrix_construction(monkeypatch, atlanta_depot, atlanta_stops):
    def fail(*args, **kwargs):
        raise AssertionError("matrix should not be built")

    monkeypatch.setattr(routing_service, "build_distance_matrix", fail)
    with pytest.raises(InvalidInputError):
        optimize_route(atlanta_depot, atlanta_stops, TuningParameters(vehicle_efficiency=-1))
    with pytest.raises(InvalidInputError):
        optimize_route(atlanta_depot, atlanta_stops, max_iterations=0)


def test_invalid_stops_are_filtered(atlanta_depot, atlanta_stops):
    stops = [*atlanta_stops, _stop("BAD", None, None)]
    result = optimize_route(atlanta_depot, stops)
    assert [stop.location.location_id for stop in result.ordered_stops if stop.location.location_id == "BAD"] == []
    assert len(result.ordered_stops) == 2


def test_hexagon_route_is_uncrossed(hexagon_depot, hexagon_stops):
    result = optimize_route(hexagon_depot, hexagon_stops)

    order = [stop.location.location_id for stop in result.ordered_stops]
    assert order in (
        ["t0", "t1", "t2", "e", "b2", "b1"],
        ["b1", "b2", "e", "t2", "t1", "t0"],
    )
    assert result.metrics.total_distance < result.original_metrics.total_distance
    assert result.savings.distance > 0
    assert result.savings.distance_percent > 0
    assert result.savings.time_minutes > 0
    assert result.converged


def test_optimized_route_is_a_permutation(hexagon_depot, hexagon_stops):
    result = optimize_route(hexagon_depot, hexagon_stops)
    ids = [stop.location.location_id for stop in result.ordered_stops]
    assert sorted(ids) == sorted(stop.location_id for stop in hexagon_stops)
    assert result.route_order[1:-1] == ids


def test_reoptimizing_optimized_order_is_a_fixed_point(hexagon_depot, hexagon_stops):
    first = optimize_route(hexagon_depot, hexagon_stops)
    reordered = [stop.location for stop in first.ordered_stops]

    second = optimize_route(hexagon_depot, reordered)

    assert second.metrics.total_distance == pytest.approx(first.metrics.total_distance)
    assert second.input_order_metrics.total_distance == pytest.approx(first.metrics.total_distance)
    assert [stop.location.location_id for stop in second.ordered_stops] == [
        stop.location.location_id for stop in first.ordered_stops
    ]


def test_repeated_calls_are_identical(hexagon_depot, hexagon_stops):
    first = optimize_route(hexagon_depot, hexagon_stops)
    second = optimize_route(hexagon_depot, hexagon_stops)
    assert first.route_order == second.route_order
    assert first.metrics == second.metrics


def test_segments_cover_closed_tour(hexagon_depot, hexagon_stops):
    result = optimize_route(hexagon_depot, hexagon_stops)

    assert len(result.segments) == len(hexagon_stops) + 1
    assert result.segments[0].from_id == "DC"
    assert result.segments[-1].to_id == "DC"
    assert result.segments[-1].cumulative_distance == pytest.approx(result.metrics.total_distance)
    assert result.segments[-1].cumulative_minutes == pytest.approx(result.metrics.total_minutes)
    first_stop = result.ordered_stops[0]
    assert first_stop.arrival_minutes == pytest.approx(first_stop.eta_minutes_from_previous)
    second_stop = result.ordered_stops[1]
    assert second_stop.arrival_minutes == pytest.approx(
        first_stop.arrival_minutes + 20 + second_stop.eta_minutes_from_previous
    )


def test_custom_parameters_flow_into_metrics(atlanta_depot, atlanta_stops):
    params = TuningParameters(
        fuel_price_per_unit=4.0,
        vehicle_efficiency=10.0,
        avg_speed=30.0,
        stop_service_minutes=15.0,
        driver_hourly_rate=30.0,
    )
    result = optimize_route(atlanta_depot, atlanta_stops, params)

    distance = result.metrics.total_distance
    assert result.metrics.fuel_cost == pytest.approx(distance / 10.0 * 4.0)
    assert result.metrics.stop_minutes == pytest.approx(30.0)
    assert result.parameters == params


def test_estimate_route(hexagon_depot, hexagon_stops):
    estimate = estimate_route(hexagon_depot, hexagon_stops)
    result = optimize_route(hexagon_depot, hexagon_stops)
    assert estimate.metrics == result.metrics
    assert estimate.route_order == result.route_order


def test_optimize_fleet_splits_far_groups():
    depot = _stop("DC", 36.16, -86.78)
    atlanta = [_stop("A1", 33.75, -84.39), _stop("A2", 33.80, -84.35), _stop("A3", 33.70, -84.42)]
    chicago = [_stop("C1", 41.88, -87.63), _stop("C2", 41.90, -87.70)]

    clusters, results = optimize_fleet(depot, [*atlanta, *chicago], 2)

    assert len(results) == len(clusters) == 2
    routed = sorted(stop.location.location_id for result in results for stop in result.ordered_stops)
    assert routed == ["A1", "A2", "A3", "C1", "C2"]
    for result in results:
        ids = {stop.location.location_id for stop in result.ordered_stops}
        assert ids <= {"A1", "A2", "A3"} or ids <= {"C1", "C2"}


def test_optimize_fleet_rejects_zero_vehicles(atlanta_depot, atlanta_stops):
    with pytest.raises(InvalidInputError):
        optimize_fleet(atlanta_depot, atlanta_stops, 0)


def test_optimize_fleet_routes_stops_sharing_an_id_once():
    depot = _stop("DC", 36.16, -86.78)
    stops = [_stop("X", 33.75, -84.39), _stop("X", 41.88, -87.63)]

    clusters, results = optimize_fleet(depot, stops, 2)

    assert clusters == [["X"], ["X"]]
    routed = sorted(stop.location.latitude for result in results for stop in result.ordered_stops)
    assert routed == [33.75, 41.88]
