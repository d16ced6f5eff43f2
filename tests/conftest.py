import pytest

from route_optimizer.models.domain import Location, LocationRole


def make_location(
    lid: str,
    lat: float | None,
    lng: float | None,
    *,
    demand: float | None = None,
    role: LocationRole = LocationRole.STOP,
) -> Location:
    return Location(
        location_id=lid,
        latitude=lat,
        longitude=lng,
        name=f"Stop {lid}",
        address=None,
        demand=demand,
        role=role,
    )


@pytest.fixture
def atlanta_depot() -> Location:
    return make_location("DC", 33.7490, -84.3880, role=LocationRole.DEPOT)


@pytest.fixture
def atlanta_stops() -> list[Location]:
    return [
        make_location("S1", 33.9526, -84.5499, demand=500),
        make_location("S2", 33.7748, -84.2963, demand=250),
    ]


@pytest.fixture
def hexagon_depot() -> Location:
    return make_location("DC", 0.0, 30.0, role=LocationRole.DEPOT)


@pytest.fixture
def hexagon_stops() -> list[Location]:
    """Six stops that form a convex polygon with the depot.

    Nearest neighbour visits t0, t1, b1, b2, t2, e and the return leg e -> depot
    crosses both t1-b1 and b2-t2.
    """
    return [
        make_location("e", 0.0, 30.9),
        make_location("b1", -0.10, 30.3),
        make_location("t0", 0.08, 30.1),
        make_location("t2", 0.12, 30.6),
        make_location("b2", -0.12, 30.6),
        make_location("t1", 0.10, 30.3),
    ]
