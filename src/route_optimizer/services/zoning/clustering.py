"""Geographic clustering of stops for multi-vehicle splitting."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np

from ...exceptions import InvalidInputError
from ...models.domain import Location
from ..geospatial import haversine_miles, is_valid_coordinate
from .base import ClusteringStrategy, ClusterResult

logger = logging.getLogger(__name__)


class FarthestPointClustering(ClusteringStrategy):
    """Farthest-point seeding followed by a single nearest-centroid assignment.

    Features:
    - Deterministic first seed (lowest index, or farthest from the depot when one is given)
    - Optional ``random_state`` to draw the first seed from a seeded generator
    - No centroid re-centering; clusters that end up empty are dropped
    """

    def __init__(self, *, random_state: int | None = None) -> None:
        self.random_state = random_state

    def _first_seed(self, stops: Sequence[Location], depot: Optional[Location]) -> int:
        if self.random_state is not None:
            rng = np.random.default_rng(self.random_state)
            return int(rng.integers(len(stops)))
        if depot is not None and is_valid_coordinate(depot.latitude, depot.longitude):
            farthest = 0
            farthest_dist = -1.0
            for index, stop in enumerate(stops):
                dist = haversine_miles(depot.latitude, depot.longitude, stop.latitude, stop.longitude)
                if dist > farthest_dist:
                    farthest = index
                    farthest_dist = dist
            return farthest
        return 0

    def _seed_centroids(
        self, stops: Sequence[Location], target_clusters: int, depot: Optional[Location]
    ) -> list[int]:
        centroids = [self._first_seed(stops, depot)]
        # Running minimum distance from each stop to the chosen centroids.
        min_dist = [
            haversine_miles(stop.latitude, stop.longitude, stops[centroids[0]].latitude, stops[centroids[0]].longitude)
            for stop in stops
        ]
        chosen = set(centroids)

        while len(centroids) < target_clusters:
            farthest = -1
            farthest_dist = -1.0
            for index, dist in enumerate(min_dist):
                if index not in chosen and dist > farthest_dist:
                    farthest = index
                    farthest_dist = dist
            centroids.append(farthest)
            chosen.add(farthest)
            seed = stops[farthest]
            for index, stop in enumerate(stops):
                dist = haversine_miles(stop.latitude, stop.longitude, seed.latitude, seed.longitude)
                if dist < min_dist[index]:
                    min_dist[index] = dist

        return centroids

    def generate(
        self,
        *,
        stops: Sequence[Location],
        target_clusters: int,
        depot: Optional[Location] = None,
    ) -> ClusterResult:
        if target_clusters < 1:
            raise InvalidInputError("target_clusters", f"must be >= 1, got {target_clusters}")

        positions = [
            position for position, stop in enumerate(stops) if is_valid_coordinate(stop.latitude, stop.longitude)
        ]
        valid_stops = [stops[position] for position in positions]
        dropped = len(stops) - len(valid_stops)
        if dropped:
            logger.warning(f"Dropped {dropped} stops without valid coordinates before clustering")

        if not valid_stops:
            return ClusterResult([], metadata={"strategy": "farthest_point", "error": "No stops provided"})

        if len(valid_stops) <= target_clusters:
            clusters = [[stop.location_id] for stop in valid_stops]
            return ClusterResult(
                clusters,
                metadata={
                    "strategy": "farthest_point",
                    "centroids": [stop.location_id for stop in valid_stops],
                    "counts": [1] * len(clusters),
                    "dropped_stops": dropped,
                },
                members=[[position] for position in positions],
            )

        centroids = self._seed_centroids(valid_stops, target_clusters, depot)

        groups: list[list[int]] = [[] for _ in centroids]
        for position, stop in zip(positions, valid_stops):
            nearest = 0
            nearest_dist = float("inf")
            for position, centroid_index in enumerate(centroids):
                seed = valid_stops[centroid_index]
                dist = haversine_miles(stop.latitude, stop.longitude, seed.latitude, seed.longitude)
                if dist < nearest_dist:
                    nearest = position
                    nearest_dist = dist
            groups[nearest].append(position)

        members = [group for group in groups if group]
        clusters = [[stops[position].location_id for position in group] for group in members]
        if len(clusters) < len(groups):
            logger.info(
                f"Requested {target_clusters} clusters but only {len(clusters)} are non-empty "
                f"(stops share coordinates)"
            )

        metadata = {
            "strategy": "farthest_point",
            "centroids": [valid_stops[index].location_id for index in centroids],
            "counts": [len(cluster) for cluster in clusters],
            "dropped_stops": dropped,
            "random_state": self.random_state,
        }
        return ClusterResult(clusters, metadata=metadata, members=members)


def cluster_stops(
    stops: Sequence[Location],
    target_clusters: int,
    *,
    depot: Optional[Location] = None,
    random_state: int | None = None,
) -> list[list[str]]:
    """Partition stops into at most ``target_clusters`` groups of stop ids."""

    strategy = FarthestPointClustering(random_state=random_state)
    return strategy.generate(stops=stops, target_clusters=target_clusters, depot=depot).clusters
