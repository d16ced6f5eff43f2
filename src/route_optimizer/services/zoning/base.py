"""Base classes for stop clustering implementations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from ...models.domain import Location


class ClusteringStrategy(ABC):
    """Contract for splitting a stop set across vehicles."""

    @abstractmethod
    def generate(
        self,
        *,
        stops: Sequence[Location],
        target_clusters: int,
        depot: Optional[Location] = None,
    ) -> "ClusterResult":
        raise NotImplementedError


class ClusterResult:
    """Container for resulting clusters of stop ids.

    ``members`` holds, per cluster, the positions of its stops in the sequence
    passed to ``generate``; ids are not required to be unique.
    """

    def __init__(
        self,
        clusters: list[list[str]],
        metadata: dict | None = None,
        members: list[list[int]] | None = None,
    ):
        self.clusters = clusters
        self.metadata = metadata or {}
        self.members = members if members is not None else [[] for _ in clusters]

    def counts(self) -> list[int]:
        return [len(cluster) for cluster in self.clusters]

    def assignments(self) -> dict[str, int]:
        return {stop_id: index for index, cluster in enumerate(self.clusters) for stop_id in cluster}

    def stops_for_cluster(self, index: int, stops: Sequence[Location]) -> list[Location]:
        return [stops[position] for position in self.members[index]]
