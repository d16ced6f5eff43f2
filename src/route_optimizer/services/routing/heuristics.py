"""Route construction and local search heuristics.

Both heuristics operate on location indices into a distance matrix whose
index 0 is the depot. Routes are handled in their open form
``[depot, stop, ..., stop]``; the leg back to the depot is added to the
objective by :func:`two_opt` when ``return_to_depot`` is set.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from ...config import settings
from ...exceptions import InvalidInputError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TwoOptOutcome:
    route: list[int]
    iterations: int
    converged: bool


def nearest_neighbor(matrix: np.ndarray, start: int = 0) -> list[int]:
    """Greedy construction: always move to the closest unvisited index.

    Ties go to the lowest index. Returns ``[]`` when the matrix holds the
    start location only.
    """

    n = len(matrix)
    if n <= 1:
        return []
    dist = matrix.tolist()
    visited = [False] * n
    visited[start] = True
    route = [start]
    current = start

    while len(route) < n:
        nearest = -1
        nearest_dist = float("inf")
        for candidate in range(n):
            if not visited[candidate] and dist[current][candidate] < nearest_dist:
                nearest = candidate
                nearest_dist = dist[current][candidate]
        visited[nearest] = True
        route.append(nearest)
        current = nearest

    return route


def _two_opt_delta(tour: list[int], dist: list[list[float]], i: int, j: int) -> float:
    a, b, c = tour[i - 1], tour[i], tour[j]
    if j + 1 < len(tour):
        d = tour[j + 1]
        return (dist[a][c] + dist[b][d]) - (dist[a][b] + dist[c][d])
    # open tail: no edge after position j
    return dist[a][c] - dist[a][b]


def two_opt(
    route: Sequence[int],
    matrix: np.ndarray,
    *,
    epsilon: float | None = None,
    max_iterations: int | None = None,
    return_to_depot: bool = True,
) -> TwoOptOutcome:
    """Improve ``route`` by reversing sub-routes until no move gains more than ``epsilon``.

    First-improvement policy: an improving reversal is applied as soon as it
    is found and the scan continues on the updated route. Passes repeat until
    one makes no move or ``max_iterations`` passes have run; in the latter
    case the best route so far is returned with ``converged=False``.
    Position 0 (the depot) is never moved.
    """

    epsilon = settings.two_opt_epsilon if epsilon is None else epsilon
    max_iterations = settings.two_opt_max_iterations if max_iterations is None else max_iterations
    if epsilon < 0:
        raise InvalidInputError("epsilon", f"must be >= 0, got {epsilon}")
    if max_iterations < 1:
        raise InvalidInputError("max_iterations", f"must be >= 1, got {max_iterations}")

    best = list(route)
    # Fewer than three stops leaves no reversal that can change a closed tour.
    if len(best) - 1 < 3:
        return TwoOptOutcome(route=best, iterations=0, converged=True)

    dist = matrix.tolist()
    tour = [*best, best[0]] if return_to_depot else best
    last = len(tour) - 2 if return_to_depot else len(tour) - 1

    iterations = 0
    improved = True
    while improved and iterations < max_iterations:
        improved = False
        iterations += 1
        for i in range(1, last):
            for j in range(i + 1, last + 1):
                if _two_opt_delta(tour, dist, i, j) < -epsilon:
                    tour[i : j + 1] = tour[i : j + 1][::-1]
                    improved = True

    converged = not improved
    if not converged:
        logger.warning(
            f"2-opt stopped at the iteration cap ({max_iterations}) before reaching a fixed point; "
            f"returning best route found for {len(best) - 1} stops"
        )

    if return_to_depot:
        tour = tour[:-1]
    return TwoOptOutcome(route=tour, iterations=iterations, converged=converged)
