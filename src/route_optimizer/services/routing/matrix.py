"""Pairwise distance matrix for a depot and its stops."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from ..geospatial import haversine_miles


def build_distance_matrix(
    points: Sequence[tuple[float, float]],
    *,
    radius: float | None = None,
) -> np.ndarray:
    """Return a read-only symmetric matrix of haversine miles.

    ``points`` are ``(lat, lng)`` pairs; by convention index 0 is the depot.
    Only the upper triangle is computed, the lower one is mirrored so the
    matrix is exactly symmetric.
    """

    n = len(points)
    matrix = np.zeros((n, n), dtype=float)
    for i in range(n):
        lat_i, lng_i = points[i]
        for j in range(i + 1, n):
            lat_j, lng_j = points[j]
            dist = haversine_miles(lat_i, lng_i, lat_j, lng_j, radius=radius)
            matrix[i, j] = dist
            matrix[j, i] = dist
    matrix.setflags(write=False)
    return matrix


def close_route(route: Sequence[int]) -> list[int]:
    """Append the starting index so the route ends where it began."""

    if not route:
        return []
    return [*route, route[0]]


def route_distance(route: Sequence[int], matrix: np.ndarray, *, closed: bool = True) -> float:
    """Sum of leg distances along ``route``; adds the leg back to ``route[0]`` when closed."""

    if len(route) < 2:
        return 0.0
    total = 0.0
    for from_idx, to_idx in zip(route, route[1:]):
        total += float(matrix[from_idx, to_idx])
    if closed:
        total += float(matrix[route[-1], route[0]])
    return total
