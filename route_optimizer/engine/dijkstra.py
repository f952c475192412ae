"""
Default strategy: Dijkstra's algorithm in plain Python.

Uses an O(V^2) scan for the next unvisited city, which is more than
fast enough for a canvas of at most ten cities.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from route_optimizer.engine.base import UNREACHABLE, PathResult, PathStrategy, StrategyKind

if TYPE_CHECKING:
    from route_optimizer.graph.model import Graph


def compute_shortest_path(graph: Graph, start_id: int, end_id: int) -> PathResult:
    """
    Find the shortest path between two cities.

    Connections are traversed in both directions with equal weight. When
    several unvisited cities share the minimum tentative distance, the
    first one in insertion order is taken.

    Returns:
        PathResult with an empty path and UNREACHABLE distance if end_id
        cannot be reached (or either id is unknown)
    """
    cities = graph.cities
    connections = graph.connections

    if not cities:
        return PathResult()

    dist: dict[int, float] = {city.id: UNREACHABLE for city in cities}
    previous: dict[int, int | None] = {city.id: None for city in cities}
    visited: set[int] = set()

    if start_id in dist:
        dist[start_id] = 0.0

    for _ in range(len(cities)):
        # Find unvisited city with minimum distance
        u = None
        min_dist = UNREACHABLE
        for city in cities:
            if city.id not in visited and dist[city.id] < min_dist:
                u = city.id
                min_dist = dist[city.id]

        if u is None:
            break
        visited.add(u)

        # Relax every connection touching u
        for conn in connections:
            if not conn.touches(u):
                continue
            v = conn.other_end(u)
            if v in visited or v not in dist:
                continue
            alt = dist[u] + conn.weight
            if alt < dist[v]:
                dist[v] = alt
                previous[v] = u

    if dist.get(end_id, UNREACHABLE) == UNREACHABLE:
        return PathResult(path=[], distance=UNREACHABLE, all_distances=dist)

    path = []
    current: int | None = end_id
    while current is not None:
        path.append(current)
        current = previous[current]
    path.reverse()

    return PathResult(path=path, distance=dist[end_id], all_distances=dist)


class DijkstraStrategy(PathStrategy):
    """Reference implementation; always available."""

    @property
    def kind(self) -> StrategyKind:
        return StrategyKind.DEFAULT

    @property
    def description(self) -> str:
        return "Pure Python Dijkstra (vertex scan)"

    def compute(self, graph: Graph, start_id: int, end_id: int) -> PathResult:
        return compute_shortest_path(graph, start_id, end_id)
