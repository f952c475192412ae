"""
Random graph generation for demos, benchmarks and property tests.
"""

from __future__ import annotations

import logging
import random

from route_optimizer.config import CANVAS_HEIGHT, MAX_CANVAS_WIDTH, MAX_CITIES
from route_optimizer.graph.model import Graph
from route_optimizer.graph.weights import connection_weight

logger = logging.getLogger(__name__)


def random_graph(
    rng: random.Random,
    num_cities: int | None = None,
    edge_probability: float = 0.4,
    width: float = MAX_CANVAS_WIDTH,
    height: float = CANVAS_HEIGHT,
    max_weight: int | None = None,
) -> Graph:
    """
    Build a random city graph.

    Args:
        rng: Random source (seed it for reproducibility)
        num_cities: Number of cities; random in [0, MAX_CITIES] if omitted,
            clamped to MAX_CITIES otherwise
        edge_probability: Chance that each unordered pair is connected
        width: Canvas width cities are placed in
        height: Canvas height cities are placed in
        max_weight: If set, weights are random integers in [1, max_weight]
            instead of being derived from city distance
    """
    if num_cities is None:
        num_cities = rng.randint(0, MAX_CITIES)
    elif num_cities > MAX_CITIES:
        logger.warning(f"Requested {num_cities} cities, clamping to {MAX_CITIES}")
        num_cities = MAX_CITIES

    graph = Graph()
    for _ in range(num_cities):
        graph.add_city(rng.uniform(0, width), rng.uniform(0, height))

    cities = graph.cities
    for i, a in enumerate(cities):
        for b in cities[i + 1 :]:
            if rng.random() >= edge_probability:
                continue
            weight = rng.randint(1, max_weight) if max_weight else connection_weight(a, b)
            graph.add_connection(a.id, b.id, weight)

    return graph


def sample_graph() -> Graph:
    """
    Three-city example where the detour beats the direct connection.

    A(0,0) -5- B(100,0) -3- C(100,100), plus A -20- C.
    """
    graph = Graph()
    a = graph.add_city(0, 0)
    b = graph.add_city(100, 0)
    c = graph.add_city(100, 100)
    graph.add_connection(a.id, b.id, 5)
    graph.add_connection(b.id, c.id, 3)
    graph.add_connection(a.id, c.id, 20)
    return graph
