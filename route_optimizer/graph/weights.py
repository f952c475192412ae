"""
Default connection weights derived from canvas geometry.
"""

from __future__ import annotations

import math

from route_optimizer.config import MIN_CONNECTION_WEIGHT, WEIGHT_SCALE
from route_optimizer.graph.model import City


def default_weight(a: City, b: City, scale: float = WEIGHT_SCALE) -> int:
    """
    Euclidean distance between two cities divided by `scale`, rounded half up.

    Coincident or very close cities give 0, which is not a valid
    connection weight; use connection_weight() when creating an edge.
    """
    pixel_distance = math.hypot(b.x - a.x, b.y - a.y)
    return math.floor(pixel_distance / scale + 0.5)


def connection_weight(a: City, b: City) -> int:
    """default_weight() clamped so the result can be used as a connection weight."""
    return max(default_weight(a, b), MIN_CONNECTION_WEIGHT)
