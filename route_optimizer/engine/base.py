"""
Shortest-path result type and the strategy contract.

Every strategy computes single-source shortest paths over an undirected
city graph and must return the same PathResult as every other strategy
for the same graph, start and end.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from route_optimizer.config import DISTANCE_TOLERANCE

if TYPE_CHECKING:
    from route_optimizer.graph.model import Graph

# Distance reported when no path exists
UNREACHABLE = math.inf


class StrategyKind(str, Enum):
    """Tag identifying one of the interchangeable strategy implementations."""

    DEFAULT = "default"
    ACCELERATED = "accelerated"


class StrategyError(RuntimeError):
    """A strategy could not be prepared or failed while computing."""


class InconsistentResultError(StrategyError):
    """A strategy produced a result that does not agree with the graph."""


@dataclass
class PathResult:
    """
    Outcome of a shortest-path query.

    Attributes:
        path: City ids from start to end inclusive (empty if unreachable)
        distance: Total weight along path, or UNREACHABLE
        all_distances: Shortest distance from start to every city
    """

    path: list[int] = field(default_factory=list)
    distance: float = UNREACHABLE
    all_distances: dict[int, float] = field(default_factory=dict)

    @property
    def reachable(self) -> bool:
        return bool(self.path) and math.isfinite(self.distance)

    @property
    def hops(self) -> int:
        """Number of connections traversed (0 when unreachable)."""
        return max(len(self.path) - 1, 0)

    def path_names(self, graph: Graph) -> list[str]:
        """City names along the path, falling back to the id for unknown cities."""
        names = []
        for city_id in self.path:
            city = graph.get_city(city_id)
            names.append(city.name if city else str(city_id))
        return names

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly form; unreachable distances become None."""

        def finite_or_none(value: float) -> float | None:
            return value if math.isfinite(value) else None

        return {
            "path": list(self.path),
            "distance": finite_or_none(self.distance),
            "all_distances": {
                str(city_id): finite_or_none(d) for city_id, d in self.all_distances.items()
            },
        }


def check_result_consistency(graph: Graph, result: PathResult) -> None:
    """
    Verify a result against the graph it was computed on.

    Checks that the path is a walk over existing connections with no
    repeated city, that its weight sum equals the reported distance, and
    that the end city's entry in all_distances matches.

    Raises:
        InconsistentResultError: If any check fails
    """
    if not result.path:
        if math.isfinite(result.distance):
            raise InconsistentResultError(
                f"Empty path reported with finite distance {result.distance}"
            )
        return

    if len(set(result.path)) != len(result.path):
        raise InconsistentResultError(f"Path revisits a city: {result.path}")

    total = 0.0
    for a, b in zip(result.path, result.path[1:]):
        conn = graph.get_connection(a, b)
        if conn is None:
            raise InconsistentResultError(f"Path uses missing connection {a}-{b}")
        total += conn.weight

    if not math.isclose(total, result.distance, rel_tol=0.0, abs_tol=DISTANCE_TOLERANCE):
        raise InconsistentResultError(
            f"Path weight {total} does not match reported distance {result.distance}"
        )

    end_id = result.path[-1]
    reported = result.all_distances.get(end_id, UNREACHABLE)
    if not math.isclose(reported, result.distance, rel_tol=0.0, abs_tol=DISTANCE_TOLERANCE):
        raise InconsistentResultError(
            f"all_distances[{end_id}]={reported} disagrees with distance {result.distance}"
        )


class PathStrategy(ABC):
    """
    Abstract base class for shortest-path strategies.

    Strategies are stateless with respect to the graph: each call gets
    a snapshot and must not modify it.
    """

    @property
    @abstractmethod
    def kind(self) -> StrategyKind:
        """Tag used by the selector to dispatch to this strategy."""
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description of the implementation."""
        ...

    @property
    def name(self) -> str:
        return self.kind.value

    @abstractmethod
    def compute(self, graph: Graph, start_id: int, end_id: int) -> PathResult:
        """
        Compute the shortest path from start_id to end_id.

        Unknown ids never raise: they give an empty path and UNREACHABLE.
        """
        ...

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
