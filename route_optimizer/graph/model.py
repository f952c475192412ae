"""
City graph data structure.

Cities are kept in insertion order (the order they were placed on the
canvas); connections are undirected and unique per unordered pair.

A published Graph is treated as a snapshot: callers that want to change
it take a copy(), mutate the copy and publish the new instance, so a
route computation never sees a half-applied edit.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from route_optimizer.config import MAX_CITIES

logger = logging.getLogger(__name__)


def is_valid_weight(weight: Any) -> bool:
    """Whether weight is a finite number greater than zero (bools excluded)."""
    if isinstance(weight, bool) or not isinstance(weight, (int, float)):
        return False
    return math.isfinite(weight) and weight > 0


@dataclass(frozen=True)
class City:
    """
    A point on the canvas.

    Attributes:
        id: Unique identifier, increasing in creation order
        name: Short label (A, B, ..., Z, AA, ...)
        x: Canvas x coordinate
        y: Canvas y coordinate
    """

    id: int
    name: str
    x: float
    y: float

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "x": self.x, "y": self.y}


@dataclass(frozen=True)
class Connection:
    """
    Weighted undirected link between two cities.

    The stored direction is only the order the user drew it in.
    """

    from_id: int
    to_id: int
    weight: float

    def joins(self, a: int, b: int) -> bool:
        """Whether this connection links a and b, in either direction."""
        return (self.from_id == a and self.to_id == b) or (
            self.from_id == b and self.to_id == a
        )

    def touches(self, city_id: int) -> bool:
        return self.from_id == city_id or self.to_id == city_id

    def other_end(self, city_id: int) -> int:
        return self.to_id if self.from_id == city_id else self.from_id

    def to_dict(self) -> dict[str, Any]:
        return {"from": self.from_id, "to": self.to_id, "weight": self.weight}


def city_name(index: int) -> str:
    """
    Label for the city created when the graph holds `index` cities.

    Bijective base-26: 0 -> A, 25 -> Z, 26 -> AA, 701 -> ZZ, 702 -> AAA.
    """
    if index < 0:
        raise ValueError(f"City index must be non-negative, got {index}")

    letters = []
    n = index + 1
    while n > 0:
        n, remainder = divmod(n - 1, 26)
        letters.append(chr(ord("A") + remainder))
    return "".join(reversed(letters))


class Graph:
    """
    Cities and the connections between them.

    Mutating methods never raise for structural problems: a request that
    would break an invariant (11th city, self-loop, duplicate pair,
    unknown endpoint, non-positive weight) returns None or False and
    leaves the graph unchanged.
    """

    def __init__(self, max_cities: int = MAX_CITIES) -> None:
        self._max_cities = max_cities
        self._cities: list[City] = []
        self._connections: list[Connection] = []
        self._next_id = 1

    # =========================================================================
    # Accessors
    # =========================================================================

    @property
    def cities(self) -> list[City]:
        """Cities in insertion order (a fresh list)."""
        return list(self._cities)

    @property
    def connections(self) -> list[Connection]:
        """Connections in creation order (a fresh list)."""
        return list(self._connections)

    @property
    def max_cities(self) -> int:
        return self._max_cities

    def get_cities(self) -> list[City]:
        return self.cities

    def get_connections(self) -> list[Connection]:
        return self.connections

    def get_city(self, city_id: int) -> City | None:
        """Get a city by id, or None if not found."""
        for city in self._cities:
            if city.id == city_id:
                return city
        return None

    def has_city(self, city_id: int) -> bool:
        return self.get_city(city_id) is not None

    def get_connection(self, a: int, b: int) -> Connection | None:
        """Get the connection between a and b regardless of stored direction."""
        for conn in self._connections:
            if conn.joins(a, b):
                return conn
        return None

    def neighbors(self, city_id: int) -> Iterator[tuple[int, float]]:
        """Yield (neighbor_id, weight) for every connection touching city_id."""
        for conn in self._connections:
            if conn.touches(city_id):
                yield conn.other_end(city_id), conn.weight

    def is_full(self) -> bool:
        return len(self._cities) >= self._max_cities

    def __len__(self) -> int:
        return len(self._cities)

    def __repr__(self) -> str:
        return (
            f"Graph(cities={len(self._cities)}, "
            f"connections={len(self._connections)})"
        )

    # =========================================================================
    # Mutations
    # =========================================================================

    def add_city(self, x: float, y: float) -> City | None:
        """
        Add a new city at (x, y).

        Returns:
            The created city, or None if the graph is already full
        """
        if self.is_full():
            logger.debug(f"Rejected city at ({x}, {y}): limit of {self._max_cities} reached")
            return None

        city = City(id=self._next_id, name=city_name(len(self._cities)), x=x, y=y)
        self._next_id += 1
        self._cities.append(city)
        return city

    def remove_city(self, city_id: int) -> None:
        """Remove a city and every connection touching it. Unknown ids are ignored."""
        self._cities = [c for c in self._cities if c.id != city_id]
        self._connections = [c for c in self._connections if not c.touches(city_id)]

    def add_connection(self, from_id: int, to_id: int, weight: float) -> Connection | None:
        """
        Connect two cities.

        Returns:
            The created connection, or None if it would be a self-loop,
            reference an unknown city, duplicate an existing pair, or
            carry a weight that is not a finite positive number
        """
        if from_id == to_id:
            return None
        if not self.has_city(from_id) or not self.has_city(to_id):
            return None
        if self.get_connection(from_id, to_id) is not None:
            return None
        if not is_valid_weight(weight):
            return None

        connection = Connection(from_id=from_id, to_id=to_id, weight=weight)
        self._connections.append(connection)
        return connection

    def update_connection_weight(self, from_id: int, to_id: int, weight: float) -> bool:
        """
        Replace the weight of the connection between two cities.

        Returns:
            True if a connection was updated
        """
        if not is_valid_weight(weight):
            return False

        for i, conn in enumerate(self._connections):
            if conn.joins(from_id, to_id):
                self._connections[i] = Connection(conn.from_id, conn.to_id, weight)
                return True
        return False

    def copy(self) -> Graph:
        """Independent copy; cities and connections are immutable so a shallow copy suffices."""
        clone = Graph(max_cities=self._max_cities)
        clone._cities = list(self._cities)
        clone._connections = list(self._connections)
        clone._next_id = self._next_id
        return clone

    # =========================================================================
    # Serialization
    # =========================================================================

    def serialize(self) -> dict[str, list[dict[str, Any]]]:
        """Plain-dict form for persistence."""
        return {
            "nodes": [city.to_dict() for city in self._cities],
            "edges": [conn.to_dict() for conn in self._connections],
        }

    @classmethod
    def deserialize(cls, data: dict[str, Any], max_cities: int = MAX_CITIES) -> Graph:
        """
        Rebuild a graph from serialize() output.

        Missing keys default to empty lists. Invariants are not checked
        here; validate untrusted input with storage.is_valid_state first.
        """
        graph = cls(max_cities=max_cities)
        graph._cities = [
            City(id=node["id"], name=node["name"], x=node["x"], y=node["y"])
            for node in data.get("nodes") or []
        ]
        graph._connections = [
            Connection(from_id=edge["from"], to_id=edge["to"], weight=edge["weight"])
            for edge in data.get("edges") or []
        ]
        graph._next_id = max((c.id for c in graph._cities), default=0) + 1
        return graph

    @classmethod
    def restore(cls, data: dict[str, Any], max_cities: int = MAX_CITIES) -> Graph:
        """
        Rebuild a graph from saved data, enforcing every graph invariant.

        Unlike deserialize(), entries that would break an invariant are
        dropped with a warning: repeated city ids, cities past max_cities,
        self-loops, unknown endpoints, duplicate pairs and weights that are
        not finite positive numbers. Expects input that passed
        storage.is_valid_state.
        """
        graph = cls(max_cities=max_cities)

        seen: set[int] = set()
        for node in data.get("nodes") or []:
            if node["id"] in seen:
                logger.warning(f"Dropped city with repeated id {node['id']}")
                continue
            if graph.is_full():
                logger.warning(f"Dropped city {node['id']}: limit of {max_cities} reached")
                continue
            seen.add(node["id"])
            graph._cities.append(City(id=node["id"], name=node["name"], x=node["x"], y=node["y"]))
        graph._next_id = max(seen, default=0) + 1

        for edge in data.get("edges") or []:
            if graph.add_connection(edge["from"], edge["to"], edge["weight"]) is None:
                logger.warning(
                    f"Dropped connection {edge['from']}-{edge['to']} (weight {edge['weight']})"
                )

        return graph
