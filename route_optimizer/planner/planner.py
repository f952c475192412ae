"""
Route planner: the caller that owns the graph.

Turns canvas gestures into graph rebuilds, keeps the start/end
selection consistent, asks the strategy selector for routes, and saves
the result after every change.
"""

from __future__ import annotations

import logging
import random
from typing import Any

from route_optimizer.config import DEFAULT_IMPLEMENTATION_MODE
from route_optimizer.engine.base import PathResult
from route_optimizer.engine.selector import ImplementationMode, StrategySelector
from route_optimizer.geometry.hit_testing import city_at_position, connection_at_position
from route_optimizer.graph.model import City, Connection, Graph
from route_optimizer.graph.weights import connection_weight
from route_optimizer.planner.state import PlannerState
from route_optimizer.storage.backends import MemoryStore
from route_optimizer.storage.state import StateStore, create_state_object, is_valid_state

logger = logging.getLogger(__name__)


class RoutePlanner:
    """
    Canvas session: graph editing, route selection and persistence.

    Every edit copies the current graph, applies the change to the copy
    and publishes the copy only if the change was accepted. A rejected
    edit leaves state untouched and returns None/False.
    """

    def __init__(
        self,
        state_store: StateStore | None = None,
        selector: StrategySelector | None = None,
        autosave: bool = True,
    ) -> None:
        """
        Initialize the planner.

        Args:
            state_store: Where state is saved (in-memory if omitted)
            selector: Strategy selector for route queries (a new one in
                the ROUTE_OPTIMIZER_MODE mode if omitted)
            autosave: Persist after every accepted change
        """
        self._store = state_store or StateStore(MemoryStore())
        self._autosave = autosave
        self.state = PlannerState()

        if selector is None:
            selector = StrategySelector()
            try:
                selector.set_mode(DEFAULT_IMPLEMENTATION_MODE)
            except ValueError as e:
                logger.warning(f"{e}; keeping '{selector.mode.value}'")
        self._selector = selector

    @property
    def graph(self) -> Graph:
        return self.state.graph

    @property
    def selector(self) -> StrategySelector:
        return self._selector

    async def initialize(self) -> bool:
        """Prepare the accelerated strategy. Safe to call more than once."""
        return await self._selector.initialize()

    # =========================================================================
    # Persistence
    # =========================================================================

    def load(self) -> bool:
        """
        Restore the saved graph, route selection and implementation mode.

        Invalid or unreadable state is ignored.

        Returns:
            True if a graph was restored
        """
        saved_mode = self._store.load_mode()
        if saved_mode is not None:
            try:
                self._selector.set_mode(saved_mode)
            except ValueError as e:
                logger.warning(f"Ignoring saved mode: {e}")

        saved = self._store.load_state()
        if saved is None:
            return False
        if not is_valid_state(saved):
            logger.warning("Saved state failed validation, starting with an empty canvas")
            return False

        graph = Graph.restore(saved)
        self.state = PlannerState(
            graph=graph,
            start_id=saved.get("startId"),
            end_id=saved.get("endId"),
        )
        self.state.drop_missing_selections()
        logger.info(f"Restored {len(graph)} cities and {len(graph.connections)} connections")
        return True

    def persist(self) -> bool:
        """Save the current graph and route selection."""
        state = create_state_object(self.state.graph, self.state.start_id, self.state.end_id)
        return self._store.save_state(state)

    def _publish(self, graph: Graph) -> None:
        """Swap in a rebuilt graph and fix up everything that depended on the old one."""
        self.state.graph = graph
        self.state.result = None
        self.state.drop_missing_selections()
        if self._autosave:
            self.persist()

    # =========================================================================
    # Graph editing
    # =========================================================================

    def add_city_at(self, x: float, y: float) -> City | None:
        """
        Place a city at (x, y).

        Returns:
            The new city, or None if the canvas is full or the point
            is on an existing city
        """
        if city_at_position(self.state.graph, x, y) is not None:
            return None

        graph = self.state.graph.copy()
        city = graph.add_city(x, y)
        if city is None:
            logger.info(f"Canvas is full ({graph.max_cities} cities)")
            return None

        self._publish(graph)
        return city

    def remove_city(self, city_id: int) -> bool:
        """Remove a city and its connections. Returns False for unknown ids."""
        if not self.state.graph.has_city(city_id):
            return False

        graph = self.state.graph.copy()
        graph.remove_city(city_id)
        self._publish(graph)
        return True

    def remove_city_at(self, x: float, y: float) -> City | None:
        """Remove the city under (x, y), as a right-click or long press does."""
        city = city_at_position(self.state.graph, x, y)
        if city is None:
            return None
        self.remove_city(city.id)
        return city

    def connect(self, from_id: int, to_id: int, weight: float | None = None) -> Connection | None:
        """
        Connect two cities.

        Args:
            weight: Connection weight; derived from the distance between
                the cities when omitted

        Returns:
            The new connection, or None if the graph rejected it
        """
        graph = self.state.graph.copy()

        if weight is None:
            from_city = graph.get_city(from_id)
            to_city = graph.get_city(to_id)
            if from_city is None or to_city is None:
                return None
            weight = connection_weight(from_city, to_city)

        connection = graph.add_connection(from_id, to_id, weight)
        if connection is None:
            return None

        self._publish(graph)
        return connection

    def connect_at(self, from_id: int, x: float, y: float) -> Connection | None:
        """Finish a drag that started on from_id at canvas point (x, y)."""
        target = city_at_position(self.state.graph, x, y)
        if target is None or target.id == from_id:
            return None
        return self.connect(from_id, target.id)

    def select_connection_at(self, x: float, y: float) -> Connection | None:
        """Pick the connection whose midpoint is near (x, y) for weight editing."""
        connection = connection_at_position(self.state.graph, x, y)
        self.state.selected_connection = connection
        return connection

    def update_connection_weight(self, from_id: int, to_id: int, weight: float) -> bool:
        """Change a connection's weight. Returns False if absent or weight is not positive."""
        graph = self.state.graph.copy()
        if not graph.update_connection_weight(from_id, to_id, weight):
            return False

        self._publish(graph)
        return True

    def auto_connect(self, rng: random.Random | None = None) -> int:
        """
        Add random connections between existing cities.

        Draws between n and n + min(2n, n(n-1)/2) - 1 random pairs;
        self-pairs and duplicates are skipped.

        Returns:
            Number of connections actually added
        """
        rng = rng or random.Random()
        graph = self.state.graph.copy()
        cities = graph.cities
        n = len(cities)
        if n < 2:
            logger.info("Need at least 2 cities to create connections")
            return 0

        max_connections = min(n * 2, n * (n - 1) // 2)
        attempts = rng.randrange(max_connections) + n

        added = 0
        for _ in range(attempts):
            a = rng.choice(cities)
            b = rng.choice(cities)
            if a.id == b.id:
                continue
            if graph.add_connection(a.id, b.id, connection_weight(a, b)) is not None:
                added += 1

        if added:
            self._publish(graph)
        logger.info(f"Auto-connect added {added} connections")
        return added

    def reset(self) -> None:
        """Clear the canvas and forget the saved state."""
        self.state = PlannerState()
        self._store.clear_state()

    # =========================================================================
    # Route selection
    # =========================================================================

    def set_start(self, city_id: int | None) -> bool:
        return self._set_endpoint("start_id", city_id)

    def set_end(self, city_id: int | None) -> bool:
        return self._set_endpoint("end_id", city_id)

    def _set_endpoint(self, attr: str, city_id: int | None) -> bool:
        if city_id is not None and not self.state.graph.has_city(city_id):
            return False
        setattr(self.state, attr, city_id)
        self.state.result = None
        if self._autosave:
            self.persist()
        return True

    def calculate_route(self) -> PathResult | None:
        """
        Shortest route between the selected start and end.

        Returns:
            PathResult (possibly unreachable), or None if start or end
            is not selected
        """
        if not self.state.has_endpoints:
            return None

        result = self._selector.find_shortest_path(
            self.state.graph, self.state.start_id, self.state.end_id
        )
        self.state.result = result

        if result.reachable:
            logger.info(
                f"Route {' -> '.join(self.state.route_names)} "
                f"(distance {result.distance:g}, via {self._selector.state.last_implementation.value})"
            )
        else:
            logger.info("No route between the selected cities")
        return result

    # =========================================================================
    # Implementation mode
    # =========================================================================

    def set_mode(self, mode: str | ImplementationMode) -> None:
        """
        Switch implementation mode and remember the choice.

        Raises:
            ValueError: If the mode name is unknown
        """
        self._selector.set_mode(mode)
        self._store.save_mode(self._selector.mode.value)

    def implementation_info(self) -> dict[str, Any]:
        return self._selector.implementation_info()
