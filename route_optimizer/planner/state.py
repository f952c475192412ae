"""
Planner state dataclass for the canvas session.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from route_optimizer.engine.base import PathResult
from route_optimizer.graph.model import Connection, Graph


@dataclass
class PlannerState:
    """
    Everything the canvas shows at a given moment.

    Attributes:
        graph: Current graph snapshot (replaced, never edited in place)
        start_id: Selected start city, if any
        end_id: Selected end city, if any
        result: Last computed route, cleared whenever the graph changes
        selected_connection: Connection picked for weight editing
    """

    graph: Graph = field(default_factory=Graph)
    start_id: int | None = None
    end_id: int | None = None
    result: PathResult | None = None
    selected_connection: Connection | None = None

    @property
    def has_endpoints(self) -> bool:
        """Whether both start and end are chosen."""
        return self.start_id is not None and self.end_id is not None

    @property
    def route_names(self) -> list[str]:
        """City names along the last route (empty if none)."""
        if self.result is None:
            return []
        return self.result.path_names(self.graph)

    def drop_missing_selections(self) -> None:
        """Clear start, end and selected connection if they no longer exist in the graph."""
        if self.start_id is not None and not self.graph.has_city(self.start_id):
            self.start_id = None
        if self.end_id is not None and not self.graph.has_city(self.end_id):
            self.end_id = None
        if self.selected_connection is not None:
            current = self.graph.get_connection(
                self.selected_connection.from_id, self.selected_connection.to_id
            )
            self.selected_connection = current
