"""
Planner module.

Provides the canvas session that owns the graph:
- PlannerState: Graph snapshot, start/end selection and last route
- RoutePlanner: Editing, route calculation and persistence
"""

from route_optimizer.planner.planner import RoutePlanner
from route_optimizer.planner.state import PlannerState

__all__ = [
    "PlannerState",
    "RoutePlanner",
]
