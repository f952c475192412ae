"""
Implementation selection between the default and accelerated strategies.

StrategySelector is the single entry point for route queries. It holds
a caller-owned SelectionState (no module-level flags), prepares the
accelerated strategy once, and falls back to the default strategy
whenever the accelerated one is unavailable or fails.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from route_optimizer.engine.base import PathResult, PathStrategy, StrategyError, StrategyKind
from route_optimizer.engine.dijkstra import DijkstraStrategy

if TYPE_CHECKING:
    from route_optimizer.graph.model import Graph

logger = logging.getLogger(__name__)


class ImplementationMode(str, Enum):
    """
    How the selector picks a strategy.

    AUTO: accelerated if ready, else default
    ACCELERATED: forced accelerated; silently default if not ready
    DEFAULT: always default
    """

    AUTO = "auto"
    ACCELERATED = "accelerated"
    DEFAULT = "default"

    @classmethod
    def parse(cls, value: str | ImplementationMode) -> ImplementationMode:
        """
        Parse a mode name ("forced-accelerated" and "forced-default" are accepted too).

        Raises:
            ValueError: If the name is unknown
        """
        if isinstance(value, cls):
            return value
        name = str(value).strip().lower().removeprefix("forced-")
        try:
            return cls(name)
        except ValueError:
            available = ", ".join(m.value for m in cls)
            raise ValueError(f"Unknown implementation mode '{value}'. Available: {available}") from None


@dataclass
class SelectionState:
    """
    Mutable selector state, owned by whoever owns the selector.

    Attributes:
        mode: Current implementation mode
        initialized: Whether the one-time initialisation has started
        accelerated_ready: Accelerated strategy passed its self-check
        accelerated_failed: Initialisation failed; accelerated is off for good
        failure_reason: Message of the initialisation failure, if any
        fallback_count: Queries re-run on the default strategy after a failure
        last_implementation: Strategy that produced the most recent result
    """

    mode: ImplementationMode = ImplementationMode.AUTO
    initialized: bool = False
    accelerated_ready: bool = False
    accelerated_failed: bool = False
    failure_reason: str | None = None
    fallback_count: int = 0
    last_implementation: StrategyKind | None = None


def _load_accelerated_strategy() -> PathStrategy:
    """Import and build the numpy-backed strategy."""
    from route_optimizer.engine import get_strategy

    return get_strategy(StrategyKind.ACCELERATED)


def _probe_graph() -> Graph:
    """Small graph with a detour, a tie and an isolated city for the self-check."""
    from route_optimizer.graph.model import Graph

    graph = Graph()
    a = graph.add_city(0, 0)
    b = graph.add_city(100, 0)
    c = graph.add_city(100, 100)
    d = graph.add_city(0, 100)
    graph.add_city(300, 300)
    graph.add_connection(a.id, b.id, 5)
    graph.add_connection(b.id, c.id, 3)
    graph.add_connection(a.id, c.id, 20)
    graph.add_connection(a.id, d.id, 4)
    graph.add_connection(d.id, c.id, 4)
    return graph


class StrategySelector:
    """
    Dispatches shortest-path queries to the default or accelerated strategy.

    Callers never see accelerated failures: they are logged and the
    query is answered by the default strategy instead.
    """

    def __init__(
        self,
        state: SelectionState | None = None,
        default_strategy: PathStrategy | None = None,
        accelerated_loader: Callable[[], PathStrategy] | None = None,
    ) -> None:
        """
        Initialize the selector.

        Args:
            state: Selection state to use (a fresh one if omitted)
            default_strategy: Always-available strategy
            accelerated_loader: Builds the accelerated strategy during initialize()
        """
        self.state = state or SelectionState()
        self._strategies: dict[StrategyKind, PathStrategy] = {
            StrategyKind.DEFAULT: default_strategy or DijkstraStrategy(),
        }
        self._accelerated_loader = accelerated_loader or _load_accelerated_strategy
        self._init_task: asyncio.Future[bool] | None = None

    # =========================================================================
    # Initialisation
    # =========================================================================

    async def initialize(self) -> bool:
        """
        Prepare the accelerated strategy once.

        Loading and the self-check run in a worker thread so the caller's
        event loop stays responsive. Callers arriving while preparation is
        in flight wait for the same outcome; later calls return the
        recorded outcome without retrying.

        Returns:
            Whether the accelerated strategy is ready
        """
        if self._init_task is not None and not self._init_task.done():
            return await self._init_task
        if self.state.initialized:
            return self.is_accelerated_ready()
        self.state.initialized = True

        self._init_task = asyncio.ensure_future(self._initialize_once())
        return await self._init_task

    async def _initialize_once(self) -> bool:
        logger.info("Initializing accelerated Dijkstra strategy...")
        try:
            strategy = await asyncio.to_thread(self._prepare_accelerated)
        except Exception as e:
            self.state.accelerated_ready = False
            self.state.accelerated_failed = True
            self.state.failure_reason = str(e)
            logger.warning(f"Failed to load accelerated strategy, using default: {e}")
            return False

        self._strategies[StrategyKind.ACCELERATED] = strategy
        self.state.accelerated_ready = True
        logger.info(f"Accelerated strategy ready: {strategy.description}")
        return True

    def _prepare_accelerated(self) -> PathStrategy:
        """Load the accelerated strategy and check it agrees with the default one."""
        strategy = self._accelerated_loader()
        reference = self._strategies[StrategyKind.DEFAULT]

        probe = _probe_graph()
        ids = [city.id for city in probe.cities]
        for start_id in ids:
            for end_id in ids:
                expected = reference.compute(probe, start_id, end_id)
                actual = strategy.compute(probe, start_id, end_id)
                if (
                    actual.distance != expected.distance
                    or actual.all_distances != expected.all_distances
                ):
                    raise StrategyError(
                        f"Self-check mismatch for {start_id}->{end_id}: "
                        f"expected {expected.distance}, got {actual.distance}"
                    )
        return strategy

    # =========================================================================
    # Readiness
    # =========================================================================

    def is_accelerated_ready(self) -> bool:
        return (
            self.state.accelerated_ready
            and not self.state.accelerated_failed
            and StrategyKind.ACCELERATED in self._strategies
        )

    @property
    def mode(self) -> ImplementationMode:
        return self.state.mode

    def set_mode(self, mode: str | ImplementationMode) -> None:
        """
        Change the implementation mode.

        Raises:
            ValueError: If the mode name is unknown
        """
        self.state.mode = ImplementationMode.parse(mode)
        logger.info(f"Implementation mode set to '{self.state.mode.value}'")

    @property
    def active_implementation(self) -> StrategyKind:
        """Strategy the next query will be sent to."""
        if self.state.mode is ImplementationMode.DEFAULT:
            return StrategyKind.DEFAULT
        if self.is_accelerated_ready():
            return StrategyKind.ACCELERATED
        return StrategyKind.DEFAULT

    def implementation_info(self) -> dict[str, Any]:
        """Readiness and usage details for display."""
        active = self.active_implementation
        last = self.state.last_implementation
        return {
            "mode": self.state.mode.value,
            "accelerated_ready": self.is_accelerated_ready(),
            "accelerated_failed": self.state.accelerated_failed,
            "failure_reason": self.state.failure_reason,
            "implementation": active.value,
            "description": self._strategies[active].description,
            "fallback_count": self.state.fallback_count,
            "last_implementation": last.value if last else None,
        }

    # =========================================================================
    # Queries
    # =========================================================================

    def find_shortest_path(self, graph: Graph, start_id: int, end_id: int) -> PathResult:
        """Shortest path from start_id to end_id using the active strategy."""
        if self.active_implementation is StrategyKind.ACCELERATED:
            try:
                result = self._strategies[StrategyKind.ACCELERATED].compute(graph, start_id, end_id)
                self.state.last_implementation = StrategyKind.ACCELERATED
                return result
            except Exception as e:
                self.state.fallback_count += 1
                logger.warning(f"Accelerated strategy failed, falling back to default: {e}")
        elif self.state.mode is ImplementationMode.ACCELERATED:
            logger.debug("Accelerated strategy requested but not ready, using default")

        result = self._strategies[StrategyKind.DEFAULT].compute(graph, start_id, end_id)
        self.state.last_implementation = StrategyKind.DEFAULT
        return result
