"""
Shortest-path engine module.

Provides the interchangeable Dijkstra strategies and the layer that
chooses between them:
- PathResult: Path, distance and per-city distances
- DijkstraStrategy: Pure Python implementation (default)
- VectorizedDijkstraStrategy: numpy implementation (accelerated)
- StrategySelector: Mode-based dispatch with automatic fallback
"""

from route_optimizer.engine.base import (
    UNREACHABLE,
    InconsistentResultError,
    PathResult,
    PathStrategy,
    StrategyError,
    StrategyKind,
    check_result_consistency,
)
from route_optimizer.engine.dijkstra import DijkstraStrategy, compute_shortest_path
from route_optimizer.engine.selector import ImplementationMode, SelectionState, StrategySelector

__all__ = [
    "UNREACHABLE",
    "DijkstraStrategy",
    "ImplementationMode",
    "InconsistentResultError",
    "PathResult",
    "PathStrategy",
    "SelectionState",
    "StrategyError",
    "StrategyKind",
    "StrategySelector",
    "check_result_consistency",
    "compute_shortest_path",
    "get_strategy",
]


def get_strategy(kind: str | StrategyKind, **kwargs) -> PathStrategy:
    """
    Get a strategy by name.

    Args:
        kind: Strategy identifier (default, accelerated)
        **kwargs: Additional arguments passed to the strategy constructor

    Returns:
        Instantiated strategy

    Raises:
        ValueError: If the strategy name is unknown
    """
    name = kind.value if isinstance(kind, StrategyKind) else kind

    if name == StrategyKind.DEFAULT.value:
        return DijkstraStrategy()
    if name == StrategyKind.ACCELERATED.value:
        # numpy is only imported once the accelerated strategy is requested
        from route_optimizer.engine.vectorized import VectorizedDijkstraStrategy

        return VectorizedDijkstraStrategy(**kwargs)

    available = ", ".join(k.value for k in StrategyKind)
    raise ValueError(f"Unknown strategy '{name}'. Available: {available}")
