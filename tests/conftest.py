"""
Pytest configuration and shared fixtures.

This file is automatically loaded by pytest and provides
fixtures available to all test files.
"""

import random

import pytest

from route_optimizer.engine import DijkstraStrategy, StrategySelector, get_strategy
from route_optimizer.graph import Graph, sample_graph
from route_optimizer.planner import RoutePlanner
from route_optimizer.storage import MemoryStore, StateStore


@pytest.fixture
def abc_graph() -> Graph:
    """A(0,0) -5- B(100,0) -3- C(100,100), plus A -20- C."""
    return sample_graph()


@pytest.fixture
def abc_ids(abc_graph: Graph) -> dict[str, int]:
    """Map city name -> id for abc_graph."""
    return {city.name: city.id for city in abc_graph.cities}


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source."""
    return random.Random(1234)


@pytest.fixture(params=["default", "accelerated"])
def strategy(request):
    """Each strategy implementation in turn."""
    return get_strategy(request.param)


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def state_store(memory_store: MemoryStore) -> StateStore:
    return StateStore(memory_store)


@pytest.fixture
def planner(state_store: StateStore) -> RoutePlanner:
    """Planner on an in-memory store using only the default strategy."""
    selector = StrategySelector(default_strategy=DijkstraStrategy())
    return RoutePlanner(state_store=state_store, selector=selector)
