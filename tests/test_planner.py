"""
Tests for the route planner: editing, selection, routing and persistence.
"""

import asyncio
import json
import random

import pytest

from route_optimizer.engine import ImplementationMode, StrategyKind, StrategySelector, get_strategy
from route_optimizer.planner import RoutePlanner
from route_optimizer.storage import StateStore


def build_abc(planner: RoutePlanner) -> dict[str, int]:
    """Recreate the three-city sample through the planner."""
    a = planner.add_city_at(0, 0)
    b = planner.add_city_at(100, 0)
    c = planner.add_city_at(100, 100)
    planner.connect(a.id, b.id, 5)
    planner.connect(b.id, c.id, 3)
    planner.connect(a.id, c.id, 20)
    return {"A": a.id, "B": b.id, "C": c.id}


class TestEditing:
    """Test graph edits through the planner."""

    def test_add_city(self, planner):
        city = planner.add_city_at(50, 50)
        assert city.name == "A"
        assert planner.graph.cities == [city]

    def test_add_on_existing_city_rejected(self, planner):
        planner.add_city_at(50, 50)
        assert planner.add_city_at(60, 55) is None
        assert len(planner.graph) == 1

    def test_add_when_full_rejected(self, planner):
        for i in range(10):
            assert planner.add_city_at(i * 50, 0) is not None
        assert planner.add_city_at(300, 300) is None

    def test_edits_replace_graph(self, planner):
        """Published graphs are never mutated afterwards."""
        planner.add_city_at(0, 0)
        before = planner.graph
        snapshot = before.serialize()
        planner.add_city_at(200, 200)
        assert planner.graph is not before
        assert before.serialize() == snapshot

    def test_rejected_edit_keeps_graph(self, planner):
        planner.add_city_at(0, 0)
        before = planner.graph
        assert planner.connect(before.cities[0].id, 99) is None
        assert planner.graph is before

    def test_connect_default_weight_from_distance(self, planner):
        a = planner.add_city_at(0, 0)
        b = planner.add_city_at(300, 400)
        conn = planner.connect(a.id, b.id)
        assert conn.weight == 50

    def test_connect_at_drop_point(self, planner):
        a = planner.add_city_at(0, 0)
        b = planner.add_city_at(200, 0)
        conn = planner.connect_at(a.id, 205, 5)
        assert conn.joins(a.id, b.id)
        assert planner.connect_at(a.id, 100, 100) is None
        assert planner.connect_at(a.id, 3, 3) is None

    def test_remove_city_at(self, planner):
        ids = build_abc(planner)
        removed = planner.remove_city_at(102, 2)
        assert removed.id == ids["B"]
        assert len(planner.graph.connections) == 1
        assert planner.remove_city_at(500, 300) is None

    def test_remove_unknown_city(self, planner):
        assert planner.remove_city(1234) is False

    def test_select_and_update_connection(self, planner):
        ids = build_abc(planner)
        conn = planner.select_connection_at(50, 0)
        assert conn.joins(ids["A"], ids["B"])
        assert planner.update_connection_weight(ids["B"], ids["A"], 1) is True
        assert planner.state.selected_connection.weight == 1

    def test_update_rejects_non_positive(self, planner):
        ids = build_abc(planner)
        assert planner.update_connection_weight(ids["A"], ids["B"], 0) is False
        assert planner.graph.get_connection(ids["A"], ids["B"]).weight == 5


class TestAutoConnect:
    """Test random connection generation."""

    def test_needs_two_cities(self, planner, rng):
        planner.add_city_at(0, 0)
        assert planner.auto_connect(rng) == 0
        assert planner.graph.connections == []

    def test_adds_valid_connections(self, planner, rng):
        for i in range(6):
            planner.add_city_at(i * 100, (i % 2) * 150)
        added = planner.auto_connect(rng)

        connections = planner.graph.connections
        assert added == len(connections)
        assert 0 < added <= 15
        pairs = {frozenset((c.from_id, c.to_id)) for c in connections}
        assert len(pairs) == len(connections)
        assert all(c.from_id != c.to_id and c.weight >= 1 for c in connections)

    def test_seeded_is_reproducible(self, state_store):
        def run():
            planner = RoutePlanner(state_store=state_store, selector=StrategySelector())
            for i in range(5):
                planner.add_city_at(i * 120, 200)
            planner.auto_connect(random.Random(42))
            return [(c.from_id, c.to_id) for c in planner.graph.connections]

        assert run() == run()


class TestRouting:
    """Test endpoint selection and route calculation."""

    def test_route_needs_endpoints(self, planner):
        ids = build_abc(planner)
        assert planner.calculate_route() is None
        planner.set_start(ids["A"])
        assert planner.calculate_route() is None

    def test_calculate_route(self, planner):
        ids = build_abc(planner)
        planner.set_start(ids["A"])
        planner.set_end(ids["C"])
        result = planner.calculate_route()
        assert result.distance == 8
        assert planner.state.route_names == ["A", "B", "C"]
        assert planner.selector.state.last_implementation is StrategyKind.DEFAULT

    def test_unreachable_route(self, planner):
        ids = build_abc(planner)
        d = planner.add_city_at(500, 300)
        planner.set_start(ids["A"])
        planner.set_end(d.id)
        result = planner.calculate_route()
        assert not result.reachable
        assert planner.state.route_names == []

    def test_set_unknown_endpoint_rejected(self, planner):
        build_abc(planner)
        assert planner.set_start(999) is False
        assert planner.state.start_id is None

    def test_removing_endpoint_clears_selection(self, planner):
        ids = build_abc(planner)
        planner.set_start(ids["A"])
        planner.set_end(ids["C"])
        planner.calculate_route()
        planner.remove_city(ids["C"])
        assert planner.state.start_id == ids["A"]
        assert planner.state.end_id is None
        assert planner.state.result is None

    def test_edit_clears_result(self, planner):
        ids = build_abc(planner)
        planner.set_start(ids["A"])
        planner.set_end(ids["C"])
        planner.calculate_route()
        planner.update_connection_weight(ids["A"], ids["C"], 1)
        assert planner.state.result is None
        assert planner.calculate_route().path == [ids["A"], ids["C"]]

    def test_accelerated_after_initialize(self, state_store):
        planner = RoutePlanner(state_store=state_store, selector=StrategySelector())
        ids = build_abc(planner)
        assert asyncio.run(planner.initialize()) is True
        planner.set_start(ids["C"])
        planner.set_end(ids["A"])
        assert planner.calculate_route().distance == 8
        assert planner.implementation_info()["last_implementation"] == "accelerated"


class TestPersistence:
    """Test autosave and restore."""

    def test_round_trip(self, planner, state_store):
        ids = build_abc(planner)
        planner.set_start(ids["A"])
        planner.set_end(ids["C"])

        restored = RoutePlanner(state_store=state_store, selector=StrategySelector())
        assert restored.load() is True
        assert restored.graph.serialize() == planner.graph.serialize()
        assert (restored.state.start_id, restored.state.end_id) == (ids["A"], ids["C"])
        assert restored.state.result is None

    def test_restored_ids_continue(self, planner, state_store):
        ids = build_abc(planner)
        restored = RoutePlanner(state_store=state_store, selector=StrategySelector())
        restored.load()
        assert restored.add_city_at(400, 300).id > max(ids.values())

    def test_load_nothing(self, planner):
        assert planner.load() is False
        assert len(planner.graph) == 0

    def test_invalid_state_ignored(self, memory_store, planner):
        memory_store.set("dijkstraAppState", '{"nodes": "oops", "edges": []}')
        assert planner.load() is False
        assert len(planner.graph) == 0

    def test_dangling_selection_dropped(self, memory_store, planner):
        memory_store.set(
            "dijkstraAppState",
            '{"nodes": [{"id": 1, "name": "A", "x": 0, "y": 0}], "edges": [], "startId": 1, "endId": 7}',
        )
        assert planner.load() is True
        assert planner.state.start_id == 1
        assert planner.state.end_id is None

    def test_duplicate_pair_state_restored_once(self, memory_store, planner):
        """A saved pair in both directions loads as one connection, so both strategies agree."""
        memory_store.set(
            "dijkstraAppState",
            json.dumps({
                "nodes": [
                    {"id": 1, "name": "A", "x": 0, "y": 0},
                    {"id": 2, "name": "B", "x": 100, "y": 0},
                    {"id": 3, "name": "C", "x": 200, "y": 0},
                ],
                "edges": [
                    {"from": 1, "to": 2, "weight": 1},
                    {"from": 2, "to": 1, "weight": 5},
                    {"from": 2, "to": 3, "weight": 1},
                ],
            }),
        )
        assert planner.load() is True

        graph = planner.graph
        assert len([c for c in graph.connections if c.joins(1, 2)]) == 1
        default = get_strategy("default").compute(graph, 1, 3)
        accelerated = get_strategy("accelerated").compute(graph, 1, 3)
        assert default.all_distances == accelerated.all_distances == {1: 0, 2: 1, 3: 2}

    def test_autosave_disabled(self, memory_store):
        planner = RoutePlanner(state_store=StateStore(memory_store), autosave=False)
        planner.add_city_at(0, 0)
        assert "dijkstraAppState" not in memory_store
        planner.persist()
        assert "dijkstraAppState" in memory_store

    def test_reset_clears_store(self, planner, memory_store):
        build_abc(planner)
        planner.reset()
        assert len(planner.graph) == 0
        assert "dijkstraAppState" not in memory_store
        assert planner.load() is False

    def test_mode_is_remembered(self, planner, state_store):
        planner.set_mode("forced-default")
        restored = RoutePlanner(state_store=state_store, selector=StrategySelector())
        restored.load()
        assert restored.selector.mode is ImplementationMode.DEFAULT

    def test_unknown_mode_rejected(self, planner):
        with pytest.raises(ValueError):
            planner.set_mode("warp")
