"""
Unit and property tests for the shortest-path strategies.

Every test using the `strategy` fixture runs against both the default
and the accelerated implementation.
"""

import math
import random

import pytest

from route_optimizer.engine import (
    UNREACHABLE,
    InconsistentResultError,
    PathResult,
    check_result_consistency,
    compute_shortest_path,
    get_strategy,
)
from route_optimizer.engine.vectorized import build_weight_matrix
from route_optimizer.graph import Graph, random_graph


def path_weight(graph: Graph, path: list[int]) -> float:
    return sum(graph.get_connection(a, b).weight for a, b in zip(path, path[1:]))


class TestScenarios:
    """Concrete scenarios."""

    def test_detour_beats_direct_connection(self, strategy, abc_graph, abc_ids):
        """A->C goes through B (5 + 3 = 8 < 20)."""
        result = strategy.compute(abc_graph, abc_ids["A"], abc_ids["C"])
        assert result.path == [abc_ids["A"], abc_ids["B"], abc_ids["C"]]
        assert result.distance == 8

    def test_all_distances(self, strategy, abc_graph, abc_ids):
        result = strategy.compute(abc_graph, abc_ids["A"], abc_ids["C"])
        assert result.all_distances == {abc_ids["A"]: 0, abc_ids["B"]: 5, abc_ids["C"]: 8}

    def test_empty_graph(self, strategy):
        """No cities: empty path, unreachable, no distances."""
        result = strategy.compute(Graph(), 1, 2)
        assert result.path == []
        assert result.distance == UNREACHABLE
        assert result.all_distances == {}

    def test_start_equals_end(self, strategy, abc_graph, abc_ids):
        result = strategy.compute(abc_graph, abc_ids["B"], abc_ids["B"])
        assert result.path == [abc_ids["B"]]
        assert result.distance == 0

    def test_single_city_without_connections(self, strategy):
        graph = Graph()
        a = graph.add_city(0, 0)
        result = strategy.compute(graph, a.id, a.id)
        assert result.path == [a.id]
        assert result.distance == 0

    def test_disconnected_target(self, strategy, abc_graph, abc_ids):
        """Reachable distances are still reported when the target is isolated."""
        d = abc_graph.add_city(400, 300)
        result = strategy.compute(abc_graph, abc_ids["A"], d.id)
        assert result.path == []
        assert result.distance == UNREACHABLE
        assert result.all_distances[d.id] == UNREACHABLE
        assert result.all_distances[abc_ids["C"]] == 8
        assert not result.reachable

    def test_unknown_ids_do_not_raise(self, strategy, abc_graph, abc_ids):
        result = strategy.compute(abc_graph, 999, abc_ids["A"])
        assert result.path == []
        assert result.distance == UNREACHABLE

        result = strategy.compute(abc_graph, abc_ids["A"], 999)
        assert result.path == []
        assert result.distance == UNREACHABLE

    def test_reverse_direction_connections(self, strategy):
        """Stored direction does not matter for traversal."""
        graph = Graph()
        a = graph.add_city(0, 0)
        b = graph.add_city(10, 0)
        c = graph.add_city(20, 0)
        graph.add_connection(b.id, a.id, 2)
        graph.add_connection(c.id, b.id, 2)
        result = strategy.compute(graph, a.id, c.id)
        assert result.path == [a.id, b.id, c.id]
        assert result.distance == 4

    def test_float_weights(self, strategy):
        graph = Graph()
        a = graph.add_city(0, 0)
        b = graph.add_city(10, 0)
        c = graph.add_city(20, 0)
        graph.add_connection(a.id, b.id, 0.5)
        graph.add_connection(b.id, c.id, 0.25)
        graph.add_connection(a.id, c.id, 1.0)
        result = strategy.compute(graph, a.id, c.id)
        assert result.distance == pytest.approx(0.75)
        assert result.path == [a.id, b.id, c.id]

    def test_does_not_modify_graph(self, strategy, abc_graph, abc_ids):
        before = abc_graph.serialize()
        strategy.compute(abc_graph, abc_ids["A"], abc_ids["C"])
        assert abc_graph.serialize() == before


class TestProperties:
    """Properties over random graphs."""

    @pytest.fixture
    def graphs(self):
        rng = random.Random(2024)
        return [random_graph(rng, num_cities=rng.randint(1, 10)) for _ in range(40)]

    def test_symmetric_distance(self, strategy, graphs):
        for graph in graphs:
            ids = [c.id for c in graph.cities]
            for a in ids:
                for b in ids:
                    forward = strategy.compute(graph, a, b).distance
                    backward = strategy.compute(graph, b, a).distance
                    assert forward == pytest.approx(backward) or forward == backward == UNREACHABLE

    def test_path_is_valid_walk(self, strategy, graphs):
        """Paths use existing connections, never repeat a city, and sum to the distance."""
        for graph in graphs:
            ids = [c.id for c in graph.cities]
            for a in ids:
                for b in ids:
                    result = strategy.compute(graph, a, b)
                    if not result.reachable:
                        assert result.path == []
                        continue
                    assert result.path[0] == a
                    assert result.path[-1] == b
                    assert len(set(result.path)) == len(result.path)
                    assert path_weight(graph, result.path) == pytest.approx(result.distance)

    def test_no_shorter_connection_exists(self, strategy, graphs):
        """all_distances satisfies the triangle inequality over every connection."""
        for graph in graphs:
            start = graph.cities[0].id
            dist = strategy.compute(graph, start, start).all_distances
            for conn in graph.connections:
                assert dist[conn.to_id] <= dist[conn.from_id] + conn.weight + 1e-9
                assert dist[conn.from_id] <= dist[conn.to_id] + conn.weight + 1e-9


class TestInterchangeability:
    """Default and accelerated strategies must agree."""

    def test_agree_on_random_graphs(self):
        """100 random graphs, every ordered pair: same distance and all_distances."""
        rng = random.Random(7)
        default = get_strategy("default")
        accelerated = get_strategy("accelerated")

        for _ in range(100):
            graph = random_graph(rng, num_cities=rng.randint(0, 10), max_weight=rng.choice([None, 3, 20]))
            ids = [c.id for c in graph.cities]
            for a in ids:
                for b in ids:
                    expected = default.compute(graph, a, b)
                    actual = accelerated.compute(graph, a, b)
                    assert actual.distance == expected.distance
                    assert actual.all_distances == expected.all_distances
                    if expected.reachable:
                        assert path_weight(graph, actual.path) == pytest.approx(expected.distance)

    def test_same_tie_break(self):
        """Both pick the first equal-cost route in insertion order."""
        graph = Graph()
        a = graph.add_city(0, 0)
        b = graph.add_city(100, 0)
        c = graph.add_city(0, 100)
        d = graph.add_city(100, 100)
        graph.add_connection(a.id, b.id, 1)
        graph.add_connection(a.id, c.id, 1)
        graph.add_connection(b.id, d.id, 1)
        graph.add_connection(c.id, d.id, 1)

        default = get_strategy("default").compute(graph, a.id, d.id)
        accelerated = get_strategy("accelerated").compute(graph, a.id, d.id)
        assert default.distance == accelerated.distance == 2
        assert default.path == accelerated.path == [a.id, b.id, d.id]


class TestWeightMatrix:
    """Test the accelerated strategy's adjacency matrix."""

    def test_symmetric_with_inf_gaps(self, abc_graph):
        ids, weights = build_weight_matrix(abc_graph)
        assert ids == [1, 2, 3]
        assert weights.shape == (3, 3)
        assert (weights == weights.T).all()
        assert weights[0, 1] == 5
        assert weights[1, 2] == 3
        assert weights[0, 2] == 20
        assert math.isinf(weights[0, 0])


class TestConsistencyCheck:
    """Test result verification."""

    def test_accepts_correct_result(self, abc_graph, abc_ids):
        check_result_consistency(abc_graph, compute_shortest_path(abc_graph, abc_ids["A"], abc_ids["C"]))

    def test_rejects_wrong_distance(self, abc_graph, abc_ids):
        bad = PathResult(
            path=[abc_ids["A"], abc_ids["B"], abc_ids["C"]],
            distance=7,
            all_distances={abc_ids["C"]: 7},
        )
        with pytest.raises(InconsistentResultError):
            check_result_consistency(abc_graph, bad)

    def test_rejects_missing_connection(self, abc_graph, abc_ids):
        abc_graph.remove_city(abc_ids["B"])
        abc_graph.add_city(200, 0)
        bad = PathResult(path=[abc_ids["A"], 4], distance=1, all_distances={4: 1})
        with pytest.raises(InconsistentResultError):
            check_result_consistency(abc_graph, bad)

    def test_rejects_empty_path_with_finite_distance(self, abc_graph):
        with pytest.raises(InconsistentResultError):
            check_result_consistency(abc_graph, PathResult(path=[], distance=3))


class TestPathResult:
    """Test PathResult helpers."""

    def test_path_names(self, abc_graph, abc_ids):
        result = compute_shortest_path(abc_graph, abc_ids["A"], abc_ids["C"])
        assert result.path_names(abc_graph) == ["A", "B", "C"]
        assert result.hops == 2

    def test_to_dict_replaces_inf(self):
        result = PathResult(path=[], distance=UNREACHABLE, all_distances={1: 0.0, 2: UNREACHABLE})
        assert result.to_dict() == {"path": [], "distance": None, "all_distances": {"1": 0.0, "2": None}}


def test_unknown_strategy_raises():
    with pytest.raises(ValueError, match="Unknown strategy"):
        get_strategy("gpu")
