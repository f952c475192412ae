"""
Graph module.

Provides the city graph edited on the canvas:
- City: Immutable labelled point
- Connection: Weighted undirected link
- Graph: Ordered cities plus connections, with invariant-preserving edits
- is_valid_weight: Finite positive number check for connection weights
- default_weight / connection_weight: Weights derived from city positions
- random_graph / sample_graph: Ready-made graphs for demos and tests
"""

from route_optimizer.graph.generators import random_graph, sample_graph
from route_optimizer.graph.model import City, Connection, Graph, city_name, is_valid_weight
from route_optimizer.graph.weights import connection_weight, default_weight

__all__ = [
    "City",
    "Connection",
    "Graph",
    "city_name",
    "connection_weight",
    "default_weight",
    "is_valid_weight",
    "random_graph",
    "sample_graph",
]
