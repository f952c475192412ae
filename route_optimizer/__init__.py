"""
Route Optimizer.

Build a small weighted city graph on a canvas and find the shortest
route between two cities with Dijkstra's algorithm, using either the
pure-Python engine or its numpy-vectorised twin.
"""

__version__ = "0.1.0"
