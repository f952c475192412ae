#!/usr/bin/env python3
"""
Compare the default and accelerated strategies on random canvases.

Every ordered city pair of every graph is solved by both strategies;
distances and per-city distances must match exactly.

Usage:
    python scripts/compare_strategies.py
    python scripts/compare_strategies.py --graphs 500 --seed 7
"""

from __future__ import annotations

import argparse
import random
import sys
import time
from pathlib import Path

# Fix Windows console encoding
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import logging
logging.basicConfig(level=logging.WARNING)  # Quiet mode

from route_optimizer.engine import StrategyKind, get_strategy  # noqa: E402
from route_optimizer.graph import random_graph  # noqa: E402


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--graphs", type=int, default=100, help="Number of random graphs (default: 100)")
    parser.add_argument("--seed", type=int, default=0, help="Random seed (default: 0)")
    parser.add_argument(
        "--edge-probability",
        type=float,
        default=0.4,
        help="Chance each city pair is connected (default: 0.4)",
    )
    return parser.parse_args()


def run_comparison(graphs: int, seed: int, edge_probability: float) -> int:
    print("=" * 70)
    print("Route Optimizer - Strategy Comparison")
    print("=" * 70)

    rng = random.Random(seed)
    strategies = {kind: get_strategy(kind) for kind in StrategyKind}
    timings = {kind: 0.0 for kind in StrategyKind}

    for strategy in strategies.values():
        print(f"  {strategy.name:12} : {strategy.description}")
    print(f"\nSolving every city pair on {graphs} random graphs (seed {seed})...\n")

    queries = 0
    mismatches = 0
    path_differences = 0

    for i in range(1, graphs + 1):
        graph = random_graph(rng, edge_probability=edge_probability)
        ids = [city.id for city in graph.cities]

        for start_id in ids:
            for end_id in ids:
                results = {}
                for kind, strategy in strategies.items():
                    t0 = time.perf_counter()
                    results[kind] = strategy.compute(graph, start_id, end_id)
                    timings[kind] += time.perf_counter() - t0

                expected = results[StrategyKind.DEFAULT]
                actual = results[StrategyKind.ACCELERATED]
                queries += 1

                if (
                    expected.distance != actual.distance
                    or expected.all_distances != actual.all_distances
                ):
                    mismatches += 1
                    print(
                        f"  [graph {i}] MISMATCH {start_id}->{end_id}: "
                        f"default {expected.distance} vs accelerated {actual.distance}"
                    )
                elif expected.path != actual.path:
                    # Equal distance, different path: only allowed under ties
                    path_differences += 1

    # Summary
    print("\n" + "=" * 70)
    print("SUMMARY")
    print("=" * 70)
    print(f"  Queries          : {queries}")
    print(f"  Mismatches       : {mismatches}")
    print(f"  Tied-path diffs  : {path_differences}")
    for kind in StrategyKind:
        avg_us = timings[kind] / queries * 1e6 if queries else 0.0
        print(f"  {kind.value:16} : {avg_us:.1f} us/query")

    return 1 if mismatches else 0


if __name__ == "__main__":
    args = parse_args()
    sys.exit(run_comparison(args.graphs, args.seed, args.edge_probability))
