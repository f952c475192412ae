#!/usr/bin/env python3
"""
Route Optimizer CLI - Find the shortest route on a saved or generated canvas.

Usage:
    python scripts/plan_route.py --start A --end C
    python scripts/plan_route.py --demo --start A --end C --mode default
    python scripts/plan_route.py --random 8 --seed 42 --start A --end H --save
    python scripts/plan_route.py --show

Modes:
    auto        - Accelerated if it initialised, otherwise default (default)
    accelerated - Force the numpy implementation (falls back if unavailable)
    default     - Always the pure Python implementation
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import random
import sys
from pathlib import Path

# Fix Windows console encoding
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from route_optimizer.config import LOG_DATE_FORMAT, LOG_FORMAT, MAX_CITIES, STATE_DIR  # noqa: E402
from route_optimizer.engine import ImplementationMode, StrategySelector  # noqa: E402
from route_optimizer.graph import Graph, random_graph, sample_graph  # noqa: E402
from route_optimizer.planner import PlannerState, RoutePlanner  # noqa: E402
from route_optimizer.storage import FileStore, StateStore  # noqa: E402


def city_count(value: str) -> int:
    """argparse type for --random: an integer in [0, MAX_CITIES]."""
    n = int(value)
    if not 0 <= n <= MAX_CITIES:
        raise argparse.ArgumentTypeError(f"must be between 0 and {MAX_CITIES}, got {n}")
    return n


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Find the shortest route between two cities",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--demo",
        action="store_true",
        help="Use the built-in three-city example instead of the saved canvas",
    )
    source.add_argument(
        "--random",
        type=city_count,
        metavar="N",
        default=None,
        help=f"Use a random canvas with N cities (at most {MAX_CITIES})",
    )

    parser.add_argument("--start", type=str, help="Start city name (e.g. A)")
    parser.add_argument("--end", type=str, help="End city name (e.g. C)")
    parser.add_argument(
        "--mode",
        type=str,
        default=None,
        choices=[m.value for m in ImplementationMode],
        help="Implementation mode (default: saved preference or auto)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for --random",
    )
    parser.add_argument(
        "--state-dir",
        type=Path,
        default=STATE_DIR,
        help=f"Directory with saved state (default: {STATE_DIR})",
    )
    parser.add_argument(
        "--save",
        action="store_true",
        help="Save the canvas and route selection after planning",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Print the cities and connections",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    return parser.parse_args()


def find_city_id(graph: Graph, name: str) -> int | None:
    """Look up a city id by (case-insensitive) name."""
    for city in graph.cities:
        if city.name.lower() == name.lower():
            return city.id
    return None


def print_graph(graph: Graph) -> None:
    print(f"\nCities ({len(graph)}):")
    for city in graph.cities:
        print(f"  {city.name:4} id={city.id:<4} ({city.x:.0f}, {city.y:.0f})")

    print(f"\nConnections ({len(graph.connections)}):")
    for conn in graph.connections:
        a = graph.get_city(conn.from_id)
        b = graph.get_city(conn.to_id)
        print(f"  {a.name if a else conn.from_id} - {b.name if b else conn.to_id}: {conn.weight:g}")


def main() -> int:
    """Main entry point."""
    args = parse_args()

    # Set up logging
    log_level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(level=log_level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    store = StateStore(FileStore(args.state_dir))
    planner = RoutePlanner(state_store=store, selector=StrategySelector(), autosave=False)

    if args.demo:
        planner.state = PlannerState(graph=sample_graph())
    elif args.random is not None:
        planner.state = PlannerState(graph=random_graph(random.Random(args.seed), num_cities=args.random))
    elif not planner.load():
        print(f"No saved canvas in {args.state_dir} (try --demo or --random N)", file=sys.stderr)
        return 1

    if args.mode:
        planner.selector.set_mode(args.mode)

    graph = planner.graph
    if args.show:
        print_graph(graph)

    if args.start is None and args.end is None and args.show:
        return 0

    # Resolve city names, falling back to the saved selection
    start_id = find_city_id(graph, args.start) if args.start else planner.state.start_id
    end_id = find_city_id(graph, args.end) if args.end else planner.state.end_id
    if start_id is None or end_id is None:
        names = ", ".join(c.name for c in graph.cities) or "none"
        print(f"Error: choose --start and --end from: {names}", file=sys.stderr)
        return 1
    planner.set_start(start_id)
    planner.set_end(end_id)

    print("Initializing strategies...")
    asyncio.run(planner.initialize())
    info = planner.implementation_info()

    result = planner.calculate_route()

    print("\n" + "=" * 60)
    print("Route Optimizer")
    print("=" * 60)
    print(f"  Cities:         {len(graph)}")
    print(f"  Connections:    {len(graph.connections)}")
    print(f"  Mode:           {info['mode']}")
    print(f"  Implementation: {info['description']}")
    print("=" * 60 + "\n")

    if result.reachable:
        print(f"Shortest route: {' -> '.join(planner.state.route_names)}")
        print(f"Total distance: {result.distance:g} ({result.hops} connections)")
    else:
        start = graph.get_city(start_id)
        end = graph.get_city(end_id)
        print(f"No route exists between {start.name} and {end.name}")

    print("\nDistances from start:")
    for city in graph.cities:
        d = result.all_distances.get(city.id)
        shown = f"{d:g}" if d is not None and d != float("inf") else "unreachable"
        print(f"  {city.name:4} {shown}")

    if args.save:
        planner.persist()
        print(f"\nSaved to {args.state_dir}")

    return 0 if result.reachable else 1


if __name__ == "__main__":
    sys.exit(main())
