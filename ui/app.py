"""
Route Optimizer - build a city graph and find the shortest route.
"""

import asyncio
import logging
import random
import sys
from pathlib import Path

import streamlit as st

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from route_optimizer.config import CANVAS_HEIGHT, LOG_DATE_FORMAT, LOG_FORMAT, LOG_LEVEL, MAX_CANVAS_WIDTH  # noqa: E402
from route_optimizer.engine import ImplementationMode  # noqa: E402
from route_optimizer.planner import RoutePlanner  # noqa: E402
from route_optimizer.storage import FileStore, StateStore  # noqa: E402
from ui.components.canvas import create_canvas_figure  # noqa: E402

logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

st.set_page_config(page_title="Route Optimizer", page_icon="🗺️", layout="wide")


def get_planner() -> RoutePlanner:
    """One planner per browser session, restored from disk on first use."""
    if "planner" not in st.session_state:
        planner = RoutePlanner(state_store=StateStore(FileStore()))
        planner.load()
        asyncio.run(planner.initialize())
        st.session_state.planner = planner
    return st.session_state.planner


def city_label(planner: RoutePlanner, city_id: int | None) -> str:
    if city_id is None:
        return "-"
    city = planner.graph.get_city(city_id)
    return city.name if city else str(city_id)


planner = get_planner()
graph = planner.graph
cities = graph.cities

st.title("Route Optimizer")
st.caption("Using Dijkstra's algorithm to find shortest paths")

# SIDEBAR: canvas editing and implementation
with st.sidebar:
    st.header("Canvas")

    with st.form("add_city", clear_on_submit=True):
        col1, col2 = st.columns(2)
        x = col1.number_input("x", min_value=0.0, max_value=float(MAX_CANVAS_WIDTH), value=100.0, step=10.0)
        y = col2.number_input("y", min_value=0.0, max_value=float(CANVAS_HEIGHT), value=100.0, step=10.0)
        if st.form_submit_button("Add city", use_container_width=True):
            if planner.add_city_at(x, y) is None:
                st.warning(f"Can't place a city there (max {graph.max_cities}, no overlaps)")
            st.rerun()

    if st.button("Add random city", use_container_width=True):
        planner.add_city_at(random.uniform(20, MAX_CANVAS_WIDTH - 20), random.uniform(20, CANVAS_HEIGHT - 20))
        st.rerun()

    if st.button("Auto-connect", use_container_width=True, disabled=len(cities) < 2):
        planner.auto_connect()
        st.rerun()

    if st.button("Reset canvas", use_container_width=True, type="primary"):
        planner.reset()
        st.rerun()

    st.divider()
    st.header("Implementation")
    modes = [m.value for m in ImplementationMode]
    selected_mode = st.radio("Mode", modes, index=modes.index(planner.selector.mode.value), horizontal=True)
    if selected_mode != planner.selector.mode.value:
        planner.set_mode(selected_mode)
        st.rerun()

    info = planner.implementation_info()
    st.caption(f"Active: **{info['implementation']}** · {info['description']}")
    if info["accelerated_failed"]:
        st.caption(f"Accelerated unavailable: {info['failure_reason']}")
    if info["fallback_count"]:
        st.caption(f"Fallbacks: {info['fallback_count']}")

# MAIN: canvas and route planning
col_canvas, col_route = st.columns([2, 1])

with col_canvas:
    st.plotly_chart(
        create_canvas_figure(graph, planner.state.start_id, planner.state.end_id, planner.state.result),
        use_container_width=True,
    )
    if not cities:
        st.info(f"Add cities to begin (max {graph.max_cities})")

    names = {c.id: c.name for c in cities}

    with st.expander("Connections", expanded=bool(cities)):
        c1, c2, c3, c4 = st.columns([2, 2, 2, 1])
        a = c1.selectbox("From", list(names), format_func=names.get, key="conn_from")
        b = c2.selectbox("To", list(names), format_func=names.get, key="conn_to")
        w = c3.number_input("Weight (0 = from distance)", min_value=0.0, value=0.0, step=1.0)
        if c4.button("Connect", disabled=len(cities) < 2):
            if planner.connect(a, b, w or None) is None:
                st.warning("Connection rejected (same city or already connected)")
            st.rerun()

        connections = graph.connections
        if connections:
            labels = {i: f"{names.get(c.from_id)} – {names.get(c.to_id)} ({c.weight:g})" for i, c in enumerate(connections)}
            e1, e2, e3 = st.columns([3, 2, 1])
            idx = e1.selectbox("Edit connection", list(labels), format_func=labels.get)
            new_weight = e2.number_input("New weight", min_value=0.0, value=float(connections[idx].weight), step=1.0)
            if e3.button("Update"):
                conn = connections[idx]
                if not planner.update_connection_weight(conn.from_id, conn.to_id, new_weight):
                    st.warning("Weight must be greater than 0")
                else:
                    st.rerun()

    with st.expander("Remove city"):
        r1, r2 = st.columns([3, 1])
        victim = r1.selectbox("City", list(names), format_func=names.get, key="remove_city")
        if r2.button("Remove", disabled=not cities):
            planner.remove_city(victim)
            st.rerun()

with col_route:
    st.subheader("Route Planning")
    options = [None] + list(names)

    def fmt(city_id):
        return city_label(planner, city_id)

    start = st.selectbox("Start city", options, index=options.index(planner.state.start_id), format_func=fmt)
    end = st.selectbox("End city", options, index=options.index(planner.state.end_id), format_func=fmt)
    if start != planner.state.start_id:
        planner.set_start(start)
        st.rerun()
    if end != planner.state.end_id:
        planner.set_end(end)
        st.rerun()

    if st.button("Find shortest path", type="primary", use_container_width=True):
        if planner.calculate_route() is None:
            st.error("Please select both start and end cities")
        else:
            st.rerun()

    result = planner.state.result
    if result is not None:
        st.subheader("Results")
        if not result.reachable:
            st.error("No path exists between selected cities")
        else:
            st.metric("Total distance", f"{result.distance:g}")
            st.write(" → ".join(planner.state.route_names))
            last = planner.selector.state.last_implementation
            st.caption(f"Computed with the {last.value} implementation")
