"""
Plotly rendering of the city canvas.
"""

import plotly.graph_objects as go

from route_optimizer.config import CANVAS_HEIGHT, CITY_RADIUS, MAX_CANVAS_WIDTH
from route_optimizer.engine import PathResult
from route_optimizer.graph import Graph

CITY_COLOR = "#3498db"
START_COLOR = "#2ecc71"
END_COLOR = "#e74c3c"
EDGE_COLOR = "#95a5a6"
ROUTE_COLOR = "#27ae60"


def _route_pairs(result: PathResult | None) -> set[frozenset[int]]:
    if result is None or not result.reachable:
        return set()
    return {frozenset(pair) for pair in zip(result.path, result.path[1:])}


def create_canvas_figure(
    graph: Graph,
    start_id: int | None = None,
    end_id: int | None = None,
    result: PathResult | None = None,
    width: float = MAX_CANVAS_WIDTH,
    height: float = CANVAS_HEIGHT,
) -> go.Figure:
    """Cities, connections with weight labels, and the route highlighted."""
    fig = go.Figure()
    on_route = _route_pairs(result)

    for conn in graph.connections:
        a = graph.get_city(conn.from_id)
        b = graph.get_city(conn.to_id)
        if a is None or b is None:
            continue
        highlighted = frozenset((a.id, b.id)) in on_route
        fig.add_trace(go.Scatter(
            x=[a.x, b.x],
            y=[a.y, b.y],
            mode="lines",
            line=dict(color=ROUTE_COLOR if highlighted else EDGE_COLOR, width=5 if highlighted else 2),
            hoverinfo="skip",
            showlegend=False,
        ))
        fig.add_annotation(
            x=(a.x + b.x) / 2,
            y=(a.y + b.y) / 2,
            text=f"{conn.weight:g}",
            showarrow=False,
            bgcolor="white",
            bordercolor=EDGE_COLOR,
            font=dict(size=11),
        )

    cities = graph.cities
    colors = []
    for city in cities:
        if city.id == start_id:
            colors.append(START_COLOR)
        elif city.id == end_id:
            colors.append(END_COLOR)
        else:
            colors.append(CITY_COLOR)

    fig.add_trace(go.Scatter(
        x=[c.x for c in cities],
        y=[c.y for c in cities],
        mode="markers+text",
        marker=dict(size=CITY_RADIUS * 2, color=colors, line=dict(color="white", width=2)),
        text=[c.name for c in cities],
        textfont=dict(color="white", size=13),
        customdata=[c.id for c in cities],
        hovertemplate="%{text} (%{x:.0f}, %{y:.0f})<extra></extra>",
        showlegend=False,
    ))

    fig.update_layout(
        height=height + 60,
        margin=dict(t=10, b=10, l=10, r=10),
        plot_bgcolor="#f8f9fa",
    )
    fig.update_xaxes(range=[0, width], showgrid=False, zeroline=False, visible=False)
    # Canvas y grows downward
    fig.update_yaxes(range=[height, 0], showgrid=False, zeroline=False, visible=False)
    return fig
