"""
Geometric calculations and coordinate utilities for the canvas.

All functions are pure; points are anything with x and y attributes
(City instances or Point).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from route_optimizer.config import (
    CANVAS_HEIGHT,
    CANVAS_PADDING,
    CITY_RADIUS,
    CONNECTION_CLICK_THRESHOLD,
    DRAG_THRESHOLD,
    LONG_PRESS_DURATION_MS,
    MAX_CANVAS_WIDTH,
    MOBILE_CANVAS_RATIO,
)

if TYPE_CHECKING:
    from route_optimizer.graph.model import City, Connection, Graph


class HasPosition(Protocol):
    x: float
    y: float


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class CanvasRect:
    """On-screen bounding box of the canvas (client coordinates)."""

    left: float
    top: float
    width: float
    height: float


@dataclass(frozen=True)
class PointerEvent:
    """
    Mouse or touch event in client coordinates.

    Attributes:
        client_x: Mouse x position
        client_y: Mouse y position
        touches: Active touch points as (x, y)
        changed_touches: Touch points that changed in this event (touchend)
    """

    client_x: float = 0.0
    client_y: float = 0.0
    touches: tuple[tuple[float, float], ...] = field(default_factory=tuple)
    changed_touches: tuple[tuple[float, float], ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class CanvasDimensions:
    width: float
    height: float


def distance(a: HasPosition, b: HasPosition) -> float:
    return math.hypot(b.x - a.x, b.y - a.y)


def is_point_in_circle(point: HasPosition, center: HasPosition, radius: float) -> bool:
    """Whether point lies inside (or on) the circle."""
    return distance(point, center) <= radius


def is_point_near_line(
    point: HasPosition,
    line_start: HasPosition,
    line_end: HasPosition,
    threshold: float,
) -> bool:
    """Whether point is closer than threshold to the segment. Degenerate segments never match."""
    dx = line_end.x - line_start.x
    dy = line_end.y - line_start.y
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return False

    t = ((point.x - line_start.x) * dx + (point.y - line_start.y) * dy) / length_sq
    t = max(0.0, min(1.0, t))
    closest = Point(line_start.x + t * dx, line_start.y + t * dy)
    return distance(point, closest) < threshold


def is_point_near_line_midpoint(
    point: HasPosition,
    line_start: HasPosition,
    line_end: HasPosition,
    threshold: float,
) -> bool:
    """Whether point is closer than threshold to the segment's midpoint."""
    midpoint = Point((line_start.x + line_end.x) / 2, (line_start.y + line_end.y) / 2)
    return distance(point, midpoint) < threshold


def normalize_pointer_coordinates(
    event: PointerEvent,
    rect: CanvasRect,
    canvas_width: float,
    canvas_height: float,
) -> Point:
    """
    Map an event's client coordinates into canvas space.

    The first active touch wins, then the first changed touch, then the
    mouse position. The canvas may be displayed scaled, so client
    offsets are multiplied by the backing-size / display-size ratio.
    """
    if event.touches:
        client_x, client_y = event.touches[0]
    elif event.changed_touches:
        client_x, client_y = event.changed_touches[0]
    else:
        client_x, client_y = event.client_x, event.client_y

    # Collapsed canvas: no display size to scale from
    scale_x = canvas_width / rect.width if rect.width else 1.0
    scale_y = canvas_height / rect.height if rect.height else 1.0
    return Point((client_x - rect.left) * scale_x, (client_y - rect.top) * scale_y)


def is_drag(origin: HasPosition, current: HasPosition, threshold: float = DRAG_THRESHOLD) -> bool:
    """Whether the pointer has moved far enough from where it went down to count as a drag."""
    return distance(origin, current) > threshold


def is_long_press(held_ms: float, duration_ms: float = LONG_PRESS_DURATION_MS) -> bool:
    return held_ms >= duration_ms


def calculate_canvas_dimensions(container_width: float, is_mobile: bool) -> CanvasDimensions:
    """Canvas size for a container; mobile canvases keep a 5:4 ratio capped at the desktop height."""
    width = min(container_width - CANVAS_PADDING, MAX_CANVAS_WIDTH)
    height = min(width * MOBILE_CANVAS_RATIO, CANVAS_HEIGHT) if is_mobile else CANVAS_HEIGHT
    return CanvasDimensions(width=width, height=height)


def city_at_position(graph: Graph, x: float, y: float, radius: float = CITY_RADIUS) -> City | None:
    """First city (in insertion order) whose circle contains (x, y)."""
    point = Point(x, y)
    for city in graph.cities:
        if is_point_in_circle(point, city, radius):
            return city
    return None


def connection_at_position(
    graph: Graph,
    x: float,
    y: float,
    threshold: float = CONNECTION_CLICK_THRESHOLD,
) -> Connection | None:
    """First connection whose midpoint is within threshold of (x, y)."""
    point = Point(x, y)
    for conn in graph.connections:
        from_city = graph.get_city(conn.from_id)
        to_city = graph.get_city(conn.to_id)
        if from_city is None or to_city is None:
            continue
        if is_point_near_line_midpoint(point, from_city, to_city, threshold):
            return conn
    return None
