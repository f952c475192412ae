"""
Geometry module.

Pure hit-testing and coordinate helpers used by the canvas:
- is_drag / is_long_press: Gesture classification
- is_point_in_circle / is_point_near_line / is_point_near_line_midpoint
- normalize_pointer_coordinates: Client -> canvas coordinates
- calculate_canvas_dimensions: Responsive canvas size
- city_at_position / connection_at_position: Hit-tests against a Graph
"""

from route_optimizer.geometry.hit_testing import (
    CanvasDimensions,
    CanvasRect,
    Point,
    PointerEvent,
    calculate_canvas_dimensions,
    city_at_position,
    connection_at_position,
    distance,
    is_drag,
    is_long_press,
    is_point_in_circle,
    is_point_near_line,
    is_point_near_line_midpoint,
    normalize_pointer_coordinates,
)

__all__ = [
    "CanvasDimensions",
    "CanvasRect",
    "Point",
    "PointerEvent",
    "calculate_canvas_dimensions",
    "city_at_position",
    "connection_at_position",
    "distance",
    "is_drag",
    "is_long_press",
    "is_point_in_circle",
    "is_point_near_line",
    "is_point_near_line_midpoint",
    "normalize_pointer_coordinates",
]
