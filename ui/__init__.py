"""
Streamlit UI module.

Provides the web interface for the Route Optimizer:
- app: Canvas editing, route planning and implementation switching
- components.canvas: Plotly rendering of the city graph
"""
