"""
Configuration constants for the Route Optimizer project.

All paths, limits, and tunable parameters are defined here.
Environment overrides are read from the process environment or a .env file.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# =============================================================================
# Path Configuration
# =============================================================================

# Project root is parent of route_optimizer/
PROJECT_ROOT = Path(__file__).parent.parent

# Directory holding the persisted key-value documents
STATE_DIR = Path(os.environ.get("ROUTE_OPTIMIZER_STATE_DIR", PROJECT_ROOT / ".state"))

# =============================================================================
# Graph Configuration
# =============================================================================

# Maximum number of cities on the canvas
MAX_CITIES = 10

# Pixel distance is divided by this to get a default connection weight
WEIGHT_SCALE = 10

# Smallest weight given to a connection created from canvas geometry
MIN_CONNECTION_WEIGHT = 1

# =============================================================================
# Geometry Configuration
# =============================================================================

# Radius of a drawn city (hit-test circle)
CITY_RADIUS = 20

# Max distance from a connection's midpoint that still selects it
CONNECTION_CLICK_THRESHOLD = 30

# Pointer travel before a press turns into a drag
DRAG_THRESHOLD = 10

# Touch hold time that removes a city (milliseconds)
LONG_PRESS_DURATION_MS = 500

# Canvas sizing
MAX_CANVAS_WIDTH = 800
CANVAS_PADDING = 32
CANVAS_HEIGHT = 400
MOBILE_CANVAS_RATIO = 0.8
MOBILE_BREAKPOINT = 768

# =============================================================================
# Engine Configuration
# =============================================================================

# Implementation mode at startup: auto, accelerated, or default
DEFAULT_IMPLEMENTATION_MODE = os.environ.get("ROUTE_OPTIMIZER_MODE", "auto")

# Absolute tolerance when checking a path's weight sum against its distance
DISTANCE_TOLERANCE = 1e-9

# =============================================================================
# Persistence Configuration
# =============================================================================

# Key under which the graph and route selection are saved
STATE_KEY = "dijkstraAppState"

# Key under which the preferred implementation mode is saved
MODE_KEY = "dijkstraImplementation"

# =============================================================================
# Logging Configuration
# =============================================================================

# Log level (DEBUG, INFO, WARNING, ERROR)
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"
