#!/usr/bin/env python3
"""
Shared constants for the N-Pendulum Viewer.

Keeping constants in one place helps ensure values are consistent across the
codebase and makes tuning easier. Runtime overrides go through
npendulum.config; these are only the defaults.
"""

# Playback
SIM_DURATION = 60.0  # seconds of simulated time per loop
TRACE_LENGTH = 100  # frames in the live scene's tail
N_POINTS = 8000  # samples requested per run

# Body count bounds for the parameter form
MIN_BODIES = 1
MAX_BODIES = 150
DEFAULT_BODIES = 2
CONFIRM_BODIES = 20  # ask before running more than this

# Per-pendulum form defaults
DEFAULT_MASS = 1.0  # kg
DEFAULT_LENGTH = 1.0  # m

# Simulation backend
DEFAULT_BACKEND = "local"  # local | http
DEFAULT_ENDPOINT = "http://127.0.0.1:8080/simulate"
DEFAULT_TIMEOUT = 120.0  # seconds
GRAVITY = 9.81  # m/s^2

# Rendering (viewport)
VIEW_WIDTH = 1200
VIEW_HEIGHT = 600
HUD_HEIGHT = 24
FPS = 60

# Colors (RGB)
BACKGROUND_COLOR = (255, 255, 255)
AXIS_COLOR = (238, 238, 238)  # #eee, live scene
AXIS_DETAILED_COLOR = (204, 204, 204)  # #ccc, trajectory plot
GRID_FINE_COLOR = (240, 240, 240)
BORDER_COLOR = (0, 0, 0)
TRACE_COLOR = (255, 0, 0, 153)  # rgba(255, 0, 0, 0.6)
ROD_COLOR = (0, 0, 0)
PIVOT_COLOR = (0, 0, 0)
BODY_COLOR = (51, 51, 51)  # #333
HUD_COLOR = (90, 90, 90)

# Stroke widths and marker radii (pixels)
TRACE_WIDTH = 2
ROD_WIDTH = 3
TRAJECTORY_WIDTH = 3
MIN_GRID_STEP = 2  # finest grid spacing drawn
PIVOT_RADIUS = 4
BODY_RADIUS = 6

# Trajectory palette, indexed by body modulo its length
PALETTE = (
    (31, 119, 180),  # #1f77b4
    (214, 39, 40),  # #d62728
    (44, 160, 44),  # #2ca02c
    (23, 190, 207),  # #17becf
    (148, 103, 189),  # #9467bd
    (227, 119, 194),  # #e377c2
    (188, 189, 34),  # #bcbd22
)

# Logging
LOGGER_NAME = "npendulum"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_LEVEL = "INFO"
