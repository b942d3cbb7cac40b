"""
Configuration module for FlowField.

This module contains global constants, default parameters, and configuration
settings used throughout the flow field simulation and its viewer.
"""

import numpy as np

# Golden ratio
PHI = (1 + np.sqrt(5)) / 2

# Frame pacing
FPS_MULTIPLIER = 0.001  # seconds per millisecond
FPS_RESISTANCE = (60 * FPS_MULTIPLIER) / 3  # per-tick displacement per unit of scale
TARGET_FPS = 60
DURATION_BUDGET_S = 20.0  # stretched by PHI when computing the tick limit
FRAME_INTERVAL_MS = 16  # timer interval used by the matplotlib host (~60 FPS)

# Field shape
# 4 quadrants * 2.5: a sinusoidal pattern shows at most 4 whole spirals
N_FIELD_SHAPE = 4 * 2.5
DEFAULT_FIELD_STEPS = 2 ** 5
DEFAULT_PATTERN = 'SINUSOIDAL'

# Spatial lookup
# Supported metrics: 'euclidean', 'manhattan'
DEFAULT_METRIC = 'euclidean'
# Supported methods: 'grid' (index arithmetic), 'scan' (linear), 'kdtree'
DEFAULT_LOOKUP_METHOD = 'grid'
USE_LOOKUP_CACHE = False

# Advection
INTERPOLATION_FACTOR = 0.97  # pull ratio of the force term on the position
LERP_ADVECTION = True

# Resize handling
RESIZE_DEBOUNCE_MS = 200

# Canvas defaults (pixels) for headless runs and the initial window
DEFAULT_CANVAS_WIDTH = 800
DEFAULT_CANVAS_HEIGHT = 800

# Particle appearance
PARTICLE_SPEED = 1.0
PARTICLE_SIZE = 2.0

# Arrow sizes for the static field drawing
ARROW_MIN_SIZE = 2.0
ARROW_MAX_SIZE = 4.0

# Colors
BACKGROUND_COLOR = '#333344'
ARROW_COLOR = (0.05, 0.95, 0.95, 1.0)  # hsla(180, 90%, 50%)
PARTICLE_COLOR = (1.0, 0.02, 0.0, 1.0)  # hsla(1, 100%, 50%)
MATCH_COLOR = (0.52, 0.95, 0.05, 0.6)  # hsla(91, 90%, 50%, 0.6)
MARKER_RADIUS = 3

# Window title
WINDOW_TITLE = "FlowField"

DPI = 150  # For saved figures

# Print status messages (start/stop summaries, shuffles, resizes)
VERBOSE = False


def compute_tick_limit(fps=None, duration_s=None):
    """
    Compute the number of ticks a simulation runs before it stops.

    Args:
        fps (float, optional): Target frame rate
        duration_s (float, optional): Wall-clock budget in seconds

    Returns:
        int: Tick limit, floor(fps * duration * PHI)
    """
    if fps is None:
        fps = TARGET_FPS
    if duration_s is None:
        duration_s = DURATION_BUDGET_S
    return int(np.floor(fps * duration_s * PHI))


def compute_scale_factor(canvas_width, field_shape=None):
    """Pixels per field-space unit for a canvas of the given width."""
    if field_shape is None:
        field_shape = N_FIELD_SHAPE
    return canvas_width / (field_shape or 10)


def compute_resistance(scale_factor):
    """Convert a unit flow vector into a per-tick displacement."""
    return scale_factor * FPS_RESISTANCE


def _round_up_to_ten(value):
    return value + (10 - (value % 10))


def cache_resolution(scale_factor):
    """
    Quantization resolution used to key the lookup cache.

    The scale factor is floored, rounded up to the next multiple of ten,
    halved and rounded up again (72 -> 80 -> 40 -> 50).

    Args:
        scale_factor (float): Current pixels per field-space unit

    Returns:
        float: Multiplier applied to field-space coordinates before rounding
    """
    resolution = float(np.floor(scale_factor))
    resolution = _round_up_to_ten(resolution)
    resolution *= 0.5
    resolution = _round_up_to_ten(resolution)
    return resolution
