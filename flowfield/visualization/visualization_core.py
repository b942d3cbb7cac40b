"""
Visualization core module for FlowField.

This module handles figure setup and the matplotlib rendering sink: the
static field drawing (arrows at every field point), the tracer particle and
the highlight on the field point matched under it.
"""

import os

import numpy as np
import matplotlib.pyplot as plt

from .. import config
from ..physics.grid_computation import field_to_screen
from ..physics.interpolation import clamp


def setup_figure_layout(width=None, height=None):
    """
    Setup the figure and the single map axes.

    Args:
        width, height (float, optional): Canvas extent in pixels

    Returns:
        tuple: (fig, ax) - Figure and axes objects
    """
    if width is None:
        width = config.DEFAULT_CANVAS_WIDTH
    if height is None:
        height = config.DEFAULT_CANVAS_HEIGHT

    fig = plt.figure(figsize=(width / 100, height / 100))
    fig.patch.set_facecolor(config.BACKGROUND_COLOR)
    # Leave room at the bottom for the control buttons
    ax = fig.add_axes([0.0, 0.08, 1.0, 0.92])
    apply_styling(fig, ax)
    return fig, ax


def apply_styling(fig, ax):
    """Dark background, no ticks and no spines."""
    fig.patch.set_facecolor(config.BACKGROUND_COLOR)
    ax.set_facecolor(config.BACKGROUND_COLOR)
    ax.set_xticks([])
    ax.set_yticks([])
    for spine in ax.spines.values():
        spine.set_visible(False)


def compute_arrow_size(field, scale_factor, extent):
    """
    Arrow head size for a field drawn on a canvas.

    Canvas pixels per field point, divided by the scale factor and clamped to
    [ARROW_MIN_SIZE, ARROW_MAX_SIZE].
    """
    width, height = extent
    pixels_per_point = (width * height) / len(field)
    return clamp(pixels_per_point / scale_factor, config.ARROW_MIN_SIZE, config.ARROW_MAX_SIZE)


class MatplotlibSink:
    """Rendering sink drawing a simulation onto matplotlib axes."""

    def __init__(self, fig, ax):
        self.fig = fig
        self.ax = ax
        self.field_artist = None
        self.frames_drawn = 0
        # Screen coordinates grow downwards, like a canvas
        self.particle_artist, = ax.plot([], [], 'o', color=config.PARTICLE_COLOR,
                                        markersize=config.MARKER_RADIUS * 2, zorder=5)
        self.match_artist, = ax.plot([], [], 'o', color=config.MATCH_COLOR,
                                     markersize=config.MARKER_RADIUS * 2, zorder=4)

    def draw_field(self, field, scale_factor, extent):
        """Draw one arrow per field point; replaces any previous field drawing."""
        if self.field_artist is not None:
            self.field_artist.remove()
            self.field_artist = None

        width, height = extent
        self.ax.set_xlim(0, width)
        self.ax.set_ylim(height, 0)

        x, y, u, v = field_to_screen(field, scale_factor)
        u = np.ma.masked_invalid(u)
        v = np.ma.masked_invalid(v)
        arrow_size = compute_arrow_size(field, scale_factor, extent)
        self.field_artist = self.ax.quiver(
            x, y, u, v,
            angles='xy', color=config.ARROW_COLOR, zorder=2,
            headwidth=arrow_size, headlength=arrow_size, headaxislength=arrow_size * 0.9,
        )
        self.fig.canvas.draw_idle()

    def draw_frame(self, particle, match, scale_factor):
        """Move the particle marker and the matched field point highlight."""
        self.particle_artist.set_data([particle.x], [particle.y])
        if match is None:
            self.match_artist.set_data([], [])
        else:
            self.match_artist.set_data([match.x * scale_factor], [match.y * scale_factor])
        self.frames_drawn += 1
        self.fig.canvas.draw_idle()

    def on_stop(self, summary):
        self.ax.set_title(f"Stopped after {summary['tick']} ticks", color='white', fontsize=10)
        self.fig.canvas.draw_idle()


def save_final_figure(fig, output_dir, filename="flowfield_figure.png"):
    """
    Save the figure as a PNG file.

    Args:
        fig: Matplotlib figure object
        output_dir (str): Output directory path
        filename (str): Filename for the saved figure

    Returns:
        str: Path of the written file
    """
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, filename)
    fig.savefig(path, dpi=config.DPI, facecolor=fig.get_facecolor())
    return path
