"""
Grid computation module for FlowField.

This module handles grid building and discretization of an analytic pattern
into a flow field: a row-major sequence of field points (x, y, u, v) laid out
on a regular square grid in field-space.
"""

from dataclasses import dataclass
from functools import cached_property
from numbers import Integral

import numpy as np
from scipy.spatial import cKDTree

from ..errors import FieldConfigurationError
from .patterns import evaluate, resolve_pattern


@dataclass(frozen=True)
class FieldPoint:
    """A grid coordinate in field-space and the flow vector at it."""

    x: float
    y: float
    u: float
    v: float


@dataclass(frozen=True, eq=False)
class FlowField:
    """
    A discretized vector field.

    Attributes:
        cols, rows: Field-space extent of each axis (always equal)
        steps: Samples per axis, a power of two
        pattern: FieldPattern the field was generated from
        points: Row-major tuple of steps**2 FieldPoints
        xs, ys, us, vs: The same data as flat numpy arrays
    """

    cols: float
    rows: float
    steps: int
    pattern: object
    points: tuple
    xs: np.ndarray
    ys: np.ndarray
    us: np.ndarray
    vs: np.ndarray

    @property
    def step(self):
        """Distance between neighbouring samples along an axis."""
        return self.rows / self.steps

    def __len__(self):
        return len(self.points)

    @cached_property
    def kdtree(self):
        """KD-tree over the point coordinates, built on first use."""
        return cKDTree(np.column_stack((self.xs, self.ys)))


def is_power_of_two(n):
    """True for positive integers that are a power of two."""
    if isinstance(n, bool) or not isinstance(n, Integral):
        return False
    n = int(n)
    return n > 0 and (n & (n - 1)) == 0


def validate_field_shape(cols, rows, steps):
    """
    Check the preconditions of field generation.

    Raises:
        FieldConfigurationError: If steps is not a positive power of two or
            the field is not square
    """
    if isinstance(steps, bool) or not isinstance(steps, Integral):
        raise FieldConfigurationError(f"Expected steps to be an integer. Got {steps!r}.")
    if not is_power_of_two(steps):
        raise FieldConfigurationError(f"Expected steps to be a power of 2. Got {steps}.")
    if cols != rows:
        raise FieldConfigurationError(
            f"Expected count of rows and columns to be the same. Got rows: {rows}, cols: {cols}."
        )


def create_grid_coordinates(extent, steps):
    """
    Create the sample grids for a square field.

    Samples along each axis are [0, step, ..., (steps - 1) * step] with
    step = extent / steps. x varies along a row, y varies from row to row.

    Args:
        extent (float): Field-space length of an axis
        steps (int): Number of samples per axis

    Returns:
        tuple: (grid_x, grid_y, samples)
    """
    step = extent / steps
    samples = np.arange(steps) * step
    grid_x, grid_y = np.meshgrid(samples, samples)
    return grid_x, grid_y, samples


def generate_field(cols, rows, steps, pattern):
    """
    Build a flow field by applying a pattern over a regular grid.

    Args:
        cols (float): Field-space width
        rows (float): Field-space height, must equal cols
        steps (int): Samples per axis, a positive power of two
        pattern (FieldPattern or str): Pattern to discretize

    Returns:
        FlowField: Field with steps**2 points in row-major order
    """
    validate_field_shape(cols, rows, steps)
    pattern = resolve_pattern(pattern)

    grid_x, grid_y, _ = create_grid_coordinates(rows, steps)
    grid_u, grid_v = evaluate(pattern, grid_x, grid_y)

    xs = grid_x.ravel()
    ys = grid_y.ravel()
    us = np.asarray(grid_u, dtype=float).ravel()
    vs = np.asarray(grid_v, dtype=float).ravel()
    points = tuple(
        FieldPoint(float(x), float(y), float(u), float(v))
        for x, y, u, v in zip(xs, ys, us, vs)
    )

    if len(points) != steps * steps or not is_power_of_two(len(points)):
        raise FieldConfigurationError(
            f"Expected {steps * steps} field points. Got {len(points)}."
        )

    return FlowField(cols=cols, rows=rows, steps=int(steps), pattern=pattern,
                     points=points, xs=xs, ys=ys, us=us, vs=vs)


def field_to_screen(field, scale_factor):
    """
    Screen-space arrays for drawing a field.

    Args:
        field (FlowField): Field to convert
        scale_factor (float): Pixels per field-space unit

    Returns:
        tuple: (x, y, u, v) arrays, positions scaled to pixels
    """
    return field.xs * scale_factor, field.ys * scale_factor, field.us, field.vs
