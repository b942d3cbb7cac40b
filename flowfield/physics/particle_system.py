"""
Particle system module for FlowField.

This module handles the tracer particle: creation at a random position,
advection through a flow field and toroidal wrapping at the canvas edges.

Advection is a position-replacement blend, not a velocity integrator: the
particle's field-space position is interpolated towards the force term of
the flow vector found under it.
"""

from dataclasses import dataclass

import numpy as np

from .. import config
from .interpolation import lerp
from .lookup import nearest


@dataclass
class Particle:
    """Tracer particle in screen-space coordinates."""

    x: float
    y: float
    speed: float = config.PARTICLE_SPEED
    size: float = config.PARTICLE_SIZE


def _random_position(width, height, rng):
    if rng is None:
        rng = np.random.default_rng()
    return float(rng.uniform(0, width)), float(rng.uniform(0, height))


def create_particle(width, height, rng=None, speed=None, size=None):
    """
    Create a particle at a uniformly random point of the visible surface.

    Args:
        width, height (float): Canvas extent in pixels
        rng (np.random.Generator, optional): Random source
        speed (float, optional): Particle speed
        size (float, optional): Particle size

    Returns:
        Particle: New particle
    """
    x, y = _random_position(width, height, rng)
    return Particle(
        x, y,
        speed=config.PARTICLE_SPEED if speed is None else speed,
        size=config.PARTICLE_SIZE if size is None else size,
    )


def respawn_particle(particle, width, height, rng=None):
    """Move an existing particle to a new random point of the surface."""
    particle.x, particle.y = _random_position(width, height, rng)


def wrap_coordinate(value, extent):
    """
    Wrap a coordinate once around [0, extent].

    A single wrap assumes a particle never moves more than one extent per
    tick. NaN compares false on both sides and is returned unchanged.
    """
    if value < 0:
        return value + extent
    if value > extent:
        return value - extent
    return value


def wrap_particle(particle, width, height):
    """Apply the toroidal wrap to each axis independently."""
    particle.x = wrap_coordinate(particle.x, width)
    particle.y = wrap_coordinate(particle.y, height)


def has_finite_position(particle):
    return bool(np.isfinite(particle.x) and np.isfinite(particle.y))


def advance(particle, field, interpolation_factor, resistance, scale_factor, extent,
            lerped=True, metric=None, method=None, cache=None):
    """
    Move a particle one tick through a flow field.

    Args:
        particle (Particle): Particle to update in place
        field (FlowField): Field to sample
        interpolation_factor (float): Blend factor t in [0, 1]
        resistance (float): Multiplier turning a flow vector into a force
        scale_factor (float): Pixels per field-space unit
        extent (tuple): (width, height) of the canvas in pixels
        lerped (bool): Blend positions when True, add the force when False
        metric, method, cache: Passed on to the spatial lookup

    Returns:
        LookupResult: The field point matched under the particle
    """
    px = particle.x / scale_factor
    py = particle.y / scale_factor

    result = nearest(field, px, py, metric=metric, method=method, cache=cache)
    force_u = result.vector.u * resistance
    force_v = result.vector.v * resistance

    if lerped:
        particle.x = lerp(px, force_u, interpolation_factor) * scale_factor
        particle.y = lerp(py, force_v, interpolation_factor) * scale_factor
    else:
        particle.x += force_u
        particle.y += force_v

    width, height = extent
    wrap_particle(particle, width, height)
    return result
