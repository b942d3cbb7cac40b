import math

import numpy as np
import pytest

from flowfield import config
from flowfield.physics.grid_computation import generate_field
from flowfield.physics.particle_system import (
    Particle, advance, create_particle, has_finite_position, respawn_particle,
    wrap_coordinate, wrap_particle,
)

WIDTH = HEIGHT = 800.0
SCALE = config.compute_scale_factor(WIDTH)


@pytest.fixture
def field():
    return generate_field(config.N_FIELD_SHAPE, config.N_FIELD_SHAPE, 32, "SINUSOIDAL")


def test_wrap_single_step_past_the_edge():
    assert wrap_coordinate(WIDTH + 1, WIDTH) == 1
    assert wrap_coordinate(-1.0, WIDTH) == WIDTH - 1
    assert wrap_coordinate(WIDTH, WIDTH) == WIDTH
    assert wrap_coordinate(0.0, WIDTH) == 0.0
    assert wrap_coordinate(123.0, WIDTH) == 123.0


def test_wrap_is_per_axis():
    particle = Particle(WIDTH + 1, -2.0)
    wrap_particle(particle, WIDTH, 600.0)
    assert particle.x == 1
    assert particle.y == 598.0


def test_wrap_leaves_nan_visible():
    assert math.isnan(wrap_coordinate(float('nan'), WIDTH))


def test_create_particle_inside_surface():
    rng = np.random.default_rng(3)
    for _ in range(50):
        particle = create_particle(WIDTH, 300.0, rng)
        assert 0 <= particle.x < WIDTH
        assert 0 <= particle.y < 300.0
    assert particle.speed == config.PARTICLE_SPEED
    assert particle.size == config.PARTICLE_SIZE


def test_respawn_is_reproducible_with_seed():
    a = Particle(1.0, 1.0)
    b = Particle(2.0, 2.0)
    respawn_particle(a, WIDTH, HEIGHT, np.random.default_rng(5))
    respawn_particle(b, WIDTH, HEIGHT, np.random.default_rng(5))
    assert (a.x, a.y) == (b.x, b.y)


def _particle_on_point(field, i, j):
    point = field.points[i * field.steps + j]
    return Particle(point.x * SCALE, point.y * SCALE), point


def test_zero_factor_keeps_position(field):
    particle, _ = _particle_on_point(field, 2, 1)
    before = (particle.x, particle.y)
    advance(particle, field, 0.0, config.compute_resistance(SCALE), SCALE, (WIDTH, HEIGHT))
    assert particle.x == pytest.approx(before[0])
    assert particle.y == pytest.approx(before[1])


def test_unit_factor_replaces_position_with_force(field):
    particle, point = _particle_on_point(field, 2, 1)
    resistance = config.compute_resistance(SCALE)
    # sin(y) and cos(x) are both positive here, so no wrap happens
    assert point.u > 0 and point.v > 0

    result = advance(particle, field, 1.0, resistance, SCALE, (WIDTH, HEIGHT))

    assert result.point == point
    assert particle.x / SCALE == pytest.approx(point.u * resistance)
    assert particle.y / SCALE == pytest.approx(point.v * resistance)


def test_blend_between_position_and_force(field):
    particle, point = _particle_on_point(field, 2, 1)
    resistance = config.compute_resistance(SCALE)
    t = config.INTERPOLATION_FACTOR
    advance(particle, field, t, resistance, SCALE, (WIDTH, HEIGHT))
    expected_x = ((1 - t) * point.x + t * point.u * resistance) * SCALE
    assert particle.x == pytest.approx(expected_x)


def test_additive_mode_adds_force(field):
    particle, point = _particle_on_point(field, 2, 1)
    start_x, start_y = particle.x, particle.y
    resistance = config.compute_resistance(SCALE)
    advance(particle, field, 0.5, resistance, SCALE, (WIDTH, HEIGHT), lerped=False)
    assert particle.x == pytest.approx(start_x + point.u * resistance)
    assert particle.y == pytest.approx(start_y + point.v * resistance)


def test_negative_force_wraps_around(field):
    # sin(y) < 0 for y in (pi, 2*pi): pick row 12 (y = 3.75)
    particle, point = _particle_on_point(field, 12, 0)
    assert point.u < 0
    advance(particle, field, 1.0, config.compute_resistance(SCALE), SCALE, (WIDTH, HEIGHT))
    assert 0 <= particle.x <= WIDTH
    assert particle.x == pytest.approx(WIDTH + point.u * config.compute_resistance(SCALE) * SCALE)


def test_nan_position_is_propagated(field):
    particle = Particle(float('nan'), 10.0)
    result = advance(particle, field, 0.5, 1.0, SCALE, (WIDTH, HEIGHT))
    assert result.point is None
    assert math.isnan(particle.x) and math.isnan(particle.y)
    assert not has_finite_position(particle)


def test_invalid_factor_raises(field):
    particle = Particle(10.0, 10.0)
    with pytest.raises(ValueError):
        advance(particle, field, 1.5, 1.0, SCALE, (WIDTH, HEIGHT))
