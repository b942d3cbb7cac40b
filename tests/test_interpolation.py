import math

import pytest

from flowfield.physics.interpolation import clamp, lerp


@pytest.mark.parametrize("a, b", [(0.1, 0.7), (-3.3, 1e9), (1e-17, 0.3), (5.0, 5.0)])
def test_lerp_end_points_are_exact(a, b):
    assert lerp(a, b, 0) == a
    assert lerp(a, b, 1) == b
    assert lerp(a, b, 0.0) == a
    assert lerp(a, b, 1.0) == b


def test_lerp_midpoint():
    assert lerp(0.0, 10.0, 0.5) == 5.0
    assert lerp(2.0, 4.0, 0.97) == pytest.approx(3.94)


@pytest.mark.parametrize("t", [-0.01, 1.01, float('nan')])
def test_lerp_rejects_factor_outside_unit_interval(t):
    with pytest.raises(ValueError):
        lerp(0.0, 1.0, t)


def test_lerp_propagates_nan_operands():
    assert math.isnan(lerp(float('nan'), 1.0, 0.5))
    assert math.isnan(lerp(float('nan'), 1.0, 0.0))


@pytest.mark.parametrize("value, expected", [(5, 5), (-5, 0), (15, 10)])
def test_clamp(value, expected):
    assert clamp(value, 0, 10) == expected


def test_clamp_with_equal_bounds():
    assert clamp(7, 5, 5) == 5
