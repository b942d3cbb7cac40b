"""
Pattern library for FlowField.

Each pattern maps a field-space coordinate pair (x, y) to a flow vector
(u, v). Patterns are evaluated element-wise, so the same functions serve
single lookups and whole coordinate grids.
"""

from enum import Enum

import numpy as np

from .. import config
from ..errors import InvalidPattern


class FieldPattern(str, Enum):
    """Named analytic field patterns."""

    SINUSOIDAL = "SINUSOIDAL"
    INVERSE_SINUSOIDAL = "INVERSE_SINUSOIDAL"
    ANTI_CLOCKWISE = "ANTI_CLOCKWISE"
    CLOCKWISE = "CLOCKWISE"


# Scaling constant for the rotational patterns
ROTATION_K = (1 / config.PHI) * (1 / np.pi)


def available_patterns():
    """Return the names of all known patterns, in declaration order."""
    return [pattern.value for pattern in FieldPattern]


def resolve_pattern(pattern):
    """
    Normalize a pattern given as an enum member or its name.

    Args:
        pattern (FieldPattern or str): Pattern to resolve

    Returns:
        FieldPattern: The matching enum member

    Raises:
        InvalidPattern: If the value names no known pattern
    """
    if isinstance(pattern, FieldPattern):
        return pattern
    try:
        return FieldPattern(pattern)
    except ValueError:
        raise InvalidPattern(
            f"Expected one of {available_patterns()} for field pattern. Got {pattern!r}."
        ) from None


def _sqrt(values):
    # Negative arguments give NaN, which is propagated to the caller
    with np.errstate(invalid='ignore'):
        return np.sqrt(values)


def evaluate(pattern, x, y):
    """
    Evaluate a pattern at field-space coordinates.

    x is the column coordinate and y the row coordinate, so
    evaluate(SINUSOIDAL, pi/2, 0) gives (sin(0), cos(pi/2)).

    Args:
        pattern (FieldPattern or str): Pattern to evaluate
        x (float or np.ndarray): Column coordinate(s)
        y (float or np.ndarray): Row coordinate(s)

    Returns:
        tuple: (u, v) with the same shape as the inputs
    """
    pattern = resolve_pattern(pattern)
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)

    if pattern is FieldPattern.SINUSOIDAL:
        u, v = np.sin(y), np.cos(x)
    elif pattern is FieldPattern.INVERSE_SINUSOIDAL:
        u, v = np.cos(x), np.sin(y)
    elif pattern is FieldPattern.CLOCKWISE:
        u, v = -_sqrt(y * ROTATION_K), _sqrt(x * ROTATION_K)
    else:  # ANTI_CLOCKWISE
        u, v = _sqrt(y * ROTATION_K), _sqrt(x * ROTATION_K)

    if u.ndim == 0:
        return float(u), float(v)
    return u, v


def shuffle_pattern(current, rng=None):
    """
    Pick a pattern uniformly at random that differs from the current one.

    Draws are repeated until the result differs (rejection sampling).

    Args:
        current (FieldPattern or str): Active pattern
        rng (np.random.Generator, optional): Random source

    Returns:
        FieldPattern: A different pattern
    """
    current = resolve_pattern(current)
    if rng is None:
        rng = np.random.default_rng()
    patterns = list(FieldPattern)
    choice = current
    while choice is current:
        choice = patterns[int(rng.integers(len(patterns)))]
    return choice
