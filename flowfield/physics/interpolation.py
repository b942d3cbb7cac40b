"""
Scalar interpolation helpers used by the particle advector and the renderer.
"""


def clamp(value, lo, hi):
    """Clamp value into [lo, hi]; lo wins if the bounds cross."""
    return min(max(value, lo), hi)


def lerp(a, b, t):
    """
    Linear interpolation from a to b.

    Args:
        a (float): Start value
        b (float): End value
        t (float): Interpolation factor in [0, 1]

    Returns:
        float: a when t == 0, b when t == 1, (1 - t) * a + t * b otherwise

    Raises:
        ValueError: If t lies outside [0, 1]
    """
    if not 0.0 <= t <= 1.0:
        raise ValueError(f"Expected interpolation factor t to be between 0.0 and 1.0. Got {t}.")
    if t == 0:
        return a
    if t == 1:
        return b
    return (1 - t) * a + t * b

